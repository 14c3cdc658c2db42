"""SQLAlchemy 2.0 ORM models for the players feature."""

from datetime import date

from sqlalchemy import Date, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.models import Base

# Placeholder position for a freshly inserted player, replaced by the
# recompute pass in the same unit of work.
UNRANKED_POSITION = 999_999_999


def last_name_key(last_name: str) -> str:
    """Normalize a last name for case-insensitive comparison.

    Folding happens in Python rather than with the database's ``lower()``,
    which only folds ASCII on SQLite and on Postgres under the C collation.
    """
    return last_name.casefold()


class PlayerORM(Base):
    """Player record as held by the player store.

    ``rank`` is derived data: it is always recomputed from ``points`` across
    the whole player set and is never set directly by a caller.
    """

    __tablename__ = "players"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    last_name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Last name as entered",
    )

    last_name_key: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        comment="Case folded last name; lookup and uniqueness key",
    )

    first_name: Mapped[str] = mapped_column(String(50), nullable=False)

    birth_date: Mapped[date] = mapped_column(Date, nullable=False)

    points: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Ranking points; source of the rank position",
    )

    rank: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=UNRANKED_POSITION,
        comment="1-based dense rank position",
    )

    def __init__(
        self,
        last_name: str,
        first_name: str,
        birth_date: date,
        points: int,
        rank: int = UNRANKED_POSITION,
    ):
        super().__init__(
            last_name=last_name,
            last_name_key=last_name_key(last_name),
            first_name=first_name,
            birth_date=birth_date,
            points=points,
            rank=rank,
        )

    @property
    def is_ranked(self) -> bool:
        """Whether the record carries a real position rather than the placeholder."""
        return self.rank != UNRANKED_POSITION

    def __repr__(self) -> str:
        return (
            f"<PlayerORM(last_name='{self.last_name}', points={self.points}, "
            f"rank={self.rank})>"
        )
