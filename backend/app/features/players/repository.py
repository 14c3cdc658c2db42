"""Repository pattern implementation for players feature.

Provides collection-like interface for accessing player records.
Isolates data access logic from the ranking rules in the service layer.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .orm_models import PlayerORM, last_name_key

logger = structlog.get_logger(__name__)


class PlayerRepositoryInterface(ABC):
    """Interface for player repository.

    Defines contract for data access operations. Writes are staged in the
    current unit of work and only become durable on ``commit``.
    """

    @abstractmethod
    async def find_all(self) -> list[PlayerORM]:
        """Get every player, in no particular order.

        :returns: List of all players
        """
        pass

    @abstractmethod
    async def find_one_by_last_name_ignore_case(
        self, last_name: str
    ) -> Optional[PlayerORM]:
        """Find player by last name, ignoring case.

        :param last_name: Last name to look up
        :returns: PlayerORM if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, player: PlayerORM) -> PlayerORM:
        """Add or update a single player.

        :param player: Player record to persist
        :returns: Persisted player with generated fields populated
        """
        pass

    @abstractmethod
    async def save_all(self, players: Iterable[PlayerORM]) -> list[PlayerORM]:
        """Add or update many players at once.

        :param players: Player records to persist
        :returns: Persisted players
        """
        pass

    @abstractmethod
    async def delete(self, player: PlayerORM) -> None:
        """Remove player from repository.

        :param player: Player to delete
        """
        pass

    @abstractmethod
    async def commit(self) -> None:
        """Make all staged writes durable."""
        pass

    @abstractmethod
    async def rollback(self) -> None:
        """Discard all staged writes."""
        pass


class SQLAlchemyPlayerRepository(PlayerRepositoryInterface):
    """SQLAlchemy implementation of player repository.

    Handles all database operations for players using SQLAlchemy async sessions.
    Writes are flushed, not committed, so the caller decides the transaction boundary.
    """

    def __init__(self, db: AsyncSession):
        """Initialize repository with database session.

        :param db: Async database session
        """
        self.db = db

    async def find_all(self) -> list[PlayerORM]:
        """Get every player."""
        result = await self.db.execute(select(PlayerORM))
        players = list(result.scalars().all())

        logger.debug("players_retrieved", count=len(players))

        return players

    async def find_one_by_last_name_ignore_case(
        self, last_name: str
    ) -> Optional[PlayerORM]:
        """Find player by last name, ignoring case."""
        stmt = select(PlayerORM).where(
            PlayerORM.last_name_key == last_name_key(last_name)
        )

        result = await self.db.execute(stmt)
        player = result.scalar_one_or_none()

        logger.debug(
            "player_search_by_last_name",
            last_name=last_name,
            found=player is not None,
        )

        return player

    async def save(self, player: PlayerORM) -> PlayerORM:
        """Stage a single player and flush it."""
        self.db.add(player)
        await self.db.flush()
        await self.db.refresh(player)

        logger.debug("player_saved", last_name=player.last_name, rank=player.rank)

        return player

    async def save_all(self, players: Iterable[PlayerORM]) -> list[PlayerORM]:
        """Stage many players and flush them in one round trip."""
        players = list(players)
        self.db.add_all(players)
        await self.db.flush()

        logger.debug("players_saved", count=len(players))

        return players

    async def delete(self, player: PlayerORM) -> None:
        """Hard delete player."""
        await self.db.delete(player)
        await self.db.flush()

        logger.info("player_deleted", last_name=player.last_name)

    async def commit(self) -> None:
        """Commit the current transaction."""
        await self.db.commit()

    async def rollback(self) -> None:
        """Roll back the current transaction."""
        await self.db.rollback()
