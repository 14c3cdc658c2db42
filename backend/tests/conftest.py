"""Shared fixtures for the tennis ranking tests."""

import os

# Keep the module level database manager off Postgres while testing.
os.environ.setdefault("DATABASE_DSN", "sqlite+aiosqlite://")

from datetime import date  # noqa: E402
from typing import Callable  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.models import Base  # noqa: E402
from app.features.players.orm_models import PlayerORM  # noqa: E402
from app.features.players.schemas import PlayerToSave  # noqa: E402
from tests.helpers import make_player  # noqa: E402


@pytest.fixture
def player_entities() -> Callable[[], list[PlayerORM]]:
    """Factory for the reference roster, deliberately not in rank order."""

    def build() -> list[PlayerORM]:
        return [
            make_player("Murray", 500, 4, "Andy", date(1987, 5, 15)),
            make_player("Nadal", 5000, 1, "Rafael", date(1986, 6, 3)),
            make_player("Federer", 1000, 3, "Roger", date(1981, 8, 8)),
            make_player("Djokovic", 2000, 2, "Novak", date(1987, 5, 22)),
        ]

    return build


@pytest.fixture
def player_to_save() -> Callable[..., PlayerToSave]:
    """Factory for create/update payloads."""

    def build(
        last_name: str = "Alcaraz",
        points: int = 100,
        first_name: str = "Carlos",
        birth_date: date = date(2003, 5, 5),
    ) -> PlayerToSave:
        return PlayerToSave(
            first_name=first_name,
            last_name=last_name,
            birth_date=birth_date,
            points=points,
        )

    return build


@pytest_asyncio.fixture
async def engine(tmp_path):
    """File backed SQLite engine so every session gets its own connection."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'players.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest_asyncio.fixture
async def seeded_session_factory(session_factory, player_entities):
    """Session factory over a database holding the reference roster."""
    async with session_factory() as session:
        session.add_all(player_entities())
        await session.commit()
    return session_factory
