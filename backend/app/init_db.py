"""Database initialization script using SQLAlchemy create_all().

Creates, drops or seeds the player tables.

Usage:
    python -m app.init_db [init|drop|reset|seed]
"""

import asyncio
import sys
from datetime import date
from typing import NoReturn

import structlog
from sqlalchemy.exc import SQLAlchemyError

from app.core import Base, DatabaseManager, ServiceException
from app.core.logging import setup_logging
from app.features.players import PlayerService, PlayerToSave, SQLAlchemyPlayerRepository
from app.features.players.orm_models import last_name_key

logger = structlog.get_logger(__name__)

SEED_PLAYERS = [
    PlayerToSave(
        first_name="Rafael",
        last_name="Nadal",
        birth_date=date(1986, 6, 3),
        points=5000,
    ),
    PlayerToSave(
        first_name="Novak",
        last_name="Djokovic",
        birth_date=date(1987, 5, 22),
        points=2000,
    ),
    PlayerToSave(
        first_name="Roger",
        last_name="Federer",
        birth_date=date(1981, 8, 8),
        points=1000,
    ),
    PlayerToSave(
        first_name="Andy",
        last_name="Murray",
        birth_date=date(1987, 5, 15),
        points=500,
    ),
]


async def init_db(manager: DatabaseManager) -> None:
    """Create all tables defined in Base.metadata.

    Raises:
        SQLAlchemyError: If database connection or table creation fails
    """
    try:
        async with manager.engine.begin() as conn:
            logger.info("Creating database tables...")
            await conn.run_sync(Base.metadata.create_all)

        logger.info(
            "Database initialization completed successfully",
            table_names=list(Base.metadata.tables.keys()),
        )
    except SQLAlchemyError as e:
        logger.error(
            "Database initialization failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        raise


async def drop_all_tables(manager: DatabaseManager) -> None:
    """Drop all tables from the database.

    WARNING: This is destructive and will delete all data!

    Raises:
        SQLAlchemyError: If database connection or table dropping fails
    """
    try:
        logger.warning("Dropping all database tables...")
        async with manager.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.info("All database tables dropped successfully")
    except SQLAlchemyError as e:
        logger.error(
            "Failed to drop database tables",
            error=str(e),
            error_type=type(e).__name__,
        )
        raise


async def reset_db(manager: DatabaseManager) -> None:
    """Drop and recreate all tables.

    WARNING: This is destructive and will delete all data!
    """
    logger.warning("Resetting database (drop + create)...")
    await drop_all_tables(manager)
    await init_db(manager)
    logger.info("Database reset completed successfully")


async def seed_db(manager: DatabaseManager) -> int:
    """Create the reference players through the service so they are ranked.

    Players that already exist are skipped.

    :returns: Number of players created
    """
    created = 0
    async with manager.get_session() as session:
        service = PlayerService(SQLAlchemyPlayerRepository(session))
        existing = {last_name_key(player.last_name) for player in await service.get_all_players()}
        for player_to_save in SEED_PLAYERS:
            if last_name_key(player_to_save.last_name) in existing:
                logger.info("Seed player already present", last_name=player_to_save.last_name)
                continue
            player = await service.create(player_to_save)
            created += 1
            logger.info(
                "Seed player created",
                last_name=player.last_name,
                position=player.rank.position,
            )
    return created


async def _run(command: str) -> None:
    manager = DatabaseManager()
    try:
        if command == "init":
            await init_db(manager)
        elif command == "drop":
            await drop_all_tables(manager)
        elif command == "reset":
            await reset_db(manager)
        elif command == "seed":
            await init_db(manager)
            await seed_db(manager)
    finally:
        await manager.close()


def main() -> NoReturn:
    """Run CLI for database initialization commands.

    Supports commands:
    - init: Create all tables (default)
    - drop: Drop all tables (WARNING: destructive)
    - reset: Drop and recreate all tables (WARNING: destructive)
    - seed: Create tables if needed and add the reference players
    """
    setup_logging()
    command = sys.argv[1] if len(sys.argv) > 1 else "init"

    if command not in ("init", "drop", "reset", "seed"):
        logger.error("Unknown command", command=command)
        print("Usage: python -m app.init_db [init|drop|reset|seed]")
        sys.exit(1)

    try:
        asyncio.run(_run(command))
    except (SQLAlchemyError, ServiceException) as e:
        logger.error("Database command failed", command=command, error=str(e))
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
