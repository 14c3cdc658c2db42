"""Dependencies for the players feature.

Injects the repository into the service following dependency inversion principle.
"""

import asyncio
from typing import Annotated
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import get_db
from .service import PlayerService
from .repository import SQLAlchemyPlayerRepository, PlayerRepositoryInterface


async def get_player_repository(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PlayerRepositoryInterface:
    """Get player repository instance.

    :param db: Database session
    :returns: Player repository implementation
    """
    return SQLAlchemyPlayerRepository(db)


def get_ranking_lock(request: Request) -> asyncio.Lock:
    """Get the application's ranking lock, created by the lifespan handler."""
    return request.app.state.ranking_lock


async def get_player_service(
    repository: Annotated[PlayerRepositoryInterface, Depends(get_player_repository)],
    lock: Annotated[asyncio.Lock, Depends(get_ranking_lock)],
) -> PlayerService:
    """Get player service instance.

    :param repository: Player repository
    :param lock: Lock serializing mutations across requests
    :returns: Player service with injected repository
    """
    return PlayerService(repository, lock=lock)


# Type aliases for cleaner dependency injection
PlayerServiceDep = Annotated[PlayerService, Depends(get_player_service)]

__all__ = [
    "get_player_service",
    "get_player_repository",
    "get_ranking_lock",
    "PlayerServiceDep",
]
