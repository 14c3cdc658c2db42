"""Player API endpoints for the ranking roster."""

from typing import List

from fastapi import APIRouter, HTTPException, Response, status
import structlog

from app.core.exceptions import (
    PlayerAlreadyExistsError,
    PlayerDataRetrievalError,
    PlayerNotFoundError,
    ValidationError,
)
from .dependencies import PlayerServiceDep
from .schemas import Player, PlayerToSave

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/players", tags=["players"])


def _data_retrieval_failed(e: PlayerDataRetrievalError) -> HTTPException:
    logger.error(
        "player_data_retrieval_failed",
        operation=e.operation,
        error=str(e.original_error) if e.original_error else str(e),
    )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(e),
    )


@router.get("", response_model=List[Player])
async def list_players(player_service: PlayerServiceDep) -> List[Player]:
    """
    Get the full ranking.

    Players are ordered by rank position, best ranked first.
    """
    try:
        return await player_service.get_all_players()
    except PlayerDataRetrievalError as e:
        raise _data_retrieval_failed(e)


@router.get("/{last_name}", response_model=Player)
async def get_player(last_name: str, player_service: PlayerServiceDep) -> Player:
    """Get a single player by last name (case-insensitive)."""
    try:
        return await player_service.get_by_last_name(last_name)
    except PlayerNotFoundError as e:
        logger.warning("player_not_found", last_name=last_name)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except PlayerDataRetrievalError as e:
        raise _data_retrieval_failed(e)


@router.post("", response_model=Player, status_code=status.HTTP_201_CREATED)
async def create_player(
    player_to_save: PlayerToSave, player_service: PlayerServiceDep
) -> Player:
    """
    Register a new player.

    The whole ranking is recomputed; the response carries the new player's position.
    """
    try:
        return await player_service.create(player_to_save)
    except PlayerAlreadyExistsError as e:
        logger.warning("player_already_exists", last_name=player_to_save.last_name)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except PlayerDataRetrievalError as e:
        raise _data_retrieval_failed(e)


@router.put("", response_model=Player)
async def update_player(
    player_to_save: PlayerToSave, player_service: PlayerServiceDep
) -> Player:
    """
    Update first name, birth date and points of an existing player.

    The last name in the body selects the player and cannot be changed.
    """
    try:
        return await player_service.update(player_to_save)
    except PlayerNotFoundError as e:
        logger.warning("player_not_found", last_name=player_to_save.last_name)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PlayerDataRetrievalError as e:
        raise _data_retrieval_failed(e)


@router.delete("/{last_name}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_player(last_name: str, player_service: PlayerServiceDep) -> Response:
    """Remove a player; remaining players move up to close the gap."""
    try:
        await player_service.delete(last_name)
    except PlayerNotFoundError as e:
        logger.warning("player_not_found", last_name=last_name)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except PlayerDataRetrievalError as e:
        raise _data_retrieval_failed(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
