"""Player service: roster operations and ranking maintenance.

- Reads go straight through the repository
- Every mutation runs as one unit of work: apply the change, re-read the
  whole roster, recompute all positions, write the roster back, commit
- Mutations are serialized so two requests cannot interleave their
  read-recompute-write cycles and overwrite each other's ranking
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

import structlog

from .orm_models import PlayerORM
from .ranking import RankingCalculator
from .repository import PlayerRepositoryInterface
from .schemas import Player, PlayerToSave
from .transformers import player_orm_to_response, player_to_save_to_orm
from app.core.decorators import input_validation, service_error_handler
from app.core.exceptions import PlayerAlreadyExistsError, PlayerNotFoundError

logger = structlog.get_logger(__name__)


class PlayerService:
    """Service for player retrieval and ranking-preserving mutations.

    Responsibilities:
    - Enforce last name uniqueness (case-insensitive)
    - Keep rank positions dense and ordered by points after every mutation
    - Translate store records to API schemas
    """

    def __init__(
        self,
        repository: PlayerRepositoryInterface,
        lock: Optional[asyncio.Lock] = None,
    ):
        """Initialize player service with its repository.

        :param repository: Player store
        :param lock: Lock serializing mutations; shared by every service of an application
        """
        self.repository = repository
        self._lock = lock or asyncio.Lock()

    @service_error_handler("PlayerService")
    async def get_all_players(self) -> List[Player]:
        """Get every player ordered by rank position.

        :returns: Players, best ranked first
        :raises PlayerDataRetrievalError: If the store cannot be read
        """
        logger.info("Invoking get_all_players")
        players = await self.repository.find_all()
        return [
            player_orm_to_response(player)
            for player in sorted(players, key=lambda p: p.rank)
        ]

    @service_error_handler("PlayerService")
    @input_validation(validate_non_empty=["last_name"])
    async def get_by_last_name(self, last_name: str) -> Player:
        """Get a player by last name, ignoring case.

        :param last_name: Last name to look up
        :returns: Player response schema
        :raises PlayerNotFoundError: If no player has this last name
        :raises PlayerDataRetrievalError: If the store cannot be read
        """
        logger.info("Invoking get_by_last_name", last_name=last_name)
        player = await self.repository.find_one_by_last_name_ignore_case(last_name)
        if player is None:
            raise PlayerNotFoundError(last_name)
        return player_orm_to_response(player)

    @service_error_handler("PlayerService")
    async def create(self, player_to_save: PlayerToSave) -> Player:
        """Register a new player and rerank the roster.

        The player is first stored with a placeholder position, which the
        recompute pass replaces before the unit of work commits. The result
        carries the position as committed by this call.

        :param player_to_save: New player data
        :returns: The stored player with its computed rank
        :raises PlayerAlreadyExistsError: If the last name is already taken
        :raises PlayerDataRetrievalError: If the store cannot be read or written
        """
        last_name = player_to_save.last_name
        logger.info("Invoking create", last_name=last_name, points=player_to_save.points)

        async with self._unit_of_work():
            existing = await self.repository.find_one_by_last_name_ignore_case(last_name)
            if existing is not None:
                raise PlayerAlreadyExistsError(last_name)

            registered = await self.repository.save(player_to_save_to_orm(player_to_save))
            await self._recompute_ranking()
            created = player_orm_to_response(registered)

        return created

    @service_error_handler("PlayerService")
    async def update(self, player_to_save: PlayerToSave) -> Player:
        """Overwrite first name, birth date and points of a player, then rerank.

        The last name is the key and is never changed.

        :param player_to_save: Updated player data
        :returns: The updated player with its computed rank
        :raises PlayerNotFoundError: If no player has this last name
        :raises PlayerDataRetrievalError: If the store cannot be read or written
        """
        last_name = player_to_save.last_name
        logger.info("Invoking update", last_name=last_name, points=player_to_save.points)

        async with self._unit_of_work():
            player = await self.repository.find_one_by_last_name_ignore_case(last_name)
            if player is None:
                raise PlayerNotFoundError(last_name)

            player.first_name = player_to_save.first_name
            player.birth_date = player_to_save.birth_date
            player.points = player_to_save.points
            await self.repository.save(player)
            await self._recompute_ranking()
            updated = player_orm_to_response(player)

        return updated

    @service_error_handler("PlayerService")
    @input_validation(validate_non_empty=["last_name"])
    async def delete(self, last_name: str) -> None:
        """Remove a player and rerank the remaining roster.

        :param last_name: Last name of the player to remove
        :raises PlayerNotFoundError: If no player has this last name
        :raises PlayerDataRetrievalError: If the store cannot be read or written
        """
        logger.info("Invoking delete", last_name=last_name)

        async with self._unit_of_work():
            player = await self.repository.find_one_by_last_name_ignore_case(last_name)
            if player is None:
                raise PlayerNotFoundError(last_name)

            await self.repository.delete(player)
            await self._recompute_ranking()

    async def _recompute_ranking(self) -> List[PlayerORM]:
        """Re-read the whole roster, reassign every position and write all of it back."""
        players = await self.repository.find_all()
        new_ranking = RankingCalculator(players).get_new_players_ranking()
        await self.repository.save_all(new_ranking)

        logger.info("Ranking updated", player_count=len(new_ranking))
        return new_ranking

    @asynccontextmanager
    async def _unit_of_work(self) -> AsyncIterator[None]:
        """Serialize a mutation and commit it, or roll all of it back."""
        async with self._lock:
            try:
                yield
                await self.repository.commit()
            except Exception:
                await self.repository.rollback()
                raise
