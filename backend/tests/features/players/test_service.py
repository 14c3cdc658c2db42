"""
Tests for PlayerService with a mocked repository.
"""

import asyncio

import pytest
from unittest.mock import AsyncMock
from sqlalchemy.exc import OperationalError

from app.core.exceptions import (
    PlayerAlreadyExistsError,
    PlayerDataRetrievalError,
    PlayerNotFoundError,
    ValidationError,
)
from app.features.players.orm_models import UNRANKED_POSITION, last_name_key
from app.features.players.repository import SQLAlchemyPlayerRepository
from app.features.players.service import PlayerService
from tests.helpers import is_dense_ranking, make_player


def _find_by_last_name(players):
    """Build a case-insensitive lookup over a mutable roster."""

    async def find(last_name):
        for player in players:
            if player.last_name_key == last_name_key(last_name):
                return player
        return None

    return find


@pytest.fixture
def roster(player_entities):
    return player_entities()


@pytest.fixture
def mock_repository(roster):
    """Repository mock backed by an in-memory roster list."""
    repository = AsyncMock(spec=SQLAlchemyPlayerRepository)

    async def find_all():
        return list(roster)

    async def save(player):
        if all(player is not p for p in roster):
            roster.append(player)
        return player

    async def save_all(players):
        return list(players)

    async def delete(player):
        roster.remove(player)

    repository.find_all.side_effect = find_all
    repository.find_one_by_last_name_ignore_case.side_effect = _find_by_last_name(
        roster
    )
    repository.save.side_effect = save
    repository.save_all.side_effect = save_all
    repository.delete.side_effect = delete
    return repository


@pytest.fixture
def service(mock_repository):
    return PlayerService(mock_repository, lock=asyncio.Lock())


def _assert_store_untouched(mock_repository):
    mock_repository.save.assert_not_called()
    mock_repository.save_all.assert_not_called()
    mock_repository.delete.assert_not_called()
    mock_repository.commit.assert_not_called()


class TestGetAllPlayers:
    """Test class for ranking retrieval."""

    async def test_returns_players_ranking(self, service):
        """Players stored in arbitrary order come back by rank position."""
        players = await service.get_all_players()

        assert [p.last_name for p in players] == [
            "Nadal",
            "Djokovic",
            "Federer",
            "Murray",
        ]
        assert [p.rank.position for p in players] == [1, 2, 3, 4]
        assert players[0].rank.points == 5000

    async def test_is_idempotent(self, service):
        """Two reads without a mutation in between return the same sequence."""
        assert await service.get_all_players() == await service.get_all_players()

    async def test_empty_store(self, service, mock_repository):
        mock_repository.find_all.side_effect = None
        mock_repository.find_all.return_value = []

        assert await service.get_all_players() == []

    async def test_fails_when_data_access_error_occurs(self, service, mock_repository):
        """Store failures surface as a data retrieval error, never a partial result."""
        cause = OperationalError("SELECT", {}, Exception("connection refused"))
        mock_repository.find_all.side_effect = cause

        with pytest.raises(PlayerDataRetrievalError) as exc_info:
            await service.get_all_players()

        assert str(exc_info.value) == "Could not retrieve player data"
        assert exc_info.value.original_error is cause
        assert exc_info.value.__cause__ is cause
        assert exc_info.value.operation == "get_all_players"

    async def test_connection_errors_are_wrapped(self, service, mock_repository):
        mock_repository.find_all.side_effect = ConnectionError("store unreachable")

        with pytest.raises(PlayerDataRetrievalError):
            await service.get_all_players()


class TestGetByLastName:
    """Test class for single player retrieval."""

    async def test_retrieves_player_ignoring_case(self, service, mock_repository):
        player = await service.get_by_last_name("nadal")

        assert player.last_name == "Nadal"
        assert player.first_name == "Rafael"
        assert player.rank.position == 1
        mock_repository.find_one_by_last_name_ignore_case.assert_called_once_with(
            "nadal"
        )

    async def test_fails_when_player_does_not_exist(self, service):
        with pytest.raises(PlayerNotFoundError) as exc_info:
            await service.get_by_last_name("doe")

        assert str(exc_info.value) == "Player with last name doe could not be found."
        assert exc_info.value.last_name == "doe"
        assert exc_info.value.operation == "get_by_last_name"

    async def test_fails_on_blank_last_name(self, service, mock_repository):
        with pytest.raises(ValidationError):
            await service.get_by_last_name("   ")

        mock_repository.find_one_by_last_name_ignore_case.assert_not_called()

    async def test_fails_when_data_access_error_occurs(self, service, mock_repository):
        mock_repository.find_one_by_last_name_ignore_case.side_effect = (
            OperationalError("SELECT", {}, Exception("timeout"))
        )

        with pytest.raises(PlayerDataRetrievalError):
            await service.get_by_last_name("nadal")


class TestCreate:
    """Test class for player creation."""

    async def test_creates_player_and_reranks(
        self, service, mock_repository, roster, player_to_save
    ):
        """A new player is inserted, ranked, and returned with its position."""
        created = await service.create(player_to_save("Alcaraz", points=1500))

        assert created.last_name == "Alcaraz"
        assert created.rank.position == 3
        assert created.rank.points == 1500
        assert len(roster) == 5
        assert is_dense_ranking(roster)
        mock_repository.commit.assert_awaited_once()
        mock_repository.rollback.assert_not_called()

    async def test_result_comes_from_the_committed_unit_of_work(
        self, service, mock_repository, player_to_save
    ):
        """The only lookup is the duplicate check; nothing is read after the commit."""
        created = await service.create(player_to_save("Alcaraz", points=1500))

        mock_repository.find_one_by_last_name_ignore_case.assert_awaited_once_with(
            "Alcaraz"
        )
        assert created.rank.position == 3

    async def test_result_survives_removal_after_commit(
        self, service, mock_repository, roster, player_to_save
    ):
        """A delete landing right after the commit does not turn the create into a miss."""

        async def commit():
            roster[:] = [p for p in roster if p.last_name != "Alcaraz"]

        mock_repository.commit.side_effect = commit

        created = await service.create(player_to_save("Alcaraz", points=9000))

        assert created.last_name == "Alcaraz"
        assert created.rank.position == 1

    async def test_inserts_with_placeholder_rank_before_recompute(
        self, service, mock_repository, player_to_save
    ):
        """The first save carries the placeholder; the bulk save carries the real position."""
        saved_ranks = []

        async def save(player):
            saved_ranks.append(player.rank)
            return player

        mock_repository.save.side_effect = save
        mock_repository.find_all.side_effect = None
        mock_repository.find_all.return_value = []

        await service.create(player_to_save())

        assert saved_ranks == [UNRANKED_POSITION]
        mock_repository.save_all.assert_awaited_once()

    async def test_new_leader_shifts_everyone_down(
        self, service, roster, player_to_save
    ):
        """A player above the current #1 takes first place; the rest move down one."""
        before = {p.last_name: p.rank for p in roster}

        created = await service.create(player_to_save("Sinner", points=9000))

        assert created.rank.position == 1
        for player in roster:
            if player.last_name != "Sinner":
                assert player.rank == before[player.last_name] + 1
        assert is_dense_ranking(roster)

    async def test_whole_roster_is_written_back(
        self, service, mock_repository, roster, player_to_save
    ):
        """The recompute pass saves every player, changed or not."""
        await service.create(player_to_save("Nobody", points=0))

        (written,) = mock_repository.save_all.call_args.args
        assert {p.last_name for p in written} == {p.last_name for p in roster}

    async def test_fails_when_player_already_exists(
        self, service, mock_repository, player_to_save
    ):
        """Duplicate last names are rejected, case-insensitively, without touching the store."""
        with pytest.raises(PlayerAlreadyExistsError) as exc_info:
            await service.create(player_to_save("NADAL"))

        assert str(exc_info.value) == "Player with last name NADAL already exists."
        _assert_store_untouched(mock_repository)
        mock_repository.rollback.assert_awaited_once()

    async def test_rolls_back_when_recompute_fails(
        self, service, mock_repository, player_to_save
    ):
        """A failed bulk save leaves nothing committed."""
        mock_repository.save_all.side_effect = OperationalError(
            "UPDATE", {}, Exception("disk full")
        )

        with pytest.raises(PlayerDataRetrievalError) as exc_info:
            await service.create(player_to_save())

        assert exc_info.value.operation == "create"
        mock_repository.commit.assert_not_called()
        mock_repository.rollback.assert_awaited_once()


class TestUpdate:
    """Test class for player updates."""

    async def test_updates_player_and_reranks(
        self, service, mock_repository, roster, player_to_save
    ):
        """Raising a player's points moves them up; positions stay dense."""
        updated = await service.update(
            player_to_save("murray", points=6000, first_name="Andrew")
        )

        assert updated.last_name == "Murray"
        assert updated.first_name == "Andrew"
        assert updated.rank.position == 1
        assert updated.rank.points == 6000
        assert is_dense_ranking(roster)
        mock_repository.commit.assert_awaited_once()

    async def test_result_is_not_read_back_after_commit(
        self, service, mock_repository, player_to_save
    ):
        updated = await service.update(player_to_save("Federer", points=3000))

        mock_repository.find_one_by_last_name_ignore_case.assert_awaited_once_with(
            "Federer"
        )
        assert updated.rank.position == 2

    async def test_last_name_is_not_changed(self, service, roster, player_to_save):
        await service.update(player_to_save("NADAL", points=5000))

        assert "Nadal" in {p.last_name for p in roster}

    async def test_fails_when_player_does_not_exist(
        self, service, mock_repository, player_to_save
    ):
        with pytest.raises(PlayerNotFoundError) as exc_info:
            await service.update(player_to_save("doe"))

        assert exc_info.value.operation == "update"
        _assert_store_untouched(mock_repository)


class TestDelete:
    """Test class for player deletion."""

    async def test_delete_leader_collapses_positions(
        self, service, mock_repository, roster
    ):
        """Deleting #1 moves positions 2..N to 1..N-1 in the same order."""
        await service.delete("Nadal")

        assert [(p.last_name, p.rank) for p in sorted(roster, key=lambda p: p.rank)] == [
            ("Djokovic", 1),
            ("Federer", 2),
            ("Murray", 3),
        ]
        mock_repository.commit.assert_awaited_once()

    async def test_delete_last_player_leaves_empty_roster(self, mock_repository):
        roster = [make_player("Nadal", 5000, 1)]
        mock_repository.find_all.side_effect = None
        mock_repository.find_all.return_value = []
        mock_repository.find_one_by_last_name_ignore_case.side_effect = (
            _find_by_last_name(roster)
        )
        mock_repository.delete.side_effect = None
        service = PlayerService(mock_repository, lock=asyncio.Lock())

        await service.delete("nadal")

        mock_repository.delete.assert_awaited_once_with(roster[0])
        mock_repository.save_all.assert_awaited_once_with([])

    async def test_fails_when_player_does_not_exist(self, service, mock_repository):
        with pytest.raises(PlayerNotFoundError):
            await service.delete("doe")

        _assert_store_untouched(mock_repository)


class TestMutationSerialization:
    """Mutations hold the ranking lock for their whole read-recompute-write cycle."""

    async def test_lock_held_during_recompute(self, mock_repository, player_to_save):
        lock = asyncio.Lock()
        service = PlayerService(mock_repository, lock=lock)
        seen_locked = []

        async def save_all(players):
            seen_locked.append(lock.locked())
            return list(players)

        mock_repository.save_all.side_effect = save_all

        await service.create(player_to_save())
        await service.update(player_to_save("Federer", points=10))
        await service.delete("Murray")

        assert seen_locked == [True, True, True]
        assert not lock.locked()

    async def test_lock_released_after_failure(self, mock_repository, player_to_save):
        lock = asyncio.Lock()
        service = PlayerService(mock_repository, lock=lock)

        with pytest.raises(PlayerAlreadyExistsError):
            await service.create(player_to_save("Nadal"))

        assert not lock.locked()

    def test_services_without_a_lock_do_not_share_one(self, mock_repository):
        """Only locks handed in by the caller are shared between services."""
        first = PlayerService(mock_repository)
        second = PlayerService(mock_repository)

        assert first._lock is not second._lock

    async def test_reads_do_not_take_the_lock(self, mock_repository):
        lock = asyncio.Lock()
        service = PlayerService(mock_repository, lock=lock)

        async with lock:
            players = await asyncio.wait_for(service.get_all_players(), timeout=1)

        assert len(players) == 4
