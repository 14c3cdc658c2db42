"""Builders shared by the test modules."""

from datetime import date
from typing import Sequence

from app.features.players.orm_models import PlayerORM


def make_player(
    last_name: str,
    points: int,
    rank: int,
    first_name: str = "Test",
    birth_date: date = date(1990, 1, 1),
) -> PlayerORM:
    """Build a stored player record."""
    return PlayerORM(
        last_name=last_name,
        first_name=first_name,
        birth_date=birth_date,
        points=points,
        rank=rank,
    )


def is_dense_ranking(players: Sequence[PlayerORM]) -> bool:
    """Check that positions are exactly 1..N and points never increase with position."""
    by_position = sorted(players, key=lambda p: p.rank)
    if [p.rank for p in by_position] != list(range(1, len(by_position) + 1)):
        return False
    return all(
        earlier.points >= later.points
        for earlier, later in zip(by_position, by_position[1:])
    )
