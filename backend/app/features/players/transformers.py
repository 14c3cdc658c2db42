"""Transformers for converting between layers in players feature.

Keeps the store record (PlayerORM) and the API schema (Player) decoupled.
"""

from .orm_models import PlayerORM
from .schemas import Player, PlayerToSave, Rank


def player_orm_to_response(player: PlayerORM) -> Player:
    """Transform a stored player record into the Player API schema.

    :param player: Player record from the store
    :returns: Player response schema with its rank
    """
    return Player(
        first_name=player.first_name,
        last_name=player.last_name,
        birth_date=player.birth_date,
        rank=Rank(position=player.rank, points=player.points),
    )


def player_to_save_to_orm(player_to_save: PlayerToSave) -> PlayerORM:
    """Build a new, not yet ranked, store record from a create payload."""
    return PlayerORM(
        last_name=player_to_save.last_name,
        first_name=player_to_save.first_name,
        birth_date=player_to_save.birth_date,
        points=player_to_save.points,
    )
