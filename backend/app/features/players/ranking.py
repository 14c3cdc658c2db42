"""
Ranking recomputation for the player roster.

Positions are derived from points over the whole player set: highest points
first, one position per player, no shared positions and no gaps.
"""

from typing import Iterable, List

import structlog

from .orm_models import PlayerORM

logger = structlog.get_logger(__name__)


def ranking_sort_key(player: PlayerORM) -> tuple[int, str]:
    """Sort key putting more points first, then last name A to Z.

    Python's sort is stable, so players equal on both keys keep the order
    in which the store enumerated them.
    """
    return (-player.points, player.last_name.casefold())


class RankingCalculator:
    """Recomputes rank positions for a complete set of players."""

    def __init__(self, current_players: Iterable[PlayerORM]):
        """
        Initialize the calculator.

        Args:
            current_players: Every player in the store after the mutation,
                in store enumeration order
        """
        self.current_players: List[PlayerORM] = list(current_players)

    def get_new_players_ranking(self) -> List[PlayerORM]:
        """
        Assign positions 1..N by descending points and return the players in rank order.

        Every player gets its position written, including players whose
        position did not change, so the result can be handed to a bulk save.
        """
        ranked = sorted(self.current_players, key=ranking_sort_key)

        moved = 0
        for position, player in enumerate(ranked, start=1):
            if player.rank != position:
                moved += 1
            player.rank = position

        logger.debug(
            "ranking_recomputed",
            player_count=len(ranked),
            positions_changed=moved,
        )
        return ranked
