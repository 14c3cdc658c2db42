"""Players feature: roster storage and ranking maintenance."""

from .orm_models import PlayerORM, UNRANKED_POSITION
from .schemas import Player, PlayerToSave, Rank
from .ranking import RankingCalculator
from .repository import PlayerRepositoryInterface, SQLAlchemyPlayerRepository
from .service import PlayerService
from .router import router as players_router

__all__ = [
    "PlayerORM",
    "UNRANKED_POSITION",
    "Player",
    "PlayerToSave",
    "Rank",
    "RankingCalculator",
    "PlayerRepositoryInterface",
    "SQLAlchemyPlayerRepository",
    "PlayerService",
    "players_router",
]
