from .game import GameEngine, PrizeTierRule, build_prize_tiers
from .players import PlayerRegistry

__all__ = [
    "GameEngine",
    "PlayerRegistry",
    "PrizeTierRule",
    "build_prize_tiers",
]
