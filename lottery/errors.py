from __future__ import annotations


class LotteryError(Exception):
    """Base error for the lottery game."""


class GameStateError(LotteryError, RuntimeError):
    """Operation attempted while the game is in an invalid state."""


class PrizeDistributionError(GameStateError):
    """Prize distribution failed part-way through a round."""


class HouseProfitError(GameStateError):
    """House profit could not be computed for a round."""
