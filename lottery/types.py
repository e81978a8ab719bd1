from __future__ import annotations

from enum import Enum
from typing import Protocol


class GameState(str, Enum):
    IDLE = "IDLE"
    DISTRIBUTING = "DISTRIBUTING"
    FINALIZED = "FINALIZED"
    ABORTED = "ABORTED"


class PrizeTier(str, Enum):
    GRAND_PRIZE = "Grand Prize"
    SECOND_TIER = "Second Tier"
    THIRD_TIER = "Third Tier"


class RandomSource(Protocol):
    def randint(self, a: int, b: int) -> int:
        """Return a uniformly drawn integer in ``[a, b]``, both inclusive."""
        ...


class InputProvider(Protocol):
    def read_line(self, prompt: str) -> str:
        ...

    def write_line(self, message: str) -> None:
        ...
