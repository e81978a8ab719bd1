from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_EVEN, Decimal
from typing import List

from .types import PrizeTier

CENT = Decimal("0.01")


def quantize_amount(value: Decimal) -> Decimal:
    """Round a monetary amount to 2 decimal places, ties to even."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_EVEN)


@dataclass
class Player:
    name: str
    balance: int
    tickets_purchased: int = 0
    tickets: List[int] = field(default_factory=list)
    winnings: Decimal = Decimal("0.00")

    def purchase_tickets(self, requested: int) -> int:
        """Buy up to ``requested`` tickets, capped at what the balance allows."""
        if requested < 0:
            raise ValueError("Requested ticket count must not be negative.")
        purchased = min(requested, self.balance)
        self.tickets_purchased += purchased
        self.balance -= purchased
        return purchased

    def add_winnings(self, amount: Decimal) -> None:
        self.winnings = quantize_amount(self.winnings + amount)


@dataclass(frozen=True)
class PlayerResult:
    player_name: str
    tickets_purchased: int
    winnings: Decimal
    prize_tier: PrizeTier


@dataclass
class GameResult:
    player_results: List[PlayerResult] = field(default_factory=list)
    house_profit: Decimal = Decimal("0.00")

    def winners_for(self, tier: PrizeTier) -> List[PlayerResult]:
        return [entry for entry in self.player_results if entry.prize_tier == tier]

    def total_winnings(self) -> Decimal:
        return quantize_amount(sum((entry.winnings for entry in self.player_results), Decimal("0")))
