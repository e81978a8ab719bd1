from __future__ import annotations

import re
from decimal import Decimal
from typing import Any, List

from pydantic import BaseModel, Field, field_validator, model_validator

from .models import GameResult, PlayerResult
from .types import PrizeTier

WHOLE_NUMBER_PATTERN = re.compile(r"^[0-9]+$")


class UserTicketInput(BaseModel):
    tickets: int = Field(..., description="Number of tickets the user wants to buy.")
    minimum: int
    maximum: int

    @field_validator("tickets", mode="before")
    @classmethod
    def parse_whole_number(cls, value: Any) -> Any:
        if isinstance(value, str):
            text = value.strip()
            if not WHOLE_NUMBER_PATTERN.match(text):
                raise ValueError("Ticket count must be a whole number.")
            return int(text)
        if isinstance(value, bool):
            raise ValueError("Ticket count must be a whole number.")
        return value

    @model_validator(mode="after")
    def check_limits(self) -> "UserTicketInput":
        if not self.minimum <= self.tickets <= self.maximum:
            raise ValueError(
                f"The number of tickets must be between {self.minimum} and {self.maximum}."
            )
        return self


class PlayerResultResponse(BaseModel):
    player_name: str
    tickets_purchased: int
    winnings: Decimal
    prize_tier: PrizeTier

    @classmethod
    def from_result(cls, entry: PlayerResult) -> "PlayerResultResponse":
        return cls(
            player_name=entry.player_name,
            tickets_purchased=entry.tickets_purchased,
            winnings=entry.winnings,
            prize_tier=entry.prize_tier,
        )


class GameResultResponse(BaseModel):
    player_count: int
    ticket_count: int
    total_revenue: Decimal
    house_profit: Decimal
    player_results: List[PlayerResultResponse] = []

    @classmethod
    def from_result(
        cls,
        result: GameResult,
        *,
        player_count: int,
        ticket_count: int,
        total_revenue: Decimal,
    ) -> "GameResultResponse":
        return cls(
            player_count=player_count,
            ticket_count=ticket_count,
            total_revenue=total_revenue,
            house_profit=result.house_profit,
            player_results=[PlayerResultResponse.from_result(entry) for entry in result.player_results],
        )
