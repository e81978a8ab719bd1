from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

ZERO = Decimal("0")
ONE = Decimal("1")


def _int_from_env(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"Invalid integer value for {key}: {value!r}") from exc


def _optional_int_from_env(key: str) -> Optional[int]:
    value = os.getenv(key)
    if value is None or value == "":
        return None
    return _int_from_env(key, 0)


def _decimal_from_env(key: str, default: str) -> Decimal:
    value = os.getenv(key)
    if value is None or value == "":
        value = default
    try:
        parsed = Decimal(value)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid decimal value for {key}: {value!r}") from exc
    if not parsed.is_finite():
        raise ValueError(f"Invalid decimal value for {key}: {value!r}")
    return parsed


@dataclass(frozen=True)
class RangeSettings:
    """Inclusive ``[min, max]`` bounds."""

    min: int
    max: int

    def __post_init__(self) -> None:
        if self.min < 0:
            raise ValueError(f"Range minimum must not be negative (got {self.min}).")
        if self.min > self.max:
            raise ValueError(
                f"Range minimum {self.min} must not exceed maximum {self.max}."
            )


@dataclass(frozen=True)
class PrizeDistributionSettings:
    """Revenue share of each tier and the ticket ratio used to size tiers."""

    grand_prize_share: Decimal = Decimal("0.50")
    second_tier_share: Decimal = Decimal("0.30")
    third_tier_share: Decimal = Decimal("0.10")
    second_tier_winner_ratio: Decimal = Decimal("0.10")
    third_tier_winner_ratio: Decimal = Decimal("0.20")

    def __post_init__(self) -> None:
        for name in (
            "grand_prize_share",
            "second_tier_share",
            "third_tier_share",
            "second_tier_winner_ratio",
            "third_tier_winner_ratio",
        ):
            value = getattr(self, name)
            if not ZERO <= value <= ONE:
                raise ValueError(f"{name} must be between 0 and 1 (got {value}).")
        if self.total_share > ONE:
            raise ValueError(
                f"Prize tier shares must not exceed 100% of revenue (got {self.total_share})."
            )

    @property
    def total_share(self) -> Decimal:
        return self.grand_prize_share + self.second_tier_share + self.third_tier_share


@dataclass(frozen=True)
class LotteryGameSettings:
    ticket_price: Decimal = Decimal("1")
    player_initial_balance: Decimal = Decimal("10")
    player_count_range: RangeSettings = RangeSettings(min=10, max=15)
    tickets_per_player_limit: RangeSettings = RangeSettings(min=1, max=10)
    prize_distribution: PrizeDistributionSettings = PrizeDistributionSettings()
    random_seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.ticket_price <= ZERO:
            raise ValueError(f"Ticket price must be positive (got {self.ticket_price}).")
        if self.player_initial_balance < ZERO:
            raise ValueError(
                f"Initial balance must not be negative (got {self.player_initial_balance})."
            )
        if self.player_count_range.min < 1:
            raise ValueError("At least one player (the user) is required.")

    def copy(self, **updates) -> "LotteryGameSettings":
        return replace(self, **updates)


def load_from_environment() -> LotteryGameSettings:
    player_count_range = RangeSettings(
        min=_int_from_env("PLAYER_COUNT_RANGE__MIN", 10),
        max=_int_from_env("PLAYER_COUNT_RANGE__MAX", 15),
    )
    tickets_per_player_limit = RangeSettings(
        min=_int_from_env("TICKETS_PER_PLAYER_LIMIT__MIN", 1),
        max=_int_from_env("TICKETS_PER_PLAYER_LIMIT__MAX", 10),
    )
    prize_distribution = PrizeDistributionSettings(
        grand_prize_share=_decimal_from_env("PRIZE_DISTRIBUTION__GRAND_PRIZE_SHARE", "0.50"),
        second_tier_share=_decimal_from_env("PRIZE_DISTRIBUTION__SECOND_TIER_SHARE", "0.30"),
        third_tier_share=_decimal_from_env("PRIZE_DISTRIBUTION__THIRD_TIER_SHARE", "0.10"),
        second_tier_winner_ratio=_decimal_from_env(
            "PRIZE_DISTRIBUTION__SECOND_TIER_WINNER_RATIO", "0.10"
        ),
        third_tier_winner_ratio=_decimal_from_env(
            "PRIZE_DISTRIBUTION__THIRD_TIER_WINNER_RATIO", "0.20"
        ),
    )

    return LotteryGameSettings(
        ticket_price=_decimal_from_env("TICKET_PRICE", "1"),
        player_initial_balance=_decimal_from_env("PLAYER_INITIAL_BALANCE", "10"),
        player_count_range=player_count_range,
        tickets_per_player_limit=tickets_per_player_limit,
        prize_distribution=prize_distribution,
        random_seed=_optional_int_from_env("LOTTERY_SEED"),
    )


@lru_cache(maxsize=1)
def load_config(dotenv_path: Optional[str] = None) -> LotteryGameSettings:
    if dotenv_path:
        load_dotenv(dotenv_path)
    else:
        default_path = pathlib.Path(".env")
        if default_path.exists():
            load_dotenv(default_path)
    return load_from_environment()
