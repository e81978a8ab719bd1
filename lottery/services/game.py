from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from ..config import LotteryGameSettings, PrizeDistributionSettings
from ..errors import GameStateError, HouseProfitError, PrizeDistributionError
from ..models import GameResult, PlayerResult, quantize_amount
from ..pool import TicketPool
from ..types import GameState, PrizeTier, RandomSource
from .players import PlayerRegistry


@dataclass(frozen=True)
class PrizeTierRule:
    """How much of the revenue a tier receives and how many tickets win it.

    Attributes
    ----------
    tier : PrizeTier
        Tier label recorded on each result entry.
    revenue_share : Decimal
        Fraction of total revenue paid out across the tier's winners.
    winner_ratio : Optional[Decimal]
        Fraction of the ticket count that wins the tier. ``None`` means the
        tier has exactly one winner.
    """

    tier: PrizeTier
    revenue_share: Decimal
    winner_ratio: Optional[Decimal] = None

    def winner_count(self, ticket_count: int) -> int:
        if self.winner_ratio is None:
            return 1
        return max(1, int(Decimal(ticket_count) * self.winner_ratio))


def build_prize_tiers(distribution: PrizeDistributionSettings) -> List[PrizeTierRule]:
    return [
        PrizeTierRule(PrizeTier.GRAND_PRIZE, distribution.grand_prize_share),
        PrizeTierRule(
            PrizeTier.SECOND_TIER,
            distribution.second_tier_share,
            distribution.second_tier_winner_ratio,
        ),
        PrizeTierRule(
            PrizeTier.THIRD_TIER,
            distribution.third_tier_share,
            distribution.third_tier_winner_ratio,
        ),
    ]


class GameEngine:
    """Runs a round: sets up players and tickets, then draws the prize tiers."""

    def __init__(
        self,
        registry: PlayerRegistry,
        settings: LotteryGameSettings,
        rng: Optional[RandomSource] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._registry = registry
        self._settings = settings
        self._random = rng or registry.random_source
        self._logger = logger or logging.getLogger("lottery.game")
        self._tiers = build_prize_tiers(settings.prize_distribution)
        self._pool: Optional[TicketPool] = None
        self._total_revenue = Decimal("0")
        self._state = GameState.IDLE
        self._last_result: Optional[GameResult] = None

    @property
    def registry(self) -> PlayerRegistry:
        return self._registry

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def total_revenue(self) -> Decimal:
        return self._total_revenue

    @property
    def ticket_pool(self) -> Optional[TicketPool]:
        return self._pool

    @property
    def last_result(self) -> Optional[GameResult]:
        return self._last_result

    def initialise_game(self, user_tickets: Optional[int] = None) -> Decimal:
        """Create the players, generate their tickets and record the revenue."""
        if self._pool is not None:
            raise GameStateError("The game has already been initialised.")

        self._registry.create_players(user_tickets)
        pool = TicketPool()
        self._total_revenue = self._registry.generate_tickets(pool)
        self._pool = pool
        self._logger.info(
            "Game initialised with %s tickets and revenue %s",
            len(pool),
            self._total_revenue,
        )
        return self._total_revenue

    def play_game(self) -> GameResult:
        """Distribute the prize tiers and compute the house profit.

        Each call produces a new :class:`GameResult`. A round that fails part
        way leaves the engine in ``ABORTED`` and later calls are refused.

        Raises
        ------
        GameStateError
            If the game was not initialised, has no tickets left, or a
            previous round aborted.
        PrizeDistributionError
            If drawing winners failed.
        HouseProfitError
            If the house profit could not be computed.
        """
        if self._state is GameState.ABORTED:
            raise GameStateError("A previous round aborted; start a new game.")
        if self._pool is None or len(self._pool) == 0:
            raise GameStateError("No tickets available for prize distribution.")

        result = GameResult()
        self._state = GameState.DISTRIBUTING
        try:
            self._distribute_prizes(result)
            self._calculate_house_profit(result)
        except Exception:
            self._state = GameState.ABORTED
            raise
        self._state = GameState.FINALIZED
        self._last_result = result
        return result

    def _distribute_prizes(self, result: GameResult) -> None:
        if result is None:
            raise ValueError("Game result cannot be None.")
        if self._pool is None or len(self._pool) == 0:
            raise GameStateError("No tickets available for prize distribution.")

        try:
            ticket_count = len(self._pool)
            for rule in self._tiers:
                prize_pool = self._total_revenue * rule.revenue_share
                self._distribute_prize(
                    rule.tier, prize_pool, rule.winner_count(ticket_count), result
                )
        except Exception as exc:
            raise PrizeDistributionError("An error occurred while distributing prizes.") from exc

    def _distribute_prize(
        self,
        tier: PrizeTier,
        prize_pool: Decimal,
        winners_count: int,
        result: GameResult,
    ) -> None:
        # a tier may run short when the pool empties before every winner is drawn
        prize_per_winner = quantize_amount(prize_pool / winners_count)
        pool = self._pool
        awarded = 0
        while awarded < winners_count and len(pool) > 0:
            winning_ticket = pool.pick(self._random)
            winner = self._registry.find_player_by_ticket(winning_ticket)
            if winner is None:
                raise GameStateError(f"No player found with ticket number {winning_ticket}.")

            pool.retire(winning_ticket)
            winner.add_winnings(prize_per_winner)
            result.player_results.append(
                PlayerResult(
                    player_name=winner.name,
                    tickets_purchased=winner.tickets_purchased,
                    winnings=prize_per_winner,
                    prize_tier=tier,
                )
            )
            awarded += 1
            self._logger.debug(
                "%s: ticket %s won by %s (%s)", tier.value, winning_ticket, winner.name, prize_per_winner
            )

        self._logger.info(
            "%s: %s of %s winners paid %s each", tier.value, awarded, winners_count, prize_per_winner
        )

    def _calculate_house_profit(self, result: GameResult) -> None:
        if result is None:
            raise ValueError("Game result cannot be None.")
        if not result.player_results:
            raise GameStateError("No player results available for calculating winnings.")

        try:
            total_winnings = result.total_winnings()
            result.house_profit = quantize_amount(self._total_revenue - total_winnings)
        except Exception as exc:
            raise HouseProfitError("An error occurred while calculating the house profit.") from exc
        self._logger.info(
            "House profit %s from revenue %s", result.house_profit, self._total_revenue
        )
