from __future__ import annotations

import logging
import random
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import ValidationError

from ..config import LotteryGameSettings
from ..errors import GameStateError
from ..models import Player
from ..pool import TicketPool
from ..schemas import UserTicketInput
from ..types import InputProvider, RandomSource


class PlayerRegistry:
    """Creates the players of a round and the tickets they buy.

    Player 1 is the user; the remaining players are CPU players whose ticket
    purchases are drawn at random within the configured per-player limit.
    Every purchase is capped at the player's balance.
    """

    def __init__(
        self,
        settings: LotteryGameSettings,
        rng: Optional[RandomSource] = None,
        input_provider: Optional[InputProvider] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._settings = settings
        self._random = rng or random.Random(settings.random_seed)
        self._input = input_provider
        self._logger = logger or logging.getLogger("lottery.players")
        self._players: List[Player] = []
        self._owners: Dict[int, Player] = {}
        self._pool: Optional[TicketPool] = None

    @property
    def players(self) -> List[Player]:
        return list(self._players)

    @property
    def user_player(self) -> Optional[Player]:
        return self._players[0] if self._players else None

    @property
    def ticket_pool(self) -> Optional[TicketPool]:
        return self._pool

    @property
    def random_source(self) -> RandomSource:
        return self._random

    def create_players(self, user_tickets: Optional[int] = None) -> List[Player]:
        """Create the user player and a random number of CPU players."""
        limit = self._settings.tickets_per_player_limit
        if user_tickets is not None:
            tickets = UserTicketInput(
                tickets=user_tickets, minimum=limit.min, maximum=limit.max
            ).tickets
        else:
            tickets = self._prompt_user_tickets()

        self._players = []
        self._owners = {}
        self._pool = None

        self._players.append(self._new_player(1, tickets))

        player_range = self._settings.player_count_range
        total_players = self._random.randint(player_range.min, player_range.max)
        for index in range(2, total_players + 1):
            requested = self._random.randint(limit.min, limit.max)
            self._players.append(self._new_player(index, requested))

        self._logger.info(
            "Created %s players (%s CPU); user bought %s tickets.",
            len(self._players),
            len(self._players) - 1,
            self._players[0].tickets_purchased,
        )
        return self.players

    def generate_tickets(self, pool: TicketPool) -> Decimal:
        """Assign contiguous ticket numbers to every player and fill ``pool``.

        Returns the total revenue of the round as an exact decimal.
        """
        if pool is None:
            raise ValueError("Ticket pool cannot be None.")
        if self._owners or any(player.tickets for player in self._players):
            raise GameStateError("Tickets have already been generated for these players.")

        assignments: List[List[int]] = []
        next_ticket = 1
        for player in self._players:
            block = list(range(next_ticket, next_ticket + player.tickets_purchased))
            clashes = [ticket_number for ticket_number in block if ticket_number in pool]
            if clashes:
                raise ValueError(f"Ticket pool already holds ticket {clashes[0]}.")
            assignments.append(block)
            next_ticket += player.tickets_purchased

        # nothing is written until every block is known to fit
        for player, block in zip(self._players, assignments):
            for ticket_number in block:
                pool.add(ticket_number)
                player.tickets.append(ticket_number)
                self._owners[ticket_number] = player
        self._pool = pool

        price = self._settings.ticket_price
        revenue = sum(
            (Decimal(player.tickets_purchased) * price for player in self._players),
            Decimal("0"),
        )
        self._logger.info("Generated %s tickets; revenue=%s", next_ticket - 1, revenue)
        return revenue

    def find_player_by_ticket(self, ticket_number: int) -> Optional[Player]:
        """Return the owner of a ticket that is still in the pool, else ``None``."""
        if ticket_number <= 0:
            raise ValueError("Ticket number must be greater than zero.")
        if self._pool is None or ticket_number not in self._pool:
            return None
        return self._owners.get(ticket_number)

    def get_winning_players(self) -> List[Player]:
        return [player for player in self._players if player.winnings > 0]

    def _new_player(self, index: int, requested: int) -> Player:
        player = Player(
            name=f"Player {index}",
            balance=int(self._settings.player_initial_balance),
        )
        purchased = player.purchase_tickets(requested)
        if purchased < requested:
            self._logger.debug(
                "%s requested %s tickets but can only afford %s.",
                player.name,
                requested,
                purchased,
            )
        return player

    def _prompt_user_tickets(self) -> int:
        if self._input is None:
            raise GameStateError("No input provider configured to ask for the user's tickets.")

        limit = self._settings.tickets_per_player_limit
        prompt = (
            f"Enter the number of tickets Player 1 wants to buy ({limit.min}-{limit.max}): "
        )
        while True:
            raw = self._input.read_line(prompt)
            try:
                return UserTicketInput(
                    tickets=raw, minimum=limit.min, maximum=limit.max
                ).tickets
            except ValidationError:
                self._logger.debug("Rejected ticket count input %r", raw)
                self._input.write_line(
                    f"Invalid input. Please enter a whole number between {limit.min} and {limit.max}."
                )
