from __future__ import annotations

from typing import List, Set

from .types import RandomSource


class TicketPool:
    """Ordered collection of ticket numbers that have not won yet.

    The registry fills the pool while generating tickets; the game engine
    retires tickets from it as they are drawn, so a ticket can win at most
    once.
    """

    def __init__(self) -> None:
        self._tickets: List[int] = []
        self._members: Set[int] = set()

    def add(self, ticket_number: int) -> None:
        if ticket_number <= 0:
            raise ValueError("Ticket numbers must be positive.")
        if ticket_number in self._members:
            raise ValueError(f"Ticket {ticket_number} is already in the pool.")
        self._tickets.append(ticket_number)
        self._members.add(ticket_number)

    def pick(self, rng: RandomSource) -> int:
        """Return a uniformly chosen ticket without removing it."""
        if not self._tickets:
            raise LookupError("Cannot draw from an empty ticket pool.")
        index = rng.randint(0, len(self._tickets) - 1)
        return self._tickets[index]

    def retire(self, ticket_number: int) -> None:
        if ticket_number not in self._members:
            raise KeyError(f"Ticket {ticket_number} is not in the pool.")
        self._members.remove(ticket_number)
        self._tickets.remove(ticket_number)

    def snapshot(self) -> List[int]:
        return list(self._tickets)

    def __contains__(self, ticket_number: object) -> bool:
        return ticket_number in self._members

    def __len__(self) -> int:
        return len(self._tickets)
