from __future__ import annotations

from decimal import Decimal
from typing import List, Sequence

from .config import LotteryGameSettings
from .models import GameResult, Player
from .types import PrizeTier


class ConsoleInputProvider:
    """Reads the user's answers from stdin and echoes messages to stdout."""

    def read_line(self, prompt: str) -> str:
        return input(prompt)

    def write_line(self, message: str) -> None:
        print(message)


def format_amount(amount: Decimal) -> str:
    return f"${Decimal(amount):.2f}"


def render_welcome(settings: LotteryGameSettings) -> List[str]:
    return [
        "Welcome to the Bede Lottery, Player 1!",
        f"* Your digital balance: {format_amount(settings.player_initial_balance)}",
        f"* Ticket Price: {format_amount(settings.ticket_price)} each",
    ]


def render_game_result(result: GameResult, players: Sequence[Player]) -> List[str]:
    cpu_players = max(len(players) - 1, 0)
    lines = [
        "",
        f"{cpu_players} other CPU players also have purchased tickets.",
        "",
        "Ticket Draw Results:",
    ]

    grand_prize = result.winners_for(PrizeTier.GRAND_PRIZE)
    if grand_prize:
        winner = grand_prize[0]
        lines.append(
            f"* Grand Prize: {winner.player_name} wins {format_amount(winner.winnings)}!"
        )

    for tier in (PrizeTier.SECOND_TIER, PrizeTier.THIRD_TIER):
        winners = result.winners_for(tier)
        if winners:
            names = ", ".join(entry.player_name for entry in winners)
            lines.append(
                f"* {tier.value}: Players {names} win {format_amount(winners[0].winnings)} each!"
            )

    lines.extend(
        [
            "",
            "Congratulations to the winners!",
            "",
            f"House Revenue: {format_amount(result.house_profit)}",
        ]
    )
    return lines
