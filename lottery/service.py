from __future__ import annotations

import argparse
import logging
import random
import sys
from typing import Optional

from .config import LotteryGameSettings, load_config
from .console import ConsoleInputProvider, render_game_result, render_welcome
from .models import GameResult
from .schemas import GameResultResponse
from .services import GameEngine, PlayerRegistry
from .types import InputProvider


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stderr,
    )


def build_engine(
    settings: LotteryGameSettings,
    input_provider: Optional[InputProvider] = None,
) -> GameEngine:
    rng = random.Random(settings.random_seed)
    registry = PlayerRegistry(
        settings,
        rng=rng,
        input_provider=input_provider or ConsoleInputProvider(),
        logger=logging.getLogger("lottery.players"),
    )
    return GameEngine(registry, settings, rng=rng, logger=logging.getLogger("lottery.game"))


def run(
    args: argparse.Namespace,
    input_provider: Optional[InputProvider] = None,
) -> GameResult:
    settings = load_config(args.env_file)
    if args.seed is not None:
        settings = settings.copy(random_seed=args.seed)
    configure_logging(args.verbose)
    logger = logging.getLogger("lottery")

    engine = build_engine(settings, input_provider)
    if not args.json:
        for line in render_welcome(settings):
            print(line)

    engine.initialise_game(args.tickets)
    result = engine.play_game()
    players = engine.registry.players
    logger.info("Round finished: %s winners, house profit %s", len(result.player_results), result.house_profit)

    if args.json:
        response = GameResultResponse.from_result(
            result,
            player_count=len(players),
            ticket_count=sum(player.tickets_purchased for player in players),
            total_revenue=engine.total_revenue,
        )
        print(response.model_dump_json(indent=2))
    else:
        for line in render_game_result(result, players):
            print(line)
    return result


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Single-round lottery game simulator")
    parser.add_argument("--env-file", type=str, default=None, help="Path to .env file with game settings")
    parser.add_argument(
        "--tickets",
        type=int,
        default=None,
        help="Tickets for Player 1; prompts interactively when omitted.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed the random draws.")
    parser.add_argument("--json", action="store_true", help="Print the round as JSON.")
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging (default WARNING)."
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    try:
        run(args)
    except (KeyboardInterrupt, EOFError):
        print("Game cancelled by user.")


if __name__ == "__main__":
    main()
