import random
import unittest
from decimal import Decimal

from lottery.config import LotteryGameSettings, RangeSettings
from lottery.errors import GameStateError
from lottery.pool import TicketPool
from lottery.services.players import PlayerRegistry


class ScriptedRandom:
    def __init__(self, values) -> None:
        self._values = list(values)
        self.calls = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        value = self._values.pop(0)
        if not a <= value <= b:
            raise AssertionError(f"scripted value {value} outside [{a}, {b}]")
        return value


class FakeInputProvider:
    def __init__(self, answers) -> None:
        self._answers = list(answers)
        self.prompts = []
        self.messages = []

    def read_line(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self._answers.pop(0)

    def write_line(self, message: str) -> None:
        self.messages.append(message)


class PlayerCreationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.settings = LotteryGameSettings()

    def test_population_within_configured_range(self) -> None:
        for seed in range(20):
            registry = PlayerRegistry(self.settings, rng=random.Random(seed))
            players = registry.create_players(5)

            self.assertGreaterEqual(len(players), 10)
            self.assertLessEqual(len(players), 15)
            self.assertEqual(players[0].name, "Player 1")
            self.assertEqual(len({player.name for player in players}), len(players))

    def test_balance_plus_tickets_equals_initial_balance(self) -> None:
        registry = PlayerRegistry(self.settings, rng=random.Random(42))
        for player in registry.create_players(5):
            self.assertEqual(player.balance + player.tickets_purchased, 10, player.name)
            self.assertGreaterEqual(player.tickets_purchased, 1)
            self.assertLessEqual(player.tickets_purchased, 10)

    def test_explicit_user_tickets_are_deducted(self) -> None:
        registry = PlayerRegistry(self.settings, rng=random.Random(1))
        registry.create_players(5)

        user = registry.user_player
        self.assertEqual(user.tickets_purchased, 5)
        self.assertEqual(user.balance, 5)

    def test_user_tickets_outside_limit_raise(self) -> None:
        registry = PlayerRegistry(self.settings, rng=random.Random(1))
        with self.assertRaises(ValueError):
            registry.create_players(15)
        with self.assertRaises(ValueError):
            registry.create_players(0)
        self.assertEqual(registry.players, [])

    def test_user_request_capped_by_balance(self) -> None:
        settings = self.settings.copy(tickets_per_player_limit=RangeSettings(min=1, max=20))
        registry = PlayerRegistry(settings, rng=random.Random(3))
        registry.create_players(15)

        user = registry.user_player
        self.assertEqual(user.tickets_purchased, 10)
        self.assertEqual(user.balance, 0)

    def test_cpu_request_capped_by_balance(self) -> None:
        settings = self.settings.copy(
            player_initial_balance=Decimal("3"),
            player_count_range=RangeSettings(min=1, max=3),
        )
        rng = ScriptedRandom([2, 8])
        registry = PlayerRegistry(settings, rng=rng)
        players = registry.create_players(2)

        self.assertEqual(rng.calls, [(1, 3), (1, 10)])
        self.assertEqual([p.name for p in players], ["Player 1", "Player 2"])
        self.assertEqual(players[1].tickets_purchased, 3)
        self.assertEqual(players[1].balance, 0)

    def test_prompt_retries_until_valid(self) -> None:
        provider = FakeInputProvider(["abc", "0", "11", "-3", " 7 "])
        registry = PlayerRegistry(self.settings, rng=random.Random(5), input_provider=provider)
        registry.create_players()

        self.assertEqual(registry.user_player.tickets_purchased, 7)
        self.assertEqual(len(provider.prompts), 5)
        self.assertIn("(1-10)", provider.prompts[0])
        self.assertEqual(
            provider.messages,
            ["Invalid input. Please enter a whole number between 1 and 10."] * 4,
        )

    def test_prompt_without_provider_raises(self) -> None:
        registry = PlayerRegistry(self.settings, rng=random.Random(5))
        with self.assertRaises(GameStateError):
            registry.create_players()

    def test_recreating_players_replaces_population(self) -> None:
        registry = PlayerRegistry(self.settings, rng=random.Random(9))
        registry.create_players(3)
        registry.generate_tickets(TicketPool())
        registry.create_players(4)

        self.assertEqual(registry.user_player.tickets_purchased, 4)
        self.assertIsNone(registry.ticket_pool)
        self.assertTrue(all(player.tickets == [] for player in registry.players))


class TicketGenerationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.settings = LotteryGameSettings()

    def test_pool_matches_purchases_and_is_contiguous(self) -> None:
        registry = PlayerRegistry(self.settings, rng=random.Random(11))
        registry.create_players(5)
        pool = TicketPool()
        revenue = registry.generate_tickets(pool)

        total = sum(player.tickets_purchased for player in registry.players)
        self.assertEqual(len(pool), total)
        self.assertEqual(pool.snapshot(), list(range(1, total + 1)))
        self.assertEqual(revenue, Decimal(total))
        self.assertIsInstance(revenue, Decimal)

        expected_start = 1
        for player in registry.players:
            self.assertEqual(
                player.tickets,
                list(range(expected_start, expected_start + player.tickets_purchased)),
            )
            expected_start += player.tickets_purchased

    def test_revenue_uses_ticket_price(self) -> None:
        settings = self.settings.copy(
            ticket_price=Decimal("2.5"),
            player_count_range=RangeSettings(min=1, max=2),
        )
        registry = PlayerRegistry(settings, rng=ScriptedRandom([2, 3]))
        registry.create_players(4)
        revenue = registry.generate_tickets(TicketPool())

        self.assertEqual(revenue, Decimal("17.5"))

    def test_none_pool_raises(self) -> None:
        registry = PlayerRegistry(self.settings, rng=random.Random(1))
        registry.create_players(5)
        with self.assertRaises(ValueError):
            registry.generate_tickets(None)  # type: ignore[arg-type]

    def test_generating_twice_raises(self) -> None:
        registry = PlayerRegistry(self.settings, rng=random.Random(1))
        registry.create_players(5)
        registry.generate_tickets(TicketPool())
        with self.assertRaises(GameStateError):
            registry.generate_tickets(TicketPool())

    def test_clashing_pool_leaves_registry_untouched(self) -> None:
        registry = PlayerRegistry(self.settings, rng=random.Random(1))
        registry.create_players(5)
        seeded = TicketPool()
        seeded.add(3)

        with self.assertRaises(ValueError):
            registry.generate_tickets(seeded)

        self.assertIsNone(registry.ticket_pool)
        self.assertTrue(all(player.tickets == [] for player in registry.players))
        self.assertEqual(seeded.snapshot(), [3])
        self.assertIsNone(registry.find_player_by_ticket(1))

        pool = TicketPool()
        registry.generate_tickets(pool)
        total = sum(player.tickets_purchased for player in registry.players)
        self.assertEqual(pool.snapshot(), list(range(1, total + 1)))
        self.assertIs(registry.ticket_pool, pool)


class TicketLookupTests(unittest.TestCase):
    def setUp(self) -> None:
        settings = LotteryGameSettings(player_count_range=RangeSettings(min=1, max=3))
        self.registry = PlayerRegistry(settings, rng=ScriptedRandom([3, 2, 4]))
        self.registry.create_players(3)
        self.pool = TicketPool()

    def test_lookup_before_generation_returns_none(self) -> None:
        self.assertIsNone(self.registry.find_player_by_ticket(1))

    def test_each_ticket_resolves_to_its_owner(self) -> None:
        self.registry.generate_tickets(self.pool)
        owners = [self.registry.find_player_by_ticket(n).name for n in range(1, 10)]

        self.assertEqual(owners, ["Player 1"] * 3 + ["Player 2"] * 2 + ["Player 3"] * 4)
        self.assertIsNone(self.registry.find_player_by_ticket(10))

    def test_non_positive_ticket_raises(self) -> None:
        self.registry.generate_tickets(self.pool)
        with self.assertRaises(ValueError):
            self.registry.find_player_by_ticket(0)
        with self.assertRaises(ValueError):
            self.registry.find_player_by_ticket(-4)

    def test_retired_ticket_no_longer_resolves(self) -> None:
        self.registry.generate_tickets(self.pool)
        self.pool.retire(4)

        self.assertIsNone(self.registry.find_player_by_ticket(4))
        self.assertEqual(self.registry.find_player_by_ticket(5).name, "Player 2")
        self.assertIn(4, self.registry.players[1].tickets)

    def test_winning_players(self) -> None:
        self.registry.generate_tickets(self.pool)
        self.assertEqual(self.registry.get_winning_players(), [])

        self.registry.players[2].add_winnings(Decimal("1.50"))
        winners = self.registry.get_winning_players()
        self.assertEqual([player.name for player in winners], ["Player 3"])


if __name__ == "__main__":
    unittest.main()
