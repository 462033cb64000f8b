import unittest
from unittest.mock import MagicMock, patch

from roulette_be.exceptions import (
    FundsMismatchException,
    InvalidBetShapeException,
    OverflowException,
    RandomnessUnavailableException,
)
from roulette_be.models import (
    MAX_QUANTITY, BLACK, ODD, RED, RANGE_1_TO_12, RANGE_1_TO_18, RANGE_13_TO_24, COLUMN_2,
    Bet, BetCategory, Coin, TableConfig, build_transfer_instruction,
)
from roulette_be.services import settlement_service
from roulette_be.utils.rng import draw_number_from_seed, fixed_seed_provider

TABLE = TableConfig(min_bet=1, max_bet=1000, max_total_per_request=5000, supported_currencies={"X", "Y"})


def seed_for_number(number, attempts=5000):
    """Find a seed whose draw is ``number``."""
    for i in range(attempts):
        seed = f"seed-{i}".encode()
        if draw_number_from_seed(seed) == number:
            return seed
    raise AssertionError(f"No seed found for {number} in {attempts} attempts")


def bet(quantity, category, currency="X"):
    return Bet(amount=Coin(currency, quantity), category=category)


class TestSettleBets(unittest.TestCase):

    def test_exact_bet_on_drawn_number(self):
        provider = fixed_seed_provider(seed_for_number(17))
        result = settlement_service.settle_bets([bet(10, BetCategory.exact(17))], [Coin("X", 10)], provider, TABLE)

        self.assertEqual(result.drawn_number, 17)
        self.assertEqual(result.payouts, {"X": 360})
        for category in (BetCategory.exact(17), ODD, BLACK, COLUMN_2, RANGE_13_TO_24, RANGE_1_TO_18):
            self.assertIn(category, result.winning_categories)
        self.assertNotIn(RED, result.winning_categories)

    def test_funds_mismatch_never_draws(self):
        provider = MagicMock(return_value=b"unused")
        with self.assertRaises(FundsMismatchException):
            settlement_service.settle_bets([bet(3, RED)], [Coin("X", 5)], provider, TABLE)
        provider.assert_not_called()

    def test_invalid_bet_never_draws(self):
        provider = MagicMock(return_value=b"unused")
        with self.assertRaises(InvalidBetShapeException):
            settlement_service.settle_bets([bet(3, BetCategory.line(2, 2))], [Coin("X", 3)], provider, TABLE)
        provider.assert_not_called()

    def test_provider_without_seed(self):
        with self.assertRaises(RandomnessUnavailableException):
            settlement_service.settle_bets([bet(3, RED)], [Coin("X", 3)], lambda: None, TABLE)

    def test_same_seed_same_result(self):
        provider = fixed_seed_provider(b"round-42")
        bets = [bet(5, RED), bet(5, BetCategory.exact(3))]
        first = settlement_service.settle_bets(bets, [Coin("X", 10)], provider, TABLE)
        second = settlement_service.settle_bets(bets, [Coin("X", 10)], provider, TABLE)
        self.assertEqual(first, second)

    @patch('roulette_be.services.settlement_service.draw_number_from_seed', return_value=1)
    def test_reordered_lines_both_pay(self, mock_draw):
        bets = [bet(10, BetCategory.line(1, 2)), bet(10, BetCategory.line(2, 1))]
        result = settlement_service.settle_bets(bets, [Coin("X", 20)], fixed_seed_provider(b"s"), TABLE)
        mock_draw.assert_called_once_with(b"s")
        self.assertEqual(result.payouts, {"X": 10 * 18 * 2})

    @patch('roulette_be.services.settlement_service.draw_number_from_seed', return_value=0)
    def test_zero_only_pays_exact_zero(self, mock_draw):
        bets = [bet(10, RED), bet(10, RANGE_1_TO_12), bet(10, BetCategory.line(1, 2)), bet(10, BetCategory.exact(0))]
        result = settlement_service.settle_bets(bets, [Coin("X", 40)], fixed_seed_provider(b"s"), TABLE)
        self.assertEqual(result.winning_categories, frozenset({BetCategory.exact(0)}))
        self.assertEqual(result.payouts, {"X": 360})

    @patch('roulette_be.services.settlement_service.draw_number_from_seed', return_value=0)
    def test_losing_request_has_no_payouts(self, mock_draw):
        result = settlement_service.settle_bets([bet(10, RED)], [Coin("X", 10)], fixed_seed_provider(b"s"), TABLE)
        self.assertEqual(result.payouts, {})
        self.assertFalse(result.has_payout)
        self.assertIsNone(build_transfer_instruction(result, "player"))

    @patch('roulette_be.services.settlement_service.draw_number_from_seed', return_value=5)
    def test_payouts_aggregate_per_currency(self, mock_draw):
        bets = [
            bet(10, RED),                             # 20
            bet(10, BetCategory.corner(5, 6, 8, 9)),  # 90
            bet(7, ODD, currency="Y"),                # 14
            bet(7, BetCategory.exact(6), currency="Y"),
        ]
        funds = [Coin("X", 20), Coin("Y", 14)]
        result = settlement_service.settle_bets(bets, funds, fixed_seed_provider(b"s"), TABLE)
        self.assertEqual(result.payouts, {"X": 110, "Y": 14})

        transfer = build_transfer_instruction(result, "player")
        self.assertEqual(transfer.recipient, "player")
        self.assertEqual(transfer.amounts, [Coin("X", 110), Coin("Y", 14)])


class TestCalculatePayouts(unittest.TestCase):

    def test_only_members_of_winning_set_pay(self):
        winning = frozenset({BetCategory.exact(9), RED})
        payouts = settlement_service.calculate_payouts(
            [bet(2, RED), bet(2, BLACK), bet(1, BetCategory.exact(9))], winning
        )
        self.assertEqual(payouts, {"X": 4 + 36})

    def test_payout_overflow(self):
        with self.assertRaises(OverflowException):
            settlement_service.calculate_payouts([bet(MAX_QUANTITY, RED)], frozenset({RED}))

    def test_settle_with_draw(self):
        result = settlement_service.settle_with_draw([bet(4, BetCategory.corner(31, 32, 34, 35))], 34)
        self.assertEqual(result.drawn_number, 34)
        self.assertEqual(result.payouts, {"X": 36})


if __name__ == '__main__':
    unittest.main()
