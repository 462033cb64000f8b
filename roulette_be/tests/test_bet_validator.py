import unittest

from roulette_be.error_codes import ErrorCodes
from roulette_be.exceptions import (
    BetOutOfLimitsException,
    FundsMismatchException,
    InvalidBetShapeException,
    OverflowException,
    TotalExceedsLimitException,
    UnsupportedCurrencyException,
)
from roulette_be.models import MAX_QUANTITY, RED, Bet, BetCategory, Coin, TableConfig
from roulette_be.utils.bet_validator import checked_add, sum_by_currency, validate_bet, validate_request

TABLE = TableConfig(min_bet=5, max_bet=100, max_total_per_request=250, supported_currencies={"uscrt", "uatom"})


def bet(quantity, category=RED, currency="uscrt"):
    return Bet(amount=Coin(currency, quantity), category=category)


class TestValidateBet(unittest.TestCase):

    def test_accepts_limits_boundaries(self):
        validate_bet(bet(5), TABLE)
        validate_bet(bet(100), TABLE)

    def test_rejects_zero_when_min_is_positive(self):
        with self.assertRaises(BetOutOfLimitsException) as ctx:
            validate_bet(bet(0), TABLE)
        self.assertEqual(ctx.exception.error_code, ErrorCodes.BET_OUT_OF_LIMITS)
        self.assertEqual(ctx.exception.details["quantity"], 0)

    def test_rejects_just_outside_limits(self):
        with self.assertRaises(BetOutOfLimitsException):
            validate_bet(bet(4), TABLE)
        with self.assertRaises(BetOutOfLimitsException):
            validate_bet(bet(101), TABLE)

    def test_rejects_unsupported_currency(self):
        with self.assertRaises(UnsupportedCurrencyException) as ctx:
            validate_bet(bet(10, currency="uluna"), TABLE, index=3)
        self.assertEqual(ctx.exception.details["bet_index"], 3)

    def test_rejects_invalid_shapes(self):
        for category in (BetCategory.exact(37), BetCategory.line(3, 3), BetCategory.corner(1, 2, 2, 5),
                         BetCategory.line(36, 37)):
            with self.subTest(category=category):
                with self.assertRaises(InvalidBetShapeException):
                    validate_bet(bet(10, category), TABLE)

    def test_accepts_valid_shapes(self):
        for category in (BetCategory.exact(0), BetCategory.exact(36), BetCategory.line(2, 1),
                         BetCategory.corner(5, 4, 2, 1)):
            validate_bet(bet(10, category), TABLE)


class TestValidateRequest(unittest.TestCase):

    def test_matching_funds_pass(self):
        bets = [bet(10), bet(20, BetCategory.exact(7)), bet(30, currency="uatom")]
        funds = [Coin("uatom", 30), Coin("uscrt", 30)]
        self.assertEqual(validate_request(bets, funds, TABLE), {"uscrt": 30, "uatom": 30})

    def test_duplicate_fund_coins_are_summed(self):
        validate_request([bet(10), bet(10)], [Coin("uscrt", 15), Coin("uscrt", 5)], TABLE)

    def test_zero_fund_coins_are_ignored(self):
        validate_request([bet(10)], [Coin("uscrt", 10), Coin("uatom", 0)], TABLE)

    def test_too_many_funds(self):
        with self.assertRaises(FundsMismatchException) as ctx:
            validate_request([bet(10)], [Coin("uscrt", 12)], TABLE)
        self.assertEqual(ctx.exception.details["bets_total"], {"uscrt": 10})
        self.assertEqual(ctx.exception.details["attached"], {"uscrt": 12})

    def test_too_few_funds(self):
        with self.assertRaises(FundsMismatchException):
            validate_request([bet(10), bet(10)], [Coin("uscrt", 10)], TABLE)

    def test_funds_in_wrong_currency(self):
        with self.assertRaises(FundsMismatchException):
            validate_request([bet(10)], [Coin("uatom", 10)], TABLE)

    def test_no_funds(self):
        with self.assertRaises(FundsMismatchException):
            validate_request([bet(10)], [], TABLE)

    def test_unsupported_fund_currency(self):
        with self.assertRaises(UnsupportedCurrencyException):
            validate_request([bet(10)], [Coin("uscrt", 10), Coin("uluna", 1)], TABLE)

    def test_negative_funds(self):
        with self.assertRaises(FundsMismatchException):
            validate_request([bet(10)], [Coin("uscrt", -10)], TABLE)

    def test_total_exceeds_limit(self):
        bets = [bet(100), bet(100), bet(100)]
        with self.assertRaises(TotalExceedsLimitException) as ctx:
            validate_request(bets, [Coin("uscrt", 300)], TABLE)
        self.assertEqual(ctx.exception.error_code, ErrorCodes.TOTAL_EXCEEDS_LIMIT)
        self.assertEqual(ctx.exception.details["total"], 300)

    def test_total_limit_is_per_currency(self):
        bets = [bet(100), bet(100), bet(100, currency="uatom"), bet(100, currency="uatom")]
        validate_request(bets, [Coin("uscrt", 200), Coin("uatom", 200)], TABLE)

    def test_empty_bets(self):
        with self.assertRaises(InvalidBetShapeException):
            validate_request([], [], TABLE)

    def test_first_bad_bet_fails_whole_request(self):
        bets = [bet(10), bet(10, BetCategory.exact(40))]
        with self.assertRaises(InvalidBetShapeException) as ctx:
            validate_request(bets, [Coin("uscrt", 20)], TABLE)
        self.assertEqual(ctx.exception.details["bet_index"], 1)

    def test_overflow(self):
        table = TableConfig(min_bet=1, max_bet=MAX_QUANTITY, max_total_per_request=MAX_QUANTITY,
                            supported_currencies={"uscrt"})
        bets = [bet(MAX_QUANTITY), bet(1)]
        with self.assertRaises(OverflowException) as ctx:
            validate_request(bets, [Coin("uscrt", MAX_QUANTITY)], table)
        self.assertEqual(ctx.exception.error_code, ErrorCodes.OVERFLOW)


class TestAccumulation(unittest.TestCase):

    def test_checked_add(self):
        self.assertEqual(checked_add(MAX_QUANTITY - 1, 1, "uscrt"), MAX_QUANTITY)
        with self.assertRaises(OverflowException):
            checked_add(MAX_QUANTITY, 1, "uscrt")

    def test_sum_by_currency(self):
        coins = [Coin("a", 1), Coin("b", 2), Coin("a", 3), Coin("c", 0)]
        self.assertEqual(sum_by_currency(coins), {"a": 4, "b": 2})


if __name__ == '__main__':
    unittest.main()
