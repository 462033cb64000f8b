"""
Bet validation against table limits.

Runs before any randomness is consumed: a request that fails here never
draws a number.
"""
import logging
from typing import Dict, Iterable, List

from roulette_be.exceptions import (
    BetOutOfLimitsException,
    FundsMismatchException,
    InvalidBetShapeException,
    OverflowException,
    TotalExceedsLimitException,
    UnsupportedCurrencyException,
)
from roulette_be.models import MAX_QUANTITY, Bet, Coin, TableConfig

logger = logging.getLogger(__name__)


def checked_add(total: int, quantity: int, currency: str) -> int:
    """Add two ledger quantities, raising OverflowException past MAX_QUANTITY."""
    result = total + quantity
    if result > MAX_QUANTITY:
        raise OverflowException(details={"currency": currency})
    return result


def sum_by_currency(coins: Iterable[Coin]) -> Dict[str, int]:
    """Per-currency totals. Zero-quantity coins do not create an entry."""
    totals: Dict[str, int] = {}
    for coin in coins:
        if coin.quantity == 0:
            continue
        totals[coin.currency] = checked_add(totals.get(coin.currency, 0), coin.quantity, coin.currency)
    return totals


def validate_bet(bet: Bet, table: TableConfig, index: int = 0):
    """Check a single bet's currency, quantity limits and category shape."""
    currency = bet.amount.currency
    quantity = bet.amount.quantity
    details = {"bet_index": index, "currency": currency}

    if currency not in table.supported_currencies:
        raise UnsupportedCurrencyException(
            status_message=f"Currency '{currency}' is not supported at this table",
            details=details
        )

    if quantity < table.min_bet or quantity > table.max_bet:
        raise BetOutOfLimitsException(
            status_message=f"Bet amount must be between {table.min_bet} and {table.max_bet}",
            details={**details, "quantity": quantity, "min_bet": table.min_bet, "max_bet": table.max_bet}
        )

    if not bet.category.is_valid():
        raise InvalidBetShapeException(
            status_message=f"Invalid bet: {bet.category.kind.value} {list(bet.category.numbers)}",
            details={**details, "kind": bet.category.kind.value, "numbers": list(bet.category.numbers)}
        )


def validate_request(bets: List[Bet], funds: List[Coin], table: TableConfig) -> Dict[str, int]:
    """Validate a whole settlement request.

    Returns the per-currency stake totals. Raises the matching
    SettlementException subclass on the first violation; nothing is partially
    accepted.
    """
    if not bets:
        raise InvalidBetShapeException(status_message="At least one bet is required")

    for index, bet in enumerate(bets):
        validate_bet(bet, table, index)

    for coin in funds:
        if coin.quantity < 0:
            raise FundsMismatchException(
                status_message="Attached funds cannot be negative",
                details={"currency": coin.currency}
            )
        if coin.quantity and coin.currency not in table.supported_currencies:
            raise UnsupportedCurrencyException(
                status_message=f"Currency '{coin.currency}' is not supported at this table",
                details={"currency": coin.currency}
            )

    staked = sum_by_currency(bet.amount for bet in bets)
    attached = sum_by_currency(funds)

    if staked != attached:
        logger.warning(f"Funds mismatch: bets total {staked}, attached {attached}")
        raise FundsMismatchException(
            details={"bets_total": staked, "attached": attached}
        )

    for currency, total in attached.items():
        if total > table.max_total_per_request or total < table.min_bet:
            raise TotalExceedsLimitException(
                status_message=(
                    f"Total of {total} {currency} must be between "
                    f"{table.min_bet} and {table.max_total_per_request}"
                ),
                details={
                    "currency": currency,
                    "total": total,
                    "min_bet": table.min_bet,
                    "max_total": table.max_total_per_request,
                }
            )

    return staked
