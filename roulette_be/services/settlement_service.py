import logging
from typing import Dict, Iterable, List, Optional

from roulette_be.models import Bet, Coin, SettlementResult, TableConfig
from roulette_be.utils import roulette_helper
from roulette_be.utils.bet_validator import checked_add, validate_request
from roulette_be.utils.rng import SeedProvider, draw_number_from_seed, obtain_seed

logger = logging.getLogger(__name__)


def calculate_payouts(bets: Iterable[Bet], winning_categories) -> Dict[str, int]:
    """
    Aggregates winnings per currency for every bet whose category is in
    ``winning_categories``.

    Winnings are quantity * payout multiplier; the stake itself is not added.
    Currencies with no winning bet are absent from the result.
    """
    payouts: Dict[str, int] = {}
    for bet in bets:
        if bet.category not in winning_categories:
            continue
        currency = bet.amount.currency
        winnings = bet.amount.quantity * roulette_helper.payout_multiplier(bet.category)
        logger.debug(f"Bet on {bet.category.label} wins {winnings} {currency}")
        payouts[currency] = checked_add(payouts.get(currency, 0), winnings, currency)
    return payouts


def settle_with_draw(bets: List[Bet], drawn_number: int) -> SettlementResult:
    """Resolve already-validated bets against a known draw."""
    winning_categories = roulette_helper.expand(drawn_number)
    payouts = calculate_payouts(bets, winning_categories)
    return SettlementResult(
        drawn_number=drawn_number,
        winning_categories=winning_categories,
        payouts=payouts,
    )


def settle_bets(bets: List[Bet], funds: List[Coin], seed_provider: Optional[SeedProvider],
                table_config: TableConfig) -> SettlementResult:
    '''
    Settles one request end to end.

    Args:
        bets: Bets placed in this request.
        funds: Funds attached to the request, already held by custody.
        seed_provider: Zero-argument callable returning the seed bytes for this request.
        table_config: Table limits and supported currencies.

    Returns:
        SettlementResult with the drawn number, every winning category and the
        per-currency winnings. An empty ``payouts`` means nothing is sent back.

    Raises:
        SettlementException subclasses. Validation failures are raised before
        the seed provider is called.
    '''
    validate_request(bets, funds, table_config)

    seed = obtain_seed(seed_provider)
    drawn_number = draw_number_from_seed(seed)

    result = settle_with_draw(bets, drawn_number)
    logger.info(
        f"Settled {len(bets)} bet(s): drew {drawn_number}, "
        f"{len(result.winning_categories)} winning categories, payouts {result.payouts}"
    )
    return result
