"""Board geometry and draw expansion for single-zero roulette.

The board is laid out as twelve rows of three numbers::

    row 0:   1   2   3      <- top row
    row 1:   4   5   6
    ...
    row 11: 34  35  36      <- bottom row

"Over" is the row above (number - 3) and "under" the row below (number + 3).
Column 1 is the left edge (n % 3 == 1), column 3 the right edge (n % 3 == 0).
"""
from enum import Enum
from typing import FrozenSet, Optional

from roulette_be.models import (
    BetCategory, BetKind, MAX_NUMBER, MIN_NUMBER,
    RED, BLACK, ODD, EVEN, RANGE_1_TO_12, RANGE_13_TO_24, RANGE_25_TO_36,
    RANGE_1_TO_18, RANGE_19_TO_36, COLUMN_1, COLUMN_2, COLUMN_3,
)

# European Roulette: numbers 0-36
ROULETTE_NUMBERS = list(range(MIN_NUMBER, MAX_NUMBER + 1))

RED_NUMBERS = frozenset({1, 3, 5, 7, 9, 12, 14, 16, 18, 19, 21, 23, 25, 27, 30, 32, 34, 36})
BLACK_NUMBERS = frozenset(set(range(1, MAX_NUMBER + 1)) - RED_NUMBERS)
GREEN_NUMBER = frozenset({0})

ROW_WIDTH = 3

# Payout multipliers, winnings only (stake return is up to funds custody)
PAYOUTS = {
    BetKind.EXACT: 36,
    BetKind.LINE: 18,
    BetKind.CORNER: 9,
    BetKind.COLUMN_1: 3,
    BetKind.COLUMN_2: 3,
    BetKind.COLUMN_3: 3,
    BetKind.RANGE_1_TO_12: 3,
    BetKind.RANGE_13_TO_24: 3,
    BetKind.RANGE_25_TO_36: 3,
    BetKind.RED: 2,
    BetKind.BLACK: 2,
    BetKind.ODD: 2,
    BetKind.EVEN: 2,
    BetKind.RANGE_1_TO_18: 2,
    BetKind.RANGE_19_TO_36: 2,
}


class CornerType(Enum):
    BOTTOM_LEFT = 0
    BOTTOM_RIGHT = 1
    TOP_LEFT = 2
    TOP_RIGHT = 3


class LineType(Enum):
    OVER = 0
    UNDER = 1
    LEFT = 2
    RIGHT = 3


def _check_number(number: int):
    if number not in ROULETTE_NUMBERS:
        raise ValueError(f"Invalid roulette number: {number}")


def _in_top_row(number: int) -> bool:
    return number <= ROW_WIDTH


def _in_bottom_row(number: int) -> bool:
    return number > MAX_NUMBER - ROW_WIDTH


def _in_left_column(number: int) -> bool:
    return number % ROW_WIDTH == 1


def _in_right_column(number: int) -> bool:
    return number % ROW_WIDTH == 0


def payout_multiplier(category: BetCategory) -> int:
    return PAYOUTS[category.kind]


def column_of(number: int) -> Optional[BetCategory]:
    """Column category for ``number``; ``None`` for zero."""
    _check_number(number)
    if number == 0:
        return None
    return {1: COLUMN_1, 2: COLUMN_2, 0: COLUMN_3}[number % ROW_WIDTH]


def dozen_of(number: int) -> Optional[BetCategory]:
    _check_number(number)
    if number == 0:
        return None
    if number <= 12:
        return RANGE_1_TO_12
    if number <= 24:
        return RANGE_13_TO_24
    return RANGE_25_TO_36


def half_of(number: int) -> Optional[BetCategory]:
    _check_number(number)
    if number == 0:
        return None
    return RANGE_1_TO_18 if number < 19 else RANGE_19_TO_36


def parity_of(number: int) -> Optional[BetCategory]:
    _check_number(number)
    if number == 0: # 0 is neither even nor odd for payout purposes
        return None
    return EVEN if number % 2 == 0 else ODD


def color_of(number: int) -> Optional[BetCategory]:
    _check_number(number)
    if number == 0:
        return None
    return RED if number in RED_NUMBERS else BLACK


def corner(anchor: int, corner_type: CornerType) -> Optional[BetCategory]:
    """The 4-number square touching ``anchor`` in the given direction.

    Returns ``None`` when the square would fall off the board, and always for
    zero, which sits outside the grid.
    """
    _check_number(anchor)
    if anchor == 0:
        return None

    if corner_type in (CornerType.TOP_LEFT, CornerType.TOP_RIGHT) and _in_top_row(anchor):
        return None
    if corner_type in (CornerType.BOTTOM_LEFT, CornerType.BOTTOM_RIGHT) and _in_bottom_row(anchor):
        return None
    if corner_type in (CornerType.TOP_LEFT, CornerType.BOTTOM_LEFT) and _in_left_column(anchor):
        return None
    if corner_type in (CornerType.TOP_RIGHT, CornerType.BOTTOM_RIGHT) and _in_right_column(anchor):
        return None

    vertical = -ROW_WIDTH if corner_type in (CornerType.TOP_LEFT, CornerType.TOP_RIGHT) else ROW_WIDTH
    horizontal = -1 if corner_type in (CornerType.TOP_LEFT, CornerType.BOTTOM_LEFT) else 1
    return BetCategory.corner(
        anchor,
        anchor + horizontal,
        anchor + vertical,
        anchor + vertical + horizontal,
    )


def line(anchor: int, line_type: LineType) -> Optional[BetCategory]:
    """The 2-number split between ``anchor`` and its neighbour, or ``None`` off the board."""
    _check_number(anchor)
    if anchor == 0:
        return None

    if line_type == LineType.OVER:
        if _in_top_row(anchor):
            return None
        return BetCategory.line(anchor - ROW_WIDTH, anchor)
    if line_type == LineType.UNDER:
        if _in_bottom_row(anchor):
            return None
        return BetCategory.line(anchor, anchor + ROW_WIDTH)
    if line_type == LineType.LEFT:
        if _in_left_column(anchor):
            return None
        return BetCategory.line(anchor - 1, anchor)
    if _in_right_column(anchor):
        return None
    return BetCategory.line(anchor, anchor + 1)


def expand(number: int) -> FrozenSet[BetCategory]:
    """Every category that wins when ``number`` is drawn.

    Raises ValueError for numbers outside 0-36; callers must guarantee range.
    """
    _check_number(number)
    if number == 0:
        return frozenset({BetCategory.exact(0)})

    winners = {
        BetCategory.exact(number),
        parity_of(number),
        half_of(number),
        column_of(number),
        dozen_of(number),
        color_of(number),
    }
    for corner_type in CornerType:
        square = corner(number, corner_type)
        if square is not None:
            winners.add(square)
    for line_type in LineType:
        split = line(number, line_type)
        if split is not None:
            winners.add(split)
    return frozenset(winners)
