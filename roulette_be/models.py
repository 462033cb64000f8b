"""Domain types for roulette settlement.

Nothing in here is persisted. A list of :class:`Bet` lives for one request and
a :class:`SettlementResult` is produced once per request.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Mapping, Optional, Tuple

# Highest quantity a ledger amount may hold (unsigned 128 bit)
MAX_QUANTITY = 2 ** 128 - 1

# Board numbers, 0 included
MIN_NUMBER = 0
MAX_NUMBER = 36


class BetKind(str, Enum):
    EXACT = "exact"
    RED = "red"
    BLACK = "black"
    ODD = "odd"
    EVEN = "even"
    RANGE_1_TO_12 = "range1to12"
    RANGE_13_TO_24 = "range13to24"
    RANGE_25_TO_36 = "range25to36"
    RANGE_1_TO_18 = "range1to18"
    RANGE_19_TO_36 = "range19to36"
    COLUMN_1 = "column1"  # 1, 4, 7, ... 34
    COLUMN_2 = "column2"  # 2, 5, 8, ... 35
    COLUMN_3 = "column3"  # 3, 6, 9, ... 36
    LINE = "line"
    CORNER = "corner"


# Number of members each parameterised kind carries
KIND_ARITY = {
    BetKind.EXACT: 1,
    BetKind.LINE: 2,
    BetKind.CORNER: 4,
}

_LABELS = {
    BetKind.RED: "red",
    BetKind.BLACK: "black",
    BetKind.ODD: "odd",
    BetKind.EVEN: "even",
    BetKind.RANGE_1_TO_12: "1-12",
    BetKind.RANGE_13_TO_24: "13-24",
    BetKind.RANGE_25_TO_36: "25-36",
    BetKind.RANGE_1_TO_18: "1-18",
    BetKind.RANGE_19_TO_36: "19-36",
    BetKind.COLUMN_1: "2to1 1st",
    BetKind.COLUMN_2: "2to1 2nd",
    BetKind.COLUMN_3: "2to1 3rd",
}


@dataclass(frozen=True)
class BetCategory:
    """A named subset of board numbers a wager can be placed on.

    ``numbers`` is stored sorted, so a line or corner compares (and hashes)
    equal to any reordering of its members. Duplicates are kept so that a
    degenerate shape like ``line(4, 4)`` is still visible to validation.
    """

    kind: BetKind
    numbers: Tuple[int, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "kind", BetKind(self.kind))
        object.__setattr__(self, "numbers", tuple(sorted(int(n) for n in self.numbers)))

    @classmethod
    def exact(cls, number: int) -> "BetCategory":
        return cls(BetKind.EXACT, (number,))

    @classmethod
    def line(cls, a: int, b: int) -> "BetCategory":
        return cls(BetKind.LINE, (a, b))

    @classmethod
    def corner(cls, a: int, b: int, c: int, d: int) -> "BetCategory":
        return cls(BetKind.CORNER, (a, b, c, d))

    @classmethod
    def of(cls, kind: BetKind) -> "BetCategory":
        return cls(kind)

    def is_valid(self) -> bool:
        """Check the category is internally consistent.

        Exact must name a board number, lines and corners must hold distinct
        board numbers, and the parameterless kinds must carry none.
        """
        arity = KIND_ARITY.get(self.kind, 0)
        if len(self.numbers) != arity:
            return False
        if any(n < MIN_NUMBER or n > MAX_NUMBER for n in self.numbers):
            return False
        return len(set(self.numbers)) == len(self.numbers)

    @property
    def label(self) -> str:
        if self.kind == BetKind.EXACT:
            return str(self.numbers[0])
        if self.kind == BetKind.LINE:
            return "split " + "-".join(str(n) for n in self.numbers)
        if self.kind == BetKind.CORNER:
            return "corner " + ",".join(str(n) for n in self.numbers)
        return _LABELS[self.kind]

    def __str__(self):
        return self.label


RED = BetCategory(BetKind.RED)
BLACK = BetCategory(BetKind.BLACK)
ODD = BetCategory(BetKind.ODD)
EVEN = BetCategory(BetKind.EVEN)
RANGE_1_TO_12 = BetCategory(BetKind.RANGE_1_TO_12)
RANGE_13_TO_24 = BetCategory(BetKind.RANGE_13_TO_24)
RANGE_25_TO_36 = BetCategory(BetKind.RANGE_25_TO_36)
RANGE_1_TO_18 = BetCategory(BetKind.RANGE_1_TO_18)
RANGE_19_TO_36 = BetCategory(BetKind.RANGE_19_TO_36)
COLUMN_1 = BetCategory(BetKind.COLUMN_1)
COLUMN_2 = BetCategory(BetKind.COLUMN_2)
COLUMN_3 = BetCategory(BetKind.COLUMN_3)


@dataclass(frozen=True)
class Coin:
    currency: str
    quantity: int


@dataclass(frozen=True)
class Bet:
    amount: Coin
    category: BetCategory


@dataclass(frozen=True)
class TableConfig:
    """Table limits. Owned by the host, read-only to settlement."""

    min_bet: int
    max_bet: int
    max_total_per_request: int
    supported_currencies: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        object.__setattr__(self, "supported_currencies", frozenset(self.supported_currencies))

    @classmethod
    def from_mapping(cls, config: Mapping) -> "TableConfig":
        """Build from Flask-style config keys (``TABLE_MIN_BET`` etc.)."""
        return cls(
            min_bet=int(config["TABLE_MIN_BET"]),
            max_bet=int(config["TABLE_MAX_BET"]),
            max_total_per_request=int(config["TABLE_MAX_TOTAL"]),
            supported_currencies=config["TABLE_SUPPORTED_CURRENCIES"],
        )


@dataclass(frozen=True)
class SettlementResult:
    drawn_number: int
    winning_categories: FrozenSet[BetCategory]
    payouts: Dict[str, int] = field(default_factory=dict)

    @property
    def has_payout(self) -> bool:
        return any(q > 0 for q in self.payouts.values())

    def payout_coins(self) -> List[Coin]:
        return [Coin(currency, quantity) for currency, quantity in sorted(self.payouts.items())]


@dataclass(frozen=True)
class TransferInstruction:
    """Funds the custody layer must send back to the requester."""

    recipient: str
    amounts: List[Coin]


def build_transfer_instruction(result: SettlementResult, recipient: str) -> Optional[TransferInstruction]:
    """Return the transfer for ``result``'s winnings, or ``None`` when nothing was won."""
    if not result.has_payout:
        return None
    return TransferInstruction(recipient=recipient, amounts=result.payout_coins())
