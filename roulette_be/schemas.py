from marshmallow import Schema, fields, ValidationError, post_load
from marshmallow.validate import Length, Range

from .models import KIND_ARITY, MAX_QUANTITY, Bet, BetCategory, BetKind, Coin
from .utils.roulette_helper import PAYOUTS

_KIND_ORDER = {kind: position for position, kind in enumerate(BetKind)}


def sort_categories(categories):
    """Stable display order: by kind declaration order, then by numbers."""
    return sorted(categories, key=lambda c: (_KIND_ORDER[c.kind], c.numbers))


def _parse_kind(value):
    try:
        return BetKind(value)
    except ValueError:
        raise ValidationError(f"Unknown bet category '{value}'.")


class BetCategoryField(fields.Field):
    """
    Bet category in its wire form.

    Parameterless kinds are bare strings (``"red"``). Numbered kinds are a
    single-key object: ``{"exact": {"num": 17}}``, ``{"line": {"nums": [1, 2]}}``
    or ``{"corner": {"nums": [1, 2, 4, 5]}}``. Only the structure is checked
    here; board range and distinctness are checked by the bet validator.
    """

    default_error_messages = {
        "invalid": "Bet category must be a string or a single-key object.",
    }

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        if value.kind == BetKind.EXACT:
            return {value.kind.value: {"num": value.numbers[0]}}
        if value.kind in KIND_ARITY:
            return {value.kind.value: {"nums": list(value.numbers)}}
        return value.kind.value

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, str):
            kind = _parse_kind(value)
            if kind in KIND_ARITY:
                raise ValidationError(f"Bet category '{value}' requires numbers.")
            return BetCategory(kind)

        if not isinstance(value, dict) or len(value) != 1:
            raise self.make_error("invalid")

        (raw_kind, params), = value.items()
        kind = _parse_kind(raw_kind)
        arity = KIND_ARITY.get(kind, 0)
        if arity == 0:
            if params not in (None, {}):
                raise ValidationError(f"Bet category '{raw_kind}' takes no numbers.")
            return BetCategory(kind)

        if not isinstance(params, dict):
            raise ValidationError(f"Bet category '{raw_kind}' parameters must be an object.")

        if kind == BetKind.EXACT:
            numbers = [params.get("num")]
        else:
            numbers = params.get("nums")
            if not isinstance(numbers, list) or len(numbers) != arity:
                raise ValidationError(f"Bet category '{raw_kind}' requires exactly {arity} numbers.")

        if not all(isinstance(n, int) and not isinstance(n, bool) for n in numbers):
            raise ValidationError(f"Bet category '{raw_kind}' numbers must be integers.")
        return BetCategory(kind, tuple(numbers))


class CoinSchema(Schema):
    currency = fields.Str(required=True, validate=Length(min=1, max=128))
    quantity = fields.Int(
        required=True,
        strict=True,
        validate=Range(min=0, max=MAX_QUANTITY, error="Quantity must be between 0 and 2^128 - 1.")
    )

    @post_load
    def make_coin(self, data, **kwargs):
        return Coin(**data)


class BetSchema(Schema):
    amount = fields.Nested(CoinSchema, required=True)
    category = BetCategoryField(required=True)

    @post_load
    def make_bet(self, data, **kwargs):
        return Bet(**data)


class SettleRequestSchema(Schema):
    requester = fields.Str(required=True, validate=Length(min=1, max=256))
    bets = fields.List(fields.Nested(BetSchema), required=True, validate=Length(min=1, error="At least one bet is required."))
    funds = fields.List(fields.Nested(CoinSchema), load_default=list)


class SettlementResultSchema(Schema):
    drawn_number = fields.Int(dump_only=True)
    winning_categories = fields.Method("get_winning_categories", dump_only=True)
    payouts = fields.Method("get_payouts", dump_only=True)

    def get_winning_categories(self, obj):
        return [category.label for category in sort_categories(obj.winning_categories)]

    def get_payouts(self, obj):
        return CoinSchema(many=True).dump(obj.payout_coins())


class TransferInstructionSchema(Schema):
    recipient = fields.Str(dump_only=True)
    amounts = fields.List(fields.Nested(CoinSchema), dump_only=True)


class TableConfigSchema(Schema):
    min_bet = fields.Int(dump_only=True)
    max_bet = fields.Int(dump_only=True)
    max_total_per_request = fields.Int(dump_only=True)
    supported_currencies = fields.Method("get_supported_currencies", dump_only=True)
    payouts = fields.Method("get_payouts", dump_only=True)

    def get_supported_currencies(self, obj):
        return sorted(obj.supported_currencies)

    def get_payouts(self, obj):
        return {kind.value: multiplier for kind, multiplier in PAYOUTS.items()}
