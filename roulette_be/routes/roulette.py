from flask import Blueprint, request, jsonify, current_app
from http import HTTPStatus

from roulette_be.exceptions import NotFoundException, SettlementException, ValidationException
from roulette_be.models import TableConfig, build_transfer_instruction
from roulette_be.schemas import (
    SettleRequestSchema, SettlementResultSchema, TableConfigSchema, TransferInstructionSchema,
    sort_categories,
)
from roulette_be.services.settlement_service import settle_bets
from roulette_be.utils import roulette_helper
from roulette_be.utils.settlement_logger import SettlementLogger

roulette_bp = Blueprint('roulette', __name__, url_prefix='/api/roulette')

settle_request_schema = SettleRequestSchema()
settlement_result_schema = SettlementResultSchema()
transfer_schema = TransferInstructionSchema()
table_config_schema = TableConfigSchema()


def _table_config():
    return TableConfig.from_mapping(current_app.config)


@roulette_bp.route('/settle', methods=['POST'])
def roulette_settle():
    data = request.get_json(silent=True)
    if not data:
        raise ValidationException(status_message="Missing JSON body")

    # marshmallow.ValidationError propagates to the app-level handler (422)
    payload = settle_request_schema.load(data)
    requester = payload['requester']

    try:
        result = settle_bets(
            bets=payload['bets'],
            funds=payload['funds'],
            seed_provider=current_app.config.get('SEED_PROVIDER'),
            table_config=_table_config(),
        )
    except SettlementException as e:
        SettlementLogger.log_rejection_event(requester, e.error_code, e.status_message, e.details)
        raise

    SettlementLogger.log_settlement_event(
        requester=requester,
        drawn_number=result.drawn_number,
        payouts=result.payouts,
        bet_count=len(payload['bets']),
    )

    transfer = build_transfer_instruction(result, requester)
    response = settlement_result_schema.dump(result)
    response['status'] = True
    response['transfer'] = transfer_schema.dump(transfer) if transfer else None
    return jsonify(response), HTTPStatus.OK


@roulette_bp.route('/outcomes/<int:number>', methods=['GET'])
def roulette_outcomes(number):
    if number not in roulette_helper.ROULETTE_NUMBERS:
        raise NotFoundException(status_message=f"{number} is not on the board", details={"number": number})

    categories = sort_categories(roulette_helper.expand(number))
    return jsonify({
        "status": True,
        "number": number,
        "winning_categories": [category.label for category in categories],
    }), HTTPStatus.OK


@roulette_bp.route('/table', methods=['GET'])
def roulette_table():
    response = table_config_schema.dump(_table_config())
    response['status'] = True
    return jsonify(response), HTTPStatus.OK
