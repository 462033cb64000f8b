"""
Settlement Event Logging
Structured audit lines for every settled or rejected request
"""

import logging
from datetime import datetime, timezone
from flask import current_app, g, has_app_context, has_request_context, request
import json

logger = logging.getLogger(__name__)


class SettlementLogger:
    """Centralized settlement event logging"""

    @staticmethod
    def _request_context():
        if not has_request_context():
            return 'N/A', None
        return g.get('request_id', 'N/A'), request.remote_addr

    @staticmethod
    def _emit(level, event_data):
        target = current_app.logger if has_app_context() else logger
        target.log(level, f"SETTLEMENT_EVENT: {json.dumps(event_data)}")

    @staticmethod
    def log_settlement_event(requester: str, drawn_number: int, payouts: dict,
                             bet_count: int, details: dict = None):
        """Log a completed settlement"""
        request_id, ip_address = SettlementLogger._request_context()

        event_data = {
            'event_type': 'settlement',
            'sub_type': 'settled',
            'requester': requester,
            'drawn_number': drawn_number,
            'bet_count': bet_count,
            'payouts': payouts,
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'request_id': request_id,
            'ip_address': ip_address,
            'details': details or {}
        }
        SettlementLogger._emit(logging.INFO, event_data)
        return event_data

    @staticmethod
    def log_rejection_event(requester: str, error_code: str, status_message: str,
                            details: dict = None):
        """Log a request that failed validation or could not draw"""
        request_id, ip_address = SettlementLogger._request_context()

        event_data = {
            'event_type': 'settlement',
            'sub_type': 'rejected',
            'requester': requester,
            'error_code': error_code,
            'status_message': status_message,
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'request_id': request_id,
            'ip_address': ip_address,
            'details': details or {}
        }
        SettlementLogger._emit(logging.WARNING, event_data)
        return event_data
