from flask import Flask, request, jsonify, current_app, g
import uuid
from werkzeug.exceptions import HTTPException as WerkzeugHTTPException # Renamed to avoid conflict
from http import HTTPStatus
import logging
from pythonjsonlogger import jsonlogger
from marshmallow import ValidationError

from .config import Config # Relative import
from .error_codes import ErrorCodes
from .exceptions import AppException
from .routes.roulette import roulette_bp

# Custom Logging Filter for Request ID
class RequestIdFilter(logging.Filter):
    def filter(self, record):
        try:
            record.request_id = g.get('request_id', 'N/A')
        except RuntimeError:
            # Outside application context (CLI, startup)
            record.request_id = 'N/A'
        return True


def configure_logging(app):
    """JSON log lines with request ids in production, plain logging in debug."""
    if not app.debug and app.config.get('LOG_JSON', True):
        handler = logging.StreamHandler()
        formatter = jsonlogger.JsonFormatter(
            '%(asctime)s %(levelname)s %(request_id)s %(module)s %(funcName)s %(lineno)d %(message)s'
        )
        handler.setFormatter(formatter)
        handler.addFilter(RequestIdFilter())
        for logger in (app.logger, logging.getLogger('roulette_be')):
            if logger.hasHandlers():
                logger.handlers.clear()
            logger.addHandler(handler)
            logger.setLevel(logging.INFO)
        # Engine loggers use the handler above, not the root logger
        logging.getLogger('roulette_be').propagate = False
    else:
        # Basic logging for debug mode if not already configured
        if not app.logger.handlers:
            logging.basicConfig(level=logging.DEBUG)


def _error_response(error_code, status_message, details, status_code, action_button=None):
    return jsonify({
        'request_id': g.get('request_id', 'N/A'),
        'status': False,
        'error_code': error_code,
        'status_message': status_message,
        'details': details,
        'action_button': action_button
    }), status_code


def create_app(config_class=Config):
    """Application factory pattern."""
    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app)

    @app.before_request
    def assign_request_id():
        g.request_id = str(uuid.uuid4())

    @app.after_request
    def add_request_id_header(response):
        response.headers['X-Request-ID'] = g.get('request_id', 'N/A')
        response.headers['X-Content-Type-Options'] = 'nosniff'
        return response

    # --- Specific Error Handlers ---

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        # marshmallow's ValidationError, wrapped in the common response format
        current_app.logger.warning(
            f"Request ID: {g.get('request_id', 'N/A')} - Validation error: {e.messages} - Error Code: {ErrorCodes.VALIDATION_ERROR}"
        )
        return _error_response(
            ErrorCodes.VALIDATION_ERROR,
            'Input validation failed.',
            {'errors': e.messages},
            HTTPStatus.UNPROCESSABLE_ENTITY
        )

    @app.errorhandler(404) # Catches werkzeug.exceptions.NotFound
    def handle_flask_not_found(e):
        current_app.logger.warning(
            f"Request ID: {g.get('request_id', 'N/A')} - HTTP 404 Not Found: {request.url} - Error Code: {ErrorCodes.NOT_FOUND}"
        )
        return _error_response(
            ErrorCodes.NOT_FOUND,
            'The requested resource was not found.',
            {'path': request.path},
            HTTPStatus.NOT_FOUND
        )

    @app.errorhandler(WerkzeugHTTPException)
    def handle_werkzeug_http_exception(e):
        error_code = ErrorCodes.GENERIC_ERROR # Default
        if e.code == 404:
            error_code = ErrorCodes.NOT_FOUND
        elif e.code == 405:
            error_code = ErrorCodes.METHOD_NOT_ALLOWED
        elif e.code >= 500:
            error_code = ErrorCodes.INTERNAL_SERVER_ERROR

        current_app.logger.warning(
            f"Request ID: {g.get('request_id', 'N/A')} - Werkzeug HTTPException: {e.code} - {e.name}: {e.description} - Error Code: {error_code}"
        )
        return _error_response(error_code, e.name, {'description': e.description}, e.code)

    # --- Global Error Handler (catch-all for general exceptions) ---
    @app.errorhandler(Exception)
    def handle_global_exception(e):
        request_id = g.get('request_id', 'N/A')

        if isinstance(e, AppException):
            current_app.logger.error(
                f"Request ID: {request_id} - AppException: {e.error_code} - {e.status_message} - Details: {e.details}",
                exc_info=True if e.status_code >= 500 else False # Log stack trace for server errors
            )
            return _error_response(e.error_code, e.status_message, e.details, e.status_code, e.action_button)

        if isinstance(e, WerkzeugHTTPException):
            return handle_werkzeug_http_exception(e)

        current_app.logger.critical(
            f"Request ID: {request_id} - Unhandled Critical Exception. Error Code: {ErrorCodes.INTERNAL_SERVER_ERROR}",
            exc_info=True
        )
        return _error_response(
            ErrorCodes.INTERNAL_SERVER_ERROR,
            'An unexpected internal server error occurred. Please try again later.',
            {}, # No specific details to expose for unknown errors
            HTTPStatus.INTERNAL_SERVER_ERROR
        )

    # Register Blueprints
    app.register_blueprint(roulette_bp)

    return app
