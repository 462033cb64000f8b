from roulette_be.error_codes import ErrorCodes

class AppException(Exception):
    def __init__(self, error_code, status_message, status_code, details=None, action_button=None):
        super().__init__(status_message)
        self.error_code = error_code
        self.status_message = status_message
        self.status_code = status_code
        self.details = details if details is not None else {}
        self.action_button = action_button if action_button is not None else {}

class ValidationException(AppException):
    def __init__(self, status_message="Validation failed", details=None, action_button=None):
        super().__init__(
            error_code=ErrorCodes.VALIDATION_ERROR,
            status_message=status_message,
            status_code=422,
            details=details,
            action_button=action_button
        )

class NotFoundException(AppException):
    def __init__(self, status_message="Resource not found", details=None, action_button=None):
        super().__init__(
            error_code=ErrorCodes.NOT_FOUND,
            status_message=status_message,
            status_code=404,
            details=details,
            action_button=action_button
        )

class GameLogicException(AppException):
    def __init__(self, status_message="Game logic error", details=None, action_button=None, status_code=400):
        super().__init__(
            error_code=ErrorCodes.GAME_LOGIC_ERROR,
            status_message=status_message,
            status_code=status_code, # Can be 400 or 500
            details=details,
            action_button=action_button
        )

class InternalServerErrorException(AppException):
    def __init__(self, status_message="Internal server error", details=None, action_button=None):
        super().__init__(
            error_code=ErrorCodes.INTERNAL_SERVER_ERROR,
            status_message=status_message,
            status_code=500,
            details=details,
            action_button=action_button
        )

# --- Settlement failures ---
# Every subclass aborts the whole request. Only RandomnessUnavailableException
# can be raised after validation has passed.

class SettlementException(GameLogicException):
    error_code = ErrorCodes.GAME_LOGIC_ERROR
    default_message = "Settlement failed"
    default_status_code = 400

    def __init__(self, status_message=None, details=None, action_button=None):
        super().__init__(
            status_message=status_message or self.default_message,
            details=details,
            action_button=action_button,
            status_code=self.default_status_code
        )
        # GameLogicException sets the generic code; narrow it to the subclass code
        self.error_code = type(self).error_code

class UnsupportedCurrencyException(SettlementException):
    error_code = ErrorCodes.UNSUPPORTED_CURRENCY
    default_message = "Currency is not supported at this table"

class BetOutOfLimitsException(SettlementException):
    error_code = ErrorCodes.BET_OUT_OF_LIMITS
    default_message = "Bet amount is outside the table limits"

class TotalExceedsLimitException(SettlementException):
    error_code = ErrorCodes.TOTAL_EXCEEDS_LIMIT
    default_message = "Total attached funds are outside the table limits"

class InvalidBetShapeException(SettlementException):
    error_code = ErrorCodes.INVALID_BET_SHAPE
    default_message = "Invalid bet"

class FundsMismatchException(SettlementException):
    error_code = ErrorCodes.FUNDS_MISMATCH
    default_message = "Sent funds do not match the placed bets"

class RandomnessUnavailableException(SettlementException):
    error_code = ErrorCodes.RANDOMNESS_UNAVAILABLE
    default_message = "No random seed available for the draw"
    default_status_code = 503

class OverflowException(SettlementException):
    error_code = ErrorCodes.OVERFLOW
    default_message = "Amount overflow"
