class ErrorCodes:
    GENERIC_ERROR = "GENERIC_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    GAME_LOGIC_ERROR = "GAME_LOGIC_ERROR"

    # Settlement failures
    UNSUPPORTED_CURRENCY = "UNSUPPORTED_CURRENCY"
    BET_OUT_OF_LIMITS = "BET_OUT_OF_LIMITS"
    TOTAL_EXCEEDS_LIMIT = "TOTAL_EXCEEDS_LIMIT"
    INVALID_BET_SHAPE = "INVALID_BET_SHAPE"
    FUNDS_MISMATCH = "FUNDS_MISMATCH"
    RANDOMNESS_UNAVAILABLE = "RANDOMNESS_UNAVAILABLE"
    OVERFLOW = "OVERFLOW"
