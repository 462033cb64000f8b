"""
Configuration module with fail-fast validation.

Table limits come from the environment (or a .env file) and are validated at
import time; the service refuses to start with contradictory limits.
"""
from dotenv import load_dotenv

# Load environment variables from .env file before validating
load_dotenv()

from roulette_be.config_validator import validate_production_config
from roulette_be.utils.rng import system_seed_provider


class Config:
    """Production configuration with fail-fast validation."""

    # Validate configuration and get validated values
    _validated_config = validate_production_config()

    # Table limits
    TABLE_MIN_BET = _validated_config['TABLE_MIN_BET']
    TABLE_MAX_BET = _validated_config['TABLE_MAX_BET']
    TABLE_MAX_TOTAL = _validated_config['TABLE_MAX_TOTAL']
    TABLE_SUPPORTED_CURRENCIES = _validated_config['TABLE_SUPPORTED_CURRENCIES']

    # Source of per-request seeds; must never hand out the same seed twice
    SEED_PROVIDER = staticmethod(system_seed_provider)

    # Flask Debug Mode
    DEBUG = _validated_config['DEBUG']

    # JSON log lines outside debug mode
    LOG_JSON = _validated_config['LOG_JSON']


class TestingConfig(Config):
    TESTING = True
    DEBUG = False
    LOG_JSON = False
    TABLE_MIN_BET = 1
    TABLE_MAX_BET = 100
    TABLE_MAX_TOTAL = 500
    TABLE_SUPPORTED_CURRENCIES = ['uscrt', 'uatom']
