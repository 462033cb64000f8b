"""
Configuration validation and startup checks for the roulette table.

This module implements fail-fast validation so that the service never starts
with table limits that contradict each other.
"""

import os
import sys
import warnings
from typing import Dict, List, Optional


class ConfigValidationError(Exception):
    """Raised when critical configuration is missing or invalid."""
    pass


# Development fallbacks; production must set every TABLE_* variable
DEFAULT_TABLE_CONFIG = {
    'TABLE_MIN_BET': 1,
    'TABLE_MAX_BET': 1_000_000,
    'TABLE_MAX_TOTAL': 10_000_000,
    'TABLE_SUPPORTED_CURRENCIES': ['uscrt'],
}


class ConfigValidator:
    """Validates application configuration."""

    def __init__(self, is_production: bool = None, environ: Optional[Dict[str, str]] = None):
        """
        Initialize the configuration validator.

        Args:
            is_production: If None, auto-detect based on FLASK_ENV and FLASK_DEBUG settings
            environ: Mapping to read variables from; defaults to os.environ
        """
        self.environ = environ if environ is not None else os.environ
        if is_production is None:
            flask_env = self.environ.get('FLASK_ENV', '').lower()
            flask_debug = self.environ.get('FLASK_DEBUG', 'False').lower()
            is_production = (
                flask_env == 'production' or
                (flask_env != 'development' and flask_debug not in ('true', '1', 't'))
            )

        self.is_production = is_production
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def _read_int(self, var_name: str) -> Optional[int]:
        raw = self.environ.get(var_name)
        if raw is None or raw.strip() == '':
            default = DEFAULT_TABLE_CONFIG[var_name]
            if self.is_production:
                self.warnings.append(f"WARNING: {var_name} not set - using default {default}")
            return default
        try:
            value = int(raw.replace('_', ''))
        except ValueError:
            self.errors.append(f"CRITICAL: {var_name} must be an integer, got '{raw}'")
            return None
        if value < 0:
            self.errors.append(f"CRITICAL: {var_name} cannot be negative")
            return None
        return value

    def validate_currencies(self) -> List[str]:
        """Validate the comma separated TABLE_SUPPORTED_CURRENCIES list."""
        raw = self.environ.get('TABLE_SUPPORTED_CURRENCIES')
        if raw is None:
            if self.is_production:
                self.warnings.append("WARNING: TABLE_SUPPORTED_CURRENCIES not set - using default")
            return list(DEFAULT_TABLE_CONFIG['TABLE_SUPPORTED_CURRENCIES'])

        currencies = [c.strip() for c in raw.split(',') if c.strip()]
        if not currencies:
            self.errors.append("CRITICAL: TABLE_SUPPORTED_CURRENCIES must list at least one currency")
        if len(set(currencies)) != len(currencies):
            self.warnings.append("WARNING: TABLE_SUPPORTED_CURRENCIES contains duplicates")
        return sorted(set(currencies))

    def validate_table_config(self) -> dict:
        """Validate table limits and their relationships."""
        min_bet = self._read_int('TABLE_MIN_BET')
        max_bet = self._read_int('TABLE_MAX_BET')
        max_total = self._read_int('TABLE_MAX_TOTAL')
        currencies = self.validate_currencies()

        if None not in (min_bet, max_bet, max_total):
            if min_bet > max_bet:
                self.errors.append("CRITICAL: TABLE_MIN_BET cannot exceed TABLE_MAX_BET")
            if max_bet > max_total:
                self.errors.append("CRITICAL: TABLE_MAX_BET cannot exceed TABLE_MAX_TOTAL")
            if min_bet == 0:
                self.warnings.append("WARNING: TABLE_MIN_BET is 0 - zero-amount bets will be accepted")

        return {
            'TABLE_MIN_BET': min_bet,
            'TABLE_MAX_BET': max_bet,
            'TABLE_MAX_TOTAL': max_total,
            'TABLE_SUPPORTED_CURRENCIES': currencies,
        }

    def validate_all(self) -> dict:
        """
        Validate all configuration and return validated values.

        Returns:
            Dictionary of validated configuration values

        Raises:
            ConfigValidationError: If critical validation fails
        """
        config = self.validate_table_config()
        config['DEBUG'] = self.environ.get('FLASK_DEBUG', 'False').lower() in ('true', '1', 't')
        config['LOG_JSON'] = self.environ.get('LOG_JSON', 'True').lower() in ('true', '1', 't')

        if self.is_production and config['DEBUG']:
            self.errors.append("CRITICAL: DEBUG mode must be disabled in production (set FLASK_DEBUG=False)")

        if self.errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in self.errors)
            if self.warnings:
                error_msg += "\n\nWarnings:\n" + "\n".join(f"  - {warning}" for warning in self.warnings)
            raise ConfigValidationError(error_msg)

        for warning in self.warnings:
            warnings.warn(warning, UserWarning)

        return config


def validate_production_config() -> dict:
    """
    Validate configuration with fail-fast behavior.

    Returns:
        Dictionary of validated configuration values

    Raises:
        SystemExit: If validation fails during startup
    """
    try:
        validator = ConfigValidator()
        return validator.validate_all()
    except ConfigValidationError as e:
        print("\nCONFIGURATION VALIDATION FAILED\n", file=sys.stderr)
        print(str(e), file=sys.stderr)
        print("\nSet the TABLE_* environment variables (or .env) and restart.\n", file=sys.stderr)
        sys.exit(1)
