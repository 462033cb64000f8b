#!/usr/bin/env python3
"""
Roulette settlement CLI

A command-line interface for inspecting the table and settling bets offline:
- Listing the winning categories for a number
- Settling a request against the environment's table limits
- Showing the validated table configuration

Usage:
    roulette-cli --help
    roulette-cli expand 17
    roulette-cli settle --bets '[{"amount": {"currency": "uscrt", "quantity": 10}, "category": "red"}]' \
                        --funds '[{"currency": "uscrt", "quantity": 10}]'
    roulette-cli table
"""

import json
import logging

import click
from dotenv import load_dotenv
from marshmallow import ValidationError

from roulette_be.config_validator import ConfigValidationError, ConfigValidator
from roulette_be.exceptions import SettlementException
from roulette_be.models import TableConfig
from roulette_be.schemas import BetSchema, CoinSchema, SettlementResultSchema, TableConfigSchema, sort_categories
from roulette_be.services.settlement_service import settle_bets
from roulette_be.utils import roulette_helper
from roulette_be.utils.rng import fixed_seed_provider, system_seed_provider


def load_table_config() -> TableConfig:
    """Validated table limits from the environment (.env included)."""
    load_dotenv()
    try:
        return TableConfig.from_mapping(ConfigValidator().validate_all())
    except ConfigValidationError as e:
        raise click.ClickException(str(e))


def _parse_json_option(raw: str, schema, option_name: str):
    try:
        return schema.load(json.loads(raw))
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint=option_name)
    except ValidationError as e:
        raise click.BadParameter(json.dumps(e.messages), param_hint=option_name)


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, verbose):
    """Roulette settlement CLI - inspect the table and settle bets."""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


@cli.command()
@click.argument('number', type=click.IntRange(0, 36))
def expand(number):
    """List every category that wins when NUMBER is drawn."""
    for category in sort_categories(roulette_helper.expand(number)):
        click.echo(f"{category.label}\tx{roulette_helper.payout_multiplier(category)}")


@cli.command()
@click.option('--bets', 'bets_json', required=True, help='JSON list of bets')
@click.option('--funds', 'funds_json', required=True, help='JSON list of attached coins')
@click.option('--seed', 'seed_hex', default=None, help='Hex seed to replay a draw (default: fresh system seed)')
def settle(bets_json, funds_json, seed_hex):
    """Settle bets against the configured table and print the result as JSON."""
    table_config = load_table_config()
    bets = _parse_json_option(bets_json, BetSchema(many=True), '--bets')
    funds = _parse_json_option(funds_json, CoinSchema(many=True), '--funds')

    if seed_hex is None:
        seed = system_seed_provider()
    else:
        try:
            seed = bytes.fromhex(seed_hex)
        except ValueError:
            raise click.BadParameter("seed must be hexadecimal", param_hint='--seed')

    try:
        result = settle_bets(bets, funds, fixed_seed_provider(seed), table_config)
    except SettlementException as e:
        click.echo(json.dumps({
            'status': False,
            'error_code': e.error_code,
            'status_message': e.status_message,
            'details': e.details,
        }), err=True)
        raise click.exceptions.Exit(1)

    output = SettlementResultSchema().dump(result)
    output['seed'] = seed.hex()
    click.echo(json.dumps(output, indent=2))


@cli.command()
def table():
    """Show the validated table configuration."""
    click.echo(json.dumps(TableConfigSchema().dump(load_table_config()), indent=2))


if __name__ == '__main__':
    cli()
