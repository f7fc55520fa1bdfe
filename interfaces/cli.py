"""
Command-line interface for the warrant valuation engine.

This CLI provides access to:
- Option pricing (Black-Scholes with dividend yield)
- Greeks calculation
- Scenario comparison from a JSON request file
- Time value decay curves
"""

import json
import logging
from datetime import date

import click

from warrant_pricer.core.black_scholes import black_scholes_price, calculate_greeks
from warrant_pricer.core.time_value_curve import generate_time_value_curve
from warrant_pricer.scenarios.boundary import parse_request
from warrant_pricer.scenarios.orchestrator import price_scenarios
from warrant_pricer.utils.constants import DEFAULT_MAX_CURVE_POINTS
from warrant_pricer.utils.dates import parse_date


def _parse_date_option(ctx, param, value):
    if value is None:
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise click.BadParameter(f"not a date: {value!r} (use YYYY-MM-DD or DD.MM.YYYY)")
    return parsed


@click.group()
@click.version_option(version="1.0.0")
@click.option("--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """Warrant Pricer - Black-Scholes valuation and scenario comparison."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


@cli.command()
@click.option("--spot", "-S", type=float, required=True, help="Spot price")
@click.option("--strike", "-K", type=float, required=True, help="Strike price")
@click.option("--time", "-T", type=float, required=True, help="Time to expiry (years)")
@click.option("--rate", "-r", type=float, required=True, help="Risk-free rate")
@click.option("--vol", "-v", type=float, required=True, help="Volatility (annualized)")
@click.option("--div", "-q", type=float, default=0.0, help="Dividend yield")
@click.option("--type", "-t", type=click.Choice(["call", "put"]), default="call")
def price(spot, strike, time, rate, vol, div, type):
    """Calculate option price using Black-Scholes."""
    price_value = black_scholes_price(spot, strike, time, rate, vol, div, type)
    click.echo(f"\n{type.capitalize()} Option Price: {price_value:.4f}")


@cli.command()
@click.option("--spot", "-S", type=float, required=True, help="Spot price")
@click.option("--strike", "-K", type=float, required=True, help="Strike price")
@click.option("--time", "-T", type=float, required=True, help="Time to expiry (years)")
@click.option("--rate", "-r", type=float, required=True, help="Risk-free rate")
@click.option("--vol", "-v", type=float, required=True, help="Volatility")
@click.option("--div", "-q", type=float, default=0.0, help="Dividend yield")
@click.option("--type", "-t", type=click.Choice(["call", "put"]), default="call")
def greeks(spot, strike, time, rate, vol, div, type):
    """Calculate delta, gamma, theta and vega."""
    greeks_values = calculate_greeks(spot, strike, time, rate, vol, div, type)

    click.echo(f"\nGreeks for {type.capitalize()} Option:")
    click.echo(f"  Delta:  {greeks_values.delta:>10.6f}")
    click.echo(f"  Gamma:  {greeks_values.gamma:>10.6f}")
    click.echo(f"  Theta:  {greeks_values.theta:>10.6f} (per year)")
    click.echo(f"  Vega:   {greeks_values.vega:>10.6f}")


@cli.command()
@click.argument("request_file", type=click.File("r"))
def scenarios(request_file):
    """Price a scenario comparison from a JSON request file ('-' for stdin)."""
    try:
        payload = json.load(request_file)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid JSON: {e}")
    if not isinstance(payload, dict):
        raise click.ClickException("Request must be a JSON object")

    try:
        instrument, scenario_list, reference_price = parse_request(payload)
        results = price_scenarios(instrument, scenario_list, reference_price)
    except ValueError as e:
        raise click.ClickException(str(e))

    click.echo(
        json.dumps(
            {
                "referencePrice": reference_price,
                "results": [result.to_dict() for result in results],
            },
            indent=2,
        )
    )


@cli.command()
@click.option("--spot", "-S", type=float, required=True, help="Spot price")
@click.option("--strike", "-K", type=float, required=True, help="Strike price")
@click.option("--rate", "-r", type=float, required=True, help="Risk-free rate")
@click.option("--vol", "-v", type=float, required=True, help="Volatility")
@click.option("--div", "-q", type=float, default=0.0, help="Dividend yield")
@click.option("--type", "-t", type=click.Choice(["call", "put"]), default="call")
@click.option("--expiry", "-e", required=True, callback=_parse_date_option, help="Expiry date")
@click.option("--as-of", callback=_parse_date_option, help="Valuation date (default: today)")
@click.option("--max-points", type=click.IntRange(min=1), default=DEFAULT_MAX_CURVE_POINTS)
def curve(spot, strike, rate, vol, div, type, expiry, as_of, max_points):
    """Print the time value decay curve until expiry."""
    now = as_of if as_of is not None else date.today()
    points = generate_time_value_curve(
        spot, strike, rate, vol, type, expiry, now=now, q=div, max_points=max_points
    )

    click.echo(f"\n{'Day':>6}  {'Time value':>12}")
    for point in points:
        click.echo(f"{point.day:>6}  {point.value:>12.6f}")


if __name__ == "__main__":
    cli()
