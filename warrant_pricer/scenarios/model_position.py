"""
Model valuation of a stored warrant position.

Recomputes the snapshot kept alongside a position: a single status quo
valuation as of "now" plus the agio split, rho and the time value decay
curve. Used when a position is saved or its market inputs are refreshed.
"""

import logging
from datetime import datetime
from typing import Optional

from warrant_pricer.core.black_scholes import rho
from warrant_pricer.core.time_value_curve import generate_time_value_curve
from warrant_pricer.scenarios.orchestrator import price_scenario
from warrant_pricer.utils.constants import DEFAULT_MAX_CURVE_POINTS
from warrant_pricer.utils.dates import year_fraction
from warrant_pricer.utils.rounding import round_optional, round_output, round_percent
from warrant_pricer.utils.types import (
    ComputedSnapshot,
    Instrument,
    MarketScenario,
    ModelPricing,
    PricingInputs,
)

logger = logging.getLogger(__name__)


def resolve_reference_price(
    override: Optional[float] = None,
    market_price: Optional[float] = None,
    snapshot_fair_value: Optional[float] = None,
    quoted_price: Optional[float] = None,
) -> Optional[float]:
    """
    Pick the price scenario changes are measured against.

    Precedence: explicit override, the position's market price, the fair
    value of its last computed snapshot, then the quoted instrument price.
    """
    for candidate in (override, market_price, snapshot_fair_value, quoted_price):
        if candidate is not None:
            return candidate
    return None


def compute_model_pricing(
    instrument: Instrument,
    inputs: PricingInputs,
    now: Optional[datetime] = None,
    max_points: int = DEFAULT_MAX_CURVE_POINTS,
) -> ModelPricing:
    """
    Value a position with its stored inputs as of `now`.

    Args:
        instrument: Warrant terms
        inputs: Stored market inputs of the position
        now: Valuation timestamp, defaults to the current time
        max_points: Sampling bound for the decay curve

    Returns:
        ModelPricing with the computed snapshot and the decay curve

    Notes:
        Agio (Aufgeld) is the distance of break-even above spot: absolute in
        underlying currency, percent relative to spot. It is the premium of
        the scenario comparison expressed in both units.
    """
    if now is None:
        now = datetime.now()

    warnings = []
    if inputs.fx_rate is None:
        warnings.append("No FX rate supplied, assuming 1.0")

    scenario = MarketScenario(
        underlying_price=inputs.underlying_price,
        rate=inputs.rate,
        volatility=inputs.volatility,
        dividend_yield=inputs.dividend_yield,
        fx_rate=inputs.fx_rate,
        valuation_date=now.date(),
    )
    result = price_scenario(instrument, scenario)

    if instrument.expiry is not None and year_fraction(now.date(), instrument.expiry) <= 0:
        warnings.append(f"Instrument expired on {instrument.expiry.isoformat()}")

    rho_value = None
    if result.is_priced:
        T = year_fraction(now.date(), instrument.expiry)
        rho_value = round_output(
            rho(
                inputs.underlying_price,
                instrument.strike,
                T,
                inputs.rate,
                inputs.volatility,
                inputs.dividend_yield,
                instrument.warrant_type,
            )
        )

    agio_absolute = None
    agio_percent = None
    if result.is_priced:
        agio_absolute = result.break_even - inputs.underlying_price
        agio_percent = agio_absolute / inputs.underlying_price * 100.0

    computed = ComputedSnapshot(
        fair_value=result.fair_value,
        intrinsic_value=result.intrinsic_value,
        time_value=result.time_value,
        break_even=result.break_even,
        agio_absolute=round_optional(agio_absolute),
        agio_percent=round_percent(agio_percent),
        delta=result.delta,
        gamma=result.gamma,
        theta=result.theta,
        vega=result.vega,
        rho=rho_value,
        omega=result.omega,
        as_of=now.isoformat(),
        warnings=warnings,
    )

    curve = []
    if instrument.strike is not None and instrument.expiry is not None:
        curve = list(
            generate_time_value_curve(
                inputs.underlying_price,
                instrument.strike,
                inputs.rate,
                inputs.volatility,
                instrument.warrant_type,
                instrument.expiry,
                now=now,
                q=inputs.dividend_yield,
                max_points=max_points,
            )
        )
    for warning in warnings:
        logger.debug("Model pricing warning: %s", warning)

    return ModelPricing(computed=computed, time_value_curve=curve)
