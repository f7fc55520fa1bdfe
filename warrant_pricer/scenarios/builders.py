"""
Scenario construction and time value simulation.

Helpers that derive comparison rows from one set of base market inputs:
spot shifts in percent around a status quo row, and the same inputs
re-valued on a series of future valuation dates.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Iterable, Optional, Sequence

from warrant_pricer.core.black_scholes import black_scholes_price
from warrant_pricer.core.time_value_curve import curve_days, intrinsic_value
from warrant_pricer.scenarios.orchestrator import classify_scenario, price_scenarios, scaled_values
from warrant_pricer.utils.constants import DAYS_PER_YEAR, DEFAULT_MAX_CURVE_POINTS, MAX_SCENARIOS
from warrant_pricer.utils.dates import remaining_days
from warrant_pricer.utils.rounding import round_output
from warrant_pricer.utils.types import (
    IncompleteScenario,
    Instrument,
    MarketScenario,
    ValuationPoint,
)

logger = logging.getLogger(__name__)


def shift_spot(base: MarketScenario, change_pct: float) -> MarketScenario:
    """Copy of `base` with the underlying moved by `change_pct` percent."""
    if base.underlying_price is None:
        return base
    shifted = round_output(base.underlying_price * (1.0 + change_pct / 100.0))
    return replace(base, underlying_price=shifted)


def build_spot_scenarios(
    base: MarketScenario, change_pcts: Sequence[float] = ()
) -> list[MarketScenario]:
    """
    Status quo row followed by one row per spot shift.

    Args:
        base: Current market inputs
        change_pcts: Spot changes in percent, e.g. (-10, 5, 10)

    Returns:
        [status quo, base shifted by change_pcts[0], ...]

    Raises:
        ValueError: If the rows would exceed the comparison limit
    """
    if len(change_pcts) + 1 > MAX_SCENARIOS:
        raise ValueError(
            f"At most {MAX_SCENARIOS - 1} spot shifts fit next to the status quo, "
            f"got {len(change_pcts)}"
        )
    return [shift_spot(base, 0.0)] + [shift_spot(base, pct) for pct in change_pcts]


def build_date_scenarios(
    base: MarketScenario, valuation_dates: Iterable[date]
) -> list[MarketScenario]:
    """Copies of `base`, one per valuation date."""
    return [replace(base, valuation_date=valuation_date) for valuation_date in valuation_dates]


def simulate_time_value(
    instrument: Instrument,
    base: MarketScenario,
    valuation_dates: Sequence[date],
    reference_price: Optional[float] = None,
) -> list[ValuationPoint]:
    """
    Re-value the base inputs on each of `valuation_dates`.

    Dates are priced through the scenario comparison in batches of at most
    five. Rows that cannot be priced are left out.

    Returns:
        ValuationPoint per priced date, `day` counted from the first priced date
    """
    if not valuation_dates:
        return []

    scenarios = build_date_scenarios(base, valuation_dates)
    results = []
    for start in range(0, len(scenarios), MAX_SCENARIOS):
        batch = scenarios[start:start + MAX_SCENARIOS]
        results.extend(price_scenarios(instrument, batch, reference_price))
    logger.debug(
        "Simulated %d valuation dates in %d batches",
        len(scenarios),
        -(-len(scenarios) // MAX_SCENARIOS),
    )

    priced = [
        (valuation_date, result)
        for valuation_date, result in zip(valuation_dates, results)
        if result.is_priced
    ]
    if not priced:
        return []

    first = priced[0][0]
    return [
        ValuationPoint(
            day=(valuation_date - first).days,
            fair_value=result.fair_value,
            intrinsic_value=result.intrinsic_value,
            time_value=result.time_value,
        )
        for valuation_date, result in priced
    ]


def generate_valuation_curve(
    instrument: Instrument,
    scenario: MarketScenario,
    max_points: int = DEFAULT_MAX_CURVE_POINTS,
) -> list[ValuationPoint]:
    """
    Decay curve in reporting currency from the valuation date to expiry.

    Uses the same day grid as the time value curve and holds spot, rate,
    volatility, dividend yield and FX fixed. Each point carries fair,
    intrinsic and time value scaled by ratio and FX rate.

    Returns:
        ValuationPoints ending on the expiry day with zero time value, or an
        empty list when the scenario lacks an input
    """
    classified = classify_scenario(instrument, scenario)
    if isinstance(classified, IncompleteScenario):
        logger.debug("Valuation curve skipped, missing %s", ", ".join(classified.missing))
        return []

    days = remaining_days(classified.valuation_date, classified.expiry)
    intrinsic = intrinsic_value(classified.spot, classified.strike, instrument.warrant_type)

    points = []
    for day in curve_days(days, max_points):
        remaining = days - day
        if remaining == 0:
            raw_price = intrinsic
        else:
            raw_price = black_scholes_price(
                classified.spot,
                classified.strike,
                remaining / DAYS_PER_YEAR,
                classified.rate,
                classified.volatility,
                classified.dividend_yield,
                instrument.warrant_type,
            )
        fair_value, intrinsic_scaled, time_value = scaled_values(
            raw_price, intrinsic, instrument.ratio, classified.fx_rate
        )
        points.append(
            ValuationPoint(
                day=day,
                fair_value=fair_value,
                intrinsic_value=intrinsic_scaled,
                time_value=time_value,
            )
        )
    return points
