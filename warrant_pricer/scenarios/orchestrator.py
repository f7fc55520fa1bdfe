"""
Scenario comparison for a single warrant.

A comparison prices one instrument under up to five market scenarios and
reports, per scenario, the fair value split into intrinsic and time value,
the Greeks, break-even, premium (agio), omega and the change against a
reference price. Row 0 is by convention the unperturbed "status quo".

Rows missing a required input are returned as empty results instead of
being priced with silent defaults, so a partially filled comparison still
renders.
"""

import logging
from typing import Optional, Sequence

from warrant_pricer.core.black_scholes import black_scholes_price, calculate_greeks
from warrant_pricer.core.time_value_curve import intrinsic_value
from warrant_pricer.utils.constants import DEFAULT_FX_RATE, MAX_SCENARIOS
from warrant_pricer.utils.dates import year_fraction
from warrant_pricer.utils.rounding import round_optional, round_output, round_percent
from warrant_pricer.utils.types import (
    ZERO_GREEKS,
    ClassifiedScenario,
    CompleteScenario,
    IncompleteScenario,
    Instrument,
    MarketScenario,
    PricingResult,
)

logger = logging.getLogger(__name__)


def classify_scenario(instrument: Instrument, scenario: MarketScenario) -> ClassifiedScenario:
    """
    Resolve a scenario against its instrument.

    Returns a CompleteScenario when spot, rate, volatility, valuation date,
    strike and expiry are all known; otherwise an IncompleteScenario
    listing what is missing. Dividend yield falls back to the instrument's
    default and the FX rate to 1.
    """
    required = {
        "underlying_price": scenario.underlying_price,
        "rate": scenario.rate,
        "volatility": scenario.volatility,
        "valuation_date": scenario.valuation_date,
        "strike": instrument.strike,
        "expiry": instrument.expiry,
    }
    missing = tuple(name for name, value in required.items() if value is None)
    if missing:
        return IncompleteScenario(valuation_date=scenario.valuation_date, missing=missing)

    dividend_yield = scenario.dividend_yield
    if dividend_yield is None:
        dividend_yield = instrument.dividend_yield
    fx_rate = scenario.fx_rate if scenario.fx_rate is not None else DEFAULT_FX_RATE

    return CompleteScenario(
        spot=scenario.underlying_price,
        strike=instrument.strike,
        expiry=instrument.expiry,
        rate=scenario.rate,
        volatility=scenario.volatility,
        dividend_yield=dividend_yield,
        fx_rate=fx_rate,
        valuation_date=scenario.valuation_date,
    )


def reference_changes(
    fair_value: float, reference_price: Optional[float]
) -> tuple[Optional[float], Optional[float]]:
    """
    Absolute and relative (percent) change of a fair value against a reference.

    Returns:
        (fair_value - reference, 100 * change / reference); the absolute
        change is None without a reference, the relative change is None
        when the reference is missing or zero

    Example:
        >>> reference_changes(12.0, 10.0)
        (2.0, 20.0)
    """
    if reference_price is None:
        return None, None
    abs_change = fair_value - reference_price
    if reference_price == 0:
        return abs_change, None
    return abs_change, abs_change / reference_price * 100.0


def scenario_raw_price(instrument: Instrument, scenario: CompleteScenario) -> tuple[float, float, float]:
    """
    Unscaled option value for a complete scenario.

    Returns:
        (T, intrinsic, raw_price) per unit of underlying option; at or after
        expiry the raw price is the intrinsic value itself
    """
    T = year_fraction(scenario.valuation_date, scenario.expiry)
    intrinsic = intrinsic_value(scenario.spot, scenario.strike, instrument.warrant_type)
    if T <= 0:
        return T, intrinsic, intrinsic
    raw_price = black_scholes_price(
        scenario.spot,
        scenario.strike,
        T,
        scenario.rate,
        scenario.volatility,
        scenario.dividend_yield,
        instrument.warrant_type,
    )
    return T, intrinsic, raw_price


def scaled_values(
    raw_price: float, intrinsic: float, ratio: float, fx_rate: float
) -> tuple[float, float, float]:
    """
    Convert unscaled values into rounded reporting-currency values.

    Time value is taken from the rounded fair and intrinsic values so that
    fair = intrinsic + time survives rounding.
    """
    fair_value = round_output(raw_price * ratio * fx_rate)
    intrinsic_scaled = round_output(intrinsic * ratio * fx_rate)
    time_value = round_output(max(0.0, fair_value - intrinsic_scaled))
    return fair_value, intrinsic_scaled, time_value


def _empty_result(instrument: Instrument, scenario: IncompleteScenario) -> PricingResult:
    logger.debug("Scenario not priced, missing %s", ", ".join(scenario.missing))
    return PricingResult(
        currency=instrument.currency,
        valuation_date=scenario.valuation_date,
    )


def price_scenario(
    instrument: Instrument,
    scenario: MarketScenario,
    reference_price: Optional[float] = None,
) -> PricingResult:
    """
    Price one scenario row.

    Args:
        instrument: Warrant terms
        scenario: Market inputs for this row
        reference_price: Price to measure changes against (e.g. last quote)

    Returns:
        PricingResult; empty (all numeric fields None) if an input is missing

    Notes:
        - Fair, intrinsic and time value are scaled by ratio and FX rate.
        - Greeks are per unit of underlying option, not scaled.
        - Break-even uses the unscaled price: K ± raw_price / ratio.
        - Premium is (break_even - S) / S; omega is delta·S / fair_value.
    """
    classified = classify_scenario(instrument, scenario)
    if isinstance(classified, IncompleteScenario):
        return _empty_result(instrument, classified)

    S = classified.spot
    K = classified.strike
    ratio = instrument.ratio

    T, intrinsic, raw_price = scenario_raw_price(instrument, classified)
    fair_value, intrinsic_scaled, time_value = scaled_values(
        raw_price, intrinsic, ratio, classified.fx_rate
    )

    if T <= 0:
        greeks = ZERO_GREEKS
    else:
        greeks = calculate_greeks(
            S,
            K,
            T,
            classified.rate,
            classified.volatility,
            classified.dividend_yield,
            instrument.warrant_type,
        )

    if instrument.warrant_type == "call":
        break_even = K + raw_price / ratio
    else:
        break_even = K - raw_price / ratio

    premium = (break_even - S) / S if S != 0 else None
    omega = (greeks.delta * S) / fair_value if fair_value > 0 else None
    abs_change, rel_change = reference_changes(fair_value, reference_price)

    return PricingResult(
        currency=instrument.currency,
        valuation_date=classified.valuation_date,
        fair_value=fair_value,
        intrinsic_value=intrinsic_scaled,
        time_value=time_value,
        delta=round_output(greeks.delta),
        gamma=round_output(greeks.gamma),
        theta=round_output(greeks.theta),
        vega=round_output(greeks.vega),
        implied_volatility_used=round_output(classified.volatility),
        break_even=round_output(break_even),
        premium=round_optional(premium),
        omega=round_optional(omega),
        abs_change=round_optional(abs_change),
        rel_change=round_percent(rel_change),
    )


def price_scenarios(
    instrument: Instrument,
    scenarios: Sequence[MarketScenario],
    reference_price: Optional[float] = None,
) -> list[PricingResult]:
    """
    Price a scenario comparison.

    Args:
        instrument: Warrant terms
        scenarios: One to five market scenarios, status quo first by convention
        reference_price: Optional price to report changes against

    Returns:
        One PricingResult per scenario, in input order

    Raises:
        ValueError: If no scenario or more than five are given

    Example:
        >>> from datetime import date
        >>> inst = Instrument("call", strike=100.0, expiry=date(2026, 7, 1))
        >>> rows = price_scenarios(inst, [MarketScenario(
        ...     underlying_price=100.0, rate=0.05, volatility=0.2,
        ...     valuation_date=date(2026, 1, 1))])
        >>> rows[0].fair_value > 0
        True
    """
    if not scenarios:
        raise ValueError("At least one scenario is required")
    if len(scenarios) > MAX_SCENARIOS:
        raise ValueError(
            f"At most {MAX_SCENARIOS} scenarios can be compared, got {len(scenarios)}"
        )

    return [price_scenario(instrument, scenario, reference_price) for scenario in scenarios]
