"""
Time value decay curves.

The decay curve re-prices an option with today's spot, rate, dividend yield
and volatility while the remaining life shrinks day by day towards expiry.
Intrinsic value is held at today's moneyness, so the curve isolates the
decay of the current time value rather than simulating spot paths.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, Optional

from warrant_pricer.core.black_scholes import black_scholes_price
from warrant_pricer.utils.constants import DAYS_PER_YEAR, DEFAULT_MAX_CURVE_POINTS
from warrant_pricer.utils.dates import DateLike, remaining_days
from warrant_pricer.utils.rounding import round_output
from warrant_pricer.utils.types import OptionType, TimeValuePoint

logger = logging.getLogger(__name__)


def intrinsic_value(S: float, K: float, option_type: OptionType) -> float:
    """Immediate exercise value: max(S - K, 0) for calls, max(K - S, 0) for puts."""
    if option_type == "call":
        return max(S - K, 0.0)
    return max(K - S, 0.0)


def curve_step(days: int, max_points: int) -> int:
    """Day increment that keeps a curve over `days` days within `max_points` samples."""
    if max_points < 1:
        raise ValueError(f"max_points must be at least 1, got {max_points}")
    return max(1, math.ceil(days / max_points))


def curve_days(days: int, max_points: int) -> Iterator[int]:
    """
    Day offsets sampled on a curve of `days` remaining days.

    Yields 0, step, 2·step, ... and always finishes on `days` itself.
    """
    step = curve_step(days, max_points)
    day = 0
    while day <= days:
        yield day
        day += step
    if day - step != days:
        yield days


@dataclass(frozen=True)
class TimeValueCurve:
    """
    Lazily evaluated time value curve.

    Iterating prices one point at a time; every new iteration starts over
    from the valuation date, so the same curve object can be consumed any
    number of times.
    """
    S: float
    K: float
    r: float
    sigma: float
    option_type: OptionType
    days: int
    q: float = 0.0
    max_points: int = DEFAULT_MAX_CURVE_POINTS

    def __post_init__(self) -> None:
        curve_step(self.days, self.max_points)

    def __iter__(self) -> Iterator[TimeValuePoint]:
        if self.days == 0:
            yield TimeValuePoint(day=0, value=0.0)
            return

        intrinsic = intrinsic_value(self.S, self.K, self.option_type)
        for day in curve_days(self.days, self.max_points):
            remaining = self.days - day
            if remaining == 0:
                # No time value left at expiry
                yield TimeValuePoint(day=day, value=0.0)
                continue
            price = black_scholes_price(
                self.S,
                self.K,
                remaining / DAYS_PER_YEAR,
                self.r,
                self.sigma,
                self.q,
                self.option_type,
            )
            yield TimeValuePoint(day=day, value=round_output(max(0.0, price - intrinsic)))


def generate_time_value_curve(
    S: float,
    K: float,
    r: float,
    sigma: float,
    option_type: OptionType,
    expiry: DateLike,
    now: Optional[DateLike] = None,
    q: float = 0.0,
    max_points: int = DEFAULT_MAX_CURVE_POINTS,
) -> TimeValueCurve:
    """
    Build the time value decay curve from `now` until `expiry`.

    Args:
        S, K, r, sigma, q: Black-Scholes parameters, held fixed along the curve
        option_type: "call" or "put"
        expiry: Expiry date
        now: Valuation date or timestamp, defaults to the current time
        max_points: Upper bound on the number of stepped samples

    Returns:
        TimeValueCurve yielding TimeValuePoint(day, value); the last point is
        always (remaining_days, 0)

    Raises:
        ValueError: If max_points < 1

    Example:
        >>> from datetime import date
        >>> points = list(generate_time_value_curve(
        ...     100, 100, 0.05, 0.2, "call", date(2026, 7, 1), now=date(2026, 1, 1)))
        >>> points[-1]
        TimeValuePoint(day=181, value=0.0)
    """
    if now is None:
        now = datetime.now()
    days = remaining_days(now, expiry)
    logger.debug(
        "Time value curve: %d remaining days, step %d",
        days,
        curve_step(days, max_points),
    )
    return TimeValueCurve(
        S=S,
        K=K,
        r=r,
        sigma=sigma,
        option_type=option_type,
        days=days,
        q=q,
        max_points=max_points,
    )
