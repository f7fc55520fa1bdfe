"""
Output rounding applied when results leave the engine.

Intermediate math runs in full double precision; only values handed to
callers are rounded, to keep serialised results stable.
"""

from typing import Optional

from warrant_pricer.utils.constants import OUTPUT_DECIMALS, PERCENT_DECIMALS


def round_output(value: float, decimals: int = OUTPUT_DECIMALS) -> float:
    """Round a result value, normalising -0.0 to 0.0."""
    rounded = round(value, decimals)
    return rounded + 0.0


def round_optional(value: Optional[float], decimals: int = OUTPUT_DECIMALS) -> Optional[float]:
    if value is None:
        return None
    return round_output(value, decimals)


def round_percent(value: Optional[float]) -> Optional[float]:
    return round_optional(value, PERCENT_DECIMALS)
