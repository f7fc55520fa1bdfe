"""
Data types and structures for warrant valuation.

This module defines the records exchanged with the valuation engine:
instruments, market scenarios (raw and validated), per-scenario results,
Greeks and curve samples.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Literal, Optional, Union

OptionType = Literal["call", "put"]

SUPPORTED_OPTION_TYPES = ("call", "put")


class UnsupportedInstrumentError(ValueError):
    """Raised when a position is not an option (e.g. a plain spot holding)."""


@dataclass(frozen=True)
class Instrument:
    """
    Immutable description of a warrant.

    Attributes:
        warrant_type: Either "call" or "put"
        strike: Strike price in underlying currency (None if unknown)
        expiry: Last trading / valuation day (None if unknown)
        ratio: Units of underlying option value per warrant (Bezugsverhältnis)
        currency: ISO code of the reporting currency
        dividend_yield: Default continuous dividend yield for scenarios
        isin: Optional identifier, carried through for display only
    """
    warrant_type: OptionType
    strike: Optional[float]
    expiry: Optional[date]
    ratio: float = 1.0
    currency: str = "EUR"
    dividend_yield: float = 0.0
    isin: Optional[str] = None

    def __post_init__(self) -> None:
        """Reject non-option kinds and non-positive terms."""
        if self.warrant_type not in SUPPORTED_OPTION_TYPES:
            raise UnsupportedInstrumentError(
                f"Only call and put warrants can be priced, got '{self.warrant_type}'"
            )
        if self.strike is not None and self.strike <= 0:
            raise ValueError(f"Strike price must be positive, got K={self.strike}")
        if self.ratio <= 0:
            raise ValueError(f"Ratio must be positive, got ratio={self.ratio}")
        if self.dividend_yield < 0:
            raise ValueError(
                f"Dividend yield cannot be negative, got q={self.dividend_yield}"
            )


@dataclass(frozen=True)
class MarketScenario:
    """
    One row of a scenario comparison, as supplied by the caller.

    Every field is optional; a row lacking spot, rate, volatility or
    valuation date is reported as an empty result rather than priced.
    """
    underlying_price: Optional[float] = None
    rate: Optional[float] = None
    volatility: Optional[float] = None
    dividend_yield: Optional[float] = None
    fx_rate: Optional[float] = None
    valuation_date: Optional[date] = None


@dataclass(frozen=True)
class CompleteScenario:
    """A scenario with every pricing input resolved against its instrument."""
    spot: float
    strike: float
    expiry: date
    rate: float
    volatility: float
    dividend_yield: float
    fx_rate: float
    valuation_date: date


@dataclass(frozen=True)
class IncompleteScenario:
    """A scenario that cannot be priced, with the names of the missing inputs."""
    valuation_date: Optional[date]
    missing: tuple[str, ...]


ClassifiedScenario = Union[CompleteScenario, IncompleteScenario]


@dataclass(frozen=True)
class Greeks:
    """
    Container for option Greeks.

    Attributes:
        delta: ∂V/∂S
        gamma: ∂²V/∂S²
        theta: ∂V/∂t, annualised (divide by 365 for a daily figure)
        vega: ∂V/∂σ, per unit of volatility
    """
    delta: float
    gamma: float
    theta: float
    vega: float


ZERO_GREEKS = Greeks(delta=0.0, gamma=0.0, theta=0.0, vega=0.0)


@dataclass(frozen=True)
class PricingResult:
    """
    Valuation of one scenario row.

    Monetary fields are in reporting currency (ratio and FX applied);
    Greeks are per unit of underlying option. All numeric fields are None
    when the scenario could not be priced.
    """
    currency: str
    valuation_date: Optional[date]
    fair_value: Optional[float] = None
    intrinsic_value: Optional[float] = None
    time_value: Optional[float] = None
    delta: Optional[float] = None
    gamma: Optional[float] = None
    theta: Optional[float] = None
    vega: Optional[float] = None
    implied_volatility_used: Optional[float] = None
    break_even: Optional[float] = None
    premium: Optional[float] = None
    omega: Optional[float] = None
    abs_change: Optional[float] = None
    rel_change: Optional[float] = None

    @property
    def is_priced(self) -> bool:
        return self.fair_value is not None

    def to_dict(self) -> dict[str, Any]:
        """Serialise with the camelCase keys used by the web layer."""
        return {
            "fairValue": self.fair_value,
            "intrinsicValue": self.intrinsic_value,
            "timeValue": self.time_value,
            "delta": self.delta,
            "gamma": self.gamma,
            "theta": self.theta,
            "vega": self.vega,
            "impliedVolatilityUsed": self.implied_volatility_used,
            "breakEven": self.break_even,
            "premium": self.premium,
            "omega": self.omega,
            "absChange": self.abs_change,
            "relChange": self.rel_change,
            "currency": self.currency,
            "valuationDate": (
                self.valuation_date.isoformat() if self.valuation_date else None
            ),
        }


@dataclass(frozen=True)
class TimeValuePoint:
    """Time value remaining `day` days after the valuation date."""
    day: int
    value: float


@dataclass(frozen=True)
class ValuationPoint:
    """Full valuation sample on a decay curve, in reporting currency."""
    day: int
    fair_value: float
    intrinsic_value: float
    time_value: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "day": self.day,
            "fairValue": self.fair_value,
            "intrinsicValue": self.intrinsic_value,
            "timeValue": self.time_value,
        }


@dataclass(frozen=True)
class PricingInputs:
    """
    Market inputs stored alongside a position for model recomputation.

    Attributes:
        underlying_price: Spot of the underlying
        volatility: Implied volatility to price with
        rate: Continuously compounded risk-free rate
        dividend_yield: Continuous dividend yield
        fx_rate: Option currency to reporting currency (None means 1)
        market_price: Last quoted warrant price, if known
    """
    underlying_price: float
    volatility: float
    rate: float
    dividend_yield: float = 0.0
    fx_rate: Optional[float] = None
    market_price: Optional[float] = None


@dataclass(frozen=True)
class ComputedSnapshot:
    """Model output persisted with a position by the surrounding service."""
    fair_value: Optional[float]
    intrinsic_value: Optional[float]
    time_value: Optional[float]
    break_even: Optional[float]
    agio_absolute: Optional[float]
    agio_percent: Optional[float]
    delta: Optional[float]
    gamma: Optional[float]
    theta: Optional[float]
    vega: Optional[float]
    rho: Optional[float]
    omega: Optional[float]
    as_of: str
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ModelPricing:
    """Snapshot plus the time value decay curve for the same inputs."""
    computed: ComputedSnapshot
    time_value_curve: list[TimeValuePoint]
