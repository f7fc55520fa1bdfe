"""
Conversion of loosely typed request data into valuation records.

Request bodies arrive as JSON mappings: numbers may be strings, empty
strings and None mean "not given", and keys may be camelCase
(`underlyingPrice`) or snake_case (`underlying_price`). The pydantic models
below validate such mappings; `parse_request` turns them into `Instrument`
and `MarketScenario` records and reports bad input as `ValueError` naming
the offending field.
"""

import logging
from datetime import date
from typing import Any, ClassVar, Literal, Mapping, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel, to_snake

from warrant_pricer.scenarios.model_position import resolve_reference_price
from warrant_pricer.utils.constants import DEFAULT_CURRENCY, DEFAULT_RATIO, MAX_SCENARIOS
from warrant_pricer.utils.dates import parse_date
from warrant_pricer.utils.types import (
    SUPPORTED_OPTION_TYPES,
    Instrument,
    MarketScenario,
    UnsupportedInstrumentError,
)

logger = logging.getLogger(__name__)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _reject_bool(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError(f"must be a number, got {value!r}")
    return value


def _to_date(value: Any) -> date:
    parsed = parse_date(value)
    if parsed is None:
        raise ValueError(f"not a valid date: {value!r}")
    return parsed


class _RequestModel(BaseModel):
    """Base for request models: camelCase aliases, blank values dropped."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # Extra key names accepted for a field when neither its name nor its
    # camelCase alias is present.
    synonyms: ClassVar[dict[str, tuple[str, ...]]] = {}

    @model_validator(mode="before")
    @classmethod
    def drop_blank_values(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        cleaned = {key: value for key, value in data.items() if not _is_blank(value)}
        for field, names in cls.synonyms.items():
            if field in cleaned or to_camel(field) in cleaned:
                continue
            for name in names:
                if name in cleaned:
                    cleaned[field] = cleaned.pop(name)
                    break
        return cleaned


class InstrumentIn(_RequestModel):
    synonyms: ClassVar[dict[str, tuple[str, ...]]] = {"warrant_type": ("side", "type")}

    warrant_type: Literal["call", "put"]
    strike: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    expiry: Optional[date] = None
    ratio: float = Field(DEFAULT_RATIO, gt=0, allow_inf_nan=False)
    currency: str = DEFAULT_CURRENCY
    dividend_yield: float = Field(0.0, ge=0, allow_inf_nan=False)
    isin: Optional[str] = None
    price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)

    @field_validator("warrant_type", mode="before")
    @classmethod
    def check_warrant_type(cls, value: Any) -> str:
        side = str(value).strip().lower()
        if side not in SUPPORTED_OPTION_TYPES:
            raise UnsupportedInstrumentError(
                f"{side.capitalize()} positions are not supported in this calculator"
            )
        return side

    @field_validator("strike", "ratio", "dividend_yield", "price", mode="before")
    @classmethod
    def check_number(cls, value: Any) -> Any:
        return _reject_bool(value)

    @field_validator("expiry", mode="before")
    @classmethod
    def check_expiry(cls, value: Any) -> date:
        return _to_date(value)

    @field_validator("currency")
    @classmethod
    def normalise_currency(cls, value: str) -> str:
        return value.strip().upper()

    def to_instrument(self) -> Instrument:
        return Instrument(
            warrant_type=self.warrant_type,
            strike=self.strike,
            expiry=self.expiry,
            ratio=self.ratio,
            currency=self.currency,
            dividend_yield=self.dividend_yield,
            isin=self.isin,
        )


class ScenarioIn(_RequestModel):
    synonyms: ClassVar[dict[str, tuple[str, ...]]] = {
        "rate": ("risk_free_rate", "riskFreeRate"),
    }

    underlying_price: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    rate: Optional[float] = Field(None, allow_inf_nan=False)
    volatility: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    dividend_yield: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    fx_rate: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    valuation_date: Optional[date] = None

    @field_validator(
        "underlying_price", "rate", "volatility", "dividend_yield", "fx_rate", mode="before"
    )
    @classmethod
    def check_number(cls, value: Any) -> Any:
        return _reject_bool(value)

    @field_validator("valuation_date", mode="before")
    @classmethod
    def check_valuation_date(cls, value: Any) -> date:
        return _to_date(value)

    def to_scenario(self) -> MarketScenario:
        return MarketScenario(
            underlying_price=self.underlying_price,
            rate=self.rate,
            volatility=self.volatility,
            dividend_yield=self.dividend_yield,
            fx_rate=self.fx_rate,
            valuation_date=self.valuation_date,
        )


class ScenarioRequest(_RequestModel):
    synonyms: ClassVar[dict[str, tuple[str, ...]]] = {
        "reference_price": ("referencePriceOverride", "reference_price_override"),
    }

    instrument: InstrumentIn
    scenarios: list[ScenarioIn] = Field(min_length=1, max_length=MAX_SCENARIOS)
    reference_price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    market_price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)

    @field_validator("reference_price", "market_price", mode="before")
    @classmethod
    def check_number(cls, value: Any) -> Any:
        return _reject_bool(value)


def _error_path(loc: tuple) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += ("." if path else "") + to_snake(str(part))
    return path


def _as_value_error(exc: ValidationError) -> ValueError:
    """Translate the first validation error into a ValueError naming the field."""
    errors = exc.errors()
    for error in errors:
        cause = (error.get("ctx") or {}).get("error")
        if isinstance(cause, UnsupportedInstrumentError):
            return cause

    error = errors[0]
    path = _error_path(error["loc"])
    if error["type"] == "missing":
        return ValueError(f"{path} is required")
    cause = (error.get("ctx") or {}).get("error")
    message = str(cause) if isinstance(cause, ValueError) else error["msg"]
    if not path:
        return ValueError(message)
    return ValueError(f"{path}: {message}")


def parse_instrument(data: Mapping[str, Any]) -> Instrument:
    """
    Build an Instrument from a request mapping.

    Raises:
        UnsupportedInstrumentError: If the position is not a call or put
        ValueError: If the warrant type is missing, or strike, ratio,
            dividend yield or expiry are invalid
    """
    try:
        return InstrumentIn.model_validate(data).to_instrument()
    except ValidationError as e:
        raise _as_value_error(e) from e


def parse_scenario(data: Mapping[str, Any]) -> MarketScenario:
    """
    Build a MarketScenario from a request mapping.

    Missing fields stay None; the scenario comparison reports such rows as
    empty results.
    """
    try:
        return ScenarioIn.model_validate(data).to_scenario()
    except ValidationError as e:
        raise _as_value_error(e) from e


def parse_request(
    data: Mapping[str, Any],
) -> tuple[Instrument, list[MarketScenario], Optional[float]]:
    """
    Parse a scenario comparison request.

    Expected shape::

        {
            "instrument": {"side": "call", "strike": 100, "expiry": "2026-06-18",
                           "ratio": 0.1, "currency": "EUR", "price": 1.23},
            "scenarios": [{"underlyingPrice": 100, "rate": 0.03,
                           "volatility": 0.25, "valuationDate": "2026-01-31"}],
            "referencePriceOverride": 1.5,
            "marketPrice": 1.2
        }

    Returns:
        (instrument, scenarios, reference_price)

    Raises:
        UnsupportedInstrumentError: If the position is not a call or put
        ValueError: If the instrument or scenario list is missing or invalid
    """
    try:
        request = ScenarioRequest.model_validate(data)
    except ValidationError as e:
        raise _as_value_error(e) from e

    instrument = request.instrument.to_instrument()
    scenarios = [scenario.to_scenario() for scenario in request.scenarios]
    reference_price = resolve_reference_price(
        override=request.reference_price,
        market_price=request.market_price,
        quoted_price=request.instrument.price,
    )
    logger.debug(
        "Parsed %s request with %d scenarios, reference price %s",
        instrument.warrant_type,
        len(scenarios),
        reference_price,
    )
    return instrument, scenarios, reference_price
