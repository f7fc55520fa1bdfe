"""
Pytest configuration and shared fixtures.
"""

from datetime import date

import pytest

from warrant_pricer.utils.types import Instrument, MarketScenario


@pytest.fixture
def standard_params():
    """At-the-money parameters with 182 days to expiry."""
    return {
        "S": 100.0,
        "K": 100.0,
        "T": 182 / 365,
        "r": 0.05,
        "sigma": 0.20,
        "q": 0.0,
    }


@pytest.fixture
def with_dividend_params():
    """Parameters with non-zero dividend yield."""
    return {
        "S": 100.0,
        "K": 100.0,
        "T": 1.0,
        "r": 0.05,
        "sigma": 0.20,
        "q": 0.02,
    }


@pytest.fixture
def call_instrument():
    """ATM call warrant, ratio 1, expiring 182 days after 2026-01-01."""
    return Instrument(
        warrant_type="call",
        strike=100.0,
        expiry=date(2026, 7, 2),
        ratio=1.0,
        currency="EUR",
    )


@pytest.fixture
def put_instrument():
    """Put warrant on a stock trading around 146, ratio 0.1."""
    return Instrument(
        warrant_type="put",
        strike=125.0,
        expiry=date(2026, 6, 18),
        ratio=0.1,
        currency="EUR",
    )


@pytest.fixture
def base_scenario():
    """Status quo market inputs matching `call_instrument`."""
    return MarketScenario(
        underlying_price=100.0,
        rate=0.05,
        volatility=0.20,
        dividend_yield=0.0,
        fx_rate=1.0,
        valuation_date=date(2026, 1, 1),
    )
