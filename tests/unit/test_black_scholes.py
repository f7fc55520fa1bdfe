"""
Unit tests for Black-Scholes pricing and Greeks calculations.

This module validates:
1. Known analytical solutions
2. Put-call parity relationship
3. Degenerate inputs (T ≤ 0, σ ≤ 0, invalid spot/strike)
4. Greeks accuracy via finite-difference comparison
5. Monotonicity properties
"""

import math

import numpy as np
import pytest

from warrant_pricer.core.black_scholes import (
    black_scholes_call,
    black_scholes_price,
    black_scholes_put,
    calculate_greeks,
    d1,
    d2,
    discounted_intrinsic,
    rho,
)
from warrant_pricer.utils.types import ZERO_GREEKS


# ===========================
# Known Solutions Tests
# ===========================


def test_atm_call_golden_value(standard_params):
    """S=100, K=100, T=182/365, r=5%, σ=20% → Call ≈ 6.8776."""
    price = black_scholes_call(**standard_params)
    assert abs(price - 6.8776) < 1e-3, f"Expected ~6.8776, got {price}"


def test_one_year_atm_call():
    """Hull: S=100, K=100, T=1, r=5%, σ=20% → Call ≈ 10.4506."""
    price = black_scholes_call(100.0, 100.0, 1.0, 0.05, 0.20)
    assert abs(price - 10.4506) < 1e-3


def test_one_year_atm_put():
    price = black_scholes_put(100.0, 100.0, 1.0, 0.05, 0.20)
    assert abs(price - 5.5735) < 1e-3


def test_black_scholes_price_dispatch(standard_params):
    assert black_scholes_price(**standard_params, option_type="call") == black_scholes_call(
        **standard_params
    )
    assert black_scholes_price(**standard_params, option_type="put") == black_scholes_put(
        **standard_params
    )


def test_black_scholes_price_invalid_type(standard_params):
    with pytest.raises(ValueError):
        black_scholes_price(**standard_params, option_type="straddle")


# ===========================
# Put-Call Parity Tests
# ===========================


@pytest.mark.parametrize(
    "S,K,T,r,sigma,q",
    [
        (100, 100, 1.0, 0.05, 0.20, 0.0),  # ATM
        (110, 100, 1.0, 0.05, 0.20, 0.0),  # ITM call
        (90, 100, 1.0, 0.05, 0.20, 0.0),  # OTM call
        (100, 100, 0.25, -0.01, 0.30, 0.0),  # Negative rate
        (100, 100, 2.0, 0.03, 0.15, 0.01),  # Long expiry with dividend
    ],
)
def test_put_call_parity(S, K, T, r, sigma, q):
    """C - P = S·e^(-qT) - K·e^(-rT), up to the CDF approximation error."""
    lhs = black_scholes_call(S, K, T, r, sigma, q) - black_scholes_put(S, K, T, r, sigma, q)
    rhs = S * math.exp(-q * T) - K * math.exp(-r * T)
    assert abs(lhs - rhs) < 1e-4


# ===========================
# Degenerate Inputs
# ===========================


@pytest.mark.parametrize("option_type", ["call", "put"])
@pytest.mark.parametrize("S", [80.0, 100.0, 120.0])
def test_price_at_expiry_is_intrinsic(S, option_type):
    """T = 0 → price equals intrinsic value exactly."""
    K = 100.0
    expected = max(S - K, 0.0) if option_type == "call" else max(K - S, 0.0)
    assert black_scholes_price(S, K, 0.0, 0.05, 0.2, 0.0, option_type) == expected


def test_negative_time_treated_as_expired():
    assert black_scholes_call(120.0, 100.0, -0.5, 0.05, 0.2) == 20.0
    assert black_scholes_put(120.0, 100.0, -0.5, 0.05, 0.2) == 0.0


def test_zero_volatility_uses_discounted_forward():
    S, K, T, r, q = 110.0, 100.0, 1.0, 0.05, 0.01
    expected = S * math.exp(-q * T) - K * math.exp(-r * T)
    assert black_scholes_call(S, K, T, r, 0.0, q) == pytest.approx(expected, abs=1e-12)
    assert black_scholes_put(S, K, T, r, 0.0, q) == 0.0


@pytest.mark.parametrize("option_type", ["call", "put"])
@pytest.mark.parametrize("K", [90.0, 100.0, 110.0])
def test_small_volatility_converges_to_floor(K, option_type):
    """σ → 0⁺ converges to the discounted intrinsic value."""
    S, T, r, q = 100.0, 0.5, 0.05, 0.01
    floor = discounted_intrinsic(S, K, T, r, q, option_type)
    price = black_scholes_price(S, K, T, r, 1e-6, q, option_type)
    assert abs(price - floor) < 1e-6


@pytest.mark.parametrize(
    "S,K,T",
    [
        (0.0, 100.0, 1.0),
        (-5.0, 100.0, 1.0),
        (100.0, 0.0, 1.0),
        (100.0, -1.0, 1.0),
        (math.nan, 100.0, 1.0),
        (100.0, math.inf, 1.0),
        (100.0, 100.0, math.nan),
    ],
)
def test_invalid_terms_floor_to_zero(S, K, T):
    assert black_scholes_call(S, K, T, 0.05, 0.2) == 0.0
    assert black_scholes_put(S, K, T, 0.05, 0.2) == 0.0
    assert calculate_greeks(S, K, T, 0.05, 0.2) == ZERO_GREEKS


def test_price_never_negative():
    assert black_scholes_call(10.0, 1000.0, 0.1, 0.05, 0.1) >= 0.0
    assert black_scholes_put(1000.0, 10.0, 0.1, 0.05, 0.1) >= 0.0


# ===========================
# d1 and d2 Tests
# ===========================


def test_d1_d2_relationship(standard_params):
    p = standard_params
    expected_d2 = d1(p["S"], p["K"], p["T"], p["r"], p["sigma"]) - p["sigma"] * math.sqrt(p["T"])
    assert abs(d2(p["S"], p["K"], p["T"], p["r"], p["sigma"]) - expected_d2) < 1e-12


def test_d1_sign_follows_moneyness():
    assert d1(120, 100, 1.0, 0.05, 0.20) > 0
    assert d1(80, 100, 1.0, 0.05, 0.20) < 0


# ===========================
# Greeks Tests
# ===========================


def test_greeks_at_expiry_are_zero():
    assert calculate_greeks(120.0, 100.0, 0.0, 0.05, 0.2, 0.0, "call") == ZERO_GREEKS
    assert calculate_greeks(80.0, 100.0, 0.0, 0.05, 0.2, 0.0, "put") == ZERO_GREEKS


def test_greeks_zero_volatility_are_zero():
    assert calculate_greeks(100.0, 100.0, 1.0, 0.05, 0.0) == ZERO_GREEKS


def test_delta_ranges(standard_params):
    call = calculate_greeks(**standard_params, option_type="call")
    put = calculate_greeks(**standard_params, option_type="put")
    assert 0.0 <= call.delta <= 1.0
    assert -1.0 <= put.delta <= 0.0


def test_call_put_delta_gap(with_dividend_params):
    """Δ_call - Δ_put = e^(-qT)."""
    p = with_dividend_params
    call = calculate_greeks(**p, option_type="call")
    put = calculate_greeks(**p, option_type="put")
    assert abs(call.delta - put.delta - math.exp(-p["q"] * p["T"])) < 1e-12


def test_gamma_vega_shared(with_dividend_params):
    call = calculate_greeks(**with_dividend_params, option_type="call")
    put = calculate_greeks(**with_dividend_params, option_type="put")
    assert call.gamma == put.gamma
    assert call.vega == put.vega
    assert call.gamma > 0
    assert call.vega > 0


def test_call_theta_negative(standard_params):
    assert calculate_greeks(**standard_params, option_type="call").theta < 0.0


def _bump(params, name, h):
    up = {**params, name: params[name] + h}
    down = {**params, name: params[name] - h}
    return up, down


@pytest.mark.parametrize("option_type", ["call", "put"])
def test_delta_finite_difference(with_dividend_params, option_type):
    h = 0.01
    up, down = _bump(with_dividend_params, "S", h)
    numerical = (
        black_scholes_price(**up, option_type=option_type)
        - black_scholes_price(**down, option_type=option_type)
    ) / (2 * h)
    analytical = calculate_greeks(**with_dividend_params, option_type=option_type).delta
    assert abs(analytical - numerical) < 1e-4


def test_gamma_finite_difference(with_dividend_params):
    h = 0.5
    up, down = _bump(with_dividend_params, "S", h)
    numerical = (
        black_scholes_call(**up)
        - 2 * black_scholes_call(**with_dividend_params)
        + black_scholes_call(**down)
    ) / (h * h)
    assert abs(calculate_greeks(**with_dividend_params).gamma - numerical) < 1e-3


def test_vega_finite_difference(with_dividend_params):
    h = 0.001
    up, down = _bump(with_dividend_params, "sigma", h)
    numerical = (black_scholes_call(**up) - black_scholes_call(**down)) / (2 * h)
    assert abs(calculate_greeks(**with_dividend_params).vega - numerical) < 1e-2


@pytest.mark.parametrize("option_type", ["call", "put"])
def test_theta_finite_difference(with_dividend_params, option_type):
    """Annualised theta = -∂V/∂T."""
    h = 1.0 / 365.0
    up, down = _bump(with_dividend_params, "T", h)
    numerical = -(
        black_scholes_price(**up, option_type=option_type)
        - black_scholes_price(**down, option_type=option_type)
    ) / (2 * h)
    analytical = calculate_greeks(**with_dividend_params, option_type=option_type).theta
    assert abs(analytical - numerical) < 1e-2


@pytest.mark.parametrize("option_type", ["call", "put"])
def test_rho_finite_difference(with_dividend_params, option_type):
    h = 0.0001
    up, down = _bump(with_dividend_params, "r", h)
    numerical = (
        black_scholes_price(**up, option_type=option_type)
        - black_scholes_price(**down, option_type=option_type)
    ) / (2 * h)
    analytical = rho(**with_dividend_params, option_type=option_type)
    assert abs(analytical - numerical) < 1e-2


def test_rho_signs(standard_params):
    assert rho(**standard_params, option_type="call") > 0
    assert rho(**standard_params, option_type="put") < 0
    assert rho(100.0, 100.0, 0.0, 0.05, 0.2) == 0.0


# ===========================
# Monotonicity Tests
# ===========================


def test_call_non_decreasing_in_spot():
    prices = [black_scholes_call(s, 100.0, 0.5, 0.03, 0.25, 0.01) for s in np.linspace(50, 150, 101)]
    assert all(b >= a for a, b in zip(prices, prices[1:]))


def test_put_non_increasing_in_spot():
    prices = [black_scholes_put(s, 100.0, 0.5, 0.03, 0.25, 0.01) for s in np.linspace(50, 150, 101)]
    assert all(b <= a for a, b in zip(prices, prices[1:]))


def test_call_price_increases_with_volatility():
    assert black_scholes_call(100, 100, 1.0, 0.05, 0.25) > black_scholes_call(100, 100, 1.0, 0.05, 0.20)
