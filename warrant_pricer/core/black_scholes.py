"""
Black-Scholes option pricing model with continuous dividend yield.

This module implements the Black-Scholes-Merton formula for European
options together with its analytic Greeks. The pricer and the Greeks share
a single d1/d2 computation so that prices and sensitivities are always
derived from bit-identical intermediate values.

The functions here sit below the validation boundary: degenerate inputs
(non-finite or non-positive spot/strike, no time left, no volatility) are
floored to a deterministic value instead of raising.

References:
    Black, F., & Scholes, M. (1973). The Pricing of Options and Corporate Liabilities.
    Journal of Political Economy, 81(3), 637-654.
"""

import math
from dataclasses import dataclass

from warrant_pricer.core.distributions import normal_cdf, normal_pdf
from warrant_pricer.utils.types import ZERO_GREEKS, Greeks, OptionType, SUPPORTED_OPTION_TYPES


@dataclass(frozen=True)
class _BlackScholesTerms:
    d1: float
    d2: float
    pdf_d1: float
    discount_q: float
    discount_r: float
    sqrt_t: float


def _check_option_type(option_type: str) -> None:
    if option_type not in SUPPORTED_OPTION_TYPES:
        raise ValueError(f"option_type must be 'call' or 'put', got '{option_type}'")


def _has_valid_terms(S: float, K: float, T: float) -> bool:
    """Spot, strike and time must be finite and spot/strike positive."""
    if not (math.isfinite(S) and math.isfinite(K) and math.isfinite(T)):
        return False
    return S > 0 and K > 0


def _bs_terms(S: float, K: float, T: float, r: float, sigma: float, q: float) -> _BlackScholesTerms:
    """
    Shared intermediate values for price and Greeks.

    Requires S, K, T, sigma > 0; callers handle the degenerate branches.

    Formula:
        d1 = [ln(S/K) + (r - q + σ²/2)T] / (σ√T)
        d2 = d1 - σ√T
    """
    sqrt_t = math.sqrt(T)
    diffusion = sigma * sqrt_t
    d1_value = (math.log(S / K) + (r - q + 0.5 * sigma * sigma) * T) / diffusion
    return _BlackScholesTerms(
        d1=d1_value,
        d2=d1_value - diffusion,
        pdf_d1=normal_pdf(d1_value),
        discount_q=math.exp(-q * T),
        discount_r=math.exp(-r * T),
        sqrt_t=sqrt_t,
    )


def d1(S: float, K: float, T: float, r: float, sigma: float, q: float = 0.0) -> float:
    """d1 parameter of the Black-Scholes formula (requires S, K, T, sigma > 0)."""
    return _bs_terms(S, K, T, r, sigma, q).d1


def d2(S: float, K: float, T: float, r: float, sigma: float, q: float = 0.0) -> float:
    """d2 = d1 - σ√T (requires S, K, T, sigma > 0)."""
    return _bs_terms(S, K, T, r, sigma, q).d2


def discounted_intrinsic(
    S: float, K: float, T: float, r: float, q: float = 0.0, option_type: OptionType = "call"
) -> float:
    """
    Intrinsic value of the discounted forward position.

    This is the limit of the Black-Scholes price as T → 0 or σ → 0:
        call: max(S·e^(-qT) - K·e^(-rT), 0)
        put:  max(K·e^(-rT) - S·e^(-qT), 0)

    Negative T is treated as zero.
    """
    t = max(T, 0.0)
    forward = S * math.exp(-q * t)
    discounted_strike = K * math.exp(-r * t)
    if option_type == "call":
        return max(forward - discounted_strike, 0.0)
    return max(discounted_strike - forward, 0.0)


def black_scholes_price(
    S: float,
    K: float,
    T: float,
    r: float,
    sigma: float,
    q: float = 0.0,
    option_type: OptionType = "call",
) -> float:
    """
    Calculate European option price (call or put).

    Args:
        S: Current spot price
        K: Strike price
        T: Time to expiration in years
        r: Risk-free interest rate (annualized, continuous), may be negative
        sigma: Volatility (annualized standard deviation)
        q: Continuous dividend yield (annualized), default 0.0
        option_type: "call" or "put"

    Returns:
        Option price, never negative

    Raises:
        ValueError: If option_type is not "call" or "put"

    Formulas:
        C = S·e^(-qT)·N(d1) - K·e^(-rT)·N(d2)
        P = K·e^(-rT)·N(-d2) - S·e^(-qT)·N(-d1)

    Edge Cases:
        - S, K or T non-finite, S ≤ 0 or K ≤ 0: returns 0
        - T ≤ 0 or σ ≤ 0: returns the discounted intrinsic value

    Examples:
        >>> price = black_scholes_price(100, 100, 182 / 365, 0.05, 0.20)
        >>> abs(price - 6.8776) < 1e-3
        True
    """
    _check_option_type(option_type)

    if not _has_valid_terms(S, K, T):
        return 0.0

    if T <= 0 or sigma <= 0:
        return discounted_intrinsic(S, K, T, r, q, option_type)

    terms = _bs_terms(S, K, T, r, sigma, q)
    discount_spot = S * terms.discount_q
    discount_strike = K * terms.discount_r

    if option_type == "call":
        price = discount_spot * normal_cdf(terms.d1) - discount_strike * normal_cdf(terms.d2)
    else:
        price = discount_strike * normal_cdf(-terms.d2) - discount_spot * normal_cdf(-terms.d1)

    # The CDF approximation can leave a tiny negative residue deep out of the money
    return max(price, 0.0)


def black_scholes_call(
    S: float, K: float, T: float, r: float, sigma: float, q: float = 0.0
) -> float:
    """European call price, see `black_scholes_price`."""
    return black_scholes_price(S, K, T, r, sigma, q, "call")


def black_scholes_put(
    S: float, K: float, T: float, r: float, sigma: float, q: float = 0.0
) -> float:
    """European put price, see `black_scholes_price`."""
    return black_scholes_price(S, K, T, r, sigma, q, "put")


# ===========================
# Greeks Calculations
# ===========================


def calculate_greeks(
    S: float,
    K: float,
    T: float,
    r: float,
    sigma: float,
    q: float = 0.0,
    option_type: OptionType = "call",
) -> Greeks:
    """
    Calculate delta, gamma, theta and vega in one pass.

    Args:
        S, K, T, r, sigma, q: Standard Black-Scholes parameters
        option_type: "call" or "put"

    Returns:
        Greeks; all zero for degenerate inputs (see `black_scholes_price`)
        since an expired or riskless option has no sensitivity

    Formulas:
        Delta: e^(-qT)·N(d1) (call), e^(-qT)·(N(d1) - 1) (put)
        Gamma: e^(-qT)·φ(d1) / (S·σ·√T)
        Vega:  S·e^(-qT)·φ(d1)·√T
        Theta (call):
            -S·e^(-qT)·φ(d1)·σ/(2√T) - r·K·e^(-rT)·N(d2) + q·S·e^(-qT)·N(d1)
        Theta (put):
            -S·e^(-qT)·φ(d1)·σ/(2√T) + r·K·e^(-rT)·N(-d2) - q·S·e^(-qT)·N(-d1)

    Notes:
        Theta is annualised; divide by 365 for the daily decay. Vega is per
        unit of volatility (1.0 = 100 vol points).
    """
    _check_option_type(option_type)

    if not _has_valid_terms(S, K, T) or T <= 0 or sigma <= 0:
        return ZERO_GREEKS

    terms = _bs_terms(S, K, T, r, sigma, q)
    cdf_d1 = normal_cdf(terms.d1)

    gamma_value = (terms.discount_q * terms.pdf_d1) / (S * sigma * terms.sqrt_t)
    vega_value = S * terms.discount_q * terms.pdf_d1 * terms.sqrt_t
    theta_base = -(S * terms.discount_q * terms.pdf_d1 * sigma) / (2.0 * terms.sqrt_t)

    if option_type == "call":
        delta_value = terms.discount_q * cdf_d1
        theta_value = (
            theta_base
            - r * K * terms.discount_r * normal_cdf(terms.d2)
            + q * S * terms.discount_q * cdf_d1
        )
    else:
        delta_value = terms.discount_q * (cdf_d1 - 1.0)
        theta_value = (
            theta_base
            + r * K * terms.discount_r * normal_cdf(-terms.d2)
            - q * S * terms.discount_q * normal_cdf(-terms.d1)
        )

    return Greeks(
        delta=delta_value,
        gamma=gamma_value,
        theta=theta_value,
        vega=vega_value,
    )


def rho(
    S: float,
    K: float,
    T: float,
    r: float,
    sigma: float,
    q: float = 0.0,
    option_type: OptionType = "call",
) -> float:
    """
    Calculate option rho (∂V/∂r), per unit change in the rate.

    Formulas:
        Call rho: ρ_c = K·T·e^(-rT)·N(d2)
        Put rho:  ρ_p = -K·T·e^(-rT)·N(-d2)

    Zero under the same degenerate-input floor as `calculate_greeks`.
    """
    _check_option_type(option_type)

    if not _has_valid_terms(S, K, T) or T <= 0 or sigma <= 0:
        return 0.0

    terms = _bs_terms(S, K, T, r, sigma, q)
    discount_strike = K * T * terms.discount_r

    if option_type == "call":
        return discount_strike * normal_cdf(terms.d2)
    return -discount_strike * normal_cdf(-terms.d2)
