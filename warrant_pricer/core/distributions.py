"""
Standard normal distribution functions.

This module provides the standard normal probability density function
(PDF) and a closed-form approximation of the cumulative distribution
function (CDF). The CDF uses the Abramowitz & Stegun polynomial, which is
cheap, dependency-free and accurate to about 1e-7, well inside the
precision at which warrant prices are reported.
"""

import math

from warrant_pricer.utils.constants import (
    AS_A1,
    AS_A2,
    AS_A3,
    AS_A4,
    AS_A5,
    AS_P,
    MAX_STANDARD_DEVIATIONS,
)

INV_SQRT_TWO_PI = 1.0 / math.sqrt(2.0 * math.pi)


def normal_pdf(x: float) -> float:
    """
    Standard normal probability density function.

    Args:
        x: Value at which to evaluate the PDF

    Returns:
        φ(x) = (1/√(2π)) * exp(-x²/2)

    Examples:
        >>> abs(normal_pdf(0.0) - 0.3989) < 0.001  # Peak at zero
        True
        >>> normal_pdf(3.0) < 0.01  # Small in tails
        True
    """
    return INV_SQRT_TWO_PI * math.exp(-0.5 * x * x)


def normal_cdf(x: float) -> float:
    """
    Standard normal cumulative distribution function.

    Abramowitz & Stegun formula 26.2.17, evaluated on |x| and reflected for
    negative arguments so that N(-x) = 1 - N(x) holds by construction.
    Beyond ±8 standard deviations the result is pinned to exactly 0 or 1.

    Args:
        x: Value at which to evaluate the CDF

    Returns:
        Probability that a standard normal random variable is less than x

    Examples:
        >>> abs(normal_cdf(0.0) - 0.5) < 1e-8
        True
        >>> abs(normal_cdf(1.96) - 0.975) < 1e-4
        True
        >>> normal_cdf(10.0)
        1.0
    """
    abs_x = abs(x)

    if abs_x > MAX_STANDARD_DEVIATIONS:
        upper = 1.0
    else:
        t = 1.0 / (1.0 + AS_P * abs_x)
        poly = (((AS_A5 * t + AS_A4) * t + AS_A3) * t + AS_A2) * t + AS_A1
        upper = 1.0 - normal_pdf(abs_x) * poly * t

    return upper if x >= 0 else 1.0 - upper
