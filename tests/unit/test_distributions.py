"""Unit tests for the normal distribution primitives."""

import math

import numpy as np
import pytest
from scipy.stats import norm

from warrant_pricer.core.distributions import normal_cdf, normal_pdf


def test_pdf_peak():
    """φ(0) = 1/√(2π)."""
    assert abs(normal_pdf(0.0) - 1.0 / math.sqrt(2.0 * math.pi)) < 1e-15


def test_pdf_is_even():
    for x in (0.3, 1.0, 2.5, 7.0):
        assert normal_pdf(x) == normal_pdf(-x)


@pytest.mark.parametrize("x", np.linspace(-6.0, 6.0, 121))
def test_cdf_matches_reference(x):
    """Abramowitz-Stegun approximation is accurate to ~1e-7."""
    assert abs(normal_cdf(x) - norm.cdf(x)) < 1e-7


@pytest.mark.parametrize("x", [0.0, 1e-12, 0.25, 1.0, 1.96, 3.5, 7.99, 8.5, 40.0])
def test_cdf_symmetry(x):
    """N(x) + N(-x) = 1."""
    assert abs(normal_cdf(x) + normal_cdf(-x) - 1.0) < 1e-9


def test_cdf_tails_pinned():
    assert normal_cdf(10.0) == 1.0
    assert normal_cdf(-10.0) == 0.0
    assert normal_cdf(math.inf) == 1.0
    assert normal_cdf(-math.inf) == 0.0


def test_cdf_monotone():
    xs = np.linspace(-8.0, 8.0, 401)
    values = [normal_cdf(x) for x in xs]
    assert all(b >= a for a, b in zip(values, values[1:]))


def test_cdf_known_quantile():
    assert abs(normal_cdf(1.96) - 0.975) < 1e-4
