"""
Numerical constants and defaults for warrant valuation.

This module defines the day-count basis, output precision, curve sampling
limits and the coefficients of the normal CDF approximation. All values are
plain module-level constants; callers override behaviour through function
arguments rather than by mutating these.
"""

# Day count
DAYS_PER_YEAR = 365  # Act/365 basis for time to expiry
SECONDS_PER_DAY = 24 * 60 * 60

# Normal distribution bounds
MAX_STANDARD_DEVIATIONS = 8.0  # Beyond ±8σ, CDF is effectively 0 or 1

# Abramowitz & Stegun 26.2.17 (absolute error < 7.5e-8)
AS_P = 0.2316419
AS_A1 = 0.31938153
AS_A2 = -0.356563782
AS_A3 = 1.781477937
AS_A4 = -1.821255978
AS_A5 = 1.330274429

# Output precision
OUTPUT_DECIMALS = 6  # Prices, Greeks, break-even, premium, omega
PERCENT_DECIMALS = 4  # Relative change in percent

# Scenario comparison
MAX_SCENARIOS = 5  # Status quo + up to four alternatives
DEFAULT_SPOT_CHANGE_PCT = 5.0  # Suggested shift for a newly added scenario

# Time value curve
DEFAULT_MAX_CURVE_POINTS = 90

# Instrument defaults
DEFAULT_CURRENCY = "EUR"
DEFAULT_RATIO = 1.0
DEFAULT_FX_RATE = 1.0
