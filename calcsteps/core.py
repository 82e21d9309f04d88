"""Shared core — constants, sentinel results, and number formatting."""

import math
import os

import sympy

DEFAULT_VARIABLE = "x"
LOG_LEVEL = os.environ.get("CALCSTEPS_LOG_LEVEL", "INFO")

# Key point detection
KEYPOINT_TOLERANCE = 0.1
SAMPLE_DECIMALS = 12
MAX_SAMPLES = 1_000_000

# Graph defaults
DEFAULT_X_MIN = -10.0
DEFAULT_X_MAX = 10.0
DEFAULT_WIDTH = 600
KEYPOINT_STEP_FACTOR = 5
TANGENT_HALF_WIDTH = 5.0
AREA_SLICES = 100

# Sentinel results
INTEGRAL_SENTINEL = "requires advanced techniques"
LIMIT_SENTINEL = "requires advanced limit techniques"
EQUATION_SENTINEL = "equation requires manual algebraic manipulation"
SYSTEM_SENTINEL = "system requires manual algebraic manipulation"
COMPLEX_SYSTEM_SENTINEL = "complex system requires advanced techniques"

SENTINELS = frozenset({
    INTEGRAL_SENTINEL, LIMIT_SENTINEL, EQUATION_SENTINEL,
    SYSTEM_SENTINEL, COMPLEX_SYSTEM_SENTINEL,
})


def format_number(value):
    """Render a float the way it reads on screen: 5 not 5.0, 7.5 stays 7.5."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_rational(value):
    """Render an exact coefficient: 1/3, -5/2, 4."""
    return str(sympy.Rational(value))


def to_float(value):
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
