"""Calculus tool — step-by-step differentiate, integrate, limit."""

import math

from .derivatives import differentiate
from .expression import DEFAULT_ENGINE
from .integration import integrate
from .limits import evaluate_limit

OPERATIONS = {"differentiate", "integrate", "limit"}


def _parse_point(p_str):
    if p_str is None or str(p_str).strip() == "":
        return 0.0
    value = DEFAULT_ENGINE.evaluate(DEFAULT_ENGINE.parse(str(p_str)))
    if not math.isfinite(value):
        raise ValueError(f"limit point must be a finite number, got {p_str!r}")
    return value


def calculus_tool(expression: str, operation: str = "differentiate",
                  variable: str = "x", point: str = None) -> dict:
    """All-in-one step-by-step calculus tool.

    Use for calculus with worked steps. Operations: differentiate, integrate
    (pattern-based antiderivative), limit (substitution, then one L'Hôpital step).
    Expression uses calculator syntax: x^2, 3*x, sin(x), e^x, ln(x).
    """
    try:
        if operation == "differentiate":
            trail = differentiate(expression, variable, DEFAULT_ENGINE)
            return _out(expression, trail, f"d/d{variable}")

        elif operation == "integrate":
            trail = integrate(expression, variable, DEFAULT_ENGINE)
            return _out(expression, trail, "indefinite integral")

        elif operation == "limit":
            pt = _parse_point(point)
            trail = evaluate_limit(expression, variable, pt, DEFAULT_ENGINE)
            return _out(expression, trail, f"limit {variable}->{point or '0'}")

        else:
            return {"error": f"Unknown operation '{operation}'. Use: {', '.join(sorted(OPERATIONS))}"}

    except Exception as e:
        return {"error": str(e), "expression": expression, "operation": operation}


def _out(expr, trail, label):
    return {"input": expr, "operation": label, **trail.to_dict()}
