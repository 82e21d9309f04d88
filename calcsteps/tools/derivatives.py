"""Derivative narrator — f'(x) with the rules that apply, then simplified."""

import logging

from ..core import DEFAULT_VARIABLE
from .expression import DEFAULT_ENGINE
from .trail import TrailBuilder

logger = logging.getLogger(__name__)


def rule_hints(expression: str) -> list:
    hints = []
    if "^" in expression:
        hints.append("For terms with powers (x^n), use the power rule: d/dx(x^n) = n·x^(n-1)")
    if "sin" in expression or "cos" in expression:
        hints.append("For trigonometric functions, use: d/dx(sin(x)) = cos(x) "
                     "and d/dx(cos(x)) = -sin(x)")
    if "e^" in expression:
        hints.append("For exponential functions, use: d/dx(e^x) = e^x")
    if "ln" in expression or "log" in expression:
        hints.append("For logarithmic functions, use: d/dx(ln(x)) = 1/x "
                     "and d/dx(log(x)) = 1/(x·ln(10))")
    return hints


def differentiate(expression: str, variable: str = DEFAULT_VARIABLE, engine=None):
    """Derivative of expression with respect to variable.

    A parse or differentiation failure raises before the trail is returned;
    a failed simplification just keeps the raw derivative.
    """
    engine = engine or DEFAULT_ENGINE
    expr = engine.parse(expression)

    trail = TrailBuilder()
    trail.append(f"Start with the expression f({variable}) = {expression}")
    trail.append("\n- ".join(["Apply the derivative rules"] + rule_hints(expression)))

    derivative = engine.differentiate(expr, variable)
    raw = engine.to_string(derivative)
    trail.append(f"Calculate the derivative\nf'({variable}) = {raw}")

    try:
        simplified = engine.to_string(engine.simplify(derivative))
    except Exception as e:
        logger.debug("simplify(%s) failed, keeping raw derivative: %s", raw, e)
        return trail.finish(raw)

    if simplified != raw:
        trail.append(f"Simplify the result\nf'({variable}) = {simplified}")
    return trail.finish(simplified)
