"""Limit evaluator — direct substitution with one L'Hôpital fallback."""

import logging
import math

from ..core import DEFAULT_VARIABLE, LIMIT_SENTINEL, format_number
from .expression import DEFAULT_ENGINE, ExpressionError
from .terms import has_top_level
from .trail import TrailBuilder

logger = logging.getLogger(__name__)

_FURTHER = "Further application of L'Hôpital's rule or other techniques required"


def evaluate_limit(expression: str, variable: str = DEFAULT_VARIABLE, point: float = 0.0,
                   engine=None):
    """lim(variable → point) of expression.

    Substitution first; an indeterminate value on a quotient gets exactly one
    pass of L'Hôpital's rule on the text split at the first "/". Every other
    outcome ends on LIMIT_SENTINEL.
    """
    engine = engine or DEFAULT_ENGINE
    expr = engine.parse(expression)
    at = format_number(point)

    trail = TrailBuilder()
    trail.append(f"Start with the limit expression: lim({variable}→{at}) {expression}")
    trail.append(f"To evaluate the limit, we'll substitute {variable} = {at} "
                 "into the expression if possible")

    value = engine.evaluate(expr, {variable: point})
    if math.isfinite(value):
        trail.append(f"Substitute {variable} = {at} into the expression\n"
                     f"{expression} = {format_number(value)}")
        return trail.finish(format_number(value))

    if not has_top_level(expression, "/"):
        trail.append("Direct substitution leads to an indeterminate form. "
                     "Advanced techniques required.")
        return trail.finish(LIMIT_SENTINEL)

    trail.append("Direct substitution leads to an indeterminate form (like 0/0 or ∞/∞).")
    trail.append("Apply L'Hôpital's rule: If lim f(x)/g(x) gives 0/0 or ∞/∞, "
                 "then it equals lim f'(x)/g'(x)")

    numerator, _, denominator = expression.partition("/")
    try:
        num_d = engine.differentiate(engine.parse(numerator.strip()), variable)
        den_d = engine.differentiate(engine.parse(denominator.strip()), variable)
    except ExpressionError as e:
        logger.debug("L'Hôpital split of %r failed: %s", expression, e)
        trail.append("Advanced techniques required to evaluate this limit")
        return trail.finish(LIMIT_SENTINEL)

    num_text = engine.to_string(num_d)
    den_text = engine.to_string(den_d)
    trail.append("Find derivatives of numerator and denominator:\n"
                 f"   Numerator derivative: {num_text}\n"
                 f"   Denominator derivative: {den_text}")

    try:
        ratio = engine.evaluate(engine.parse(f"({num_text})/({den_text})"), {variable: point})
    except ExpressionError as e:
        logger.debug("derivative ratio for %r failed: %s", expression, e)
        ratio = math.nan

    if not math.isfinite(ratio):
        trail.append(_FURTHER)
        return trail.finish(LIMIT_SENTINEL)

    trail.append(f"Evaluate the limit of the derivatives at {variable} = {at}\n"
                 f"   Result: {format_number(ratio)}")
    return trail.finish(format_number(ratio))
