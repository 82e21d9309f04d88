"""Expression engine — the parse / evaluate / differentiate / simplify seam.

Every derivation routine talks to an ExpressionEngine instead of SymPy
directly, so a test can hand in a stub that only knows the handful of forms
it exercises. SympyEngine is the implementation used everywhere else.
"""

import logging
import math
from abc import ABC, abstractmethod

import sympy

from .preprocess import to_sympy, to_text

logger = logging.getLogger(__name__)


class ExpressionError(Exception):
    """The expression engine could not perform a primitive."""


class InvalidExpression(ExpressionError):
    """Input text is not a valid expression."""

    def __init__(self, text, reason=None):
        self.text = text
        self.reason = reason
        msg = f"Invalid expression: {text!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class ExpressionEngine(ABC):
    """Capability set the derivation engine relies on."""

    @abstractmethod
    def parse(self, text):
        """Return an immutable expression handle, or raise InvalidExpression."""

    @abstractmethod
    def evaluate(self, expr, bindings=None) -> float:
        """Numeric value of expr under bindings; math.nan when undefined."""

    @abstractmethod
    def differentiate(self, expr, variable):
        """Derivative of expr; raises ExpressionError on failure."""

    @abstractmethod
    def simplify(self, expr):
        pass

    @abstractmethod
    def to_string(self, expr) -> str:
        pass

    def is_valid(self, text) -> bool:
        try:
            self.parse(text)
        except InvalidExpression:
            return False
        return True


class SympyEngine(ExpressionEngine):
    """SymPy-backed engine."""

    def parse(self, text):
        if not isinstance(text, str):
            raise InvalidExpression(text, "expected text")
        try:
            expr = to_sympy(text)
        except Exception as e:
            raise InvalidExpression(text, str(e) or type(e).__name__) from e
        if not isinstance(expr, sympy.Expr):
            raise InvalidExpression(text, "not a scalar expression")
        return expr

    def evaluate(self, expr, bindings=None) -> float:
        subs = {sympy.Symbol(name): value for name, value in (bindings or {}).items()}
        try:
            value = expr.subs(subs) if subs else expr
            value = value.evalf()
        except (ArithmeticError, TypeError, ValueError) as e:
            logger.debug("evaluation of %s at %s failed: %s", expr, bindings, e)
            return math.nan
        return _as_real(value)

    def differentiate(self, expr, variable):
        try:
            return sympy.diff(expr, sympy.Symbol(variable))
        except Exception as e:
            raise ExpressionError(f"Cannot differentiate {expr} with respect to {variable}: {e}") from e

    def simplify(self, expr):
        return sympy.simplify(expr)

    def to_string(self, expr) -> str:
        return to_text(expr)


def _as_real(value):
    """Collapse a SymPy number to a float; NaN for complex or symbolic leftovers."""
    if value is sympy.nan:
        return math.nan
    if value is sympy.zoo:
        return math.inf
    try:
        number = complex(value)
    except (TypeError, ValueError):
        return math.nan
    if number.imag and abs(number.imag) > 1e-12:
        return math.nan
    return number.real


DEFAULT_ENGINE = SympyEngine()
