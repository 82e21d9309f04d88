"""Unit tests for the expression engine seam, the trail recorder and the
derivative narrator.

Run:  python -m tests.test_engine
"""

import math
import sys
if sys.stdout.encoding and sys.stdout.encoding.lower() != "utf-8":
    import io
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")

import pytest

from calcsteps.core import format_number, format_rational
from calcsteps.tools.derivatives import differentiate
from calcsteps.tools.expression import (
    ExpressionEngine,
    ExpressionError,
    InvalidExpression,
    SympyEngine,
)
from calcsteps.tools.integration import integrate
from calcsteps.tools.limits import evaluate_limit
from calcsteps.tools.trail import DerivationStep, TrailBuilder

TOTAL = 0
PASSED = 0


def check(label, actual, expected):
    global TOTAL, PASSED
    TOTAL += 1
    ok = actual == expected
    PASSED += ok
    print(f"  {'[PASS]' if ok else '[FAIL]'}  {label}")
    if not ok:
        print(f"         Expected {expected!r}")
        print(f"         Got      {actual!r}")
    assert ok, label


class StubEngine(ExpressionEngine):
    """Knows only the forms the tests below feed it."""

    FORMS = {
        "x": lambda x: x,
        "x^2": lambda x: x * x,
        "1": lambda x: 1.0,
        "sin(x)": math.sin,
        "cos(x)": math.cos,
        "sin(x)/x": lambda x: math.sin(x) / x,
        "(cos(x))/(1)": lambda x: math.cos(x) / 1,
    }
    DERIVATIVES = {"sin(x)": "cos(x)", "x": "1"}

    def parse(self, text):
        text = text.strip()
        if text not in self.FORMS:
            raise InvalidExpression(text, "unknown to stub")
        return text

    def evaluate(self, expr, bindings=None):
        try:
            return float(self.FORMS[expr](bindings["x"]))
        except (ZeroDivisionError, ValueError, KeyError):
            return math.nan

    def differentiate(self, expr, variable):
        try:
            return self.DERIVATIVES[expr]
        except KeyError:
            raise ExpressionError(f"stub cannot differentiate {expr}")

    def simplify(self, expr):
        return expr

    def to_string(self, expr):
        return expr


# ── SympyEngine ────────────────────────────────────────

def test_sympy_engine():
    print("\n--- SympyEngine ------------------------------------------")
    engine = SympyEngine()
    check("x^2 at 3",          engine.evaluate(engine.parse("x^2"), {"x": 3}), 9.0)
    check("e^x at 0",          engine.evaluate(engine.parse("e^x"), {"x": 0}), 1.0)
    check("implicit 2x at 4",  engine.evaluate(engine.parse("2x"), {"x": 4}), 8.0)
    check("sin(x)/x at 0",     math.isnan(engine.evaluate(engine.parse("sin(x)/x"), {"x": 0})), True)
    check("ln(x) at -1",       math.isnan(engine.evaluate(engine.parse("ln(x)"), {"x": -1})), True)
    check("1/x at 0",          math.isinf(engine.evaluate(engine.parse("1/x"), {"x": 0})), True)
    check("unbound symbol",    math.isnan(engine.evaluate(engine.parse("x + a"), {"x": 1})), True)
    check("to_string",         engine.to_string(engine.parse("x^2")), "x^2")
    check("derivative",        engine.to_string(engine.differentiate(engine.parse("x^3"), "x")), "3*x^2")
    check("valid",             engine.is_valid("sin(x)"), True)
    check("invalid",           engine.is_valid("sin(x"), False)
    check("equation invalid",  engine.is_valid("x = 2"), False)
    check("empty invalid",     engine.is_valid("   "), False)


def test_stub_engine():
    print("\n--- injected engine --------------------------------------")
    stub = StubEngine()
    check("limit via stub",    evaluate_limit("sin(x)/x", "x", 0, engine=stub).result, "1")
    check("integral via stub", integrate("x^2", engine=stub).result, "x^3/3 + C")
    with pytest.raises(InvalidExpression):
        integrate("tan(x)", engine=stub)
    with pytest.raises(ExpressionError):
        differentiate("x^2", engine=stub)


# ── TrailBuilder ───────────────────────────────────────

def test_trail_builder():
    print("\n--- TrailBuilder -----------------------------------------")
    builder = TrailBuilder()
    builder.append("first").append("second", label="Note")
    trail = builder.finish("42")
    check("labels",            trail.steps, (DerivationStep("Step 1", "first"), DerivationStep("Note", "second")))
    check("numeric",           trail.to_dict()["numeric"], 42.0)
    check("resolved",          trail.resolved, True)
    check("text form",         str(trail), "Step 1: first\nNote: second\nResult: 42")
    with pytest.raises(RuntimeError):
        builder.append("late")
    with pytest.raises(RuntimeError):
        builder.finish("again")


def test_formatting():
    print("\n--- formatting -------------------------------------------")
    check("integral float",    format_number(5.0), "5")
    check("fraction float",    format_number(7.5), "7.5")
    check("negative zero",     format_number(-0.0), "0")
    check("nan",               format_number(math.nan), "NaN")
    check("rational",          format_rational(0.5), "1/2")


# ── differentiate ──────────────────────────────────────

def test_differentiate():
    print("\n--- differentiate ----------------------------------------")
    trail = differentiate("x^3")
    check("x^3",               trail.result, "3*x^2")
    check("no simplify step",  len(trail.steps), 3)
    check("power hint",        "power rule" in trail.steps[1].body, True)
    check("sin(x)",            differentiate("sin(x)").result, "cos(x)")
    check("in t",              differentiate("t^2", "t").result, "2*t")

    trail = differentiate("(x^2-1)/(x-1)")
    check("simplified",        trail.result, "1")
    check("simplify step",     trail.steps[-1].body, "Simplify the result\nf'(x) = 1")
    with pytest.raises(InvalidExpression):
        differentiate("sin(x")


# ── Main ───────────────────────────────────────────────

if __name__ == "__main__":
    test_sympy_engine()
    test_stub_engine()
    test_trail_builder()
    test_formatting()
    test_differentiate()
    print(f"\n  {PASSED}/{TOTAL} passed")
