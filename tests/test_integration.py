"""Unit tests for term decomposition and the rule-based integrator.

Run:  python -m tests.test_integration
"""

import sys
if sys.stdout.encoding and sys.stdout.encoding.lower() != "utf-8":
    import io
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")

import pytest

from calcsteps.core import INTEGRAL_SENTINEL
from calcsteps.tools.expression import DEFAULT_ENGINE, InvalidExpression
from calcsteps.tools.integration import integrate
from calcsteps.tools.terms import Term, decompose, has_additive_operator

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


# ── decompose ──────────────────────────────────────────

def test_decompose():
    print("\n--- decompose --------------------------------------------")
    check("polynomial",       decompose("x^2 + 3*x - 5"),
          [Term(1, "x^2"), Term(1, "3*x"), Term(-1, "5")])
    check("leading minus",    decompose("-3*x+2"), [Term(-1, "3*x"), Term(1, "2")])
    check("single term",      decompose("x"), [Term(1, "x")])
    # parentheses are not respected: the argument of sin is split too
    check("sin(x+1) mis-split", decompose("sin(x+1)"), [Term(1, "sin(x"), Term(1, "1)")])
    check("top-level +",      has_additive_operator("x+1"), True)
    check("nested + only",    has_additive_operator("1/(1+x^2)"), False)


# ── integrate: closed forms ────────────────────────────

def test_power_table():
    print("\n--- integrate x^n ----------------------------------------")
    check("x",                integrate("x").result, "x^2/2 + C")
    check("x^2",              integrate("x^2").result, "x^3/3 + C")
    check("x^3",              integrate("x^3").result, "x^4/4 + C")
    check("t^2 in t",         integrate("t^2", "t").result, "t^3/3 + C")


def test_closed_forms():
    print("\n--- integrate closed forms -------------------------------")
    check("1/x",              integrate("1/x").result, "ln|x| + C")
    check("sin(x)",           integrate("sin(x)").result, "-cos(x) + C")
    check("cos(x)",           integrate("cos(x)").result, "sin(x) + C")
    check("tan(x)",           integrate("tan(x)").result, "-ln|cos(x)| + C")
    check("e^x",              integrate("e^x").result, "e^x + C")
    check("ln(x)",            integrate("ln(x)").result, "x·ln(x) - x + C")
    check("1/(1+x^2)",        integrate("1/(1+x^2)").result, "arctan(x) + C")
    check("1/sqrt(1-x^2)",    integrate("1/sqrt(1 - x^2)").result, "arcsin(x) + C")

    trail = integrate("sqrt(x)")
    check("sqrt(x) sentinel", trail.result, INTEGRAL_SENTINEL)
    check("sentinel narrated", trail.steps[-1].body.endswith(f"({INTEGRAL_SENTINEL})"), True)
    check("sentinel unresolved", trail.resolved, False)


# ── integrate: term by term ────────────────────────────

def test_term_rules():
    print("\n--- integrate sums ---------------------------------------")
    check("polynomial",       integrate("x^2 + 3*x - 5").result, "1/3 * x^3 + 3/2 * x^2 - 5 * x + C")
    check("trig",             integrate("2*sin(x) + cos(x)").result, "-2 * cos(x) + sin(x) + C")
    check("exp and constant", integrate("e^x - 3").result, "e^x - 3 * x + C")
    check("coef power",       integrate("3*x^2 - x").result, "1 * x^3 - x^2/2 + C")
    check("fractional power", integrate("x^2.5 + 1").result, "2/7 * x^(7/2) + 1 * x + C")
    check("unresolved term",  integrate("x + tan(x)").result, "x^2/2 + (∫tan(x) dx) + C")
    check("unresolved negative", integrate("x - tan(x)").result, "x^2/2 + (∫-tan(x) dx) + C")
    check("other variable",   integrate("3*t + 1", "t").result, "3/2 * t^2 + 1 * t + C")


def test_trail():
    print("\n--- integrate trail --------------------------------------")
    trail = integrate("x^2 + sin(x)")
    check("three steps",      [s.label for s in trail.steps], ["Step 1", "Step 2", "Step 3"])
    check("step 1",           trail.steps[0].body, "Start with the expression to integrate: ∫x^2 + sin(x) dx")
    check("power hint",       "power rule" in trail.steps[1].body, True)
    check("sin hint",         "∫sin(x) dx = -cos(x)" in trail.steps[1].body, True)
    check("no cos hint",      "∫cos(x) dx" in trail.steps[1].body, False)
    check("idempotent",       integrate("x^2 + sin(x)"), trail)

    with pytest.raises(InvalidExpression):
        integrate("sin(x")


def test_decomposition_law():
    print("\n--- decomposition law ------------------------------------")
    engine = DEFAULT_ENGINE
    terms = ["x^3", "x^2", "x"]
    whole = integrate(" + ".join(terms)).result
    parts = [integrate(t).result for t in terms]

    def body(result):
        return engine.parse(result[:-len(" + C")])

    total = sum((body(p) for p in parts), 0)
    check("sum of parts",     engine.simplify(body(whole) - total), 0)


# ── Main ───────────────────────────────────────────────

if __name__ == "__main__":
    test_decompose()
    test_power_table()
    test_closed_forms()
    test_term_rules()
    test_trail()
    test_decomposition_law()
    print(f"\n  {PASSED}/{TOTAL} passed")
