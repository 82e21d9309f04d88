"""Rule-based integrator — antiderivatives by pattern, with a rule trail.

Sums are integrated term by term against RULES, tried in order; a term no
rule recognises is carried through as an unresolved integral. A single term
is looked up whole in CLOSED_FORMS instead. Neither path does real symbolic
integration.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable

import sympy

from ..core import DEFAULT_VARIABLE, INTEGRAL_SENTINEL, format_rational
from .expression import DEFAULT_ENGINE
from .terms import Term, decompose, has_additive_operator
from .trail import TrailBuilder

logger = logging.getLogger(__name__)

_COEF = r"(?P<coef>\d*\.?\d*)\*?"


@dataclass(frozen=True)
class Rule:
    name: str
    pattern: str
    build: Callable

    def match(self, term: Term, variable: str):
        regex = self.pattern.replace("{v}", re.escape(variable))
        return re.fullmatch(regex, term.text)


def _coefficient(term, m):
    raw = m.group("coef")
    if not raw:
        return sympy.Integer(term.sign)
    if raw == ".":
        return None
    return term.sign * sympy.Rational(raw)


def _exponent(raw):
    n = sympy.Rational(raw) + 1
    text = format_rational(n)
    return text if n.is_Integer else f"({text})"


def _power(c, m, v):
    n = sympy.Rational(m.group("n"))
    return f"{format_rational(c / (n + 1))} * {v}^{_exponent(m.group('n'))}"


def _linear(c, m, v):
    if m.group("coef") == "":
        return f"{v}^2/2" if c > 0 else f"-{v}^2/2"
    return f"{format_rational(c / 2)} * {v}^2"


def _constant(c, m, v):
    return f"{format_rational(c)} * {v}"


def _sin(c, m, v):
    if c == 1:
        return f"-cos({v})"
    return f"{format_rational(-c)} * cos({v})"


def _cos(c, m, v):
    if c == 1:
        return f"sin({v})"
    return f"{format_rational(c)} * sin({v})"


def _exp(c, m, v):
    if c == 1:
        return f"e^{v}"
    return f"{format_rational(c)} * e^{v}"


RULES = (
    Rule("power", _COEF + r"{v}\^(?P<n>\d+(?:\.\d+)?)", _power),
    Rule("linear", _COEF + r"{v}", _linear),
    Rule("constant", r"(?P<coef>\d+(?:\.\d+)?)", _constant),
    Rule("sine", _COEF + r"sin\({v}\)", _sin),
    Rule("cosine", _COEF + r"cos\({v}\)", _cos),
    Rule("exponential", _COEF + r"e\^{v}", _exp),
)


def _power_closed_form(m, v):
    n = int(m.group("n")) + 1
    return f"{v}^{n}/{n}"


CLOSED_FORMS = (
    (r"{v}", lambda m, v: f"{v}^2/2"),
    (r"{v}\^(?P<n>\d+)", _power_closed_form),
    (r"1/{v}", lambda m, v: f"ln|{v}|"),
    (r"sin\({v}\)", lambda m, v: f"-cos({v})"),
    (r"cos\({v}\)", lambda m, v: f"sin({v})"),
    (r"tan\({v}\)", lambda m, v: f"-ln|cos({v})|"),
    (r"e\^{v}", lambda m, v: f"e^{v}"),
    (r"ln\({v}\)", lambda m, v: f"{v}·ln({v}) - {v}"),
    (r"1/\(1\+{v}\^2\)", lambda m, v: f"arctan({v})"),
    (r"1/sqrt\(1-{v}\^2\)", lambda m, v: f"arcsin({v})"),
)

# (substring, narration) pairs for step 2; advisory only
_HINTS = (
    ("^", "For terms with powers (x^n), use the power rule: ∫x^n dx = x^(n+1)/(n+1) + C (for n ≠ -1)"),
    ("sin", "For sin(x), use: ∫sin(x) dx = -cos(x) + C"),
    ("cos", "For cos(x), use: ∫cos(x) dx = sin(x) + C"),
    ("e^", "For exponential functions, use: ∫e^x dx = e^x + C"),
    ("1/x", "For 1/x, use: ∫1/x dx = ln|x| + C"),
    ("log", "For logarithmic functions, use: ∫ln(x) dx = x·ln(x) - x + C"),
    ("ln", "For logarithmic functions, use: ∫ln(x) dx = x·ln(x) - x + C"),
)


def integrate_term(term: Term, variable: str = DEFAULT_VARIABLE) -> str:
    """Antiderivative of one term, or "(∫term dvar)" when no rule applies."""
    for rule in RULES:
        m = rule.match(term, variable)
        if not m:
            continue
        c = _coefficient(term, m)
        if c is None:
            continue
        return rule.build(c, m, variable)
    logger.debug("no integration rule for term %r", term.signed_text)
    return f"(∫{term.signed_text} d{variable})"


def integrate_sum(expression: str, variable: str = DEFAULT_VARIABLE) -> str:
    pieces = [integrate_term(t, variable) for t in decompose(expression)]
    return " + ".join(pieces).replace("+ -", "- ") + " + C"


def closed_form(expression: str, variable: str = DEFAULT_VARIABLE):
    """Whole-expression table lookup; None when the form is not tabulated."""
    text = re.sub(r"\s+", "", expression)
    for pattern, build in CLOSED_FORMS:
        m = re.fullmatch(pattern.replace("{v}", re.escape(variable)), text)
        if m:
            return build(m, variable) + " + C"
    return None


def rule_hints(expression: str) -> list:
    hints = []
    for needle, text in _HINTS:
        if needle in expression and text not in hints:
            hints.append(text)
    return hints


def integrate(expression: str, variable: str = DEFAULT_VARIABLE, engine=None):
    """Indefinite integral of expression with a three-step trail.

    Raises InvalidExpression before recording anything when the text does
    not parse. An expression no rule covers ends on INTEGRAL_SENTINEL.
    """
    engine = engine or DEFAULT_ENGINE
    engine.parse(expression)

    trail = TrailBuilder()
    trail.append(f"Start with the expression to integrate: ∫{expression} d{variable}")
    trail.append("\n- ".join(["Apply the integration rules"] + rule_hints(expression)))

    if has_additive_operator(expression):
        result = integrate_sum(expression, variable)
        shown = result
    else:
        result = closed_form(expression, variable)
        if result is None:
            result = INTEGRAL_SENTINEL
            shown = f"∫{expression} d{variable} ({INTEGRAL_SENTINEL})"
        else:
            shown = result

    trail.append(f"Calculate the integral\n∫{expression} d{variable} = {shown}")
    return trail.finish(result)
