"""Expression preprocessor — turns calculator notation into SymPy expressions.

Handles:  ^ → **,  2x → 2*x,  sin(x)cos(x) → sin(x)*cos(x)
Also:     e → E,  ln → log,  arcsin/arccos/arctan → asin/acos/atan,
          infinity/inf → oo  (word-boundary safe)
Parsing goes through SymPy's parse_expr with standard_transformations +
implicit_multiplication + convert_xor.
"""

import re

import sympy
from sympy.parsing.sympy_parser import (
    parse_expr,
    standard_transformations,
    implicit_multiplication,
    implicit_multiplication_application,
    convert_xor,
)

_TRANSFORMATIONS = standard_transformations + (
    implicit_multiplication,
    convert_xor,
    implicit_multiplication_application,
)

# Word-boundary safe: matches standalone infinity/inf/+inf/-inf but NOT "information"
_INF_RE = re.compile(r'(?<![a-zA-Z])([+-]?\s*)(infinity|inf)(?![a-zA-Z])', re.IGNORECASE)

# Restricted namespace: dangerous builtins are shadowed, calculator names are aliased
_BLOCKED = {name: None for name in (
    "exec", "eval", "__import__", "open", "compile",
    "globals", "locals", "getattr", "setattr", "delattr",
    "breakpoint", "exit", "quit", "input", "print",
)}

_ALIASES = {
    "e": sympy.E,
    "ln": sympy.log,
    "arcsin": sympy.asin,
    "arccos": sympy.acos,
    "arctan": sympy.atan,
}


def _inf_replace(m):
    sign = m.group(1).replace(" ", "")
    return f"{sign}oo"


def normalize(text: str) -> str:
    """Strip the input and spell infinity the way SymPy does."""
    return _INF_RE.sub(_inf_replace, text.strip())


def to_sympy(text: str):
    """Parse calculator notation into a SymPy expression.

    Raises whatever parse_expr raises (SyntaxError, TokenError, TypeError...);
    the expression engine wraps those into InvalidExpression.
    """
    s = normalize(text)
    if not s:
        raise ValueError("empty expression")
    local_dict = dict(_BLOCKED)
    local_dict.update(_ALIASES)
    return parse_expr(s, local_dict=local_dict, transformations=_TRANSFORMATIONS)


def to_text(expr) -> str:
    """Render a SymPy expression back into calculator notation (** → ^)."""
    return str(expr).replace("**", "^")
