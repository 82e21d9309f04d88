"""Term decomposition — split an additive expression into signed terms.

The split is a lookahead on every + and -, so "-3*x" stays one term. It does
not track parentheses: "sin(x+1)" comes back as "sin(x" and "+1)".
"""

import re
from dataclasses import dataclass

_SPLIT_RE = re.compile(r"(?=[-+])")
_WS_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class Term:
    sign: int
    text: str

    @property
    def signed_text(self):
        return f"-{self.text}" if self.sign < 0 else self.text


def has_top_level(expression: str, operators: str) -> bool:
    """True when one of operators appears outside every pair of parentheses."""
    depth = 0
    for ch in expression:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(depth - 1, 0)
        elif depth == 0 and ch in operators:
            return True
    return False


def has_additive_operator(expression: str) -> bool:
    return has_top_level(expression, "+-")


def decompose(expression: str) -> list:
    terms = []
    for fragment in _SPLIT_RE.split(_WS_RE.sub("", expression)):
        if not fragment:
            continue
        sign = 1
        if fragment[0] in "+-":
            sign = -1 if fragment[0] == "-" else 1
            fragment = fragment[1:]
        terms.append(Term(sign, fragment))
    return terms
