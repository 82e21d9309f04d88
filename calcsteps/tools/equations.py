"""Linear solver — one linear equation, or an add/subtract elimination pair.

This is a pattern matcher over equation text, not linear algebra: it knows
"x = b", "x + a = b", "c*x + a = b", "c*x = b" and the 2x2 system
"x + y = a, x - y = b". Everything else ends on a sentinel.
"""

import logging
import math
import re
from dataclasses import dataclass

from ..core import (
    COMPLEX_SYSTEM_SENTINEL,
    EQUATION_SENTINEL,
    SYSTEM_SENTINEL,
    format_number,
)
from .expression import InvalidExpression
from .trail import TrailBuilder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinearEquation:
    left: str
    right: str

    @classmethod
    def parse(cls, text: str):
        left, sep, right = text.partition("=")
        if not sep:
            raise InvalidExpression(text, "equation needs '='")
        return cls(left.strip(), right.strip())

    def __str__(self):
        return f"{self.left} = {self.right}"


@dataclass(frozen=True)
class EquationSystem:
    variables: tuple
    equations: tuple

    @classmethod
    def from_text(cls, equations, variables):
        return cls(tuple(v.strip() for v in variables),
                   tuple(LinearEquation.parse(eq) for eq in equations))


def _number(text):
    try:
        value = float(text)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def _coefficient(term, variable):
    """Numeric factor of a term like 2x, 2*x or x*2; None when it is not one."""
    factor = term.replace(variable, "", 1).strip().strip("*").strip()
    return _number(factor)


def _solve_single(equation, variable, trail):
    left, right = equation.left, equation.right
    trail.append(f"Isolate the variable {variable}")

    if left == variable:
        trail.append(f"The solution is {variable} = {right}")
        return f"{variable} = {right}"

    rhs = _number(right)
    if variable in left and rhs is not None:
        if "+" in left:
            parts = [p.strip() for p in left.split("+")]
            var_parts = [p for p in parts if variable in p]
            constants = [_number(p) for p in parts if variable not in p]
            if len(var_parts) == 1 and constants and None not in constants:
                var_part = var_parts[0]
                coef = 1.0 if var_part == variable else _coefficient(var_part, variable)
                if coef:
                    total = sum(constants)
                    moved = rhs - total
                    trail.append("Move constant terms to the right side\n"
                                 f"{var_part} = {right} - {format_number(total)}\n"
                                 f"{var_part} = {format_number(moved)}")
                    if var_part == variable:
                        return f"{variable} = {format_number(moved)}"
                    value = format_number(moved / coef)
                    trail.append(f"Divide both sides by the coefficient {format_number(coef)}\n"
                                 f"{variable} = {value}")
                    return f"{variable} = {value}"

        elif "-" not in left:
            coef = _coefficient(left, variable)
            if coef:
                value = format_number(rhs / coef)
                trail.append(f"Divide both sides by the coefficient {format_number(coef)}\n"
                             f"{variable} = {value}")
                return f"{variable} = {value}"

    logger.debug("no linear pattern for %s in %s", variable, equation)
    trail.append(f"This equation requires algebraic manipulation to isolate {variable}")
    trail.append(f"After rearranging, solve for {variable}")
    return EQUATION_SENTINEL


def _compact(text):
    return re.sub(r"\s+", "", text)


def _solve_pair(system, trail):
    (eq1, eq2), (v1, v2) = system.equations, system.variables
    trail.append(f"Start with the system of equations\n   {eq1}\n   {eq2}")
    trail.append("Solve the system using substitution or elimination method\n"
                 "First, isolate one variable in one equation")

    a, b = _number(eq1.right), _number(eq2.right)
    is_sum = _compact(eq1.left) in (f"{v1}+{v2}", f"{v2}+{v1}")
    is_difference = _compact(eq2.left) == f"{v1}-{v2}"
    if is_sum and is_difference and a is not None and b is not None:
        x = (a + b) / 2
        y = a - x
        trail.append(f"Add the equations to eliminate {v2}\n"
                     f"   {eq1}\n   {eq2}\n"
                     f"   Result: 2{v1} = {format_number(a + b)}\n"
                     f"   {v1} = {format_number(x)}")
        trail.append(f"Substitute {v1} = {format_number(x)} into the first equation\n"
                     f"   {format_number(x)} + {v2} = {format_number(a)}\n"
                     f"   {v2} = {format_number(a)} - {format_number(x)}\n"
                     f"   {v2} = {format_number(y)}")
        return f"{v1} = {format_number(x)}, {v2} = {format_number(y)}"

    logger.debug("system %s is not an elimination pair", system)
    trail.append("This system requires algebraic manipulation to solve")
    trail.append("After substitution or elimination, solve for both variables")
    return SYSTEM_SENTINEL


def solve(system: EquationSystem):
    """Solve a one- or two-variable linear system; other sizes are refused."""
    n_vars, n_eqs = len(system.variables), len(system.equations)
    trail = TrailBuilder()

    if n_vars == n_eqs == 1:
        equation, variable = system.equations[0], system.variables[0]
        trail.append(f"Start with the equation {equation}")
        return trail.finish(_solve_single(equation, variable, trail))

    if n_vars == n_eqs == 2:
        return trail.finish(_solve_pair(system, trail))

    trail.append(f"Start with the system of {n_eqs} equations and {n_vars} variables")
    trail.append("This system requires advanced techniques to solve")
    return trail.finish(COMPLEX_SYSTEM_SENTINEL)
