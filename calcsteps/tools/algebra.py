"""Equation tool — step-by-step linear equations and 2x2 elimination systems."""

from .equations import EquationSystem, solve


def equation_tool(equations: list[str], variables: list[str] = None) -> dict:
    """Step-by-step linear equation solver.

    Use for one linear equation in one variable (x + 3 = 8, 2x = 10) or the
    elimination pair x + y = a, x - y = b. Pass equations and variables as
    arrays of strings; variables defaults to ["x"].
    """
    try:
        if not equations:
            return {"error": "equations cannot be empty"}
        system = EquationSystem.from_text(equations, variables or ["x"])
        trail = solve(system)
        return {
            "equations": [str(eq) for eq in system.equations],
            "variables": list(system.variables),
            **trail.to_dict(),
        }

    except Exception as e:
        return {"error": str(e), "equations": equations, "variables": variables}
