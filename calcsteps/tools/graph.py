"""Graph tool — plot data: curves, key points, tangent line, shaded area.

Operations: critical_points, curve, derivative, tangent, area, plot.
Everything here is display data; drawing it is the caller's business.
"""

import math
from dataclasses import dataclass, field

from ..core import (
    AREA_SLICES,
    DEFAULT_VARIABLE,
    DEFAULT_WIDTH,
    DEFAULT_X_MAX,
    DEFAULT_X_MIN,
    KEYPOINT_STEP_FACTOR,
    TANGENT_HALF_WIDTH,
    format_number,
)
from .expression import DEFAULT_ENGINE
from .keypoints import KeyPointSet, SampleRange, scan

OPERATIONS = {"critical_points", "curve", "derivative", "tangent", "area", "plot"}


@dataclass(frozen=True)
class TangentLine:
    x0: float
    y0: float
    slope: float
    equation: str
    start: tuple
    end: tuple

    def to_dict(self):
        return {"x0": self.x0, "y0": self.y0, "slope": self.slope,
                "equation": self.equation, "segment": [list(self.start), list(self.end)]}


@dataclass
class PlotData:
    curve: list
    key_points: KeyPointSet
    derivative: list = field(default_factory=list)

    def to_dict(self):
        return {"curve": [list(p) for p in self.curve],
                "derivative": [list(p) for p in self.derivative],
                "key_points": self.key_points.to_dict()}


def _parse(expression, engine):
    return engine.parse(expression) if isinstance(expression, str) else expression


def sample_curve(expression, x_min=DEFAULT_X_MIN, x_max=DEFAULT_X_MAX, width=DEFAULT_WIDTH,
                 variable=DEFAULT_VARIABLE, parameters=None, engine=None):
    """One (x, y) per pixel column; columns where f is undefined are skipped."""
    engine = engine or DEFAULT_ENGINE
    f = _parse(expression, engine)
    bindings = dict(parameters or {})
    points = []
    for i in range(max(int(width), 0)):
        x = x_min + i * (x_max - x_min) / width
        bindings[variable] = x
        y = engine.evaluate(f, bindings)
        if math.isfinite(y):
            points.append((x, y))
    return points


def sample_derivative(expression, x_min=DEFAULT_X_MIN, x_max=DEFAULT_X_MAX, width=DEFAULT_WIDTH,
                      variable=DEFAULT_VARIABLE, parameters=None, engine=None):
    engine = engine or DEFAULT_ENGINE
    df = engine.differentiate(_parse(expression, engine), variable)
    return sample_curve(df, x_min, x_max, width, variable, parameters, engine)


def tangent_line(expression, x0, x_min=DEFAULT_X_MIN, x_max=DEFAULT_X_MAX,
                 variable=DEFAULT_VARIABLE, parameters=None, engine=None) -> TangentLine:
    """Tangent at x0, clipped to TANGENT_HALF_WIDTH either side and to the view."""
    engine = engine or DEFAULT_ENGINE
    f = _parse(expression, engine)
    df = engine.differentiate(f, variable)
    bindings = dict(parameters or {})
    bindings[variable] = x0
    y0 = engine.evaluate(f, bindings)
    slope = engine.evaluate(df, bindings)

    x1 = max(x_min, x0 - TANGENT_HALF_WIDTH)
    x2 = min(x_max, x0 + TANGENT_HALF_WIDTH)
    equation = f"{format_number(slope)} * ({variable} - {format_number(x0)}) + {format_number(y0)}"
    return TangentLine(x0, y0, slope, equation,
                       (x1, slope * (x1 - x0) + y0),
                       (x2, slope * (x2 - x0) + y0))


def integral_region(expression, lower, upper, variable=DEFAULT_VARIABLE, parameters=None,
                    engine=None) -> list:
    """Closed polygon between the curve and the x axis over [lower, upper]."""
    engine = engine or DEFAULT_ENGINE
    f = _parse(expression, engine)
    if not lower < upper:
        return []
    bindings = dict(parameters or {})
    width = (upper - lower) / AREA_SLICES
    polygon = [(lower, 0.0)]
    for i in range(AREA_SLICES + 1):
        x = lower + i * width
        bindings[variable] = x
        y = engine.evaluate(f, bindings)
        if math.isfinite(y):
            polygon.append((x, y))
    polygon.append((upper, 0.0))
    return polygon


def plot(expression, x_min=DEFAULT_X_MIN, x_max=DEFAULT_X_MAX, width=DEFAULT_WIDTH,
         show_derivative=False, variable=DEFAULT_VARIABLE, parameters=None,
         engine=None) -> PlotData:
    """Curve plus key points, the way a redraw needs them.

    Key points are scanned at KEYPOINT_STEP_FACTOR pixels per sample.
    """
    engine = engine or DEFAULT_ENGINE
    f = _parse(expression, engine)
    curve = sample_curve(f, x_min, x_max, width, variable, parameters, engine)
    step = (x_max - x_min) / width * KEYPOINT_STEP_FACTOR if width else 0.0
    key_points = scan(f, SampleRange(x_min, x_max, step), variable, parameters, engine)
    data = PlotData(curve, key_points)
    if show_derivative:
        data.derivative = sample_derivative(f, x_min, x_max, width, variable, parameters, engine)
    return data


def graph_tool(expression: str, operation: str = "plot", variable: str = "x",
               x_min: float = DEFAULT_X_MIN, x_max: float = DEFAULT_X_MAX,
               step: float = None, width: int = DEFAULT_WIDTH, x0: float = 0.0,
               lower: float = -1.0, upper: float = 1.0) -> dict:
    """All-in-one graphing tool.

    Use for plot data. Operations: critical_points (roots, maxima, minima,
    inflection points), curve, derivative, tangent, area, plot. step is the
    critical_points sampling step; it defaults to the plot's pixel-based step.
    """
    try:
        f = DEFAULT_ENGINE.parse(expression)

        if operation == "critical_points":
            if step is None:
                step = (x_max - x_min) / width * KEYPOINT_STEP_FACTOR
            points = scan(f, SampleRange(x_min, x_max, step), variable)
            return {"input": expression, **points.to_dict()}

        elif operation == "curve":
            return {"input": expression, "points": [list(p) for p in
                                                    sample_curve(f, x_min, x_max, width, variable)]}

        elif operation == "derivative":
            return {"input": expression, "points": [list(p) for p in
                                                    sample_derivative(f, x_min, x_max, width, variable)]}

        elif operation == "tangent":
            return {"input": expression, **tangent_line(f, x0, x_min, x_max, variable).to_dict()}

        elif operation == "area":
            return {"input": expression, "lower": lower, "upper": upper,
                    "polygon": [list(p) for p in integral_region(f, lower, upper, variable)]}

        elif operation == "plot":
            return {"input": expression, **plot(f, x_min, x_max, width, True, variable).to_dict()}

        else:
            return {"error": f"Unknown operation '{operation}'. Use: {', '.join(sorted(OPERATIONS))}"}

    except Exception as e:
        return {"error": str(e), "expression": expression, "operation": operation}
