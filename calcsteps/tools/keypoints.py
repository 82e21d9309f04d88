"""Critical-point scanner — roots, extrema and inflection points by sampling.

The scan walks a SampleRange once and classifies every sample on its own
using fixed tolerances on f, f' and f''. It is deliberately coarse: with a
pixel-sized step, neighbouring samples often land inside the same tolerance
band and are all reported.
"""

import logging
import math
from dataclasses import dataclass, field

from ..core import DEFAULT_VARIABLE, KEYPOINT_TOLERANCE, MAX_SAMPLES, SAMPLE_DECIMALS
from .expression import DEFAULT_ENGINE, ExpressionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SampleRange:
    start: float
    end: float
    step: float

    @property
    def is_valid(self) -> bool:
        values = (self.start, self.end, self.step)
        if not (all(math.isfinite(v) for v in values) and self.step > 0 and self.start <= self.end):
            return False
        span = self.end - self.start
        return math.isfinite(span) and span / self.step < MAX_SAMPLES

    def __len__(self):
        if not self.is_valid:
            return 0
        return int(math.floor((self.end - self.start) / self.step + 1e-9)) + 1

    def __iter__(self):
        for i in range(len(self)):
            yield round(self.start + i * self.step, SAMPLE_DECIMALS)


@dataclass
class KeyPointSet:
    roots: list = field(default_factory=list)
    maxima: list = field(default_factory=list)
    minima: list = field(default_factory=list)
    inflection: list = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.roots or self.maxima or self.minima or self.inflection)

    def to_dict(self):
        return {
            "roots": list(self.roots),
            "maxima": list(self.maxima),
            "minima": list(self.minima),
            "inflection": list(self.inflection),
        }


def scan(expression, sample_range: SampleRange, variable: str = DEFAULT_VARIABLE,
         parameters: dict = None, engine=None) -> KeyPointSet:
    """Classify every sample of sample_range as root / extremum / inflection.

    expression may be text (parsed here, InvalidExpression propagates) or an
    already parsed handle. A failure to differentiate, an invalid range or a
    sample that cannot be evaluated never raises: the scan returns an empty
    or partial KeyPointSet instead.
    """
    engine = engine or DEFAULT_ENGINE
    f = engine.parse(expression) if isinstance(expression, str) else expression
    points = KeyPointSet()

    if not sample_range.is_valid:
        logger.debug("scan skipped, invalid range %s", sample_range)
        return points

    try:
        df = engine.differentiate(f, variable)
        ddf = engine.differentiate(df, variable)
    except ExpressionError as e:
        logger.debug("scan skipped, derivative unavailable: %s", e)
        return points

    bindings = dict(parameters or {})
    for x in sample_range:
        bindings[variable] = x
        y = engine.evaluate(f, bindings)
        dy = engine.evaluate(df, bindings)
        ddy = engine.evaluate(ddf, bindings)

        # NaN fails every comparison below, so undefined samples drop out
        if abs(y) < KEYPOINT_TOLERANCE:
            points.roots.append(x)

        if abs(dy) < KEYPOINT_TOLERANCE:
            if ddy > 0:
                points.minima.append(x)
            elif ddy < 0:
                points.maxima.append(x)

        if abs(ddy) < KEYPOINT_TOLERANCE:
            points.inflection.append(x)

    return points
