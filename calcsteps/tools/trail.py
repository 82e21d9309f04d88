"""Derivation trail — the narrated, append-only record of a derivation."""

from dataclasses import dataclass

from ..core import SENTINELS, to_float


@dataclass(frozen=True)
class DerivationStep:
    label: str
    body: str

    def to_dict(self):
        return {"label": self.label, "body": self.body}


@dataclass(frozen=True)
class DerivationTrail:
    steps: tuple = ()
    result: str = None

    @property
    def resolved(self) -> bool:
        """False when the derivation ended on a sentinel (or never finished)."""
        return self.result is not None and self.result not in SENTINELS

    def to_dict(self):
        return {
            "steps": [step.to_dict() for step in self.steps],
            "result": self.result,
            "numeric": to_float(self.result) if self.result is not None else None,
            "resolved": self.resolved,
        }

    def __str__(self):
        lines = [f"{step.label}: {step.body}" for step in self.steps]
        if self.result is not None:
            lines.append(f"Result: {self.result}")
        return "\n".join(lines)


class TrailBuilder:
    """Write-once builder: steps can only be appended, the result set once."""

    def __init__(self):
        self._steps = []
        self._trail = None

    def append(self, body, label=None):
        if self._trail is not None:
            raise RuntimeError("trail already finished")
        label = label or f"Step {len(self._steps) + 1}"
        self._steps.append(DerivationStep(label, body))
        return self

    def finish(self, result) -> DerivationTrail:
        if self._trail is not None:
            raise RuntimeError("trail already finished")
        self._trail = DerivationTrail(tuple(self._steps), result)
        return self._trail
