"""
Value records returned by the progression planner.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date
from typing import Any


class Status(str, enum.Enum):
    """Whether a new session is allowed today."""

    ALLOWED = "ALLOWED"
    NOT_ALLOWED = "NOT_ALLOWED"


@dataclass(frozen=True)
class SessionResult:
    weight: float
    reps: int

    @property
    def estimated_max(self) -> float:
        """Epley estimate of the one-rep max."""
        return self.weight * (1.0 + self.reps / 30.0)

    def __str__(self) -> str:
        return f"{self.weight:.1f} kg × {self.reps} reps (e1RM={self.estimated_max:.2f})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "weight": round(self.weight, 3),
            "reps": self.reps,
            "estimated_max": round(self.estimated_max, 2),
        }


@dataclass(frozen=True)
class ProgressionDecision:
    """
    Outcome of a planning call.

    NOT_ALLOWED decisions carry only ``alternative``; ALLOWED decisions carry
    only ``target``. ``qualified`` is False when the target is the fallback
    load that does not reach the required gain.
    """

    status: Status
    earliest_date: date
    target: SessionResult | None = None
    alternative: SessionResult | None = None
    qualified: bool = True

    def __post_init__(self) -> None:
        if self.status is Status.ALLOWED:
            if self.target is None or self.alternative is not None:
                raise ValueError("ALLOWED decision must carry a target and no alternative")
        elif self.alternative is None or self.target is not None:
            raise ValueError("NOT_ALLOWED decision must carry an alternative and no target")

    @property
    def session(self) -> SessionResult:
        """The load to present: target when allowed, alternative otherwise."""
        if self.target is not None:
            return self.target
        if self.alternative is not None:
            return self.alternative
        raise ValueError("decision carries neither a target nor an alternative")

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "earliest_date": self.earliest_date.isoformat(),
            "target": self.target.to_dict() if self.target else None,
            "alternative": self.alternative.to_dict() if self.alternative else None,
            "qualified": self.qualified,
            "summary": str(self.session),
        }
