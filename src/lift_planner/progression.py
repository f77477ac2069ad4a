"""Progression logic for training loads."""

from __future__ import annotations

import logging
import math
from datetime import date, timedelta

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .models import ProgressionDecision, SessionResult, Status

logger = logging.getLogger(__name__)

DEFAULT_MIN_REST_DAYS = 2
DELOAD_FACTOR = 0.9
# Float slack at the upper bound of the weight search.
SEARCH_TOLERANCE = 1e-9


class InvalidConfiguration(ValueError):
    """Raised when planner inputs violate their preconditions."""


class ProgressionRules(BaseModel):
    """Bundle of progression parameters for :func:`plan_from_config`."""

    model_config = ConfigDict(frozen=True)

    plate_step: float = Field(..., gt=0, description="Smallest load increment")
    min_gain_rate: float = Field(..., ge=0, description="Required fractional e1RM gain")
    min_reps: int = Field(..., ge=1)
    max_reps: int = Field(..., ge=1)
    expand_ratio: float = Field(..., gt=0, lt=1, description="Search range around last weight")
    min_rest_days: int = Field(DEFAULT_MIN_REST_DAYS, ge=0)

    @model_validator(mode="after")
    def check_rep_range(self) -> ProgressionRules:
        if self.min_reps > self.max_reps:
            raise ValueError("min_reps must not exceed max_reps")
        return self


def estimated_max(weight: float, reps: int) -> float:
    return weight * (1.0 + reps / 30.0)


def round_to_step(value: float, step: float) -> float:
    """Round to the nearest multiple of ``step`` (ties to even), never negative."""
    return max(0.0, round(value / step) * step)


def earliest_next_date(last_date: date, min_rest_days: int = DEFAULT_MIN_REST_DAYS) -> date:
    return last_date + timedelta(days=min_rest_days)


def _validate(
    last_weight: float,
    last_reps: int,
    plate_step: float,
    min_gain_rate: float,
    min_reps: int,
    max_reps: int,
    expand_ratio: float,
    min_rest_days: int,
) -> None:
    for name, value in (
        ("last_weight", last_weight),
        ("plate_step", plate_step),
        ("min_gain_rate", min_gain_rate),
        ("expand_ratio", expand_ratio),
    ):
        if not math.isfinite(value):
            raise InvalidConfiguration(f"{name} must be finite, got {value}")
    if not last_weight > 0:
        raise InvalidConfiguration(f"last_weight must be positive, got {last_weight}")
    if last_reps < 1:
        raise InvalidConfiguration(f"last_reps must be at least 1, got {last_reps}")
    if not plate_step > 0:
        raise InvalidConfiguration(f"plate_step must be positive, got {plate_step}")
    if not min_gain_rate >= 0:
        raise InvalidConfiguration(f"min_gain_rate must be non-negative, got {min_gain_rate}")
    if min_reps < 1:
        raise InvalidConfiguration(f"min_reps must be at least 1, got {min_reps}")
    if min_reps > max_reps:
        raise InvalidConfiguration(f"min_reps ({min_reps}) exceeds max_reps ({max_reps})")
    if not 0 < expand_ratio < 1:
        raise InvalidConfiguration(f"expand_ratio must be in (0, 1), got {expand_ratio}")
    if min_rest_days < 0:
        raise InvalidConfiguration(f"min_rest_days must be non-negative, got {min_rest_days}")


def _is_better(
    candidate: SessionResult, best: SessionResult | None, last_weight: float, last_reps: int
) -> bool:
    """
    Compare two qualifying loads: closer weight wins, then closer reps,
    then the smaller e1RM.
    """
    if best is None:
        return True
    cand_dw = abs(candidate.weight - last_weight)
    best_dw = abs(best.weight - last_weight)
    if cand_dw != best_dw:
        return cand_dw < best_dw
    cand_dr = abs(candidate.reps - last_reps)
    best_dr = abs(best.reps - last_reps)
    if cand_dr != best_dr:
        return cand_dr < best_dr
    return candidate.estimated_max < best.estimated_max


def _search_bounds(
    last_weight: float, plate_step: float, expand_ratio: float
) -> tuple[float, float]:
    w_min = max(plate_step, round_to_step(last_weight * (1 - expand_ratio), plate_step))
    w_max = round_to_step(last_weight * (1 + expand_ratio), plate_step)
    return w_min, w_max


def search_size(
    last_weight: float, plate_step: float, min_reps: int, max_reps: int, expand_ratio: float
) -> int:
    """Number of (weight, reps) pairs the bounded search would visit."""
    w_min, w_max = _search_bounds(last_weight, plate_step, expand_ratio)
    weights = max(0, math.floor((w_max - w_min + SEARCH_TOLERANCE) / plate_step) + 1)
    return weights * max(0, max_reps - min_reps + 1)


def _search(
    last_weight: float,
    last_reps: int,
    plate_step: float,
    min_reps: int,
    max_reps: int,
    expand_ratio: float,
    required: float,
) -> SessionResult | None:
    w_min, w_max = _search_bounds(last_weight, plate_step, expand_ratio)
    best: SessionResult | None = None
    i = 0
    while w_min + i * plate_step <= w_max + SEARCH_TOLERANCE:
        weight = round_to_step(w_min + i * plate_step, plate_step)
        for reps in range(min_reps, max_reps + 1):
            candidate = SessionResult(weight, reps)
            if candidate.estimated_max >= required and _is_better(
                candidate, best, last_weight, last_reps
            ):
                best = candidate
        i += 1
    return best


def plan(
    today: date,
    last_date: date,
    last_weight: float,
    last_reps: int,
    plate_step: float,
    min_gain_rate: float,
    min_reps: int,
    max_reps: int,
    expand_ratio: float,
    *,
    min_rest_days: int = DEFAULT_MIN_REST_DAYS,
) -> ProgressionDecision:
    """
    Recommend the next session load.

    Before the rest period is over the decision is NOT_ALLOWED with a lighter
    alternative. Afterwards the cheapest move that meets the required e1RM
    gain is chosen: one more rep, then one more plate step, then the closest
    pair in a bounded weight x reps search. If the search finds nothing the
    plate-step candidate is returned anyway with ``qualified=False``.
    """
    _validate(
        last_weight,
        last_reps,
        plate_step,
        min_gain_rate,
        min_reps,
        max_reps,
        expand_ratio,
        min_rest_days,
    )
    earliest = earliest_next_date(last_date, min_rest_days)

    if today < earliest:
        alternative = SessionResult(
            max(plate_step, round_to_step(last_weight * DELOAD_FACTOR, plate_step)),
            max(min_reps, last_reps - 1),
        )
        logger.debug("Rest not over until %s, alternative %s", earliest, alternative)
        return ProgressionDecision(Status.NOT_ALLOWED, earliest, alternative=alternative)

    required = estimated_max(last_weight, last_reps) * (1.0 + min_gain_rate)

    one_more_rep = SessionResult(last_weight, last_reps + 1)
    if min_reps <= one_more_rep.reps <= max_reps and one_more_rep.estimated_max >= required:
        logger.debug("Adding a rep: %s", one_more_rep)
        return ProgressionDecision(Status.ALLOWED, earliest, target=one_more_rep)

    one_more_step = SessionResult(round_to_step(last_weight + plate_step, plate_step), last_reps)
    if one_more_step.estimated_max >= required:
        logger.debug("Adding a plate step: %s", one_more_step)
        return ProgressionDecision(Status.ALLOWED, earliest, target=one_more_step)

    best = _search(
        last_weight, last_reps, plate_step, min_reps, max_reps, expand_ratio, required
    )
    if best is None:
        logger.warning(
            "No load within %.0f%% of %s kg reaches e1RM %.2f, falling back to %s",
            expand_ratio * 100,
            last_weight,
            required,
            one_more_step,
        )
        return ProgressionDecision(Status.ALLOWED, earliest, target=one_more_step, qualified=False)
    logger.debug("Search picked %s (required e1RM %.2f)", best, required)
    return ProgressionDecision(Status.ALLOWED, earliest, target=best)


def plan_from_config(
    today: date,
    last_date: date,
    last_weight: float,
    last_reps: int,
    rules: ProgressionRules | dict,
) -> ProgressionDecision:
    """Same as :func:`plan` with the parameters taken from ``rules``."""
    if isinstance(rules, dict):
        try:
            rules = ProgressionRules(**rules)
        except ValidationError as e:
            raise InvalidConfiguration(str(e)) from e
    return plan(
        today,
        last_date,
        last_weight,
        last_reps,
        rules.plate_step,
        rules.min_gain_rate,
        rules.min_reps,
        rules.max_reps,
        rules.expand_ratio,
        min_rest_days=rules.min_rest_days,
    )
