"""
Next-session target API route.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, Query
from pydantic import BaseModel, ConfigDict, Field

from ...config import SETTINGS
from ...progression import InvalidConfiguration, estimated_max, plan, search_size

router = APIRouter()
logger = logging.getLogger(__name__)


class NextTargetRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    last_date: date
    last_weight: float = Field(..., gt=0, le=1000, description="Last session weight in kg")
    last_reps: int = Field(..., ge=1, le=100)
    today: date | None = None
    # Rules fall back to server defaults when omitted
    plate_step: float | None = Field(None, gt=0, le=100)
    min_gain_rate: float | None = Field(None, ge=0, le=10)
    min_reps: int | None = Field(None, ge=1, le=100)
    max_reps: int | None = Field(None, ge=1, le=100)
    expand_ratio: float | None = Field(None, gt=0, lt=1)
    min_rest_days: int | None = Field(
        None, ge=0, le=30, description="Override of the rest period"
    )


class SessionResponse(BaseModel):
    weight: float
    reps: int
    estimated_max: float


class NextTargetResponse(BaseModel):
    status: str
    earliest_date: date
    target: SessionResponse | None = None
    alternative: SessionResponse | None = None
    qualified: bool
    summary: str


def _or_default(value: Any, default: Any) -> Any:
    return default if value is None else value


@router.post("/next-target")
def next_target(req: NextTargetRequest) -> NextTargetResponse:
    """Recommend the next load from the last session."""
    today = req.today or date.today()
    plate_step = _or_default(req.plate_step, SETTINGS.DEFAULT_PLATE_STEP)
    min_reps = _or_default(req.min_reps, SETTINGS.DEFAULT_MIN_REPS)
    max_reps = _or_default(req.max_reps, SETTINGS.DEFAULT_MAX_REPS)
    expand_ratio = _or_default(req.expand_ratio, SETTINGS.DEFAULT_EXPAND_RATIO)

    size = search_size(req.last_weight, plate_step, min_reps, max_reps, expand_ratio)
    if size > SETTINGS.MAX_SEARCH_SIZE:
        raise InvalidConfiguration(
            f"search over {size} weight x reps pairs exceeds the limit of "
            f"{SETTINGS.MAX_SEARCH_SIZE}; use a larger plate_step or a narrower range"
        )

    decision = plan(
        today,
        req.last_date,
        req.last_weight,
        req.last_reps,
        plate_step,
        _or_default(req.min_gain_rate, SETTINGS.DEFAULT_MIN_GAIN_RATE),
        min_reps,
        max_reps,
        expand_ratio,
        min_rest_days=_or_default(req.min_rest_days, SETTINGS.MIN_REST_DAYS),
    )
    logger.info(
        "Next target for %s kg x %s (last %s): %s %s",
        req.last_weight,
        req.last_reps,
        req.last_date,
        decision.status.value,
        decision.session,
    )
    return NextTargetResponse.model_validate(decision.to_dict())


@router.get("/e1rm")
def get_e1rm(
    weight: float = Query(..., gt=0, le=1000, description="Weight lifted in kg"),
    reps: int = Query(..., ge=1, le=100, description="Repetitions performed"),
) -> dict[str, Any]:
    """Estimated one-rep max for a set."""
    return {"weight": weight, "reps": reps, "estimated_max": round(estimated_max(weight, reps), 2)}
