from datetime import date

import pytest

from lift_planner.models import SessionResult, Status
from lift_planner.progression import (
    InvalidConfiguration,
    ProgressionRules,
    _is_better,
    earliest_next_date,
    estimated_max,
    plan,
    plan_from_config,
    round_to_step,
    search_size,
)

LAST = date(2025, 10, 25)
RULES = dict(plate_step=0.5, min_gain_rate=0.005, min_reps=3, max_reps=12, expand_ratio=0.10)


def _plan(today, last_weight=62.5, last_reps=6, **overrides):
    rules = {**RULES, **overrides}
    return plan(
        today,
        LAST,
        last_weight,
        last_reps,
        rules["plate_step"],
        rules["min_gain_rate"],
        rules["min_reps"],
        rules["max_reps"],
        rules["expand_ratio"],
    )


def test_not_allowed_within_two_days():
    res = _plan(date(2025, 10, 26))
    assert res.status is Status.NOT_ALLOWED
    assert res.earliest_date == date(2025, 10, 27)
    assert res.target is None
    assert res.alternative is not None


def test_alternative_is_deloaded():
    res = _plan(date(2025, 10, 25))
    # 62.5 * 0.9 = 56.25 -> 56.0 on a 0.5 step (tie rounds to even)
    assert res.alternative.weight == 56.0
    assert res.alternative.reps == 5


def test_alternative_respects_floors():
    res = _plan(date(2025, 10, 25), last_weight=1.0, last_reps=3, plate_step=2.5)
    assert res.alternative.weight == 2.5
    assert res.alternative.reps == 3


def test_today_before_last_date_is_not_allowed():
    res = _plan(date(2025, 10, 1))
    assert res.status is Status.NOT_ALLOWED


def test_allowed_after_two_days_adds_a_rep():
    res = _plan(date(2025, 10, 28))
    assert res.status is Status.ALLOWED
    assert res.alternative is None
    assert res.target.weight == 62.5
    assert res.target.reps == 7
    assert res.target.estimated_max >= estimated_max(62.5, 6) * 1.005


def test_allowed_exactly_on_earliest_date():
    assert _plan(date(2025, 10, 27)).status is Status.ALLOWED


def test_max_reps_forces_plate_step():
    res = _plan(date(2025, 10, 28), last_reps=12)
    assert res.target.weight == 63.0
    assert res.target.reps == 12
    assert res.qualified


def test_search_picks_closest_qualifying_load():
    # 100.5 kg x 12 misses the required 142.94 e1RM, 102.5 kg x 12 is the nearest hit
    res = _plan(date(2025, 10, 28), last_weight=100.0, last_reps=12, min_gain_rate=0.021)
    assert res.status is Status.ALLOWED
    assert res.target.weight == 102.5
    assert res.target.reps == 12
    assert res.qualified


def test_search_fallback_returns_plate_step_candidate():
    res = _plan(date(2025, 10, 28), last_weight=100.0, last_reps=12, min_gain_rate=0.5)
    assert res.status is Status.ALLOWED
    assert res.target.weight == 100.5
    assert res.target.reps == 12
    assert not res.qualified
    assert res.target.estimated_max < estimated_max(100.0, 12) * 1.5


def test_plan_is_deterministic():
    assert _plan(date(2025, 10, 28)) == _plan(date(2025, 10, 28))
    assert _plan(date(2025, 10, 26)) == _plan(date(2025, 10, 26))


def test_configurable_rest_period():
    res = plan(date(2025, 10, 26), LAST, 62.5, 6, 0.5, 0.005, 3, 12, 0.1, min_rest_days=1)
    assert res.status is Status.ALLOWED
    assert res.earliest_date == date(2025, 10, 26)


@pytest.mark.parametrize(
    "overrides",
    [
        {"last_weight": 0},
        {"last_weight": -5},
        {"last_reps": 0},
        {"plate_step": 0},
        {"min_gain_rate": -0.1},
        {"min_reps": 0},
        {"min_reps": 8, "max_reps": 5},
        {"expand_ratio": 0},
        {"expand_ratio": 1.0},
        {"last_weight": float("inf")},
        {"last_weight": float("nan")},
        {"plate_step": float("inf")},
        {"min_gain_rate": float("inf")},
        {"expand_ratio": float("nan")},
    ],
)
def test_invalid_configuration(overrides):
    with pytest.raises(InvalidConfiguration):
        _plan(date(2025, 10, 28), **overrides)


def test_invalid_configuration_checked_before_rest_gate():
    with pytest.raises(InvalidConfiguration):
        _plan(date(2025, 10, 26), plate_step=-1)


def test_estimated_max_epley():
    assert estimated_max(62.5, 6) == pytest.approx(75.0)
    assert estimated_max(100, 0) == 100


def test_estimated_max_is_increasing():
    for w in (1.0, 20.0, 62.5, 140.0):
        for r in range(0, 20):
            assert estimated_max(w, r + 1) > estimated_max(w, r)
            assert estimated_max(w + 0.5, r) > estimated_max(w, r)


def test_round_to_step_gives_multiples():
    for step in (0.5, 1.25, 2.5, 5.0):
        for x in (0.0, 0.3, 17.2, 56.25, 101.9):
            q = round_to_step(x, step) / step
            assert q == pytest.approx(round(q))


def test_round_to_step_never_negative():
    assert round_to_step(-3.0, 2.5) == 0.0


def test_earliest_next_date():
    assert earliest_next_date(LAST) == date(2025, 10, 27)
    assert earliest_next_date(LAST, 3) == date(2025, 10, 28)


def test_plan_from_config_model():
    rules = ProgressionRules(**RULES)
    res = plan_from_config(date(2025, 10, 28), LAST, 62.5, 6, rules)
    assert res.target.reps == 7


def test_plan_from_config_dict_invalid():
    with pytest.raises(InvalidConfiguration):
        plan_from_config(date(2025, 10, 28), LAST, 62.5, 6, {**RULES, "min_reps": 20})


def test_search_prefers_closer_reps_at_equal_weight_distance():
    # Only 110 kg reaches the required 148.4 e1RM: x12 (Δreps 0) beats x11 (Δreps 1)
    # even though x11 carries the smaller e1RM.
    res = _plan(
        date(2025, 10, 28), last_weight=100.0, last_reps=12, plate_step=5.0, min_gain_rate=0.06
    )
    assert res.qualified
    assert res.target == SessionResult(110.0, 12)


def test_is_better_prefers_closer_weight():
    assert _is_better(SessionResult(95.0, 3), SessionResult(110.0, 6), 100.0, 6)
    assert not _is_better(SessionResult(110.0, 6), SessionResult(95.0, 3), 100.0, 6)


def test_is_better_equal_weight_distance_uses_reps():
    # 105 x5 and 95 x8 are both 5 kg away; 105 x5 is one rep off, 95 x8 two
    heavier, lighter = SessionResult(105.0, 5), SessionResult(95.0, 8)
    assert lighter.estimated_max < heavier.estimated_max
    assert _is_better(heavier, lighter, 100.0, 6)
    assert not _is_better(lighter, heavier, 100.0, 6)


def test_is_better_full_tie_uses_smaller_estimated_max():
    # last +/- 5 kg, last +/- 1 rep: only the e1RM separates them
    low, high = SessionResult(95.0, 5), SessionResult(105.0, 7)
    assert _is_better(low, high, 100.0, 6)
    assert not _is_better(high, low, 100.0, 6)
    assert not _is_better(low, low, 100.0, 6)


def test_is_better_accepts_first_candidate():
    assert _is_better(SessionResult(60.0, 5), None, 62.5, 6)


def test_search_size():
    # 90..110 kg in 5 kg steps, reps 3..12
    assert search_size(100.0, 5.0, 3, 12, 0.1) == 50
    assert search_size(62.5, 0.5, 3, 12, 0.1) == 270
    assert search_size(1000.0, 0.01, 1, 100, 0.5) > 1_000_000
