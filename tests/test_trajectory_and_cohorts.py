from __future__ import annotations

import logging
import math

import pytest

from paired_swings.cohorts import (
    CohortTable,
    SkillLevel,
    classify_level,
    cohort_speeds,
    project_cohorts,
)
from paired_swings.config import EngineConfig
from paired_swings.quality import max_potential_speed
from paired_swings.trajectory import (
    FlightModelConfig,
    FlightState,
    carry_distance,
    sample_trajectory,
    simulate,
    step,
)


def test_zero_speed_lands_at_origin() -> None:
    assert carry_distance(0.0, 30.0) == 0.0
    result = simulate(0.0, 45.0)
    assert result.max_distance == 0.0
    assert result.sample_points[0] == (0.0, 3.0)
    assert result.sample_points[-1][1] == 0.0


def test_step_without_velocity_only_applies_gravity() -> None:
    state = step(FlightState(x=0.0, y=3.0, vx=0.0, vy=0.0), 0.01)
    assert state.vx == 0.0
    assert state.vy == pytest.approx(-0.32174)
    assert not math.isnan(state.y)


@pytest.mark.parametrize("angle", [0.0, 25.0, 90.0])
def test_flight_terminates_and_closes_on_ground(angle: float) -> None:
    result = simulate(80.0, angle)
    points = result.sample_points
    assert points[0] == (0.0, 3.0)
    assert points[-1][1] <= 0.0
    assert all(y > 0 for _, y in points[:-1])
    assert result.max_distance >= 0.0


def test_straight_up_and_flat_launches() -> None:
    assert carry_distance(80.0, 90.0) < 1.0
    flat = carry_distance(80.0, 0.0)
    assert 0.0 < flat < 100.0


def test_vacuum_flight_matches_closed_form() -> None:
    config = FlightModelConfig(drag_coefficient=0.0, mph_to_fps=1.0)
    speed, angle = 100.0, 45.0
    vx = speed * math.cos(math.radians(angle))
    vy = speed * math.sin(math.radians(angle))
    g, h = config.gravity_ft_s2, config.contact_height_ft
    flight_time = (vy + math.sqrt(vy * vy + 2 * g * h)) / g
    assert carry_distance(speed, angle, config) == pytest.approx(vx * flight_time, abs=2.0)


def test_drag_and_speed_change_carry_in_expected_direction() -> None:
    no_drag = FlightModelConfig(drag_coefficient=0.0)
    assert carry_distance(100.0, 25.0, no_drag) > carry_distance(100.0, 25.0)
    assert carry_distance(100.0, 25.0) > carry_distance(80.0, 25.0)


def test_scan_and_sample_passes_agree_closely() -> None:
    result = simulate(100.0, 25.0)
    landing_x = result.sample_points[-1][0]
    assert landing_x != result.max_distance
    assert landing_x == pytest.approx(result.max_distance, abs=5.0)


def test_sampling_stops_at_horizontal_bound() -> None:
    points = sample_trajectory(100.0, 25.0, bound_x_ft=10.0)
    assert points
    assert all(x < 10.0 for x, _ in points)
    assert points[-1][1] > 0.0


def test_step_cap_guarantees_termination(caplog: pytest.LogCaptureFixture) -> None:
    capped = FlightModelConfig(max_steps=5)
    with caplog.at_level(logging.WARNING, logger="paired_swings.trajectory"):
        distance = carry_distance(100.0, 45.0, capped)
    assert distance > 0.0
    assert "hit 5 steps" in caplog.text
    assert len(sample_trajectory(100.0, 45.0, 1_000.0, capped)) == 5


def test_flight_config_validation() -> None:
    with pytest.raises(ValueError):
        FlightModelConfig(scan_dt_s=0.0)
    with pytest.raises(ValueError):
        FlightModelConfig(max_steps=0)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("High School Varsity", SkillLevel.HIGH_SCHOOL),
        ("14U travel", SkillLevel.YOUTH),
        ("Middle School", SkillLevel.YOUTH),
        ("Youth high-performance", SkillLevel.YOUTH),
        ("NCAA D1", SkillLevel.COLLEGE),
        ("JUCO", SkillLevel.COLLEGE),
        ("MiLB", SkillLevel.PRO),
        ("Professional", SkillLevel.PRO),
        ("Adult league", None),
        ("", None),
        (None, None),
    ],
)
def test_classify_level(text: str | None, expected: SkillLevel | None) -> None:
    assert classify_level(text) is expected


def test_cohort_speeds_by_level() -> None:
    assert cohort_speeds(SkillLevel.YOUTH) == (50.0, 60.0, 70.0)
    assert cohort_speeds("college") == (80.0, 90.0, 95.0)
    assert cohort_speeds(SkillLevel.PRO) == (80.0, 90.0, 95.0)
    assert cohort_speeds(None) == (70.0, 80.0, 90.0)
    assert cohort_speeds("adult") == (70.0, 80.0, 90.0)
    assert cohort_speeds(None, CohortTable(fallback_level="college")) == (80.0, 90.0, 95.0)


def test_cohort_table_rejects_unknown_fallback() -> None:
    with pytest.raises(ValueError):
        CohortTable(fallback_level="minors")


def test_project_cohorts_for_high_school() -> None:
    cohorts = project_cohorts(70.0, 25.0, SkillLevel.HIGH_SCHOOL)

    assert [cohort.input_speed for cohort in cohorts] == [70.0, 80.0, 90.0]
    for cohort in cohorts:
        assert cohort.derived_achievable_speed == pytest.approx(max_potential_speed(70.0, cohort.input_speed))
        assert cohort.sample_points[0] == (0.0, 3.0)
        assert cohort.sample_points[-1][1] <= 0.0
    distances = [cohort.max_distance for cohort in cohorts]
    assert distances == sorted(distances)
    assert distances[0] > 100.0


def test_project_cohorts_uses_engine_config() -> None:
    config = EngineConfig(cohorts=CohortTable(youth=(45.0,)))
    cohorts = project_cohorts(60.0, 20.0, SkillLevel.YOUTH, config)
    assert [cohort.input_speed for cohort in cohorts] == [45.0]


def test_project_cohorts_needs_both_averages() -> None:
    assert project_cohorts(None, 25.0, SkillLevel.PRO) == []
    assert project_cohorts(70.0, None, SkillLevel.PRO) == []
