"""Skill-level cohorts of hypothetical pitch speeds and their projected flights."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import TYPE_CHECKING

from .quality import QualityModelConfig, max_potential_speed
from .trajectory import FlightModelConfig, Point, simulate

if TYPE_CHECKING:
    from .config import EngineConfig

logger = logging.getLogger(__name__)


class SkillLevel(str, Enum):
    """Coarse playing level used to pick pitch-speed cohorts."""

    YOUTH = "youth"
    HIGH_SCHOOL = "high_school"
    COLLEGE = "college"
    PRO = "pro"


# First matching level wins, in this order.
LEVEL_TOKENS: tuple[tuple[SkillLevel, tuple[str, ...]], ...] = (
    (SkillLevel.YOUTH, ("youth", "12u", "14u", "middle")),
    (SkillLevel.HIGH_SCHOOL, ("high", "varsity")),
    (SkillLevel.COLLEGE, ("college", "ncaa", "juco")),
    (SkillLevel.PRO, ("pro", "mlb", "milb")),
)


@dataclass(frozen=True)
class CohortTable:
    """Pitch speeds (mph) simulated for each skill level."""

    youth: tuple[float, ...] = (50.0, 60.0, 70.0)
    high_school: tuple[float, ...] = (70.0, 80.0, 90.0)
    college: tuple[float, ...] = (80.0, 90.0, 95.0)
    pro: tuple[float, ...] = (80.0, 90.0, 95.0)
    fallback_level: str = SkillLevel.HIGH_SCHOOL.value

    def __post_init__(self) -> None:
        if self.fallback_level not in {level.value for level in SkillLevel}:
            raise ValueError(f"fallback_level must be one of {[level.value for level in SkillLevel]}")


@dataclass(frozen=True)
class TrajectoryCohort:
    """Projected flight for one hypothetical pitch speed."""

    input_speed: float
    derived_achievable_speed: float
    max_distance: float
    sample_points: tuple[Point, ...]


def classify_level(play_level: str | None) -> SkillLevel | None:
    """Best-effort, case-insensitive level from free-text athlete metadata."""
    if not play_level:
        return None
    text = play_level.strip().lower()
    for level, tokens in LEVEL_TOKENS:
        if any(token in text for token in tokens):
            return level
    return None


def cohort_speeds(level: SkillLevel | str | None, table: CohortTable = CohortTable()) -> tuple[float, ...]:
    """Pitch speeds for a level; unknown levels use the table's fallback level."""
    key = level.value if isinstance(level, SkillLevel) else level
    if key not in {member.value for member in SkillLevel}:
        key = table.fallback_level
    return tuple(getattr(table, key))


def project_cohorts(
    avg_source_speed: float | None,
    avg_launch_angle: float | None,
    level: SkillLevel | str | None,
    config: EngineConfig | None = None,
) -> list[TrajectoryCohort]:
    """Simulate one flight per cohort speed from an athlete's average swing."""
    if avg_source_speed is None or avg_launch_angle is None:
        return []

    quality = config.quality if config is not None else QualityModelConfig()
    flight = config.flight if config is not None else FlightModelConfig()
    table = config.cohorts if config is not None else CohortTable()

    cohorts: list[TrajectoryCohort] = []
    for input_speed in cohort_speeds(level, table):
        exit_speed = max_potential_speed(avg_source_speed, input_speed, quality)
        result = simulate(exit_speed, avg_launch_angle, flight)
        cohorts.append(
            TrajectoryCohort(
                input_speed=input_speed,
                derived_achievable_speed=exit_speed,
                max_distance=result.max_distance,
                sample_points=result.sample_points,
            )
        )
        logger.debug("Cohort %.0f mph -> %.1f mph exit, %.1f ft", input_speed, exit_speed, result.max_distance)
    return cohorts
