"""End-to-end paired-swing analysis: records in, chart-ready series out."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
import logging
from typing import Any, Iterable, Mapping, Sequence

import numpy as np
import pandas as pd

from .aggregation import DailyRate, aggregate_daily_rates, summarize_daily_rates
from .cohorts import SkillLevel, TrajectoryCohort, classify_level, project_cohorts
from .config import EngineConfig, default_engine_config
from .matching import MatchedPair, match_swings
from .quality import assess_contact
from .records import (
    ContactEvent,
    MotionEvent,
    build_contact_events,
    build_motion_events,
    build_session_days,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AthleteAverages:
    """Per-athlete swing averages over the requested date range."""

    avg_source_speed: float | None
    max_source_speed: float | None
    avg_achieved_speed: float | None
    max_achieved_speed: float | None
    avg_launch_angle: float | None


@dataclass(frozen=True)
class PairedAnalysisResults:
    """Container for one-pass analysis outputs."""

    config: EngineConfig
    motion_events: list[MotionEvent]
    contact_events: list[ContactEvent]
    pairs: list[MatchedPair]
    daily_rates: list[DailyRate]
    rate_summary: dict[str, float | int]
    athlete: AthleteAverages
    level: SkillLevel | None
    cohorts: list[TrajectoryCohort]


def summarize_athlete(
    motion_events: Sequence[MotionEvent],
    contact_events: Sequence[ContactEvent],
    *,
    since: date | None = None,
    until: date | None = None,
) -> AthleteAverages:
    """Average and best swing/contact speeds plus average launch angle."""
    motions = [e for e in motion_events if _in_range(e.day_key, since, until)]
    contacts = [e for e in contact_events if _in_range(e.day_key, since, until)]

    source = np.array([e.source_speed for e in motions if e.source_speed > 0], dtype=float)
    achieved = np.array([e.achieved_speed for e in contacts if e.achieved_speed > 0], dtype=float)
    angles = np.array([e.launch_angle for e in contacts if e.launch_angle is not None], dtype=float)
    angles = angles[~np.isnan(angles)]

    return AthleteAverages(
        avg_source_speed=_mean_or_none(source),
        max_source_speed=float(source.max()) if source.size else None,
        avg_achieved_speed=_mean_or_none(achieved),
        max_achieved_speed=float(achieved.max()) if achieved.size else None,
        avg_launch_angle=_mean_or_none(angles),
    )


def run_paired_analysis(
    motion_records: Iterable[Mapping[str, Any]],
    contact_records: Iterable[Mapping[str, Any]],
    session_records: Iterable[Mapping[str, Any]],
    *,
    level_text: str | None = None,
    level: SkillLevel | None = None,
    since: date | None = None,
    until: date | None = None,
    strategy: str = "greedy",
    config: EngineConfig | None = None,
) -> PairedAnalysisResults:
    """Run both pipelines once: daily squared-up rates and cohort trajectories.

    Input order of ``motion_records`` and ``contact_records`` is preserved and
    decides which pairs form under the greedy matcher.
    """
    active = config or default_engine_config()
    tz = active.tz

    motion_events = build_motion_events(motion_records, tz)
    session_days = build_session_days(session_records, tz)
    contact_events = build_contact_events(contact_records, session_days, tz, active.quality)
    logger.info(
        "Loaded %d motion events, %d contact events across %d sessions",
        len(motion_events),
        len(contact_events),
        len(session_days),
    )

    pairs = match_swings(motion_events, contact_events, active.matching, strategy=strategy)
    daily_rates = aggregate_daily_rates(pairs, active.quality, since=since, until=until)

    athlete = summarize_athlete(motion_events, contact_events, since=since, until=until)
    active_level = level if level is not None else classify_level(level_text)
    cohorts = project_cohorts(
        athlete.avg_source_speed, athlete.avg_launch_angle, active_level, active
    )
    if not cohorts:
        logger.info("No cohort projection: missing average swing speed or launch angle")

    return PairedAnalysisResults(
        config=active,
        motion_events=motion_events,
        contact_events=contact_events,
        pairs=pairs,
        daily_rates=daily_rates,
        rate_summary=summarize_daily_rates(daily_rates),
        athlete=athlete,
        level=active_level,
        cohorts=cohorts,
    )


def pair_table(pairs: Sequence[MatchedPair], config: EngineConfig | None = None) -> pd.DataFrame:
    """One row per matched pair with its contact-quality scores."""
    quality = (config or default_engine_config()).quality
    rows: list[dict[str, object]] = []
    for pair in pairs:
        scored = assess_contact(pair, quality)
        rows.append(
            {
                "day": pd.Timestamp(pair.day_key),
                "motion_id": pair.motion.event_id,
                "contact_id": pair.contact.event_id,
                "time_delta_s": pair.time_delta_s,
                "source_speed": pair.motion.source_speed,
                "input_speed": pair.contact.input_speed,
                "achieved_speed": pair.contact.achieved_speed,
                "max_potential_speed": scored.max_potential_speed,
                "efficiency_pct": scored.efficiency,
                "squared_up": scored.qualified,
            }
        )
    return pd.DataFrame(rows)


def trajectory_table(cohorts: Sequence[TrajectoryCohort]) -> pd.DataFrame:
    """Long-format polyline table (one row per sample point) for plotting."""
    frames = [
        pd.DataFrame(
            {
                "input_speed": cohort.input_speed,
                "point_index": np.arange(len(cohort.sample_points)),
                "x_ft": [x for x, _ in cohort.sample_points],
                "y_ft": [y for _, y in cohort.sample_points],
            }
        )
        for cohort in cohorts
    ]
    if not frames:
        return pd.DataFrame(columns=["input_speed", "point_index", "x_ft", "y_ft"])
    return pd.concat(frames, ignore_index=True)


def _in_range(day: date, since: date | None, until: date | None) -> bool:
    return (since is None or day >= since) and (until is None or day <= until)


def _mean_or_none(values: np.ndarray) -> float | None:
    return float(values.mean()) if values.size else None
