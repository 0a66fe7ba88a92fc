"""Paired swing-sensor correlation and batted-ball trajectory engine."""

from .aggregation import (
    DailyRate,
    TimeWindow,
    aggregate_daily_rates,
    daily_rate_table,
    summarize_daily_rates,
    window_start,
)
from .cohorts import (
    CohortTable,
    SkillLevel,
    TrajectoryCohort,
    classify_level,
    cohort_speeds,
    project_cohorts,
)
from .config import (
    EngineConfig,
    clear_config_cache,
    default_engine_config,
    load_engine_config,
)
from .exceptions import ConfigError, MalformedRecordError, PairedSwingsError
from .matching import MatchConfig, MatchedPair, match_swings
from .pipeline import (
    AthleteAverages,
    PairedAnalysisResults,
    pair_table,
    run_paired_analysis,
    summarize_athlete,
    trajectory_table,
)
from .quality import (
    ContactQuality,
    QualityModelConfig,
    assess_contact,
    contact_efficiency,
    max_potential_speed,
)
from .records import ContactEvent, MotionEvent, build_contact_events, build_motion_events
from .timestamps import contact_timestamp_ms, motion_timestamp_ms, session_day_key
from .trajectory import FlightModelConfig, TrajectoryResult, carry_distance, simulate

__all__ = [
    "AthleteAverages",
    "CohortTable",
    "ConfigError",
    "ContactEvent",
    "ContactQuality",
    "DailyRate",
    "EngineConfig",
    "FlightModelConfig",
    "MalformedRecordError",
    "MatchConfig",
    "MatchedPair",
    "MotionEvent",
    "PairedAnalysisResults",
    "PairedSwingsError",
    "QualityModelConfig",
    "SkillLevel",
    "TimeWindow",
    "TrajectoryCohort",
    "TrajectoryResult",
    "aggregate_daily_rates",
    "assess_contact",
    "build_contact_events",
    "build_motion_events",
    "carry_distance",
    "classify_level",
    "clear_config_cache",
    "cohort_speeds",
    "contact_efficiency",
    "contact_timestamp_ms",
    "daily_rate_table",
    "default_engine_config",
    "load_engine_config",
    "match_swings",
    "max_potential_speed",
    "motion_timestamp_ms",
    "pair_table",
    "project_cohorts",
    "run_paired_analysis",
    "session_day_key",
    "simulate",
    "summarize_athlete",
    "summarize_daily_rates",
    "trajectory_table",
    "window_start",
]
