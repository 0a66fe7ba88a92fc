"""Coach-facing text/table formatting helpers."""

from __future__ import annotations

from datetime import date
from typing import Sequence

import pandas as pd

from .cohorts import TrajectoryCohort


def format_day_label(day: date) -> str:
    """Short axis label such as ``May 1``."""
    return f"{day.strftime('%b')} {day.day}"


def trend_summary_text(summary: dict[str, float | int]) -> str:
    """Create the text block shown above the squared-up trend chart."""
    if int(summary.get("days", 0)) == 0:
        return "Squared Up Rate\n- No paired swings in this range"
    return (
        "Squared Up Rate\n"
        f"- Average rate: {float(summary['average_rate']):.1f}%\n"
        f"- Total squared up: {int(summary['total_qualified'])}/{int(summary['total_paired'])}\n"
        f"- Days with paired data: {int(summary['days'])}"
    )


def coach_daily_rate_table(daily_table: pd.DataFrame) -> pd.DataFrame:
    """Round and rename the daily-rate table for display."""
    table = daily_table.copy()
    table["Day"] = pd.to_datetime(table["day"]).dt.date.map(format_day_label)
    table = table.rename(
        columns={
            "total_paired": "Paired swings",
            "qualified_count": "Squared up",
            "rate_pct": "Rate (%)",
        }
    )
    table["Rate (%)"] = table["Rate (%)"].astype(float).round(1)
    return table[["Day", "Paired swings", "Squared up", "Rate (%)"]]


def cohort_table(cohorts: Sequence[TrajectoryCohort]) -> pd.DataFrame:
    """One row per pitch-speed cohort with its projected carry."""
    return pd.DataFrame(
        [
            {
                "Pitch speed (mph)": cohort.input_speed,
                "Exit speed (mph)": round(cohort.derived_achievable_speed, 1),
                "Max distance (ft)": round(cohort.max_distance),
            }
            for cohort in cohorts
        ],
        columns=["Pitch speed (mph)", "Exit speed (mph)", "Max distance (ft)"],
    )
