"""Daily squared-up rate series built from matched swing pairs."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
import logging
from typing import Sequence

import numpy as np
import pandas as pd

from .matching import MatchedPair, group_by_day
from .quality import QualityModelConfig, assess_contact

logger = logging.getLogger(__name__)


class TimeWindow(str, Enum):
    """Look-back windows offered for trend charts."""

    ONE_MONTH = "1month"
    THREE_MONTHS = "3months"
    SIX_MONTHS = "6months"
    ALL = "all"


WINDOW_DAYS = {
    TimeWindow.ONE_MONTH: 30,
    TimeWindow.THREE_MONTHS: 90,
    TimeWindow.SIX_MONTHS: 180,
}


@dataclass(frozen=True)
class DailyRate:
    """Squared-up rate for one calendar day with at least one pair."""

    day_key: date
    total_paired: int
    qualified_count: int
    rate: float


def window_start(window: TimeWindow | str, today: date) -> date | None:
    """Inclusive first day of a look-back window; None means unbounded."""
    window = TimeWindow(window)
    days = WINDOW_DAYS.get(window)
    if days is None:
        return None
    return today - timedelta(days=days)


def build_daily_rate(day: date, total_paired: int, qualified_count: int) -> DailyRate:
    """Construct a DailyRate, refusing empty buckets."""
    if total_paired <= 0:
        raise ValueError(f"DailyRate for {day.isoformat()} needs total_paired > 0")
    if not 0 <= qualified_count <= total_paired:
        raise ValueError("qualified_count must be within [0, total_paired]")
    return DailyRate(
        day_key=day,
        total_paired=total_paired,
        qualified_count=qualified_count,
        rate=qualified_count / total_paired * 100.0,
    )


def aggregate_daily_rates(
    pairs: Sequence[MatchedPair],
    config: QualityModelConfig = QualityModelConfig(),
    *,
    since: date | None = None,
    until: date | None = None,
) -> list[DailyRate]:
    """Group pairs by contact day and reduce each day to a squared-up rate.

    ``since`` and ``until`` are inclusive; either may be None. Days without
    pairs are absent from the result rather than reported as 0%.
    """
    in_range = [
        pair
        for pair in pairs
        if (since is None or pair.day_key >= since) and (until is None or pair.day_key <= until)
    ]

    rates: list[DailyRate] = []
    for day, day_pairs in sorted(group_by_day(in_range).items()):
        if not day_pairs:
            continue
        qualified = sum(1 for pair in day_pairs if assess_contact(pair, config).qualified)
        rates.append(build_daily_rate(day, len(day_pairs), qualified))

    logger.info(
        "Aggregated %d pairs into %d daily rates (%d pairs outside range)",
        len(in_range),
        len(rates),
        len(pairs) - len(in_range),
    )
    return rates


def summarize_daily_rates(rates: Sequence[DailyRate]) -> dict[str, float | int]:
    """Headline numbers shown above the daily trend chart."""
    if not rates:
        return {"days": 0, "average_rate": 0.0, "total_paired": 0, "total_qualified": 0}
    return {
        "days": len(rates),
        "average_rate": float(np.mean([rate.rate for rate in rates])),
        "total_paired": int(sum(rate.total_paired for rate in rates)),
        "total_qualified": int(sum(rate.qualified_count for rate in rates)),
    }


def daily_rate_table(rates: Sequence[DailyRate]) -> pd.DataFrame:
    """Chart-ready table, one row per day in ascending order."""
    columns = ["day", "total_paired", "qualified_count", "rate_pct"]
    if not rates:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame(
        [
            {
                "day": pd.Timestamp(rate.day_key),
                "total_paired": rate.total_paired,
                "qualified_count": rate.qualified_count,
                "rate_pct": rate.rate,
            }
            for rate in rates
        ],
        columns=columns,
    )
