"""Pair motion-sensor swings with contact-sensor swings recorded near the same instant."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
import logging
import math
from typing import Iterable, Protocol, Sequence, TypeVar

import numpy as np
from scipy.optimize import linear_sum_assignment

from .constants import MATCH_TOLERANCE_SECONDS
from .records import ContactEvent, MotionEvent

logger = logging.getLogger(__name__)

MATCH_STRATEGIES = ("greedy", "optimal")


class _DayKeyed(Protocol):
    day_key: date


EventT = TypeVar("EventT", bound=_DayKeyed)


@dataclass(frozen=True)
class MatchConfig:
    """Pairing window between the two sensor clocks."""

    tolerance_s: float = MATCH_TOLERANCE_SECONDS

    def __post_init__(self) -> None:
        if not math.isfinite(self.tolerance_s) or self.tolerance_s < 0:
            raise ValueError("tolerance_s must be a finite number >= 0")


@dataclass(frozen=True)
class MatchedPair:
    """One motion swing paired with one contact swing."""

    motion: MotionEvent
    contact: ContactEvent
    time_delta_s: float

    @property
    def day_key(self) -> date:
        return self.contact.day_key


def group_by_day(events: Iterable[EventT]) -> dict[date, list[EventT]]:
    """Bucket events by calendar day, keeping input order inside each bucket."""
    buckets: dict[date, list[EventT]] = defaultdict(list)
    for event in events:
        buckets[event.day_key].append(event)
    return dict(buckets)


def time_delta_s(motion: MotionEvent, contact: ContactEvent) -> float:
    """Absolute clock difference in seconds; infinite when either side is unparseable."""
    if motion.timestamp_ms is None or contact.timestamp_ms is None:
        return float("inf")
    return abs(motion.timestamp_ms - contact.timestamp_ms) / 1000.0


def match_swings(
    motion_events: Sequence[MotionEvent],
    contact_events: Sequence[ContactEvent],
    config: MatchConfig = MatchConfig(),
    *,
    strategy: str = "greedy",
) -> list[MatchedPair]:
    """Pair events day by day within the tolerance window, one-to-one.

    The default ``greedy`` strategy walks motion events in input order and gives
    each one the nearest unconsumed contact event, so input order decides which
    pairs form. ``optimal`` minimizes the summed time delta per day instead.
    """
    if strategy not in MATCH_STRATEGIES:
        raise ValueError(f"Unknown match strategy {strategy!r}; expected one of {MATCH_STRATEGIES}")

    motion_by_day = group_by_day(motion_events)
    contact_by_day = group_by_day(contact_events)
    match_day = _greedy_day if strategy == "greedy" else _optimal_day

    pairs: list[MatchedPair] = []
    for day in sorted(motion_by_day.keys() & contact_by_day.keys()):
        day_pairs = match_day(motion_by_day[day], contact_by_day[day], config.tolerance_s)
        logger.debug(
            "%s: %d motion / %d contact -> %d pairs",
            day.isoformat(),
            len(motion_by_day[day]),
            len(contact_by_day[day]),
            len(day_pairs),
        )
        pairs.extend(day_pairs)

    logger.info(
        "Matched %d pairs from %d motion and %d contact events (%s, %.1fs window)",
        len(pairs),
        len(motion_events),
        len(contact_events),
        strategy,
        config.tolerance_s,
    )
    return pairs


def _greedy_day(
    motions: Sequence[MotionEvent], contacts: Sequence[ContactEvent], tolerance_s: float
) -> list[MatchedPair]:
    consumed: set[int] = set()
    pairs: list[MatchedPair] = []
    for motion in motions:
        best_index: int | None = None
        best_delta = float("inf")
        for index, contact in enumerate(contacts):
            if index in consumed:
                continue
            delta = time_delta_s(motion, contact)
            # Strict comparison: the first contact seen wins a tie.
            if delta <= tolerance_s and delta < best_delta:
                best_index = index
                best_delta = delta
        if best_index is None:
            continue
        consumed.add(best_index)
        pairs.append(MatchedPair(motion, contacts[best_index], best_delta))
    return pairs


def _optimal_day(
    motions: Sequence[MotionEvent], contacts: Sequence[ContactEvent], tolerance_s: float
) -> list[MatchedPair]:
    deltas = np.array([[time_delta_s(m, c) for c in contacts] for m in motions], dtype=float)
    admissible = np.isfinite(deltas) & (deltas <= tolerance_s)
    if not admissible.any():
        return []

    # Inadmissible cells get a cost larger than any feasible assignment so the
    # solver maximizes the number of pairs first and total delta second.
    big = (tolerance_s + 1.0) * (min(len(motions), len(contacts)) + 1)
    cost = np.where(admissible, deltas, big)
    rows, cols = linear_sum_assignment(cost)

    # Row indices come back sorted, so pairs follow motion input order.
    return [
        MatchedPair(motions[r], contacts[c], float(deltas[r, c]))
        for r, c in zip(rows, cols)
        if admissible[r, c]
    ]
