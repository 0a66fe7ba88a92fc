from __future__ import annotations

from datetime import date
import math

import numpy as np
import pytest

from paired_swings.matching import MatchConfig, group_by_day, match_swings, time_delta_s
from paired_swings.records import ContactEvent, MotionEvent

DAY = date(2024, 5, 1)
NEXT_DAY = date(2024, 5, 2)


def _motion(event_id: str, seconds: float | None, day: date = DAY, speed: float = 70.0) -> MotionEvent:
    millis = None if seconds is None else int(round(seconds * 1000))
    return MotionEvent(event_id=event_id, source_speed=speed, timestamp_ms=millis, day_key=day)


def _contact(event_id: str, seconds: float | None, day: date = DAY, achieved: float = 95.0) -> ContactEvent:
    millis = None if seconds is None else int(round(seconds * 1000))
    return ContactEvent(
        event_id=event_id,
        achieved_speed=achieved,
        input_speed=75.0,
        timestamp_ms=millis,
        session_key="s1",
        day_key=day,
    )


def _ids(pairs) -> list[tuple[str, str]]:
    return [(pair.motion.event_id, pair.contact.event_id) for pair in pairs]


def test_single_pair_within_window() -> None:
    pairs = match_swings([_motion("m1", 0)], [_contact("c1", 3)])
    assert _ids(pairs) == [("m1", "c1")]
    assert pairs[0].time_delta_s == pytest.approx(3.0)
    assert pairs[0].day_key == DAY


def test_tolerance_is_inclusive() -> None:
    assert _ids(match_swings([_motion("m1", 0)], [_contact("c1", 7)])) == [("m1", "c1")]
    assert match_swings([_motion("m1", 0)], [_contact("c1", 7.5)]) == []
    tight = MatchConfig(tolerance_s=2.0)
    assert match_swings([_motion("m1", 0)], [_contact("c1", 3)], tight) == []


def test_each_contact_is_used_once() -> None:
    pairs = match_swings([_motion("m1", 0), _motion("m2", 1)], [_contact("c1", 0.5)])
    assert _ids(pairs) == [("m1", "c1")]


def test_greedy_order_decides_contested_contacts() -> None:
    motions = [_motion("m1", 4), _motion("m2", 0)]
    contacts = [_contact("c1", 2), _contact("c2", 9)]

    greedy = match_swings(motions, contacts)
    assert _ids(greedy) == [("m1", "c1")]

    reordered = match_swings(list(reversed(motions)), contacts)
    assert _ids(reordered) == [("m2", "c1"), ("m1", "c2")]


def test_optimal_strategy_maximizes_pairs() -> None:
    motions = [_motion("m1", 4), _motion("m2", 0)]
    contacts = [_contact("c1", 2), _contact("c2", 9)]
    pairs = match_swings(motions, contacts, strategy="optimal")
    assert _ids(pairs) == [("m1", "c2"), ("m2", "c1")]
    assert [pair.time_delta_s for pair in pairs] == pytest.approx([5.0, 2.0])


def test_tie_goes_to_first_contact_in_input_order() -> None:
    pairs = match_swings([_motion("m1", 5)], [_contact("c_early", 3), _contact("c_late", 7)])
    assert _ids(pairs) == [("m1", "c_early")]


def test_days_are_matched_independently() -> None:
    assert match_swings([_motion("m1", 0, DAY)], [_contact("c1", 0, NEXT_DAY)]) == []

    motions = [_motion("m2", 0, NEXT_DAY), _motion("m1", 0, DAY)]
    contacts = [_contact("c2", 1, NEXT_DAY), _contact("c1", 1, DAY)]
    assert _ids(match_swings(motions, contacts)) == [("m1", "c1"), ("m2", "c2")]


def test_unparseable_timestamps_never_pair() -> None:
    assert time_delta_s(_motion("m1", None), _contact("c1", None)) == float("inf")
    assert match_swings([_motion("m1", None)], [_contact("c1", None)]) == []
    assert match_swings([_motion("m1", 0)], [_contact("c1", None)], strategy="optimal") == []


def test_matching_is_deterministic() -> None:
    motions = [_motion(f"m{i}", i * 2.5) for i in range(10)]
    contacts = [_contact(f"c{i}", i * 2.5 + 1.0) for i in range(10)]
    assert match_swings(motions, contacts) == match_swings(motions, contacts)


@pytest.mark.parametrize("strategy", ["greedy", "optimal"])
def test_random_inputs_respect_pairing_invariants(strategy: str) -> None:
    rng = np.random.default_rng(7)
    motions = [
        _motion(f"m{i}", float(t), DAY if i % 3 else NEXT_DAY)
        for i, t in enumerate(rng.uniform(0, 120, size=40))
    ]
    contacts = [
        _contact(f"c{i}", float(t), DAY if i % 2 else NEXT_DAY)
        for i, t in enumerate(rng.uniform(0, 120, size=35))
    ]
    config = MatchConfig(tolerance_s=4.0)
    pairs = match_swings(motions, contacts, config, strategy=strategy)

    assert len({pair.motion.event_id for pair in pairs}) == len(pairs)
    assert len({pair.contact.event_id for pair in pairs}) == len(pairs)
    for pair in pairs:
        assert pair.motion.day_key == pair.contact.day_key
        assert pair.time_delta_s <= config.tolerance_s
        assert pair.time_delta_s == pytest.approx(time_delta_s(pair.motion, pair.contact))


def test_optimal_never_pairs_fewer_than_greedy() -> None:
    rng = np.random.default_rng(11)
    motions = [_motion(f"m{i}", float(t)) for i, t in enumerate(rng.uniform(0, 60, size=25))]
    contacts = [_contact(f"c{i}", float(t)) for i, t in enumerate(rng.uniform(0, 60, size=25))]
    greedy = match_swings(motions, contacts)
    optimal = match_swings(motions, contacts, strategy="optimal")
    assert len(optimal) >= len(greedy)


def test_unknown_strategy_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown match strategy"):
        match_swings([], [], strategy="closest")


def test_negative_tolerance_is_rejected() -> None:
    with pytest.raises(ValueError):
        MatchConfig(tolerance_s=-1.0)


@pytest.mark.parametrize("tolerance", [math.inf, math.nan])
def test_non_finite_tolerance_is_rejected(tolerance: float) -> None:
    with pytest.raises(ValueError, match="finite"):
        MatchConfig(tolerance_s=tolerance)


def test_optimal_skips_unparseable_timestamps_under_a_wide_window() -> None:
    motions = [_motion("m_bad", None), _motion("m1", 0)]
    contacts = [_contact("c1", 3600)]
    pairs = match_swings(motions, contacts, MatchConfig(tolerance_s=1e9), strategy="optimal")
    assert _ids(pairs) == [("m1", "c1")]


def test_group_by_day_keeps_input_order() -> None:
    events = [_motion("a", 0, NEXT_DAY), _motion("b", 0, DAY), _motion("c", 0, NEXT_DAY)]
    buckets = group_by_day(events)
    assert [e.event_id for e in buckets[NEXT_DAY]] == ["a", "c"]
    assert [e.event_id for e in buckets[DAY]] == ["b"]
