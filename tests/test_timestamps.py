from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from paired_swings.timestamps import (
    coerce_day,
    contact_timestamp_ms,
    motion_timestamp_ms,
    session_day_key,
    to_epoch_ms,
)

UTC = timezone.utc
NEW_YORK = ZoneInfo("America/New_York")


def _ms(*args: int) -> int:
    return to_epoch_ms(datetime(*args, tzinfo=UTC))


def test_contact_slash_format_keeps_milliseconds() -> None:
    assert contact_timestamp_ms("05/01/2024 10:00:03.250", UTC) == _ms(2024, 5, 1, 10, 0, 3) + 250
    assert contact_timestamp_ms("5/1/2024 10:00:03", UTC) == _ms(2024, 5, 1, 10, 0, 3)


def test_contact_iso_format_is_absolute() -> None:
    assert contact_timestamp_ms("2024-05-01T10:00:03Z", NEW_YORK) == _ms(2024, 5, 1, 10, 0, 3)
    assert contact_timestamp_ms("2024-05-01T10:00:03.500+00:00", UTC) == _ms(2024, 5, 1, 10, 0, 3) + 500


def test_contact_generic_fallback() -> None:
    assert contact_timestamp_ms("May 1 2024 10:00:03", UTC) == _ms(2024, 5, 1, 10, 0, 3)


def test_malformed_timestamps_are_unmatchable() -> None:
    assert contact_timestamp_ms("not a time", UTC) is None
    assert contact_timestamp_ms("13/45/2024 10:00:03", UTC) is None
    assert contact_timestamp_ms("", UTC) is None
    assert contact_timestamp_ms(None, UTC) is None
    assert motion_timestamp_ms("garbage", "2024-05-01", "10:00:00", UTC) is None
    assert motion_timestamp_ms(None, "2024-05-01", "10:xx:00", UTC) is None
    assert motion_timestamp_ms(None, None, "10:00:00", UTC) is None


def test_motion_precise_field_wins_over_local_fields() -> None:
    millis = motion_timestamp_ms("2024-05-01T10:00:00.123Z", "2024-04-30", "09:00:00", UTC)
    assert millis == _ms(2024, 5, 1, 10, 0, 0) + 123


def test_motion_local_fields_compose_and_drop_subseconds() -> None:
    assert motion_timestamp_ms(None, "2024-05-01", "10:00:00", UTC) == _ms(2024, 5, 1, 10)
    assert motion_timestamp_ms("  ", date(2024, 5, 1), "10:00:07.900", UTC) == _ms(2024, 5, 1, 10, 0, 7)
    assert motion_timestamp_ms(None, "2024-05-01", None, UTC) == _ms(2024, 5, 1)


def test_local_and_absolute_sources_share_one_clock() -> None:
    motion = motion_timestamp_ms(None, "2024-05-01", "10:00:00", NEW_YORK)
    contact = contact_timestamp_ms("2024-05-01T14:00:03Z", NEW_YORK)
    assert motion is not None and contact is not None
    assert contact - motion == 3000


def test_session_day_key_uses_local_calendar_day() -> None:
    assert session_day_key("2024-05-01", UTC) == date(2024, 5, 1)
    assert session_day_key("2024-05-01T23:30:00-04:00", UTC) == date(2024, 5, 2)
    assert session_day_key("2024-05-01T23:30:00-04:00", NEW_YORK) == date(2024, 5, 1)
    assert session_day_key(datetime(2024, 5, 2, 2, 0, tzinfo=UTC), NEW_YORK) == date(2024, 5, 1)
    assert session_day_key("nonsense", UTC) is None


def test_coerce_day() -> None:
    assert coerce_day("2024-05-01") == date(2024, 5, 1)
    assert coerce_day(datetime(2024, 5, 1, 12)) == date(2024, 5, 1)
    assert coerce_day("2024-02-30") is None
    assert coerce_day("05/01/2024") is None
