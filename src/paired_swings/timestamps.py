"""Timestamp normalization for motion-sensor and contact-sensor records.

Both sources are reduced to integer epoch milliseconds so their clocks can be
compared directly. Unparseable text never raises: it yields ``None``, which the
matcher treats as an unmatchable instant.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone, tzinfo
import logging
import re

import pandas as pd

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_SLASH_TIMESTAMP = re.compile(
    r"^(?P<month>\d{1,2})/(?P<day>\d{1,2})/(?P<year>\d{4})\s+"
    r"(?P<hour>\d{1,2}):(?P<minute>\d{1,2}):(?P<second>\d{1,2}(?:\.\d*)?)$"
)
_ISO_DATE = re.compile(r"^(?P<year>\d{4})-(?P<month>\d{1,2})-(?P<day>\d{1,2})$")
_CLOCK_TIME = re.compile(r"^(?P<hour>\d{1,2}):(?P<minute>\d{1,2}):(?P<second>\d{1,2}(?:\.\d*)?)$")


def to_epoch_ms(moment: datetime, tz: tzinfo | None = None) -> int:
    """Epoch milliseconds for an aware or local-naive datetime."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=tz) if tz is not None else moment.astimezone()
    return (moment - EPOCH) // timedelta(milliseconds=1)


def local_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: float = 0.0,
    tz: tzinfo | None = None,
) -> datetime | None:
    """Build a local wall-clock instant; fractional seconds keep millisecond precision."""
    whole_seconds = int(second)
    millis = int((second - whole_seconds) * 1000)
    try:
        moment = datetime(year, month, day, hour, minute, whole_seconds, millis * 1000)
    except ValueError:
        return None
    if tz is not None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone()


def parse_iso_timestamp(value: str | datetime | None, tz: tzinfo | None = None) -> int | None:
    """Parse an ISO-8601 instant; naive values are read as local time."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_epoch_ms(value, tz)
    text = value.strip()
    if not text:
        return None
    try:
        moment = datetime.fromisoformat(text)
    except ValueError:
        return parse_generic_timestamp(text, tz)
    return to_epoch_ms(moment, tz)


def parse_generic_timestamp(value: str, tz: tzinfo | None = None) -> int | None:
    """Last-resort parse for free-form timestamp text."""
    try:
        parsed = pd.to_datetime(value, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        parsed = pd.NaT
    if pd.isna(parsed):
        logger.debug("Unparseable timestamp %r treated as unmatchable", value)
        return None
    return to_epoch_ms(parsed.to_pydatetime(), tz)


def motion_timestamp_ms(
    created_at_utc: str | datetime | None,
    recorded_date: date | str | None,
    recorded_time: str | None = None,
    tz: tzinfo | None = None,
) -> int | None:
    """Motion-sensor instant: the precise absolute field wins, else local date + time."""
    if isinstance(created_at_utc, datetime) or (created_at_utc and created_at_utc.strip()):
        return parse_iso_timestamp(created_at_utc, tz)

    day = coerce_day(recorded_date)
    if day is None:
        logger.debug("Motion record without a usable recorded_date: %r", recorded_date)
        return None

    clock = (recorded_time or "00:00:00").strip()
    match = _CLOCK_TIME.match(clock)
    if not match:
        logger.debug("Unparseable recorded_time %r treated as unmatchable", recorded_time)
        return None

    # Sub-second digits are dropped.
    moment = local_datetime(
        day.year,
        day.month,
        day.day,
        int(match["hour"]),
        int(match["minute"]),
        int(float(match["second"])),
        tz,
    )
    return to_epoch_ms(moment, tz) if moment is not None else None


def contact_timestamp_ms(value: str | datetime | None, tz: tzinfo | None = None) -> int | None:
    """Contact-sensor instant from ISO text or ``MM/DD/YYYY HH:MM:SS.sss`` local text."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_epoch_ms(value, tz)

    text = value.strip()
    if not text:
        return None
    if "T" in text or "Z" in text:
        return parse_iso_timestamp(text, tz)

    match = _SLASH_TIMESTAMP.match(text)
    if not match:
        return parse_generic_timestamp(text, tz)

    moment = local_datetime(
        int(match["year"]),
        int(match["month"]),
        int(match["day"]),
        int(match["hour"]),
        int(match["minute"]),
        _parse_seconds(match["second"]),
        tz,
    )
    if moment is None:
        logger.debug("Out-of-range contact timestamp %r treated as unmatchable", value)
        return None
    return to_epoch_ms(moment, tz)


def session_day_key(session_date: str | date | datetime | None, tz: tzinfo | None = None) -> date | None:
    """Local calendar day a contact session belongs to."""
    if session_date is None:
        return None
    if isinstance(session_date, datetime):
        return _local_day(session_date, tz)
    if isinstance(session_date, date):
        return session_date

    text = session_date.strip()
    if not text:
        return None
    day = coerce_day(text)
    if day is not None:
        return day

    millis = parse_iso_timestamp(text, tz)
    if millis is None:
        return None
    moment = EPOCH + timedelta(milliseconds=millis)
    return _local_day(moment, tz)


def coerce_day(value: date | str | None) -> date | None:
    """Calendar day from a date or a ``YYYY-MM-DD`` string."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    match = _ISO_DATE.match(value.strip())
    if not match:
        return None
    try:
        return date(int(match["year"]), int(match["month"]), int(match["day"]))
    except ValueError:
        return None


def _local_day(moment: datetime, tz: tzinfo | None) -> date:
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(tz).date()


def _parse_seconds(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        return 0.0
