"""Raw sensor-record schemas and the immutable events built from them."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, tzinfo
import logging
import math
from pathlib import Path
from typing import Any, Iterable, Mapping, TypeVar

import pandas as pd
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .exceptions import MalformedRecordError
from .quality import QualityModelConfig, resolve_input_speed
from .timestamps import contact_timestamp_ms, motion_timestamp_ms, session_day_key

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class _SensorRecord(BaseModel):
    """Shared parsing rules for rows coming out of the data store or a CSV."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_missing_values(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return {key: value for key, value in data.items() if not _is_missing(value)}
        return data

    @field_validator("event_id", "session_key", mode="before", check_fields=False)
    @classmethod
    def _stringify_ids(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(int(value)) if float(value).is_integer() else str(value)
        return value


class MotionSwingRecord(_SensorRecord):
    """Bat-motion sensor row."""

    event_id: str = Field(validation_alias=AliasChoices("event_id", "id"))
    source_speed: float | None = Field(
        None, validation_alias=AliasChoices("source_speed", "bat_speed")
    )
    recorded_date: date = Field(description="Local calendar date of the swing")
    recorded_time: str | None = Field(None, description="Local HH:MM:SS of the swing")
    created_at_utc: str | None = Field(None, description="Precise absolute timestamp (ISO8601)")

    @field_validator("recorded_date", mode="before")
    @classmethod
    def _date_part_only(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value

    @field_validator("recorded_time", "created_at_utc", mode="before")
    @classmethod
    def _text_or_none(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.isoformat()
        return value


class ContactSwingRecord(_SensorRecord):
    """Ball-contact sensor row."""

    event_id: str = Field(validation_alias=AliasChoices("event_id", "id"))
    achieved_speed: float | None = Field(
        None, validation_alias=AliasChoices("achieved_speed", "exit_velocity")
    )
    input_speed: float | None = Field(
        None, validation_alias=AliasChoices("input_speed", "pitch_velocity")
    )
    swing_timestamp: str | None = Field(None, description="ISO8601 or MM/DD/YYYY HH:MM:SS.sss")
    session_key: str = Field(validation_alias=AliasChoices("session_key", "session_id"))
    launch_angle: float | None = None

    @field_validator("input_speed", "launch_angle", mode="before")
    @classmethod
    def _lenient_float(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return float(value)
            except ValueError:
                return None
        return value

    @field_validator("swing_timestamp", mode="before")
    @classmethod
    def _timestamp_text(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.isoformat()
        return value


class ContactSessionRecord(_SensorRecord):
    """Grouping record that owns the calendar date of its contact swings."""

    session_key: str = Field(validation_alias=AliasChoices("session_key", "id"))
    session_date: str | datetime | date


@dataclass(frozen=True)
class MotionEvent:
    """Swing seen by the bat-motion sensor."""

    event_id: str
    source_speed: float
    timestamp_ms: int | None
    day_key: date


@dataclass(frozen=True)
class ContactEvent:
    """Ball contact seen by the ball-flight sensor."""

    event_id: str
    achieved_speed: float
    input_speed: float
    timestamp_ms: int | None
    session_key: str
    day_key: date
    launch_angle: float | None = None


def parse_records(
    model: type[RecordT], rows: Iterable[Mapping[str, Any]], source: str
) -> list[RecordT]:
    """Validate raw rows, reporting any shape problem as a MalformedRecordError."""
    parsed: list[RecordT] = []
    for index, row in enumerate(rows):
        if not isinstance(row, Mapping):
            raise MalformedRecordError(
                f"expected a mapping, got {type(row).__name__}", source=source, record_index=index
            )
        try:
            parsed.append(model.model_validate(row))
        except ValidationError as exc:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) or "<record>" for err in exc.errors())
            raise MalformedRecordError(
                f"invalid field(s): {fields}", source=source, record_index=index
            ) from exc
    return parsed


def build_motion_events(
    rows: Iterable[Mapping[str, Any]], tz: tzinfo | None = None
) -> list[MotionEvent]:
    """Motion events in input order; swings with a blank or non-positive speed are skipped."""
    events: list[MotionEvent] = []
    for record in parse_records(MotionSwingRecord, rows, "motion"):
        if record.source_speed is None or record.source_speed <= 0:
            logger.debug("Skipping motion record %s without a positive speed", record.event_id)
            continue
        events.append(
            MotionEvent(
                event_id=record.event_id,
                source_speed=record.source_speed,
                timestamp_ms=motion_timestamp_ms(
                    record.created_at_utc, record.recorded_date, record.recorded_time, tz
                ),
                day_key=record.recorded_date,
            )
        )
    return events


def build_session_days(
    rows: Iterable[Mapping[str, Any]], tz: tzinfo | None = None
) -> dict[str, date]:
    """Session key -> local calendar day lookup."""
    days: dict[str, date] = {}
    for record in parse_records(ContactSessionRecord, rows, "session"):
        day = session_day_key(record.session_date, tz)
        if day is None:
            logger.debug("Session %s has an unparseable date %r", record.session_key, record.session_date)
            continue
        days[record.session_key] = day
    return days


def build_contact_events(
    rows: Iterable[Mapping[str, Any]],
    session_days: Mapping[str, date],
    tz: tzinfo | None = None,
    quality: QualityModelConfig = QualityModelConfig(),
) -> list[ContactEvent]:
    """Contact events in input order, placed on their session's day."""
    events: list[ContactEvent] = []
    skipped_no_session = 0
    for record in parse_records(ContactSwingRecord, rows, "contact"):
        if record.achieved_speed is None or record.achieved_speed <= 0:
            logger.debug("Skipping contact record %s without a positive speed", record.event_id)
            continue
        day = session_days.get(record.session_key)
        if day is None:
            skipped_no_session += 1
            continue
        events.append(
            ContactEvent(
                event_id=record.event_id,
                achieved_speed=record.achieved_speed,
                input_speed=resolve_input_speed(record.input_speed, quality),
                timestamp_ms=contact_timestamp_ms(record.swing_timestamp, tz),
                session_key=record.session_key,
                day_key=day,
                launch_angle=record.launch_angle,
            )
        )
    if skipped_no_session:
        logger.debug("Skipped %d contact records without a dated session", skipped_no_session)
    return events


def read_records_csv(csv_path: str | Path) -> list[dict[str, Any]]:
    """Load a CSV export as raw row mappings; blank cells are dropped during validation."""
    df = pd.read_csv(csv_path, dtype=str)
    return df.to_dict(orient="records")


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False
