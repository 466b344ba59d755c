"""Week-start settings embedded at the top of a log file.

The block between the ``---`` delimiters is a TOML document::

    [start]
    weekday = "Mon"
    time = 08:00:00
"""

from __future__ import annotations

import datetime as dt
import tomllib
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from weeklog.core.errors import SettingsError


class Weekday(str, Enum):
    MON = "Mon"
    TUE = "Tue"
    WED = "Wed"
    THU = "Thu"
    FRI = "Fri"
    SAT = "Sat"
    SUN = "Sun"

    @classmethod
    def of(cls, day: dt.date) -> Weekday:
        return _ORDER[day.weekday()]

    @classmethod
    def parse(cls, value: str) -> Weekday:
        key = value.strip().lower()
        for member in cls:
            if key in (member.value.lower(), _FULL_NAMES[member]):
                return member
        raise ValueError(f"unknown weekday: {value!r}")


_ORDER = list(Weekday)
_FULL_NAMES = {
    Weekday.MON: "monday",
    Weekday.TUE: "tuesday",
    Weekday.WED: "wednesday",
    Weekday.THU: "thursday",
    Weekday.FRI: "friday",
    Weekday.SAT: "saturday",
    Weekday.SUN: "sunday",
}


class WeekStart(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    weekday: Weekday
    time: dt.time

    @field_validator("weekday", mode="before")
    @classmethod
    def normalize_weekday(cls, value: Any) -> Any:
        if isinstance(value, str) and not isinstance(value, Weekday):
            return Weekday.parse(value)
        return value

    @field_validator("time")
    @classmethod
    def validate_time(cls, value: dt.time) -> dt.time:
        if value.tzinfo is not None:
            raise ValueError("week start time must be a local time without an offset")
        return value


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    start: WeekStart


def load_settings(text: str) -> Settings:
    try:
        payload = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise SettingsError(f"invalid settings toml: {exc}", cause=exc) from exc

    try:
        return Settings.model_validate(payload)
    except ValidationError as exc:
        raise SettingsError(f"invalid settings schema: {exc}", cause=exc) from exc
