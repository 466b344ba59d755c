from __future__ import annotations

import datetime as dt
from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator

from weeklog.core.settings import Settings


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class Tag(_Node):
    title: str
    detail: str | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        if not value or any(char.isspace() for char in value):
            raise ValueError("tag title must be a non-empty token without whitespace")
        return value


class Tags(_Node):
    tags: list[Tag] = Field(default_factory=list)

    def titles(self) -> list[str]:
        return [tag.title for tag in self.tags]


class EventInfo(_Node):
    time: dt.time
    duration: dt.timedelta

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, value: dt.timedelta) -> dt.timedelta:
        if value < dt.timedelta(0):
            raise ValueError("duration must not be negative")
        return value

    def at(self, day: dt.date) -> dt.datetime:
        return dt.datetime.combine(day, self.time)


class Event(_Node):
    tags: Tags | None = None
    info: list[EventInfo] = Field(default_factory=list)


class DayRecord(_Node):
    date: dt.date
    events: list[Event] = Field(default_factory=list)


class File(_Node):
    settings: Settings | None = None
    records: list[DayRecord] = Field(default_factory=list)

    def entries(self) -> Iterator[tuple[DayRecord, Event, EventInfo]]:
        """Yield every time entry with its day record and event, in document order."""
        for record in self.records:
            for event in record.events:
                for info in event.info:
                    yield record, event, info
