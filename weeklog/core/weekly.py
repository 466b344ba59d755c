"""Weekly totals over a parsed log.

The week starts at an anchor weekday and time of day, taken from the log's
settings block or, without one, from the weekday seven days before ``today``
at 06:00.  Every entry at or after the most recent week start is counted.
"""

from __future__ import annotations

import datetime as dt
import logging
from collections import defaultdict
from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict

from weeklog.core.errors import NotPastError
from weeklog.core.settings import Settings, Weekday
from weeklog.core.types import Event, EventInfo, File

logger = logging.getLogger(__name__)

DEFAULT_START_TIME = dt.time(6, 0)
ONE_DAY = dt.timedelta(days=1)
ONE_WEEK = dt.timedelta(days=7)


class WeeklySummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    window_start: dt.datetime
    total: dt.timedelta
    entry_count: int
    by_tag: dict[str, dt.timedelta]


def _local_naive(today: dt.datetime) -> dt.datetime:
    if today.tzinfo is None:
        return today
    return today.astimezone().replace(tzinfo=None)


def resolve_week_start(settings: Settings | None, today: dt.datetime) -> tuple[Weekday, dt.time]:
    if settings is not None:
        return settings.start.weekday, settings.start.time
    return Weekday.of(today - ONE_WEEK), DEFAULT_START_TIME


def window_start(file: File, today: dt.datetime) -> dt.datetime:
    today = _local_naive(today)
    weekday, start_time = resolve_week_start(file.settings, today)

    if Weekday.of(today) == weekday:
        day = today - ONE_WEEK if today.time() < start_time else today
    else:
        day = today
        while Weekday.of(day) != weekday:
            day -= ONE_DAY

    start = dt.datetime.combine(day.date(), start_time)
    logger.debug("week anchor %s %s, window starts %s", weekday.value, start_time, start.isoformat())
    return start


def _entries_in_window(file: File, start: dt.datetime) -> Iterator[tuple[Event, EventInfo]]:
    for record, event, info in file.entries():
        if record.date < start.date():
            continue
        if info.at(record.date) < start:
            continue
        yield event, info


def check_is_past(file: File, today: dt.datetime) -> None:
    today = _local_naive(today)
    future: list[EventInfo] = [info for record, _event, info in file.entries() if info.at(record.date) > today]
    if future:
        raise NotPastError(future)


def weekly_total(file: File, today: dt.datetime, *, require_past: bool = False) -> dt.timedelta:
    """Sum the durations of every entry at or after the current week start.

    The total is an unbounded ``timedelta``; a week of more than 24 hours
    does not wrap around.
    """
    if require_past:
        check_is_past(file, today)

    start = window_start(file, today)
    return sum((info.duration for _event, info in _entries_in_window(file, start)), dt.timedelta(0))


def weekly_summary(file: File, today: dt.datetime, *, require_past: bool = False) -> WeeklySummary:
    if require_past:
        check_is_past(file, today)

    start = window_start(file, today)
    total = dt.timedelta(0)
    count = 0
    by_tag: dict[str, dt.timedelta] = defaultdict(dt.timedelta)
    for event, info in _entries_in_window(file, start):
        total += info.duration
        count += 1
        titles = event.tags.titles() if event.tags is not None and event.tags.tags else [""]
        for title in titles:
            by_tag[title] += info.duration

    return WeeklySummary(window_start=start, total=total, entry_count=count, by_tag=dict(by_tag))


def format_duration(delta: dt.timedelta) -> str:
    seconds = int(delta.total_seconds())
    hours, rest = divmod(seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours}:{minutes:02d}:{seconds:02d}"
