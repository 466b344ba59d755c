"""Recursive-descent parser for the weeklog text format.

A log is an optional settings block followed by day records::

    ---
    [start]
    weekday = "Mon"
    time = 08:00:00
    ---

    2024-5-6
    [work(project-x) urgent] 9:00 - 1h30m, 13:00 - 45m
    15:30 - 2h

    2024-5-7
    8:15 - 20m

Day records are separated by blank lines.  Each event line holds an optional
bracketed tag group and one or more comma-separated ``H:M - <duration>``
entries, where the duration is made of ``h``, ``m`` and ``s`` parts in that
order.  Every failure raises a ``ParseError`` subclass carrying the line and
column of the cursor.
"""

from __future__ import annotations

import datetime as dt
import logging
from pathlib import Path

from weeklog.core.errors import (
    ConfigDeserializeError,
    ExpectedCharsError,
    InvalidDateError,
    InvalidDurationFormatError,
    SettingsError,
    UnexpectedEofError,
)
from weeklog.core.scanner import DIGITS, Cursor
from weeklog.core.settings import Settings, load_settings
from weeklog.core.types import DayRecord, Event, EventInfo, File, Tag, Tags

logger = logging.getLogger(__name__)

SETTINGS_DELIMITER = "---\n"

# Index into the (hours, minutes, seconds) triple.
DURATION_UNITS = {"h": 0, "m": 1, "s": 2}


class Parser:
    def __init__(self, source: str) -> None:
        self.cursor = Cursor(source.replace("\r\n", "\n"))

    def parse_file(self) -> File:
        cursor = self.cursor
        cursor.skip_space()
        settings = self.parse_settings() if cursor.peek() == "-" else None
        self._skip_blank_lines()

        records: list[DayRecord] = []
        while not cursor.at_end():
            records.append(self.parse_day_record())
            self._skip_blank_lines()

        logger.debug("parsed %d day records (settings=%s)", len(records), settings is not None)
        return File(settings=settings, records=records)

    def parse_settings(self) -> Settings:
        cursor = self.cursor
        cursor.expect_string(SETTINGS_DELIMITER)
        cursor.clear()

        while cursor.peek() != "-":
            if cursor.at_end():
                raise cursor.error(UnexpectedEofError)
            cursor.extract_until("\n")
            cursor.expect_char("\n")

        text = cursor.collect()
        cursor.expect_string(SETTINGS_DELIMITER)
        cursor.clear()

        try:
            return load_settings(text)
        except SettingsError as exc:
            raise cursor.error(ConfigDeserializeError, exc.cause) from exc.cause

    def parse_day_record(self) -> DayRecord:
        cursor = self.cursor
        date = self.parse_date()
        cursor.skip_space()
        cursor.expect_char("\n")
        cursor.clear()

        events: list[Event] = []
        while (char := cursor.peek()) is not None:
            if char == "\n":
                cursor.advance()
                cursor.clear()
                break
            events.append(self.parse_event())

        return DayRecord(date=date, events=events)

    def parse_date(self) -> dt.date:
        cursor = self.cursor
        year = int(cursor.extract_num())
        cursor.expect_char("-")
        month = int(cursor.extract_num())
        cursor.expect_char("-")
        day = int(cursor.extract_num())
        cursor.clear()

        try:
            return dt.date(year, month, day)
        except (ValueError, OverflowError):
            raise cursor.error(InvalidDateError) from None

    def parse_event(self) -> Event:
        cursor = self.cursor
        cursor.skip_space()
        tags = self.parse_tags() if cursor.peek() == "[" else None

        info: list[EventInfo] = []
        while True:
            cursor.skip_space()
            info.append(self.parse_event_info())
            cursor.skip_space()
            if cursor.peek() != ",":
                break
            cursor.advance()
            cursor.skip_space()
            # trailing comma
            if cursor.peek() in (None, "\n"):
                break

        if not cursor.at_end():
            cursor.expect_chars((",", "\n"))
        cursor.clear()
        return Event(tags=tags, info=info)

    def parse_tags(self) -> Tags:
        cursor = self.cursor
        cursor.expect_char("[")
        cursor.clear()

        tags: list[Tag] = []
        while True:
            cursor.skip_space()
            char = cursor.peek()
            if char is None:
                raise cursor.error(UnexpectedEofError)
            if char == "]":
                break
            tags.append(self.parse_tag())

        cursor.expect_char("]")
        cursor.clear()
        return Tags(tags=tags)

    def parse_tag(self) -> Tag:
        cursor = self.cursor
        while (char := cursor.peek()) is not None and not (char.isspace() or char in "]("):
            cursor.advance()

        title = cursor.collect()
        if not title:
            raise cursor.error(ExpectedCharsError, ("<tag title>",), cursor.peek())

        detail = None
        if cursor.peek() == "(":
            cursor.advance()
            cursor.clear()
            cursor.extract_until(")")
            detail = cursor.collect()
            cursor.expect_char(")")
            cursor.clear()

        return Tag(title=title, detail=detail)

    def parse_event_info(self) -> EventInfo:
        cursor = self.cursor
        hours = int(cursor.extract_num())
        cursor.expect_char(":")
        minutes = int(cursor.extract_num())
        try:
            start = dt.time(hours, minutes)
        except (ValueError, OverflowError):
            raise cursor.error(InvalidDurationFormatError) from None

        cursor.skip_space()
        cursor.expect_char("-")
        cursor.skip_space()

        return EventInfo(time=start, duration=self.parse_duration())

    def parse_duration(self) -> dt.timedelta:
        cursor = self.cursor
        hms: list[int | None] = [None, None, None]
        next_unit = 0

        while next_unit < len(hms) and cursor.peek() in DIGITS:
            amount = int(cursor.extract_num())
            unit = cursor.peek()
            if unit is None:
                raise cursor.error(UnexpectedEofError)
            if unit not in DURATION_UNITS or DURATION_UNITS[unit] < next_unit:
                raise cursor.error(InvalidDurationFormatError)
            cursor.advance()
            cursor.clear()

            hms[DURATION_UNITS[unit]] = amount
            next_unit = DURATION_UNITS[unit] + 1

        # Digits left over after the seconds part are out of order.
        if all(part is None for part in hms) or cursor.peek() in DIGITS:
            raise cursor.error(InvalidDurationFormatError)

        hours, minutes, seconds = (part or 0 for part in hms)
        try:
            return dt.timedelta(hours=hours, minutes=minutes, seconds=seconds)
        except OverflowError:
            raise cursor.error(InvalidDurationFormatError) from None

    def _skip_blank_lines(self) -> None:
        while self.cursor.peek() == "\n":
            self.cursor.advance()
        self.cursor.clear()


def parse_text(source: str) -> File:
    return Parser(source).parse_file()


def parse_path(path: Path) -> File:
    return parse_text(path.read_text(encoding="utf-8"))
