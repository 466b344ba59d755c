from __future__ import annotations

from datetime import date, time, timedelta
from pathlib import Path

import pytest

from weeklog.core.errors import (
    ConfigDeserializeError,
    ExpectedCharsError,
    InvalidDateError,
    InvalidDurationFormatError,
    UnexpectedEofError,
)
from weeklog.core.parser import parse_path, parse_text
from weeklog.core.settings import Weekday
from weeklog.core.types import Tag

SAMPLE = """---
[start]
weekday = "Mon"
time = 08:00:00
---

2024-5-6
[work(project-x) urgent] 9:00 - 1h30m, 13:00 - 45m
15:30 - 2h

2024-5-7
8:15 - 20m
"""


@pytest.mark.parametrize(
    ("year", "month", "day"),
    [(2024, 1, 1), (2024, 2, 29), (1999, 12, 31), (2023, 6, 30)],
)
def test_date_line_parses_to_empty_record(year: int, month: int, day: int) -> None:
    document = parse_text(f"{year}-{month}-{day}\n")
    assert len(document.records) == 1
    record = document.records[0]
    assert record.date == date(year, month, day)
    assert record.events == []


def test_zero_padded_date_and_trailing_spaces() -> None:
    document = parse_text("2024-03-09   \n")
    assert document.records[0].date == date(2024, 3, 9)


@pytest.mark.parametrize("literal", ["2024-2-30", "2023-2-29", "2024-4-31", "2024-0-1", "0-1-1"])
def test_invalid_calendar_date(literal: str) -> None:
    with pytest.raises(InvalidDateError):
        parse_text(f"{literal}\n")


def test_invalid_month_reports_first_line() -> None:
    with pytest.raises(InvalidDateError) as excinfo:
        parse_text("2024-13-01\n")
    assert excinfo.value.line == 1
    assert excinfo.value.kind == "invalid_date"


def test_date_requires_dashes() -> None:
    with pytest.raises(ExpectedCharsError) as excinfo:
        parse_text("2024/1/1\n")
    assert excinfo.value.found == "/"
    assert excinfo.value.expected == ("-",)


def test_full_document() -> None:
    document = parse_text(SAMPLE)

    assert document.settings is not None
    assert document.settings.start.weekday is Weekday.MON
    assert document.settings.start.time == time(8, 0)

    first, second = document.records
    assert first.date == date(2024, 5, 6)
    assert len(first.events) == 2

    tagged = first.events[0]
    assert tagged.tags is not None
    assert tagged.tags.titles() == ["work", "urgent"]
    assert [(info.time, info.duration) for info in tagged.info] == [
        (time(9, 0), timedelta(hours=1, minutes=30)),
        (time(13, 0), timedelta(minutes=45)),
    ]

    untagged = first.events[1]
    assert untagged.tags is None
    assert untagged.info[0].duration == timedelta(hours=2)

    assert second.date == date(2024, 5, 7)
    assert second.events[0].info[0].time == time(8, 15)


def test_tags_keep_order_and_details() -> None:
    document = parse_text("2024-1-1\n[work(project-x) urgent] 9:00 - 1h\n")
    tags = document.records[0].events[0].tags
    assert tags is not None
    assert tags.tags == [
        Tag(title="work", detail="project-x"),
        Tag(title="urgent", detail=None),
    ]


def test_tag_detail_may_contain_spaces() -> None:
    document = parse_text("2024-1-1\n[ meeting(weekly sync)  ] 9:00 - 1h\n")
    tags = document.records[0].events[0].tags
    assert tags is not None
    assert tags.tags == [Tag(title="meeting", detail="weekly sync")]


def test_unterminated_tag_group_is_unexpected_eof() -> None:
    with pytest.raises(UnexpectedEofError):
        parse_text("2024-1-1\n[wo")


def test_unterminated_tag_detail_is_unexpected_eof() -> None:
    with pytest.raises(UnexpectedEofError):
        parse_text("2024-1-1\n[work(project")


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("45m", timedelta(minutes=45)),
        ("2h", timedelta(hours=2)),
        ("1h2m3s", timedelta(hours=1, minutes=2, seconds=3)),
        ("90s", timedelta(seconds=90)),
        ("1h15s", timedelta(hours=1, seconds=15)),
    ],
)
def test_duration_tokens(token: str, expected: timedelta) -> None:
    document = parse_text(f"2024-1-1\n9:00 - {token}\n")
    assert document.records[0].events[0].info[0].duration == expected


@pytest.mark.parametrize("token", ["30m1h", "1x", "", "1h1h", "2s1m"])
def test_invalid_duration_tokens(token: str) -> None:
    with pytest.raises(InvalidDurationFormatError):
        parse_text(f"2024-1-1\n9:00 - {token}\n")


def test_bare_dash_at_end_of_input() -> None:
    with pytest.raises(InvalidDurationFormatError):
        parse_text("2024-1-1\n9:00 -")


def test_duration_number_without_unit_at_end_of_input() -> None:
    with pytest.raises(UnexpectedEofError):
        parse_text("2024-1-1\n9:00 - 1h30")


@pytest.mark.parametrize("clock", ["24:00", "9:60", "99:1"])
def test_invalid_start_time_shares_duration_error(clock: str) -> None:
    with pytest.raises(InvalidDurationFormatError):
        parse_text(f"2024-1-1\n{clock} - 1h\n")


def test_space_around_dash_is_optional() -> None:
    document = parse_text("2024-1-1\n9:00-1h, 10:00  -  30m ,11:00 -5m\n")
    durations = [info.duration for info in document.records[0].events[0].info]
    assert durations == [timedelta(hours=1), timedelta(minutes=30), timedelta(minutes=5)]


def test_trailing_comma_closes_line() -> None:
    document = parse_text("2024-1-1\n9:00 - 1h,\n10:00 - 1h\n")
    assert len(document.records[0].events) == 2


def test_entries_must_be_comma_separated() -> None:
    with pytest.raises(ExpectedCharsError) as excinfo:
        parse_text("2024-1-1\n9:00 - 1h 10:00 - 1h\n")
    assert excinfo.value.expected == (",", "\n")
    assert (excinfo.value.line, excinfo.value.column) == (2, 11)


def test_blank_lines_separate_records() -> None:
    document = parse_text("\n\n2024-1-1\n9:00 - 1h\n\n\n\n2024-1-2\n\n2024-1-3\n10:00 - 2h")
    assert [record.date for record in document.records] == [
        date(2024, 1, 1),
        date(2024, 1, 2),
        date(2024, 1, 3),
    ]
    assert document.records[1].events == []
    assert document.records[2].events[0].info[0].duration == timedelta(hours=2)


def test_records_need_not_be_sorted() -> None:
    document = parse_text("2024-1-5\n\n2024-1-2\n")
    assert [record.date for record in document.records] == [date(2024, 1, 5), date(2024, 1, 2)]


def test_windows_line_endings() -> None:
    document = parse_text("2024-1-1\r\n9:00 - 1h\r\n\r\n2024-1-2\r\n")
    assert len(document.records) == 2


def test_empty_input() -> None:
    document = parse_text("")
    assert document.settings is None
    assert document.records == []


def test_error_position_points_at_offending_line() -> None:
    with pytest.raises(ExpectedCharsError) as excinfo:
        parse_text("2024-1-1\n9:00 - 1h\n9;00 - 1h\n")
    error = excinfo.value
    assert error.found == ";"
    assert (error.line, error.column) == (3, 2)
    assert "line 3, column 2" in str(error)


def test_settings_with_full_weekday_name_and_string_time() -> None:
    document = parse_text('---\n[start]\nweekday = "friday"\ntime = "17:30"\n---\n2024-1-1\n')
    assert document.settings is not None
    assert document.settings.start.weekday is Weekday.FRI
    assert document.settings.start.time == time(17, 30)


def test_malformed_settings_is_config_error() -> None:
    with pytest.raises(ConfigDeserializeError) as excinfo:
        parse_text("---\n[start\nweekday = Mon\n---\n")
    assert excinfo.value.cause is not None
    assert excinfo.value.kind == "config_deserialize"


def test_settings_schema_violation_is_config_error() -> None:
    with pytest.raises(ConfigDeserializeError):
        parse_text('---\n[start]\nweekday = "Someday"\ntime = 08:00:00\n---\n')


def test_empty_settings_block_is_config_error() -> None:
    with pytest.raises(ConfigDeserializeError):
        parse_text("---\n---\n2024-1-1\n")


def test_unterminated_settings_is_unexpected_eof() -> None:
    with pytest.raises(UnexpectedEofError):
        parse_text('---\n[start]\nweekday = "Mon"\n')


def test_parse_path(write_log) -> None:
    path: Path = write_log(SAMPLE)
    document = parse_path(path)
    assert len(document.records) == 2


def test_settings_time_with_offset_is_config_error() -> None:
    with pytest.raises(ConfigDeserializeError):
        parse_text('---\n[start]\nweekday = "Mon"\ntime = "08:00:00+01:00"\n---\n2024-5-6\n9:00 - 1h\n')
