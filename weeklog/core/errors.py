from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from weeklog.core.types import EventInfo


class WeeklogError(RuntimeError):
    """Base class for failures raised by weeklog."""


class ConfigError(WeeklogError):
    """Raised when weeklog config cannot be parsed or saved."""


class SettingsError(WeeklogError):
    """Raised when an embedded settings block does not match the schema."""

    def __init__(self, message: str, *, cause: Exception):
        super().__init__(message)
        self.cause = cause


class ParseError(WeeklogError):
    """A grammar violation at a 1-based line and column of the source."""

    kind = "parse"
    message = "parse error"

    def __init__(self, message: str | None = None, *, line: int, column: int):
        self.line = line
        self.column = column
        if message is not None:
            self.message = message
        super().__init__(f"{self.message} at line {line}, column {column}")

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": self.message, "line": self.line, "column": self.column}


class ExpectedCharsError(ParseError):
    kind = "expected_chars"

    def __init__(self, expected: tuple[str, ...], found: str, *, line: int, column: int):
        self.expected = tuple(expected)
        self.found = found
        wanted = ", ".join(repr(char) for char in self.expected)
        super().__init__(f"expected one of [{wanted}], found {found!r}", line=line, column=column)


class UnexpectedEofError(ParseError):
    kind = "unexpected_eof"
    message = "unexpected end of input"


class InvalidDateError(ParseError):
    kind = "invalid_date"
    message = "invalid date"


class InvalidDurationFormatError(ParseError):
    kind = "invalid_duration_format"
    message = "invalid duration format"


class ConfigDeserializeError(ParseError):
    kind = "config_deserialize"

    def __init__(self, cause: Exception, *, line: int, column: int):
        self.cause = cause
        super().__init__(f"invalid settings block ({cause})", line=line, column=column)


class NotPastError(WeeklogError):
    """Raised when the log holds entries later than the reference moment."""

    def __init__(self, entries: list[EventInfo]):
        self.entries = entries
        super().__init__(f"log contains {len(entries)} entries in the future")
