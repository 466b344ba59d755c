"""Character cursor with line/column tracking used by the log parser.

The cursor keeps two offsets into the source: ``start`` marks the beginning
of a pending lexeme and ``current`` is the next character to read.
``collect()`` hands back everything between the two and moves the mark up.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TypeVar

from weeklog.core.errors import ExpectedCharsError, ParseError, UnexpectedEofError

DIGITS = tuple("0123456789")

E = TypeVar("E", bound=ParseError)


class Cursor:
    def __init__(self, source: str) -> None:
        self.source = source
        self.start = 0
        self.current = 0
        self.line = 1
        self.column = 1

    @property
    def position(self) -> tuple[int, int]:
        return self.line, self.column

    def at_end(self) -> bool:
        return self.current >= len(self.source)

    def peek(self) -> str | None:
        if self.at_end():
            return None
        return self.source[self.current]

    def advance(self) -> str | None:
        char = self.peek()
        if char is None:
            return None

        self.current += 1
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return char

    def clear(self) -> None:
        self.start = self.current

    def collect(self) -> str:
        lexeme = self.source[self.start : self.current]
        self.clear()
        return lexeme

    def error(self, error_cls: type[E], *args: object) -> E:
        return error_cls(*args, line=self.line, column=self.column)

    def skip_space(self) -> None:
        while (char := self.peek()) is not None and char.isspace() and char != "\n":
            self.advance()
        self.clear()

    def extract_until(self, stop: str) -> None:
        while (char := self.peek()) is not None and char != stop:
            self.advance()

    def extract_num(self) -> str:
        self.clear()
        while (char := self.peek()) is not None and char in DIGITS:
            self.advance()

        digits = self.collect()
        if not digits:
            char = self.peek()
            if char is None:
                raise self.error(UnexpectedEofError)
            raise self.error(ExpectedCharsError, DIGITS, char)
        return digits

    def expect_chars(self, chars: Iterable[str]) -> str:
        expected = tuple(chars)
        char = self.peek()
        if char is None:
            raise self.error(UnexpectedEofError)
        if char not in expected:
            raise self.error(ExpectedCharsError, expected, char)
        self.advance()
        return char

    def expect_char(self, char: str) -> str:
        return self.expect_chars((char,))

    def expect_string(self, text: str) -> None:
        for char in text:
            self.expect_char(char)
