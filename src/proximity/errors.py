"""
Error types raised by the record pipeline.

Every failure aborts the whole run (no partial results), so each error carries
enough context (offending text, line number) for the caller to report it.
"""

from __future__ import annotations


class ProximityError(Exception):
    """Base class for all errors raised by this package."""


class ParseError(ProximityError, ValueError):
    """Raised when a coordinate string is not a valid decimal number."""

    def __init__(self, text: object):
        self.text = text
        super().__init__(f"invalid decimal degree value: {text!r}")


class DecodeError(ProximityError):
    """Raised when a record's coordinates cannot be converted."""

    def __init__(self, line_no: int, cause: Exception):
        self.line_no = line_no
        self.cause = cause
        super().__init__(f"line {line_no}: {cause}")


class StreamError(ProximityError):
    """Raised when the input cannot be read, or a record is structurally malformed."""

    def __init__(self, message: str, *, line_no: int | None = None):
        self.line_no = line_no
        prefix = f"line {line_no}: " if line_no is not None else ""
        super().__init__(f"{prefix}{message}")


class DuplicateIdError(StreamError):
    """Raised when duplicate rejection is enabled and a user_id repeats."""

    def __init__(self, user_id: int, *, line_no: int, first_line_no: int):
        self.user_id = user_id
        self.first_line_no = first_line_no
        super().__init__(f"duplicate user_id {user_id} (first seen on line {first_line_no})", line_no=line_no)
