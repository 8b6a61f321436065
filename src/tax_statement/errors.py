"""Exceptions raised while reading and writing tax statement files.

All of them derive from TaxStatementError, so callers that only care about
"the file could not be processed" can catch a single type:

    TaxStatementError
    +-- FormatError            the input file is malformed
    |   +-- InvalidExtension
    |   +-- HeaderMismatch
    |   +-- InvalidRecordName
    |   +-- MalformedLength
    |   +-- InvalidEncoding
    |   +-- UnexpectedEndOfFile
    |   +-- EmptyStatement
    +-- ValueCodecError        a token can't be parsed as a typed value
    |   +-- InvalidNumber
    |   +-- InvalidDate
    +-- EncodeError            a value can't be written
        +-- EncodingError
        +-- TokenTooLarge
"""

from __future__ import annotations

from pathlib import Path


class TaxStatementError(Exception):
    """Base class for all tax statement errors.

    Errors raised deep in the codec only know the token they failed on. The
    layers above add where that token was: the field, the record and the
    file path. ``location`` holds what has been added so far and the message
    ends with it.
    """

    _LOCATION_KEYS = ("path", "record", "field")

    def __init__(self, *args: object) -> None:
        super().__init__(*args)
        self.location: dict[str, str] = {}

    def locate(self, **location: str) -> None:
        """Add location details, keeping any set closer to the failure."""
        for key, value in location.items():
            if key not in self._LOCATION_KEYS:
                raise TypeError(f"Unknown error location: {key!r}")
            self.location.setdefault(key, value)

    def __str__(self) -> str:
        message = super().__str__()
        parts = [f"{key} {self.location[key]!r}" for key in self._LOCATION_KEYS if key in self.location]
        if not parts:
            return message
        return f"{message} (at {', '.join(parts)})"


# Read side


class FormatError(TaxStatementError):
    """The file does not follow the tax statement format."""


class InvalidExtension(FormatError):
    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        super().__init__(
            f"Invalid tax statement file extension: {self.path!r} (*.dcX is expected)"
        )


class HeaderMismatch(FormatError):
    def __init__(self, path: str | Path, year: int) -> None:
        self.path = str(path)
        self.year = year
        super().__init__(f"{self.path!r} has an unexpected header for a {year} tax statement")


class InvalidRecordName(FormatError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Got an invalid record name: {name!r}")


class MalformedLength(FormatError):
    def __init__(self, data: bytes) -> None:
        self.data = data
        super().__init__(f"Got an invalid token size: {data!r}")


class InvalidEncoding(FormatError):
    def __init__(self, data: bytes) -> None:
        self.data = data
        super().__init__(f"Got an invalid Windows-1251 encoded data: {data!r}")


class UnexpectedEndOfFile(FormatError):
    def __init__(self, expected: int, got: int) -> None:
        self.expected = expected
        self.got = got
        super().__init__(f"Unexpected end of file: expected {expected} bytes, got {got}")


class EmptyStatement(FormatError):
    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        super().__init__(f"The tax statement has no records: {self.path!r}")


# Typed values


class ValueCodecError(TaxStatementError):
    """A token doesn't hold a valid value of the expected type."""


class InvalidNumber(ValueCodecError):
    def __init__(self, token: str, reason: str = "invalid number") -> None:
        self.token = token
        super().__init__(f"Got an {reason}: {token!r}")


class InvalidDate(ValueCodecError):
    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"Got an invalid date: {token!r} (DD.MM.YYYY is expected)")


# Write side


class EncodeError(TaxStatementError):
    """A value can't be represented in the file."""


class EncodingError(EncodeError):
    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Unable to encode {value!r} with Windows-1251 character encoding")


class TokenTooLarge(EncodeError):
    def __init__(self, value: str, size: int) -> None:
        self.value = value
        self.size = size
        super().__init__(f"Unable to encode {value[:32]!r}...: too big data size ({size} bytes)")
