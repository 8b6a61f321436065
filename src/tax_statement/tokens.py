"""Length-prefixed token I/O for tax statement files.

The body of a statement file is a flat sequence of tokens. Each token is a
4-digit zero-padded decimal length followed by that many bytes of
Windows-1251 text:

    0003USD0007Dividend...

Streams are read strictly forward; there is no seeking or pushback.
"""

from __future__ import annotations

import io
from typing import BinaryIO

from tax_statement.errors import (
    EncodingError,
    InvalidEncoding,
    MalformedLength,
    TokenTooLarge,
    UnexpectedEndOfFile,
)

ENCODING = "cp1251"

# Width of the length field and the largest size it can express
SIZE_WIDTH = 4
MAX_TOKEN_SIZE = 9999


def encode_text(value: str) -> bytes:
    """Encode text as Windows-1251, failing on unrepresentable characters."""
    try:
        return value.encode(ENCODING)
    except UnicodeEncodeError:
        raise EncodingError(value) from None


def decode_text(data: bytes) -> str:
    """Decode Windows-1251 bytes without any lossy substitution."""
    try:
        return data.decode(ENCODING)
    except UnicodeDecodeError:
        raise InvalidEncoding(data) from None


class TokenReader:
    """Reads tokens from a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        # at_end() needs to look at the next byte without consuming it
        if not hasattr(stream, "peek"):
            stream = io.BufferedReader(stream)  # type: ignore[arg-type]
        self._stream = stream

    def read_raw(self, size: int) -> bytes:
        """Read exactly `size` bytes."""
        data = self._stream.read(size)
        if len(data) != size:
            raise UnexpectedEndOfFile(size, len(data))
        return data

    def read_token(self) -> str:
        """Read one length-prefixed token and decode it."""
        size = self._read_size()
        return decode_text(self.read_raw(size))

    def at_end(self) -> bool:
        """Return whether the stream has no more bytes."""
        return not self._stream.peek(1)  # type: ignore[attr-defined]

    def _read_size(self) -> int:
        data = self.read_raw(SIZE_WIDTH)
        # bytes.isdigit() only accepts ASCII digits, so signs and spaces are rejected
        if not data.isdigit():
            raise MalformedLength(data)
        return int(data)


class TokenWriter:
    """Writes tokens to a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def write_raw(self, data: str) -> None:
        """Write encoded text without a length prefix."""
        self._stream.write(encode_text(data))

    def write_token(self, value: str) -> None:
        """Write one length-prefixed token."""
        data = encode_text(value)
        if len(data) > MAX_TOKEN_SIZE:
            raise TokenTooLarge(value, len(data))

        self._stream.write(b"%04d" % len(data))
        self._stream.write(data)
