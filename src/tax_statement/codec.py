"""Reading and writing tax statement files."""

from __future__ import annotations

import io
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, BinaryIO

from tax_statement.errors import (
    EmptyStatement,
    HeaderMismatch,
    InvalidRecordName,
    TaxStatementError,
    UnexpectedEndOfFile,
)
from tax_statement.header import get_header, year_from_path
from tax_statement.logging_setup import get_logger
from tax_statement.records import (
    DEFAULT_REGISTRY,
    RecordRegistry,
    is_record_name,
    read_record,
    write_record,
)
from tax_statement.statement import Statement
from tax_statement.tokens import TokenReader, TokenWriter, encode_text

logger = get_logger(__name__)


class StatementReader:
    """Reads a statement from a binary stream."""

    def __init__(self, stream: BinaryIO, registry: RecordRegistry) -> None:
        self._reader = TokenReader(stream)
        self._registry = registry

    @classmethod
    def read(cls, path: str | Path, registry: RecordRegistry | None = None) -> Statement:
        """Read a statement file.

        Args:
            path: Path to a *.dcN file. The extension determines the year.
            registry: Known record kinds. Defaults to the package registry.

        Returns:
            The statement with its records in file order.
        """
        if registry is None:
            registry = DEFAULT_REGISTRY

        year = year_from_path(path)

        with open(path, "rb") as file:
            reader = cls(file, registry)
            reader.read_header(path, year)
            try:
                records = reader.read_records()
            except TaxStatementError as error:
                error.locate(path=str(path))
                raise

        if not records:
            raise EmptyStatement(path)

        statement = Statement(path=str(path), year=year, records=records, registry=registry)
        logger.debug("Read statement:\n%r", statement)

        return statement

    def read_header(self, path: str | Path, year: int) -> None:
        header = encode_text(get_header(year))
        try:
            data = self._reader.read_raw(len(header))
        except UnexpectedEndOfFile:
            raise HeaderMismatch(path, year) from None

        if data != header:
            raise HeaderMismatch(path, year)

    def read_records(self) -> list[Any]:
        records = []
        next_record_name = None

        while True:
            if next_record_name is not None:
                record_name, next_record_name = next_record_name, None
            else:
                if self._reader.at_end():
                    break

                record_name = self._reader.read_token()
                if not is_record_name(record_name):
                    raise InvalidRecordName(record_name)

            record, next_record_name = read_record(self._reader, record_name, self._registry)
            records.append(record)

        return records


class StatementWriter:
    """Writes a statement to a binary stream."""

    def __init__(self, stream: BinaryIO, registry: RecordRegistry) -> None:
        self._writer = TokenWriter(stream)
        self._registry = registry

    @classmethod
    def write(cls, statement: Statement, path: str | Path) -> None:
        """Write a statement file.

        The statement is written to a temporary file next to `path`, which
        replaces `path` only after everything has been written. On failure
        `path` is left as it was.

        A symlinked `path` is written through, replacing the file it points
        to. An existing file keeps its permission bits; a new one gets the
        default mode for the current umask.
        """
        logger.debug("Statement to write:\n%r", statement)

        target = Path(path).resolve()
        fd, temp_path = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as file:
                cls(file, statement.registry).write_statement(statement)

            if target.exists():
                shutil.copymode(target, temp_path)
            else:
                os.chmod(temp_path, 0o666 & ~_current_umask())
            os.replace(temp_path, target)
        except TaxStatementError as error:
            os.unlink(temp_path)
            error.locate(path=str(path))
            raise
        except BaseException:
            os.unlink(temp_path)
            raise

        logger.debug("Wrote %d records to %s", len(statement.records), path)

    def write_statement(self, statement: Statement) -> None:
        self._writer.write_raw(get_header(statement.year))
        for record in statement.records:
            write_record(self._writer, record, self._registry)


def _current_umask() -> int:
    # The umask can only be read by setting it.
    mask = os.umask(0)
    os.umask(mask)
    return mask


def read(path: str | Path, registry: RecordRegistry | None = None) -> Statement:
    """Read a statement file."""
    return StatementReader.read(path, registry)


def write(statement: Statement, path: str | Path) -> None:
    """Write a statement file, replacing `path` only on success."""
    StatementWriter.write(statement, path)


def encode_statement(statement: Statement) -> bytes:
    """Encode a statement into the bytes `write` would produce."""
    buffer = io.BytesIO()
    StatementWriter(buffer, statement.registry).write_statement(statement)
    return buffer.getvalue()
