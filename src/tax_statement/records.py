"""Record kinds and the name-based record dispatcher.

A statement body is a sequence of records. Each record starts with a name
token (``@DeclForeign``, ``@PersonName``, ...) followed by its data tokens.
There is no record terminator: a record ends where the next name token
starts.

Record names registered in a RecordRegistry are decoded into typed values.
Any other record is kept as an UnknownRecord holding its tokens verbatim, so
files containing records we don't model are still written back unchanged.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from functools import partial
from typing import Any, Callable

from tax_statement.errors import TaxStatementError
from tax_statement.logging_setup import get_logger
from tax_statement.primitives import PrimitiveType, decode_value, encode_value
from tax_statement.tokens import TokenReader, TokenWriter

logger = get_logger(__name__)

RECORD_NAME_PATTERN = re.compile(r"@[A-Za-z_][A-Za-z0-9_]*")

# A record decoder gets the stream positioned right after the record name. It
# returns the record and, when it had to read the following record's name to
# find its own end, that name.
RecordReader = Callable[[TokenReader], tuple[Any, str | None]]

# A record encoder writes everything after the record name.
RecordWriter = Callable[[TokenWriter, Any], None]


def is_record_name(text: str) -> bool:
    """Check whether a token has the shape of a record name."""
    return RECORD_NAME_PATTERN.fullmatch(text) is not None


@dataclass(frozen=True)
class FieldDefinition:
    """A typed field of a known record, in file order."""

    name: str
    primitive: PrimitiveType


@dataclass(frozen=True)
class RecordKind:
    """A known record: its name, Python type, field schema and codec.

    Without an explicit reader/writer the record is a fixed sequence of
    fields: one token per field, in schema order, and the Python type is
    built with the fields as keyword arguments.
    """

    name: str
    record_type: type
    fields: tuple[FieldDefinition, ...] = ()
    reader: RecordReader | None = None
    writer: RecordWriter | None = None

    def read(self, reader: TokenReader) -> tuple[Any, str | None]:
        if self.reader is not None:
            return self.reader(reader)

        values = {}
        for field_def in self.fields:
            try:
                values[field_def.name] = decode_value(reader.read_token(), field_def.primitive)
            except TaxStatementError as error:
                error.locate(field=field_def.name)
                raise
        return self.record_type(**values), None

    def write(self, writer: TokenWriter, record: Any) -> None:
        writer.write_token(self.name)

        if self.writer is not None:
            self.writer(writer, record)
            return

        for field_def in self.fields:
            value = getattr(record, field_def.name)
            try:
                writer.write_token(encode_value(value, field_def.primitive))
            except TaxStatementError as error:
                error.locate(field=field_def.name)
                raise


class RecordRegistry:
    """Registry of known record kinds, keyed by record name and by type."""

    def __init__(self) -> None:
        self._kinds: dict[str, RecordKind] = {}
        self._types: dict[type, RecordKind] = {}

    def register(self, kind: RecordKind) -> None:
        """Register a record kind."""
        if not is_record_name(kind.name):
            raise ValueError(f"Invalid record name: {kind.name!r}")
        if kind.name in self._kinds:
            raise ValueError(f"Record '{kind.name}' is already registered")
        if kind.record_type in self._types:
            raise ValueError(
                f"Type '{kind.record_type.__name__}' is already registered "
                f"as '{self._types[kind.record_type].name}'"
            )
        if kind.record_type is UnknownRecord:
            raise ValueError("UnknownRecord can't be registered as a known record")

        self._kinds[kind.name] = kind
        self._types[kind.record_type] = kind

    def get(self, name: str) -> RecordKind | None:
        """Get a record kind by record name."""
        return self._kinds.get(name)

    def get_or_raise(self, name: str) -> RecordKind:
        """Get a record kind by record name, raising if not found."""
        kind = self._kinds.get(name)
        if kind is None:
            raise KeyError(f"Record '{name}' is not registered")
        return kind

    def kind_for(self, record_type: type) -> RecordKind | None:
        """Get the record kind a Python type is registered with."""
        return self._types.get(record_type)

    def kind_of(self, record: Any) -> RecordKind:
        """Get the record kind of a known record value."""
        kind = self._types.get(type(record))
        if kind is None:
            raise TypeError(f"{type(record).__name__} is not a registered record type")
        return kind

    def names(self) -> list[str]:
        """List all registered record names."""
        return list(self._kinds.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._kinds

    def __len__(self) -> int:
        return len(self._kinds)


@dataclass
class UnknownRecord:
    """A record we don't model, kept as its raw tokens."""

    name: str
    raw_tokens: list[str] = field(default_factory=list)

    @classmethod
    def read(cls, reader: TokenReader, name: str) -> tuple[UnknownRecord, str | None]:
        """Collect tokens up to the next record name or the end of the stream."""
        record = cls(name)

        while not reader.at_end():
            data = reader.read_token()
            if is_record_name(data):
                return record, data
            record.raw_tokens.append(data)

        return record, None

    def write(self, writer: TokenWriter) -> None:
        writer.write_token(self.name)
        for data in self.raw_tokens:
            writer.write_token(data)


@dataclass(frozen=True)
class ForeignIncome:
    """Income received abroad: dividends, interest and the tax withheld on them.

    Amounts are in the income currency; ``local_*`` amounts are converted at
    ``currency_rate`` on the income date.
    """

    RECORD_NAME = "@DeclForeign"

    description: str
    date: date
    currency: str
    currency_rate: Decimal
    amount: Decimal
    paid_tax: Decimal
    local_amount: Decimal
    local_paid_tax: Decimal


FOREIGN_INCOME = RecordKind(
    name=ForeignIncome.RECORD_NAME,
    record_type=ForeignIncome,
    fields=(
        FieldDefinition("description", PrimitiveType.STRING),
        FieldDefinition("date", PrimitiveType.DATE),
        FieldDefinition("currency", PrimitiveType.STRING),
        FieldDefinition("currency_rate", PrimitiveType.DECIMAL),
        FieldDefinition("amount", PrimitiveType.DECIMAL),
        FieldDefinition("paid_tax", PrimitiveType.DECIMAL),
        FieldDefinition("local_amount", PrimitiveType.DECIMAL),
        FieldDefinition("local_paid_tax", PrimitiveType.DECIMAL),
    ),
)


def default_registry() -> RecordRegistry:
    """Create a registry with all record kinds this package knows."""
    registry = RecordRegistry()
    registry.register(FOREIGN_INCOME)
    return registry


DEFAULT_REGISTRY = default_registry()


def read_record(
    reader: TokenReader, name: str, registry: RecordRegistry
) -> tuple[Any, str | None]:
    """Read the record that starts with `name`.

    Returns the record and the following record's name if it has already
    been consumed from the stream.
    """
    kind = registry.get(name)
    try:
        if kind is None:
            logger.debug("Reading unknown record %s", name)
            return UnknownRecord.read(reader, name)

        logger.debug("Reading %s record", name)
        return kind.read(reader)
    except TaxStatementError as error:
        error.locate(record=name)
        raise


def write_record(writer: TokenWriter, record: Any, registry: RecordRegistry) -> None:
    """Write a record: known records from their fields, unknown ones verbatim."""
    if isinstance(record, UnknownRecord):
        name, write = record.name, record.write
    else:
        kind = registry.kind_of(record)
        name, write = kind.name, partial(kind.write, record=record)

    try:
        write(writer)
    except TaxStatementError as error:
        error.locate(record=name)
        raise
