"""Tax Statement - reader and writer for *.dcN tax declaration files."""

from tax_statement.codec import StatementReader, StatementWriter, encode_statement, read, write
from tax_statement.errors import (
    EmptyStatement,
    EncodeError,
    EncodingError,
    FormatError,
    HeaderMismatch,
    InvalidDate,
    InvalidEncoding,
    InvalidExtension,
    InvalidNumber,
    InvalidRecordName,
    MalformedLength,
    TaxStatementError,
    TokenTooLarge,
    UnexpectedEndOfFile,
    ValueCodecError,
)
from tax_statement.primitives import PrimitiveType
from tax_statement.records import (
    DEFAULT_REGISTRY,
    FieldDefinition,
    ForeignIncome,
    RecordKind,
    RecordRegistry,
    UnknownRecord,
    default_registry,
    is_record_name,
)
from tax_statement.statement import Statement

__all__ = [
    # Main API
    "read",
    "write",
    "encode_statement",
    "Statement",
    "StatementReader",
    "StatementWriter",
    # Records
    "ForeignIncome",
    "UnknownRecord",
    "RecordKind",
    "RecordRegistry",
    "FieldDefinition",
    "PrimitiveType",
    "DEFAULT_REGISTRY",
    "default_registry",
    "is_record_name",
    # Errors
    "TaxStatementError",
    "FormatError",
    "InvalidExtension",
    "HeaderMismatch",
    "InvalidRecordName",
    "MalformedLength",
    "InvalidEncoding",
    "UnexpectedEndOfFile",
    "EmptyStatement",
    "ValueCodecError",
    "InvalidNumber",
    "InvalidDate",
    "EncodeError",
    "EncodingError",
    "TokenTooLarge",
]

__version__ = "0.1.0"
