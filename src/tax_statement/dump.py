"""Tool for dumping tax statement contents to the console."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import fields
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any

from tax_statement.codec import encode_statement, read
from tax_statement.errors import TaxStatementError
from tax_statement.logging_setup import configure_logging
from tax_statement.primitives import PrimitiveType, encode_value
from tax_statement.records import RecordRegistry, UnknownRecord
from tax_statement.statement import Statement


def format_value(value: Any) -> str:
    """Format a field value for display."""
    if isinstance(value, date):
        return encode_value(value, PrimitiveType.DATE)
    elif isinstance(value, Decimal):
        return encode_value(value, PrimitiveType.DECIMAL)
    elif isinstance(value, str):
        return repr(value)
    return str(value)


def record_to_json(record: Any, registry: RecordRegistry) -> dict[str, Any]:
    """Convert a record to a JSON-compatible dict."""
    if isinstance(record, UnknownRecord):
        return {"name": record.name, "known": False, "tokens": list(record.raw_tokens)}

    values: dict[str, Any] = {}
    for f in fields(record):
        value = getattr(record, f.name)
        if isinstance(value, (date, Decimal)):
            value = format_value(value)
        values[f.name] = value

    return {"name": registry.kind_of(record).name, "known": True, "fields": values}


def dump_statement(statement: Statement, limit: int | None = None) -> None:
    """Print statement records in a human-readable form."""
    records = statement.records
    display_count = min(len(records), limit) if limit is not None else len(records)

    print(f"Statement: {statement.path}")
    print(f"Year: {statement.year}")
    print(f"Records: {len(records)}")
    print("-" * 60)

    for i, record in enumerate(records[:display_count]):
        if isinstance(record, UnknownRecord):
            print(f"{i:>4}  {record.name:<24} ({len(record.raw_tokens)} tokens)")
            continue

        print(f"{i:>4}  {statement.registry.kind_of(record).name:<24} {type(record).__name__}")
        for f in fields(record):
            print(f"{'':>6}{f.name:<20} {format_value(getattr(record, f.name))}")

    if display_count < len(records):
        print(f"... ({len(records) - display_count} more)")


def dump_statement_json(statement: Statement, limit: int | None = None) -> None:
    """Print statement records as JSON."""
    records = statement.records if limit is None else statement.records[:limit]
    output = {
        "path": statement.path,
        "year": statement.year,
        "records": [record_to_json(record, statement.registry) for record in records],
    }
    print(json.dumps(output, indent=2, ensure_ascii=False))


def check_round_trip(statement: Statement, path: Path) -> bool:
    """Check that re-encoding the statement reproduces the file exactly."""
    original = path.read_bytes()
    encoded = encode_statement(statement)
    if encoded == original:
        return True

    offset = next(
        (i for i, (a, b) in enumerate(zip(original, encoded)) if a != b),
        min(len(original), len(encoded)),
    )
    print(
        f"Round-trip mismatch at byte {offset} "
        f"(file: {len(original)} bytes, encoded: {len(encoded)} bytes)",
        file=sys.stderr,
    )
    return False


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Dump tax statement (*.dcN) contents to the console"
    )
    parser.add_argument(
        "path",
        type=Path,
        help="Path to the tax statement file",
    )
    parser.add_argument(
        "-j", "--json",
        action="store_true",
        help="Output as JSON",
    )
    parser.add_argument(
        "-n", "--limit",
        type=int,
        default=None,
        help="Limit number of records to display",
    )
    parser.add_argument(
        "-c", "--check",
        action="store_true",
        help="Verify that the file is reproduced byte-for-byte when written back",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (defaults to $TAX_STATEMENT_LOG_LEVEL or INFO)",
    )

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if not args.path.exists():
        print(f"Error: Statement file not found: {args.path}", file=sys.stderr)
        return 1

    try:
        statement = read(args.path)
    except TaxStatementError as e:
        print(f"Error reading statement: {e}", file=sys.stderr)
        return 1

    if args.json:
        dump_statement_json(statement, args.limit)
    else:
        dump_statement(statement, args.limit)

    if args.check:
        if not check_round_trip(statement, args.path):
            return 1
        print("Round-trip check passed", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
