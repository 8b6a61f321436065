"""Statement file header and format version."""

from __future__ import annotations

import re
from pathlib import Path

from tax_statement.errors import InvalidExtension

# The last digit of the *.dcN extension is the format version: 2010 + N
BASE_YEAR = 2010
EXTENSION_PATTERN = re.compile(r"\.dc(\d)$")


def year_from_path(path: str | Path) -> int:
    """Get the statement year from a *.dcN file name."""
    match = EXTENSION_PATTERN.search(Path(path).name)
    if match is None:
        raise InvalidExtension(path)
    return BASE_YEAR + int(match.group(1))


def get_header(year: int) -> str:
    """Return the fixed header that starts every statement for `year`."""
    return f"DLSG            Decl{year}0102{'F' * 32}"
