"""Shared fixtures for building tax statement files."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tax_statement.logging_setup import PACKAGE_LOGGER

HEADER_2018 = b"DLSG            Decl20180102" + b"F" * 32

# A statement with records around a single foreign income, as produced by the
# declaration program: personal data before it, totals after it.
SAMPLE_TOKENS = [
    "@DeclInfo", "0", "3", "0", "7707", "0", "1",
    "@PersonName", "Иванов", "Иван", "Иванович",
    "@DeclForeign", "Дивиденд", "01.01.2018", "USD", "57.6002", "100", "10", "5760.02", "576",
    "@Sum", "0", "",
]


def encode_token(text: str) -> bytes:
    data = text.encode("cp1251")
    return b"%04d" % len(data) + data


def encode_tokens(tokens: list[str]) -> bytes:
    return b"".join(encode_token(text) for text in tokens)


@pytest.fixture
def make_statement_file(tmp_path):
    """Return a function that writes a statement file and returns its path."""

    def _make(
        tokens: list[str] | None = None,
        *,
        body: bytes | None = None,
        header: bytes = HEADER_2018,
        name: str = "statement.dc8",
    ) -> Path:
        if body is None:
            body = encode_tokens(SAMPLE_TOKENS if tokens is None else tokens)
        path = tmp_path / name
        path.write_bytes(header + body)
        return path

    return _make


@pytest.fixture
def sample_path(make_statement_file) -> Path:
    """A 2018 statement with three unknown records and one foreign income."""
    return make_statement_file()


@pytest.fixture(autouse=True)
def package_logger():
    """Run each test with a bare package logger and restore it afterwards.

    The dump tool configures logging as a side effect, which would otherwise
    leak its handler into later tests.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    saved_handlers = logger.handlers[:]
    saved_level, saved_propagate = logger.level, logger.propagate
    for handler in saved_handlers:
        logger.removeHandler(handler)

    yield logger

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    for handler in saved_handlers:
        logger.addHandler(handler)
    logger.setLevel(saved_level)
    logger.propagate = saved_propagate
