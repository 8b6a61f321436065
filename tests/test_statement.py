"""Tests for the Statement container."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

import pytest

from tax_statement.records import ForeignIncome, RecordKind, UnknownRecord, default_registry
from tax_statement.statement import Statement

INCOME_FIELDS = dict(
    description="Dividend",
    date=date(2018, 1, 1),
    currency="USD",
    currency_rate=Decimal("57.6002"),
    amount=Decimal("100"),
    paid_tax=Decimal("10"),
    local_amount=Decimal("5760.02"),
    local_paid_tax=Decimal("576"),
)


@dataclass(frozen=True)
class Marker:
    label: str


@pytest.fixture
def statement():
    return Statement(
        path="statement.dc8",
        year=2018,
        records=[
            UnknownRecord("@DeclInfo", ["0", "3"]),
            ForeignIncome(**INCOME_FIELDS),
            UnknownRecord("@Sum", ["0"]),
        ],
    )


class TestGetRecords:
    """Tests for typed record access."""

    def test_foreign_incomes(self, statement):
        assert statement.get_records(ForeignIncome) == [ForeignIncome(**INCOME_FIELDS)]
        assert statement.get_foreign_incomes() == statement.get_records(ForeignIncome)

    def test_unknown_records(self, statement):
        assert [r.name for r in statement.unknown_records()] == ["@DeclInfo", "@Sum"]

    def test_no_matches(self):
        statement = Statement(path="statement.dc8", year=2018, records=[UnknownRecord("@Sum")])
        assert statement.get_foreign_incomes() == []

    def test_file_order(self, statement):
        later = dict(INCOME_FIELDS, description="Interest", date=date(2018, 6, 1))
        statement.add_foreign_income(**later)

        incomes = statement.get_foreign_incomes()
        assert [income.description for income in incomes] == ["Dividend", "Interest"]


class TestAddRecord:
    """Tests for appending records."""

    def test_add_appends(self, statement):
        before = list(statement.records)
        record = statement.add_record(ForeignIncome, **INCOME_FIELDS)

        assert statement.records[:-1] == before
        assert statement.records[-1] is record
        assert record == ForeignIncome(**INCOME_FIELDS)

    def test_add_does_not_deduplicate(self, statement):
        statement.add_foreign_income(**INCOME_FIELDS)
        assert len(statement.get_foreign_incomes()) == 2

    def test_add_foreign_income(self, statement):
        record = statement.add_foreign_income(**INCOME_FIELDS)

        assert isinstance(record, ForeignIncome)
        assert record.local_amount == Decimal("5760.02")

    def test_add_unregistered_type(self, statement):
        """Test that only registered kinds can be added, leaving records untouched."""
        before = list(statement.records)
        with pytest.raises(TypeError):
            statement.add_record(Marker, label="x")
        assert statement.records == before

    def test_add_unknown_record_rejected(self, statement):
        with pytest.raises(TypeError):
            statement.add_record(UnknownRecord, name="@Sum")

    def test_add_with_custom_registry(self):
        registry = default_registry()
        registry.register(RecordKind(name="@Marker", record_type=Marker))
        statement = Statement(path="statement.dc8", year=2018, registry=registry)

        record = statement.add_record(Marker, label="x")

        assert statement.get_records(Marker) == [record]

    def test_missing_field(self, statement):
        fields = dict(INCOME_FIELDS)
        del fields["paid_tax"]
        with pytest.raises(TypeError):
            statement.add_record(ForeignIncome, **fields)


class TestEquality:
    """Tests for Statement equality."""

    def test_registry_is_ignored(self, statement):
        other = Statement(
            path=statement.path,
            year=statement.year,
            records=list(statement.records),
            registry=default_registry(),
        )
        assert other == statement
