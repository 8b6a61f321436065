"""In-memory tax statement."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, TypeVar

from tax_statement.records import DEFAULT_REGISTRY, ForeignIncome, RecordRegistry, UnknownRecord

R = TypeVar("R")


@dataclass
class Statement:
    """A tax statement file: its year and records in file order.

    Records of registered kinds are typed values; everything else is an
    UnknownRecord that is written back exactly as it was read. New records
    can only be appended.
    """

    path: str
    year: int
    records: list[Any] = field(default_factory=list)
    registry: RecordRegistry = field(default=DEFAULT_REGISTRY, repr=False, compare=False)

    def get_records(self, record_type: type[R]) -> list[R]:
        """Return all records of a known type, in file order."""
        return [record for record in self.records if type(record) is record_type]

    def add_record(self, record_type: type[R], **fields: Any) -> R:
        """Create a record of a known type and append it to the statement."""
        if self.registry.kind_for(record_type) is None:
            raise TypeError(f"{record_type.__name__} is not a registered record type")

        record = record_type(**fields)
        self.records.append(record)
        return record

    def unknown_records(self) -> list[UnknownRecord]:
        """Return the records that are kept verbatim."""
        return self.get_records(UnknownRecord)

    def get_foreign_incomes(self) -> list[ForeignIncome]:
        return self.get_records(ForeignIncome)

    def add_foreign_income(
        self,
        description: str,
        date: date,
        currency: str,
        currency_rate: Decimal,
        amount: Decimal,
        paid_tax: Decimal,
        local_amount: Decimal,
        local_paid_tax: Decimal,
    ) -> ForeignIncome:
        """Declare a foreign income, e.g. a dividend paid by a foreign issuer."""
        return self.add_record(
            ForeignIncome,
            description=description,
            date=date,
            currency=currency,
            currency_rate=currency_rate,
            amount=amount,
            paid_tax=paid_tax,
            local_amount=local_amount,
            local_paid_tax=local_paid_tax,
        )
