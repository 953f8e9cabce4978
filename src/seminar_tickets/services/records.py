"""Fulfillment record storage."""

from dataclasses import dataclass, field
from typing import Protocol

from seminar_tickets.domain.tickets import FulfillmentRecord


class FulfillmentRecordStore(Protocol):
    """Append-only store of completed sales."""

    async def append(self, record: FulfillmentRecord) -> None:
        """Persist a completed sale."""

    async def list_records(self) -> list[FulfillmentRecord]:
        """Return all recorded sales, oldest first."""


@dataclass
class InMemoryRecordStore(FulfillmentRecordStore):
    """Record store kept in process memory; contents are lost on restart."""

    records: list[FulfillmentRecord] = field(default_factory=list)

    async def append(self, record: FulfillmentRecord) -> None:
        self.records.append(record)

    async def list_records(self) -> list[FulfillmentRecord]:
        return list(self.records)


def total_tickets(records: list[FulfillmentRecord]) -> int:
    """Return the number of admitted people across records."""
    return sum(record.quantity for record in records)
