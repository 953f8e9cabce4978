"""Ticket and fulfillment domain models."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from seminar_tickets.domain.events import MARITAL_GRACE, EventDetails

REFERENCE_PREFIX = "MG-"
STATUS_PAID = "PAID"


def generate_reference_code() -> str:
    """Return a new human-readable ticket reference like ``MG-1A2B3C4D``."""
    return REFERENCE_PREFIX + uuid4().hex[:8].upper()


def full_name(first_name: str | None, last_name: str | None) -> str:
    """Join optional name parts into a display name."""
    parts = [part.strip() for part in (first_name, last_name) if part]
    return " ".join(part for part in parts if part)


@dataclass(frozen=True)
class FulfillmentRequest:
    """Buyer data sent back after a successful payment."""

    email: str | None
    quantity: int
    first_name: str | None = None
    last_name: str | None = None
    idempotency_key: str | None = None


@dataclass(frozen=True)
class TicketDetails:
    """Everything printed on a single ticket document."""

    reference: str
    email: str
    quantity: int
    first_name: str | None = None
    last_name: str | None = None
    event: EventDetails = MARITAL_GRACE

    @property
    def holder_name(self) -> str:
        return full_name(self.first_name, self.last_name)

    @property
    def filename(self) -> str:
        return f"Ticket-{self.reference}.pdf"


@dataclass(frozen=True)
class FulfillmentRecord:
    """One completed sale as written to the record store."""

    reference: str
    email: str
    quantity: int
    amount: int
    first_name: str | None = None
    last_name: str | None = None
    status: str = STATUS_PAID
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    @property
    def name(self) -> str:
        return full_name(self.first_name, self.last_name)


@dataclass(frozen=True)
class FulfillmentResult:
    """Outcome of a successful fulfillment."""

    reference: str
    record: FulfillmentRecord
    replayed: bool = False
