"""Paid-order fulfillment workflow."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Protocol

from seminar_tickets.domain.checkout import amount_in_minor_units, clean_email
from seminar_tickets.domain.errors import (
    DispatchError,
    FulfillmentError,
    RenderError,
    ValidationError,
)
from seminar_tickets.domain.events import MARITAL_GRACE, EventDetails
from seminar_tickets.domain.tickets import (
    FulfillmentRecord,
    FulfillmentRequest,
    FulfillmentResult,
    TicketDetails,
    generate_reference_code,
)
from seminar_tickets.services.cache import Cache, InMemoryCache
from seminar_tickets.services.notifications import NotificationService
from seminar_tickets.services.records import FulfillmentRecordStore

_logger = logging.getLogger(__name__)

IDEMPOTENCY_TTL_SECONDS = 24 * 60 * 60


class TicketRenderer(Protocol):
    """Interface for producing ticket documents."""

    async def render(self, ticket: TicketDetails) -> bytes:
        """Return the finished document bytes or raise ``RenderError``."""


@dataclass
class _KeyClaim:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    holders: int = 0


@dataclass
class FulfillmentService:
    """Turns a successful payment into a recorded, delivered ticket."""

    store: FulfillmentRecordStore
    renderer: TicketRenderer
    notifications: NotificationService
    unit_price: int
    event: EventDetails = MARITAL_GRACE
    idempotency_cache: Cache = field(default_factory=InMemoryCache)
    _claims: dict[str, _KeyClaim] = field(
        default_factory=dict, init=False, repr=False
    )

    async def fulfill(self, request: FulfillmentRequest) -> FulfillmentResult:
        """Record, render and email a ticket for a paid order.

        Recording is best-effort. Rendering and email failures raise
        ``FulfillmentError``. Without an idempotency key every call issues a
        new reference code. Calls sharing a key run one at a time, and only
        the first successful one has side effects.
        """
        email = clean_email(request.email)
        if request.quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        key = request.idempotency_key
        if not key:
            return await self._issue(email, request)

        claim = self._claims.setdefault(key, _KeyClaim())
        claim.holders += 1
        try:
            async with claim.lock:
                previous = self.idempotency_cache.get(_cache_key(key))
                if isinstance(previous, FulfillmentResult):
                    _logger.info(
                        "Fulfillment replayed: ref=%s key=%s", previous.reference, key
                    )
                    return FulfillmentResult(
                        reference=previous.reference,
                        record=previous.record,
                        replayed=True,
                    )
                result = await self._issue(email, request)
                self.idempotency_cache.set(
                    _cache_key(key), result, IDEMPOTENCY_TTL_SECONDS
                )
                return result
        finally:
            claim.holders -= 1
            if not claim.holders:
                del self._claims[key]

    async def _issue(
        self, email: str, request: FulfillmentRequest
    ) -> FulfillmentResult:
        reference = generate_reference_code()
        record = FulfillmentRecord(
            reference=reference,
            email=email,
            quantity=request.quantity,
            amount=amount_in_minor_units(request.quantity, self.unit_price),
            first_name=request.first_name,
            last_name=request.last_name,
        )
        await self._record(record)

        ticket = TicketDetails(
            reference=reference,
            email=email,
            quantity=request.quantity,
            first_name=request.first_name,
            last_name=request.last_name,
            event=self.event,
        )
        try:
            pdf_bytes = await self.renderer.render(ticket)
            await self.notifications.send_ticket(ticket, pdf_bytes)
        except (RenderError, DispatchError) as exc:
            _logger.exception("Ticket processing failed: ref=%s", reference)
            raise FulfillmentError(
                "Ticket processing failed", reference=reference
            ) from exc

        _logger.info("Fulfillment complete: ref=%s qty=%s", reference, record.quantity)
        return FulfillmentResult(reference=reference, record=record)

    async def _record(self, record: FulfillmentRecord) -> None:
        try:
            await self.store.append(record)
        except Exception:
            _logger.exception("Failed to record sale: ref=%s", record.reference)


def _cache_key(idempotency_key: str) -> str:
    return f"fulfillment:{idempotency_key}"
