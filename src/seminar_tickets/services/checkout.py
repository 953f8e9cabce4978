"""Hosted checkout creation."""

import logging
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import urlencode

from seminar_tickets.domain.checkout import (
    CheckoutRequest,
    CheckoutSession,
    amount_in_minor_units,
    clean_email,
)
from seminar_tickets.domain.errors import ValidationError
from seminar_tickets.domain.events import MARITAL_GRACE, EventDetails

_logger = logging.getLogger(__name__)

LANDING_PATH = "/marital-grace"


class PaymentProvider(Protocol):
    """Interface for a hosted-checkout payment provider."""

    async def create_checkout(  # noqa: PLR0913
        self,
        *,
        amount: int,
        currency: str,
        success_url: str,
        cancel_url: str,
        failure_url: str,
        metadata: dict[str, str],
    ) -> CheckoutSession:
        """Create a checkout and return its hosted page."""


@dataclass
class CheckoutService:
    """Turns a buyer's order into a provider checkout link."""

    provider: PaymentProvider
    unit_price: int
    currency: str
    public_base_url: str | None = None
    event: EventDetails = MARITAL_GRACE

    async def create_checkout(
        self, request: CheckoutRequest, base_url: str
    ) -> CheckoutSession:
        """Validate the order and create a hosted checkout for it.

        The buyer details travel in the success URL so the browser can hand
        them back once payment completes; nothing is stored server-side.
        """
        email = clean_email(request.email)
        if request.quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        amount = amount_in_minor_units(request.quantity, self.unit_price)
        landing_url = self._landing_url(base_url)
        metadata = {
            "email": email,
            "quantity": str(request.quantity),
            "product": self.event.name,
        }
        if request.first_name:
            metadata["firstName"] = request.first_name
        if request.last_name:
            metadata["lastName"] = request.last_name

        session = await self.provider.create_checkout(
            amount=amount,
            currency=self.currency,
            success_url=build_success_url(landing_url, request, email),
            cancel_url=f"{landing_url}?payment_cancelled=true",
            failure_url=f"{landing_url}?payment_failed=true",
            metadata=metadata,
        )
        _logger.info(
            "Checkout created: id=%s amount=%s qty=%s",
            session.id,
            amount,
            request.quantity,
        )
        return session

    def _landing_url(self, base_url: str) -> str:
        base = self.public_base_url or base_url
        return base.rstrip("/") + LANDING_PATH


def build_success_url(landing_url: str, request: CheckoutRequest, email: str) -> str:
    """Return the landing URL carrying the order context back to the browser."""
    params = {
        "payment_success": "true",
        "email": email,
        "qty": str(request.quantity),
    }
    if request.first_name:
        params["firstName"] = request.first_name
    if request.last_name:
        params["lastName"] = request.last_name
    return f"{landing_url}?{urlencode(params)}"
