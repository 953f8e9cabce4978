"""Checkout domain models."""

from dataclasses import dataclass

from seminar_tickets.domain.errors import ValidationError


@dataclass(frozen=True)
class CheckoutRequest:
    """Buyer input for starting a hosted checkout."""

    email: str
    quantity: int
    first_name: str | None = None
    last_name: str | None = None


@dataclass(frozen=True)
class CheckoutSession:
    """Provider-hosted checkout page returned to the browser."""

    id: str | None
    redirect_url: str


def amount_in_minor_units(quantity: int, unit_price: int) -> int:
    """Return the order total in cents for a whole-rand unit price."""
    return quantity * unit_price * 100


def clean_email(raw: str | None) -> str:
    """Return the trimmed buyer address or raise ``ValidationError``.

    Addresses end up in mail headers, so whitespace and control characters
    inside the address are rejected.
    """
    email = (raw or "").strip()
    if not email:
        raise ValidationError("Email is required")
    if any(char.isspace() or not char.isprintable() for char in email):
        raise ValidationError("Email address is invalid")
    return email
