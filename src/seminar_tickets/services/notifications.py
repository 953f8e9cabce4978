"""Ticket email notifications."""

import html
import logging
from dataclasses import dataclass, field
from typing import Protocol

from seminar_tickets.domain.tickets import TicketDetails

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailAttachment:
    """Binary file attached to an outgoing email."""

    filename: str
    content: bytes
    content_type: str = "application/pdf"


@dataclass(frozen=True)
class OutgoingEmail:
    """A single transactional email."""

    to_email: str
    subject: str
    html_body: str
    to_name: str | None = None
    attachments: list[EmailAttachment] = field(default_factory=list)


class EmailSender(Protocol):
    """Interface for delivering transactional email."""

    async def send_email(self, message: OutgoingEmail) -> None:
        """Deliver a message or raise ``DispatchError``."""


@dataclass
class NotificationService:
    """Builds and sends the ticket email."""

    sender: EmailSender

    async def send_ticket(self, ticket: TicketDetails, pdf_bytes: bytes) -> None:
        """Email the rendered ticket to the buyer."""
        message = build_ticket_email(ticket, pdf_bytes)
        await self.sender.send_email(message)
        _logger.info("Ticket emailed: ref=%s", ticket.reference)


def build_ticket_email(ticket: TicketDetails, pdf_bytes: bytes) -> OutgoingEmail:
    """Return the buyer-facing email for a rendered ticket."""
    greeting = "Thank you for booking"
    if ticket.first_name:
        greeting += f", {html.escape(ticket.first_name)}"
    body = (
        "<h2>Payment Successful!</h2>"
        f"<p>{greeting}. Please find your official tickets attached to this email.</p>"
        f"<p>Reference: <strong>{ticket.reference}</strong><br>"
        f"Admit: {ticket.quantity} person(s)<br>"
        f"{html.escape(ticket.event.venue)}, {ticket.event.date} at "
        f"{ticket.event.time}</p>"
    )
    return OutgoingEmail(
        to_email=ticket.email,
        to_name=ticket.holder_name or None,
        subject=f"Your Tickets: {ticket.event.name} (Ref: {ticket.reference})",
        html_body=body,
        attachments=[EmailAttachment(filename=ticket.filename, content=pdf_bytes)],
    )
