"""Direct SMTP submission for ticket emails."""

import asyncio
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr

from seminar_tickets.domain.errors import DispatchError
from seminar_tickets.services.notifications import EmailSender, OutgoingEmail


@dataclass
class SmtpEmailClient(EmailSender):
    """Email sender that submits over SMTP with STARTTLS."""

    host: str
    port: int
    username: str
    password: str
    sender_email: str
    sender_name: str
    timeout: float = 30.0

    async def send_email(self, message: OutgoingEmail) -> None:
        """Submit the message from a worker thread."""
        try:
            email_message = self.build_message(message)
            await asyncio.to_thread(self._submit, email_message)
        except (smtplib.SMTPException, OSError, ValueError) as exc:
            raise DispatchError("SMTP submission failed") from exc

    def build_message(self, message: OutgoingEmail) -> EmailMessage:
        """Build a MIME message with an HTML body and attachments."""
        email_message = EmailMessage()
        email_message["From"] = formataddr((self.sender_name, self.sender_email))
        email_message["To"] = (
            formataddr((message.to_name, message.to_email))
            if message.to_name
            else message.to_email
        )
        email_message["Subject"] = message.subject
        email_message.set_content("Your tickets are attached to this email.")
        email_message.add_alternative(message.html_body, subtype="html")
        for attachment in message.attachments:
            maintype, _, subtype = attachment.content_type.partition("/")
            email_message.add_attachment(
                attachment.content,
                maintype=maintype,
                subtype=subtype,
                filename=attachment.filename,
            )
        return email_message

    def _submit(self, email_message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            smtp.starttls()
            smtp.login(self.username, self.password)
            smtp.send_message(email_message)

    async def close(self) -> None:
        """SMTP connections are opened per message; nothing to release."""
