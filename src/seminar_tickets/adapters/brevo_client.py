"""Brevo transactional email API client."""

import base64
import logging
from dataclasses import dataclass

import httpx

from seminar_tickets.domain.errors import DispatchError
from seminar_tickets.services.notifications import EmailSender, OutgoingEmail

_logger = logging.getLogger(__name__)


@dataclass
class HttpxBrevoClient(EmailSender):
    """Brevo email sender implemented with httpx."""

    api_key: str
    sender_email: str
    sender_name: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls, api_key: str, sender_email: str, sender_name: str, base_url: str
    ) -> "HttpxBrevoClient":
        """Create a Brevo client with a managed httpx session."""
        return cls(
            api_key=api_key,
            sender_email=sender_email,
            sender_name=sender_name,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
        )

    async def send_email(self, message: OutgoingEmail) -> None:
        """Send a message through Brevo's smtp/email endpoint."""
        url = f"{self.base_url}/smtp/email"
        recipient: dict[str, str] = {"email": message.to_email}
        if message.to_name:
            recipient["name"] = message.to_name
        payload: dict[str, object] = {
            "sender": {"name": self.sender_name, "email": self.sender_email},
            "to": [recipient],
            "subject": message.subject,
            "htmlContent": message.html_body,
        }
        if message.attachments:
            payload["attachment"] = [
                {
                    "content": base64.b64encode(item.content).decode("ascii"),
                    "name": item.filename,
                }
                for item in message.attachments
            ]
        try:
            response = await self.http_client.post(
                url,
                json=payload,
                headers={"api-key": self.api_key, "accept": "application/json"},
                timeout=30,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            _logger.error(
                "Brevo rejected email: status=%s body=%s",
                exc.response.status_code,
                exc.response.text,
            )
            raise DispatchError("Brevo rejected the email") from exc
        except httpx.HTTPError as exc:
            raise DispatchError("Brevo request failed") from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
