"""Yoco hosted checkout API client."""

import logging
from dataclasses import dataclass

import httpx

from seminar_tickets.domain.checkout import CheckoutSession
from seminar_tickets.domain.errors import PaymentProviderError
from seminar_tickets.services.checkout import PaymentProvider

_logger = logging.getLogger(__name__)


@dataclass
class HttpxYocoClient(PaymentProvider):
    """Yoco checkout client implemented with httpx."""

    secret_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, secret_key: str, base_url: str) -> "HttpxYocoClient":
        """Create a Yoco client with a managed httpx session."""
        return cls(
            secret_key=secret_key, base_url=base_url, http_client=httpx.AsyncClient()
        )

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
        """Create a checkout using Yoco's checkouts API."""
        url = f"{self.base_url}/checkouts"
        payload: dict[str, object] = {
            "amount": amount,
            "currency": currency,
            "successUrl": success_url,
            "cancelUrl": cancel_url,
            "failureUrl": failure_url,
            "metadata": metadata,
        }
        try:
            response = await self.http_client.post(
                url,
                json=payload,
                headers={"Authorization": f"Bearer {self.secret_key}"},
                timeout=15,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            _logger.error(
                "Yoco checkout rejected: status=%s body=%s",
                exc.response.status_code,
                exc.response.text,
            )
            raise PaymentProviderError("Yoco rejected the checkout") from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise PaymentProviderError("Yoco checkout request failed") from exc

        redirect_url = data.get("redirectUrl") if isinstance(data, dict) else None
        if not redirect_url:
            raise PaymentProviderError("Yoco response did not include a redirectUrl")
        return CheckoutSession(id=data.get("id"), redirect_url=redirect_url)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
