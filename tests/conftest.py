"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from seminar_tickets.config import Settings
from seminar_tickets.containers import AppContainer
from seminar_tickets.domain.checkout import CheckoutSession
from seminar_tickets.domain.errors import (
    DispatchError,
    PaymentProviderError,
    RenderError,
    SinkError,
)
from seminar_tickets.domain.tickets import FulfillmentRecord, TicketDetails
from seminar_tickets.services.checkout import CheckoutService, PaymentProvider
from seminar_tickets.services.fulfillment import FulfillmentService, TicketRenderer
from seminar_tickets.services.notifications import (
    EmailSender,
    NotificationService,
    OutgoingEmail,
)
from seminar_tickets.services.records import (
    FulfillmentRecordStore,
    InMemoryRecordStore,
)


@dataclass
class FakePaymentProvider(PaymentProvider):
    """Fake payment provider that records checkout calls."""

    redirect_url: str = "https://pay.yoco.com/checkout/ch_123"
    fail: bool = False
    calls: list[dict[str, object]] = field(default_factory=list)

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
        self.calls.append(
            {
                "amount": amount,
                "currency": currency,
                "success_url": success_url,
                "cancel_url": cancel_url,
                "failure_url": failure_url,
                "metadata": metadata,
            }
        )
        if self.fail:
            raise PaymentProviderError("provider returned 502")
        return CheckoutSession(id="ch_123", redirect_url=self.redirect_url)


@dataclass
class FakeTicketRenderer(TicketRenderer):
    """Fake renderer returning static PDF-looking bytes."""

    content: bytes = b"%PDF-1.4 fake ticket"
    fail: bool = False
    rendered: list[TicketDetails] = field(default_factory=list)

    async def render(self, ticket: TicketDetails) -> bytes:
        self.rendered.append(ticket)
        if self.fail:
            raise RenderError("renderer exploded")
        return self.content


@dataclass
class FakeEmailSender(EmailSender):
    """Fake email sender that records outgoing messages."""

    fail: bool = False
    messages: list[OutgoingEmail] = field(default_factory=list)

    async def send_email(self, message: OutgoingEmail) -> None:
        if self.fail:
            raise DispatchError("provider returned 500")
        self.messages.append(message)


@dataclass
class FailingRecordStore(FulfillmentRecordStore):
    """Record store whose every call fails."""

    attempts: int = 0

    async def append(self, record: FulfillmentRecord) -> None:
        self.attempts += 1
        raise SinkError("sheet unavailable")

    async def list_records(self) -> list[FulfillmentRecord]:
        raise SinkError("sheet unavailable")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        yoco_secret_key="sk_test_123",
        from_email="tickets@example.com",
        brevo_api_key="brevo-key",
        public_base_url="https://tickets.example.com",
        ticket_image_path="does/not/exist.png",
    )


@pytest.fixture
def payment_provider() -> FakePaymentProvider:
    return FakePaymentProvider()


@pytest.fixture
def renderer() -> FakeTicketRenderer:
    return FakeTicketRenderer()


@pytest.fixture
def email_sender() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture
def record_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def failing_store() -> FailingRecordStore:
    return FailingRecordStore()


@pytest.fixture
def checkout_service(
    settings: Settings, payment_provider: FakePaymentProvider
) -> CheckoutService:
    return CheckoutService(
        provider=payment_provider,
        unit_price=settings.ticket_price,
        currency=settings.currency,
        public_base_url=settings.public_base_url,
    )


@pytest.fixture
def fulfillment_service(
    settings: Settings,
    record_store: InMemoryRecordStore,
    renderer: FakeTicketRenderer,
    email_sender: FakeEmailSender,
) -> FulfillmentService:
    return FulfillmentService(
        store=record_store,
        renderer=renderer,
        notifications=NotificationService(email_sender),
        unit_price=settings.ticket_price,
    )


@pytest.fixture
def container(
    settings: Settings,
    checkout_service: CheckoutService,
    fulfillment_service: FulfillmentService,
    record_store: InMemoryRecordStore,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        checkout_service=checkout_service,
        fulfillment_service=fulfillment_service,
        record_store=record_store,
        close_resources=close_resources,
    )
