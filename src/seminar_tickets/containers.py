"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from seminar_tickets.adapters.brevo_client import HttpxBrevoClient
from seminar_tickets.adapters.google_sheets_store import GoogleSheetsRecordStore
from seminar_tickets.adapters.pdf_ticket_renderer import ReportLabTicketRenderer
from seminar_tickets.adapters.smtp_client import SmtpEmailClient
from seminar_tickets.adapters.yoco_client import HttpxYocoClient
from seminar_tickets.config import Settings, parse_service_account_info
from seminar_tickets.services.checkout import CheckoutService
from seminar_tickets.services.fulfillment import FulfillmentService
from seminar_tickets.services.notifications import NotificationService
from seminar_tickets.services.records import (
    FulfillmentRecordStore,
    InMemoryRecordStore,
)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    checkout_service: CheckoutService
    fulfillment_service: FulfillmentService
    record_store: FulfillmentRecordStore
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    closers: list[Callable[[], Awaitable[None]]] = []

    email_sender = _build_email_sender(resolved_settings)
    closers.append(email_sender.close)

    yoco_client = HttpxYocoClient.create(
        resolved_settings.yoco_secret_key, resolved_settings.yoco_base_url
    )
    closers.append(yoco_client.close)
    checkout_service = CheckoutService(
        provider=yoco_client,
        unit_price=resolved_settings.ticket_price,
        currency=resolved_settings.currency,
        public_base_url=resolved_settings.public_base_url,
    )

    record_store: FulfillmentRecordStore
    service_account_info = parse_service_account_info(
        resolved_settings.google_service_account_json
    )
    if resolved_settings.google_spreadsheet_id and service_account_info:
        sheets_store = GoogleSheetsRecordStore.create(
            spreadsheet_id=resolved_settings.google_spreadsheet_id,
            sheet_name=resolved_settings.google_sheet_name,
            service_account_info=service_account_info,
        )
        closers.append(sheets_store.close)
        record_store = sheets_store
    else:
        record_store = InMemoryRecordStore()

    fulfillment_service = FulfillmentService(
        store=record_store,
        renderer=ReportLabTicketRenderer(
            image_path=resolved_settings.ticket_image_path
        ),
        notifications=NotificationService(email_sender),
        unit_price=resolved_settings.ticket_price,
    )

    async def close_resources() -> None:
        for close in closers:
            await close()

    return AppContainer(
        settings=resolved_settings,
        checkout_service=checkout_service,
        fulfillment_service=fulfillment_service,
        record_store=record_store,
        close_resources=close_resources,
    )


def _build_email_sender(settings: Settings) -> HttpxBrevoClient | SmtpEmailClient:
    if settings.email_backend == "smtp":
        if not settings.smtp_username or not settings.smtp_password:
            raise RuntimeError(
                "SMTP_USERNAME and SMTP_PASSWORD are required for EMAIL_BACKEND=smtp"
            )
        return SmtpEmailClient(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            sender_email=settings.from_email,
            sender_name=settings.from_name,
        )
    if settings.email_backend != "brevo":
        raise RuntimeError(f"Unknown EMAIL_BACKEND: {settings.email_backend}")
    if not settings.brevo_api_key:
        raise RuntimeError("BREVO_API_KEY is not set. Check your .env file.")
    return HttpxBrevoClient.create(
        api_key=settings.brevo_api_key,
        sender_email=settings.from_email,
        sender_name=settings.from_name,
        base_url=settings.brevo_base_url,
    )
