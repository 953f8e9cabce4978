"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse

from seminar_tickets.api.admin import router as admin_router
from seminar_tickets.api.models import OrderPayload, SendTicketPayload
from seminar_tickets.api.pages import (
    SUPPORT_MESSAGE,
    confirmation_page,
    landing_page,
    message_page,
)
from seminar_tickets.app_logging import configure_logging
from seminar_tickets.containers import AppContainer
from seminar_tickets.domain.checkout import CheckoutRequest
from seminar_tickets.domain.errors import (
    FulfillmentError,
    PaymentProviderError,
    ValidationError,
)
from seminar_tickets.domain.tickets import FulfillmentRequest

CHECKOUT_FAILED_MESSAGE = "Failed to create payment link"
INVALID_REQUEST_MESSAGE = "Invalid request"
PROCESSING_FAILED_MESSAGE = (
    "Payment received, but ticket processing failed. Please contact support."
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Seminar Tickets", lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)}
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> HTMLResponse | JSONResponse:
        logger.warning(
            "Rejected malformed request: %s %s", request.method, request.url.path
        )
        if request.url.path == "/payment-success":
            return HTMLResponse(
                message_page(INVALID_REQUEST_MESSAGE),
                status_code=status.HTTP_400_BAD_REQUEST,
            )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": INVALID_REQUEST_MESSAGE},
        )

    @app.exception_handler(PaymentProviderError)
    async def payment_provider_error_handler(
        request: Request, exc: PaymentProviderError
    ) -> JSONResponse:
        logger.error("Checkout creation failed: %s", exc, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": CHECKOUT_FAILED_MESSAGE},
        )

    @app.exception_handler(FulfillmentError)
    async def fulfillment_error_handler(
        request: Request, exc: FulfillmentError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": PROCESSING_FAILED_MESSAGE},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    @app.get("/marital-grace", response_class=HTMLResponse)
    async def landing(request: Request) -> HTMLResponse:
        """Serve the ticket purchase page."""
        state_container: AppContainer = request.app.state.container
        return HTMLResponse(
            landing_page(
                state_container.fulfillment_service.event,
                state_container.settings.ticket_price,
            )
        )

    @app.post("/create-checkout")
    async def create_checkout(
        payload: OrderPayload, request: Request
    ) -> dict[str, str]:
        """Create a hosted checkout and return the provider's payment page."""
        state_container: AppContainer = request.app.state.container
        session = await state_container.checkout_service.create_checkout(
            CheckoutRequest(
                email=payload.email or "",
                quantity=payload.quantity,
                first_name=payload.first_name,
                last_name=payload.last_name,
            ),
            base_url=str(request.base_url),
        )
        return {"redirectUrl": session.redirect_url}

    @app.post("/send-ticket")
    async def send_ticket(
        payload: SendTicketPayload, request: Request
    ) -> dict[str, object]:
        """Issue, record and email a ticket after a successful payment."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.fulfillment_service.fulfill(
            FulfillmentRequest(
                email=payload.email,
                quantity=payload.quantity,
                first_name=payload.first_name,
                last_name=payload.last_name,
                idempotency_key=payload.idempotency_key,
            )
        )
        return {"success": True, "ref": result.reference}

    @app.get("/payment-success", response_class=HTMLResponse)
    async def payment_success(  # noqa: PLR0913
        request: Request,
        email: str | None = None,
        qty: int = 1,
        firstName: str | None = None,  # noqa: N803
        lastName: str | None = None,  # noqa: N803
    ) -> HTMLResponse:
        """Fulfill the order named in the redirect and show a confirmation."""
        state_container: AppContainer = request.app.state.container
        try:
            result = await state_container.fulfillment_service.fulfill(
                FulfillmentRequest(
                    email=email,
                    quantity=qty,
                    first_name=firstName,
                    last_name=lastName,
                )
            )
        except ValidationError as exc:
            return HTMLResponse(
                message_page(str(exc)), status_code=status.HTTP_400_BAD_REQUEST
            )
        except FulfillmentError:
            return HTMLResponse(
                message_page(SUPPORT_MESSAGE),
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return HTMLResponse(confirmation_page(result.reference, result.record.email))

    return app
