"""Guest list dashboard."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status
from fastapi.responses import HTMLResponse

from seminar_tickets.api.pages import dashboard_page, message_page
from seminar_tickets.domain.errors import SinkError

if TYPE_CHECKING:
    from seminar_tickets.containers import AppContainer

_logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin"])


@router.get("/admin-dashboard", response_class=HTMLResponse)
async def admin_dashboard(request: Request) -> HTMLResponse:
    """Render every recorded sale with the running ticket total."""
    container: AppContainer = request.app.state.container
    try:
        records = await container.record_store.list_records()
    except SinkError:
        _logger.exception("Failed to load fulfillment records")
        return HTMLResponse(
            message_page("The guest list is unavailable right now."),
            status_code=status.HTTP_502_BAD_GATEWAY,
        )
    event = container.fulfillment_service.event
    return HTMLResponse(dashboard_page(event.name, records))
