"""ASGI entrypoint for the ticketing API."""

from seminar_tickets.api.app import create_app
from seminar_tickets.containers import build_container

app = create_app(build_container())
