"""Run the ticketing API with uvicorn."""

import uvicorn

from seminar_tickets.config import Settings


def main() -> None:
    """Start the HTTP server on the configured port."""
    settings = Settings()
    uvicorn.run(
        "seminar_tickets.api.asgi:app",
        host="0.0.0.0",  # noqa: S104
        port=settings.port,
    )


if __name__ == "__main__":
    main()
