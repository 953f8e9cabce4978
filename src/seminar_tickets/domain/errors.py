"""Domain errors raised by the ticketing workflow."""


class TicketingError(Exception):
    """Base class for ticketing failures."""


class ValidationError(TicketingError):
    """Raised when a checkout or fulfillment request is incomplete."""


class PaymentProviderError(TicketingError):
    """Raised when the payment provider cannot create a checkout."""


class RenderError(TicketingError):
    """Raised when a ticket document cannot be produced."""


class DispatchError(TicketingError):
    """Raised when the ticket email cannot be delivered to the provider."""


class SinkError(TicketingError):
    """Raised when a fulfillment record cannot be written or read."""


class FulfillmentError(TicketingError):
    """Raised when a paid order could not be turned into a delivered ticket."""

    def __init__(self, message: str, reference: str | None = None) -> None:
        super().__init__(message)
        self.reference = reference
