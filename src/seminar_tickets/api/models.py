"""Pydantic models for the public JSON endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class OrderPayload(BaseModel):
    """Buyer details posted by the landing page."""

    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    quantity: int = 1
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")


class SendTicketPayload(OrderPayload):
    """Buyer details posted after the payment redirect."""

    idempotency_key: str | None = Field(default=None, alias="idempotencyKey")

