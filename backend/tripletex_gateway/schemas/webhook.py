from typing import Any

from pydantic import BaseModel, Field


class EntityState(BaseModel, extra="allow"):
    id: str | int = Field(..., description="Tripletex invoice or subscription ID")
    status: Any = None


class WebhookEvent(BaseModel, extra="allow"):
    """Envelope of a delivery; nested objects are validated by the gateway that owns them."""

    event: Any = Field(None, description="Event type / name")
    invoice: Any = None
    subscription: Any = None
