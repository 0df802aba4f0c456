from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PaymentRequest(BaseModel):
    total: float = Field(..., ge=0, description="Total amount to charge")
    products: list[Any] = Field(default_factory=list)
    invoice_id: str | int = Field(..., description="Host invoice ID")


class PaymentRedirect(BaseModel):
    redirect_url: str


class InvoicePayload(BaseModel):
    """Body of POST /v2/invoices."""

    model_config = ConfigDict(populate_by_name=True)

    invoice_id: str | int = Field(..., alias="invoiceId")
    amount: float
    account_id: str = Field(..., alias="accountId")
    test_mode: bool = Field(..., alias="testMode")
    currency: str


class SubscriptionPayload(InvoicePayload):
    """Body of POST /v2/subscriptions."""

    recurring: bool = True
    interval: str
