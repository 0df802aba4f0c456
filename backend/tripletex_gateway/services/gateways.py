import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from fastapi import status
from pydantic import BaseModel, ValidationError

from tripletex_gateway.core.config import Settings
from tripletex_gateway.core.extension import ConfigField, ExtensionMetadata, config_schema
from tripletex_gateway.schemas.payment import (
    InvoicePayload,
    PaymentRequest,
    SubscriptionPayload,
)
from tripletex_gateway.schemas.webhook import EntityState, WebhookEvent
from tripletex_gateway.services import signature
from tripletex_gateway.services.tripletex_client import TripletexClient

logger = logging.getLogger(__name__)


class StatusUpdater(Protocol):
    """Host hook that records a new status for an invoice or subscription.

    Webhooks are delivered at least once and are not deduplicated here, so
    implementations must be idempotent.
    """

    def update_status(self, entity_id: str | int, status: str) -> None: ...


# Maps the entity state carried by an event to the new local status, or None
EventHandler = Callable[[EntityState], str | None]


def when_status(mapping: dict[str, str]) -> EventHandler:
    def handler(state: EntityState) -> str | None:
        for incoming, new_status in mapping.items():
            if state.status == incoming:
                return new_status
        return None

    return handler


def always(new_status: str) -> EventHandler:
    def handler(state: EntityState) -> str | None:
        return new_status

    return handler


INVOICE_EVENTS: dict[str, EventHandler] = {
    "invoice_created": when_status({"paid": "paid"}),
    "invoice_paid": when_status({"paid": "paid"}),
    "invoice_canceled": always("canceled"),
}

SUBSCRIPTION_EVENTS: dict[str, EventHandler] = {
    "subscription_created": when_status({"active": "active"}),
    "subscription_updated": when_status({"active": "active", "inactive": "inactive"}),
    "subscription_canceled": always("canceled"),
}


@dataclass(frozen=True)
class RedirectUrls:
    success: str
    error: str


class BillingGateway(ABC):
    """A Tripletex payment integration exposed to the host billing application.

    Subclasses fix the API endpoint, the outbound payload, the redirect URLs
    and the table of webhook events they react to.
    """

    name: str
    display_name: str
    endpoint: str
    entity_key: str
    events: dict[str, EventHandler]

    def __init__(
        self,
        settings: Settings,
        status_updater: StatusUpdater,
        client: TripletexClient | None = None,
    ):
        self.settings = settings
        self.status_updater = status_updater
        self.client = client or TripletexClient(
            settings.tripletex_api_url, settings.tripletex_api_key
        )

    # ---------- descriptors ----------
    def metadata(self) -> ExtensionMetadata:
        return ExtensionMetadata(display_name=self.display_name)

    def config_schema(self) -> list[ConfigField]:
        return config_schema()

    # ---------- payment ----------
    @property
    @abstractmethod
    def redirect_urls(self) -> RedirectUrls:
        """Success and error destinations for the payer."""

    @abstractmethod
    def build_payload(self, request: PaymentRequest) -> BaseModel:
        """Outbound body for the gateway's endpoint."""

    def pay(self, total: float, products: list[Any], invoice_id: str | int) -> str:
        request = PaymentRequest(total=total, products=products, invoice_id=invoice_id)
        payload = self.build_payload(request).model_dump(by_alias=True)

        logger.info(f"{self.name}: sending payment for invoice {invoice_id}")
        response = self.client.post(self.endpoint, payload)

        if response is not None and response.get("status") == "success":
            return self.redirect_urls.success

        logger.warning(f"{self.name}: payment for invoice {invoice_id} was not accepted")
        return self.redirect_urls.error

    # ---------- webhooks ----------
    def handle_webhook(self, raw_body: bytes, header: str | None) -> int:
        """Verify and dispatch one webhook delivery, returning the HTTP status."""
        try:
            signature.verify(raw_body, header, self.settings.tripletex_webhook_secret)
        except signature.WebhookSignatureError as exc:
            logger.warning(f"{self.name}: rejected webhook: {exc}")
            return status.HTTP_400_BAD_REQUEST

        try:
            event = WebhookEvent.model_validate_json(raw_body)
        except ValidationError:
            logger.warning(f"{self.name}: ignoring webhook with unreadable body")
            return status.HTTP_200_OK

        self.dispatch(event)
        return status.HTTP_200_OK

    def dispatch(self, event: WebhookEvent) -> None:
        if not isinstance(event.event, str):
            logger.warning(f"{self.name}: webhook without event name")
            return

        handler = self.events.get(event.event)
        if handler is None:
            logger.info(f"Unhandled event: {event.event}")
            return

        # Only this gateway's own object is validated; other keys are ignored
        try:
            state = EntityState.model_validate(getattr(event, self.entity_key))
        except ValidationError:
            logger.warning(f"{self.name}: {event.event} has no usable {self.entity_key} object")
            return

        new_status = handler(state)
        if new_status is None:
            logger.info(
                f"{self.name}: {event.event} for {state.id} with status "
                f"{state.status!r} needs no update"
            )
            return

        logger.info(f"{self.name}: {self.entity_key} {state.id} -> {new_status}")
        self.status_updater.update_status(state.id, new_status)


class InvoiceGateway(BillingGateway):
    name = "tripletex_invoice"
    display_name = "Tripletex Faktura"
    endpoint = "/v2/invoices"
    entity_key = "invoice"
    events = INVOICE_EVENTS

    @property
    def redirect_urls(self) -> RedirectUrls:
        return RedirectUrls(
            success=self.settings.invoice_redirect_url,
            error=self.settings.invoice_error_url,
        )

    def build_payload(self, request: PaymentRequest) -> InvoicePayload:
        return InvoicePayload(
            invoice_id=request.invoice_id,
            amount=request.total,
            account_id=self.settings.tripletex_account_id,
            test_mode=self.settings.tripletex_test_mode,
            currency=self.settings.currency,
        )


class SubscriptionGateway(BillingGateway):
    name = "tripletex_subscription"
    display_name = "Tripletex Subscription"
    endpoint = "/v2/subscriptions"
    entity_key = "subscription"
    events = SUBSCRIPTION_EVENTS

    @property
    def redirect_urls(self) -> RedirectUrls:
        return RedirectUrls(
            success=self.settings.subscription_redirect_url,
            error=self.settings.subscription_error_url,
        )

    def build_payload(self, request: PaymentRequest) -> SubscriptionPayload:
        return SubscriptionPayload(
            invoice_id=request.invoice_id,
            amount=request.total,
            account_id=self.settings.tripletex_account_id,
            test_mode=self.settings.tripletex_test_mode,
            currency=self.settings.currency,
            recurring=True,
            interval=self.settings.subscription_interval,
        )
