import logging

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Request, status
from starlette.concurrency import run_in_threadpool

from tripletex_gateway.core.config import Settings, get_settings
from tripletex_gateway.middleware.body_size import BodySizeLimitMiddleware
from tripletex_gateway.schemas.payment import PaymentRedirect, PaymentRequest
from tripletex_gateway.services.gateways import (
    BillingGateway,
    InvoiceGateway,
    StatusUpdater,
    SubscriptionGateway,
)
from tripletex_gateway.services.signature import SIGNATURE_HEADER

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------- dependencies ----------
def invoice_gateway(request: Request) -> BillingGateway:
    return request.app.state.invoice_gateway


def subscription_gateway(request: Request) -> BillingGateway:
    return request.app.state.subscription_gateway


@router.get("/health", include_in_schema=False)
async def health():
    return {"status": "ok"}


# ---------- extensions ----------
@router.get("/extensions")
def list_extensions(
    invoices: BillingGateway = Depends(invoice_gateway),
    subscriptions: BillingGateway = Depends(subscription_gateway),
):
    return {
        gateway.name: {
            "metadata": gateway.metadata().model_dump(),
            "config": [
                field.model_dump(by_alias=True) for field in gateway.config_schema()
            ],
        }
        for gateway in (invoices, subscriptions)
    }


# ---------- payments ----------
@router.post("/invoices/pay", response_model=PaymentRedirect)
def pay_invoice(
    data: PaymentRequest, gateway: BillingGateway = Depends(invoice_gateway)
):
    return {"redirect_url": gateway.pay(data.total, data.products, data.invoice_id)}


@router.post("/subscriptions/pay", response_model=PaymentRedirect)
def pay_subscription(
    data: PaymentRequest, gateway: BillingGateway = Depends(subscription_gateway)
):
    return {"redirect_url": gateway.pay(data.total, data.products, data.invoice_id)}


# ---------- webhooks ----------
async def _read_body(request: Request, limit: int) -> bytes:
    # Chunked uploads carry no Content-Length for the middleware to check
    raw = bytearray()
    async for chunk in request.stream():
        raw.extend(chunk)
        if len(raw) > limit:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail="Payload too large",
            )
    return bytes(raw)


async def _receive(gateway: BillingGateway, request: Request, signature: str | None):
    raw = await _read_body(request, gateway.settings.max_body_size)
    logger.info(f"Received {gateway.name} webhook ({len(raw)} bytes)")

    code = await run_in_threadpool(gateway.handle_webhook, raw, signature)
    if code == status.HTTP_400_BAD_REQUEST:
        raise HTTPException(status_code=code, detail="Invalid signature")
    return {"status": "received"}


@router.post("/webhooks/invoices")
async def invoice_webhook(
    request: Request,
    gateway: BillingGateway = Depends(invoice_gateway),
    signature: str | None = Header(None, alias=SIGNATURE_HEADER),
):
    return await _receive(gateway, request, signature)


@router.post("/webhooks/subscriptions")
async def subscription_webhook(
    request: Request,
    gateway: BillingGateway = Depends(subscription_gateway),
    signature: str | None = Header(None, alias=SIGNATURE_HEADER),
):
    return await _receive(gateway, request, signature)


def create_app(status_updater: StatusUpdater, settings: Settings | None = None) -> FastAPI:
    """Build the gateway service around the host's status-update hook."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Tripletex Billing Gateway",
        description="Invoice and subscription payments through Tripletex",
        version="1.0.0",
    )
    app.add_middleware(BodySizeLimitMiddleware, max_body_size=settings.max_body_size)

    app.state.invoice_gateway = InvoiceGateway(settings, status_updater)
    app.state.subscription_gateway = SubscriptionGateway(settings, status_updater)

    app.include_router(router)
    return app
