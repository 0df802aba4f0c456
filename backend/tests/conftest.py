import os

import pytest
from fastapi.testclient import TestClient

# Set test environment variables
os.environ.update(
    {
        "TRIPLETEX_API_KEY": "test_key",
        "TRIPLETEX_WEBHOOK_SECRET": "whsec_test",
        "TRIPLETEX_ACCOUNT_ID": "acct_42",
        "TRIPLETEX_TEST_MODE": "true",
    }
)

from tripletex_gateway.core.config import Settings
from tripletex_gateway.main import create_app
from tripletex_gateway.services.gateways import InvoiceGateway, SubscriptionGateway

API_URL = "https://api.tripletex.test"


class RecordingUpdater:
    """Stands in for the host application's status store."""

    def __init__(self):
        self.calls = []

    def update_status(self, entity_id, status):
        self.calls.append((entity_id, status))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        tripletex_api_url=API_URL,
        invoice_redirect_url="https://billing.example.com/invoices/done",
        invoice_error_url="https://billing.example.com/invoices/failed",
        subscription_redirect_url="https://billing.example.com/subscriptions/done",
        subscription_error_url="https://billing.example.com/subscriptions/failed",
        _env_file=None,
    )


@pytest.fixture
def updater() -> RecordingUpdater:
    return RecordingUpdater()


@pytest.fixture
def invoice_gateway(settings, updater) -> InvoiceGateway:
    return InvoiceGateway(settings, updater)


@pytest.fixture
def subscription_gateway(settings, updater) -> SubscriptionGateway:
    return SubscriptionGateway(settings, updater)


@pytest.fixture
def app(settings, updater):
    return create_app(updater, settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
