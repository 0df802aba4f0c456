"""Descriptors the host billing application reads to list and configure gateways."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

EXTENSION_VERSION = "1.0.0"
EXTENSION_AUTHOR = "Tripletex Gateway Maintainers"
EXTENSION_WEBSITE = "https://www.tripletex.no"


class ConfigField(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    friendly_name: str = Field(..., alias="friendlyName")
    type: Literal["text", "boolean"]
    description: str
    required: bool


class ExtensionMetadata(BaseModel):
    display_name: str
    version: str = EXTENSION_VERSION
    author: str = EXTENSION_AUTHOR
    website: str = EXTENSION_WEBSITE


CONFIG_FIELDS: tuple[ConfigField, ...] = (
    ConfigField(
        name="tripletex_api_key",
        friendly_name="Tripletex API Key",
        type="text",
        description="The API key for accessing the Tripletex API.",
        required=True,
    ),
    ConfigField(
        name="tripletex_webhook_secret",
        friendly_name="Tripletex Webhook Secret",
        type="text",
        description="The secret used for verifying webhooks from Tripletex.",
        required=True,
    ),
    ConfigField(
        name="tripletex_test_mode",
        friendly_name="Tripletex Test Mode",
        type="boolean",
        description="Enable test mode to simulate payments without processing real transactions.",
        required=False,
    ),
    ConfigField(
        name="tripletex_account_id",
        friendly_name="Tripletex Account ID",
        type="text",
        description="The Tripletex account ID associated with your invoices.",
        required=True,
    ),
)


def config_schema() -> list[ConfigField]:
    return list(CONFIG_FIELDS)
