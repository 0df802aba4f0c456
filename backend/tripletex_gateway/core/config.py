from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Extension settings as stored by the host billing application
    tripletex_api_key: str
    tripletex_webhook_secret: str
    tripletex_test_mode: bool = False
    tripletex_account_id: str

    tripletex_api_url: str = "https://api.tripletex.no"
    currency: str = "NOK"
    subscription_interval: str = "monthly"

    # Where the payer is sent after pay()
    invoice_redirect_url: str = "https://invoice-redirect-url.com"
    invoice_error_url: str = "https://invoice-error-url.com"
    subscription_redirect_url: str = "https://subscription-redirect-url.com"
    subscription_error_url: str = "https://subscription-error-url.com"

    max_body_size: int = 1_048_576  # 1 MiB

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
