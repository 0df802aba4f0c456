import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class TripletexClient:
    def __init__(self, base_url: str, api_key: str):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key

    def post(self, path: str, payload: dict[str, Any]) -> dict[str, Any] | None:
        """POST a JSON payload and return the decoded response object.

        Returns None on transport errors, non-2xx responses and bodies that
        are not a JSON object.
        """
        url = f"{self.base_url}{path}"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            r = httpx.post(url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.error(f"Request to {url} failed: {exc}")
            return None

        if not r.is_success:
            logger.error(f"Tripletex returned {r.status_code} for {url}")
            return None

        try:
            body = r.json()
        except ValueError:
            logger.error(f"Tripletex returned a non-JSON body for {url}")
            return None

        if not isinstance(body, dict):
            logger.error(f"Unexpected response shape from {url}: {type(body).__name__}")
            return None
        return body
