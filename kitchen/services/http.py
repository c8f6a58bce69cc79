from __future__ import annotations

from typing import Any, Optional

import httpx

from kitchen.config import Settings


class BackendClient:
    """Base for adapters talking to the inventory/recipe back-end.

    `transport` lets tests swap in httpx.MockTransport.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = settings.backend_base_url.rstrip("/")
        self.timeout = settings.http_timeout_seconds
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
            headers={"Content-Type": "application/json"},
        )


def unwrap(body: Any) -> Any:
    """Back-end replies look like {"success": bool, "data": ...}."""
    if not isinstance(body, dict):
        raise ValueError("response is not a JSON object")
    if not body.get("success", False):
        raise ValueError(body.get("message") or body.get("error") or "back-end reported failure")
    return body.get("data")
