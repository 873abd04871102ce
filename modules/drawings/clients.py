"""HTTP collaborators of the drawing export: signed-URL fetch and webhook delivery."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
USER_AGENT = "Wearco-Drawings/Export"


class DocumentFetchError(RuntimeError):
    """Raised when the template document cannot be downloaded."""


class WebhookDeliveryError(RuntimeError):
    """Raised when the automation webhook rejects or never receives a payload."""


class HttpClient:
    """Thin wrapper around httpx for simpler mocking in tests."""

    def __init__(self, *, timeout: float = DEFAULT_TIMEOUT, transport: httpx.BaseTransport | None = None) -> None:
        self._client = httpx.Client(
            timeout=httpx.Timeout(timeout, connect=min(timeout, 5.0)),
            headers={"User-Agent": USER_AGENT},
            transport=transport,
            follow_redirects=True,
        )

    def get_bytes(self, url: str) -> bytes:
        r = self._client.get(url)
        r.raise_for_status()
        return r.content

    def post_json(self, url: str, payload: Dict[str, Any]) -> httpx.Response:
        r = self._client.post(url, json=payload)
        r.raise_for_status()
        return r

    def close(self) -> None:
        self._client.close()


class DocumentFetcher:
    """Downloads a template's reference PDF from its signed URL."""

    def __init__(self, client: HttpClient) -> None:
        self.client = client

    def fetch(self, url: str) -> bytes:
        try:
            content = self.client.get_bytes(url)
        except httpx.HTTPStatusError as exc:
            raise DocumentFetchError(
                f"Template document request failed with HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise DocumentFetchError(f"Template document could not be downloaded: {exc}") from exc
        logger.debug("Fetched template document (%d bytes)", len(content))
        return content


class WebhookClient:
    """Posts exported PDFs to the workflow-automation webhook."""

    def __init__(self, client: HttpClient, url: Optional[str]) -> None:
        self.client = client
        self.url = url

    def send(self, payload: Dict[str, Any]) -> int:
        if not self.url:
            raise WebhookDeliveryError("No webhook URL is configured")
        try:
            response = self.client.post_json(self.url, payload)
        except httpx.HTTPStatusError as exc:
            raise WebhookDeliveryError(
                f"Webhook rejected the export with HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise WebhookDeliveryError(f"Webhook could not be reached: {exc}") from exc
        logger.info("Delivered %s to webhook (HTTP %d)", payload.get("filename"), response.status_code)
        return response.status_code


__all__ = [
    "DocumentFetchError",
    "DocumentFetcher",
    "HttpClient",
    "WebhookClient",
    "WebhookDeliveryError",
]
