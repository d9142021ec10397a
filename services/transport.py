"""
Authenticated HTTP transport for the procurement backend.

Every request carries the configured bearer token and expects the backend's
JSON envelope ({success, data?, error?}). Anything that prevents a usable
envelope from coming back (no token, connection failure, non-2xx status,
non-JSON body) is raised as a TransportError; the services above turn those
into Failure results.
"""
import logging
from typing import Any, Optional

import httpx

from config import Config

logger = logging.getLogger(__name__)

USER_AGENT = "Procurement-Desk/1.0"


class TransportError(Exception):
    """A request that did not yield a usable response envelope."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ApiTransport:
    """
    Thin wrapper over httpx.Client bound to the configured API base URL.

    Usage:
        transport = ApiTransport(config)
        payload = transport.request("GET", "/purchase-invoices", params={"page": "1"})
    """

    def __init__(self, config: Config, client: Optional[httpx.Client] = None) -> None:
        self.base_url = config.api_base_url.rstrip("/")
        self.token = config.api_token
        self._client = client or httpx.Client(timeout=config.request_timeout)

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, str]] = None,
        json: Any = None,
        files: Optional[dict] = None,
    ) -> Any:
        """Send one request and return the decoded JSON body."""
        if not self.token:
            raise TransportError("No authentication token available")

        headers = {
            "Authorization": f"Bearer {self.token}",
            "User-Agent": USER_AGENT,
        }
        url = self.url(path)
        logger.debug("%s %s params=%s", method, url, params)

        try:
            response = self._client.request(
                method, url, params=params, json=json, files=files, headers=headers,
            )
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {path} failed: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.is_error:
            message = None
            if isinstance(payload, dict):
                message = payload.get("error") or payload.get("message")
            if not message:
                message = f"HTTP {response.status_code}: {response.text[:200]}"
            raise TransportError(str(message), response.status_code)

        if payload is None:
            raise TransportError(
                f"Invalid JSON response from {path}", response.status_code
            )
        return payload

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ApiTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
