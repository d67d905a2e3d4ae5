"""
Client for the signing relay.

The relay accepts a SEP-0007 URI and answers with a link (typically a
Telegram bot deep link) where the user completes signing.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import requests

from adf.config.models import RelayConfig
from adf.logging import get_logger
from adf.relay.sep7 import is_stellar_uri, with_return_url

logger = get_logger(__name__)


class RelayError(RuntimeError):
    """Raised when the relay rejects a URI or answers unexpectedly."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RelayClient:
    """Posts signing URIs to the configured relay endpoint."""

    def __init__(self, config: RelayConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session

    def submit(self, uri: str) -> str:
        """
        Send ``uri`` to the relay.

        Returns:
            The URL returned by the relay

        Raises:
            RelayError: On an invalid URI, transport failure, non-2xx status,
                non-JSON body, or a response without ``url``
        """
        if not is_stellar_uri(uri):
            raise RelayError("Invalid Stellar URI format")

        uri = with_return_url(uri, self.config.return_url)
        poster = self.session.post if self.session is not None else requests.post
        logger.debug(f"Relay: POST {self.config.endpoint} ({len(uri.encode('utf-8'))} bytes)")

        try:
            response = poster(self.config.endpoint, json={"uri": uri}, timeout=self.config.timeout)
        except requests.exceptions.RequestException as exc:
            raise RelayError(f"Relay request failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.status_code < 200 or response.status_code >= 300:
            detail = data.get("error") if isinstance(data, dict) else None
            raise RelayError(
                detail or f"Relay request failed: HTTP {response.status_code}",
                status_code=response.status_code,
            )
        if not isinstance(data, dict):
            raise RelayError("Relay returned a non-JSON response", status_code=response.status_code)

        url = data.get("url")
        if not url:
            raise RelayError("No URL in response from relay", status_code=response.status_code)

        logger.info("Relay accepted signing URI")
        return str(url)

    async def submit_async(self, uri: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.submit, uri)
