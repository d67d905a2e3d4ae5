"""
Minimal Horizon client for reading account state.

Only the account endpoint is needed: it carries both the data entries and
the sequence number used when assembling a transaction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from adf.config.models import NetworkConfig
from adf.ledger.errors import LedgerError, classify_horizon_error, classify_transport_error
from adf.logging import get_logger

logger = get_logger(__name__)


@dataclass
class AccountRecord:
    """Account state as returned by Horizon."""

    account_id: str
    sequence: int
    payload: Dict[str, Any] = field(default_factory=dict)
    """Raw JSON document, kept for data-entry normalization."""


class HorizonClient:
    """
    Read-only Horizon client.

    Every non-2xx response and transport failure is raised as a
    :class:`~adf.ledger.errors.LedgerError` subclass.
    """

    def __init__(self, config: NetworkConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.base_url = config.horizon_url
        self.timeout = config.request_timeout
        self.session = session

    def _get(self, url: str) -> requests.Response:
        getter = self.session.get if self.session is not None else requests.get
        try:
            return getter(url, headers={"Accept": "application/json"}, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            raise classify_transport_error(exc) from exc

    def load_account(self, account_id: str) -> AccountRecord:
        """
        Fetch an account document.

        Raises:
            AccountNotFoundError: If the account does not exist (HTTP 404)
            LedgerError: For any other failure
        """
        url = f"{self.base_url}/accounts/{quote(account_id, safe='')}"
        logger.debug(f"Horizon: GET {url}")
        response = self._get(url)

        if response.status_code < 200 or response.status_code >= 300:
            try:
                body = response.json()
            except ValueError:
                body = None
            raise classify_horizon_error(response.status_code, body)

        try:
            payload = response.json()
        except ValueError as exc:
            raise LedgerError(f"Horizon returned invalid JSON for {account_id}") from exc
        if not isinstance(payload, dict):
            raise LedgerError(f"Horizon returned an unexpected document for {account_id}")

        try:
            sequence = int(payload.get("sequence"))
        except (TypeError, ValueError) as exc:
            raise LedgerError(f"Horizon account {account_id} has no valid sequence number") from exc

        return AccountRecord(
            account_id=str(payload.get("account_id") or account_id),
            sequence=sequence,
            payload=payload,
        )

    def load_sequence(self, account_id: str) -> int:
        """Current sequence number of ``account_id``, fetched fresh."""
        return self.load_account(account_id).sequence
