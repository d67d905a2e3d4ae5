"""Test doubles and payload builders shared across the ledger and service tests."""

import base64
from typing import Any, Dict, List, Optional

from stellar_sdk import Keypair

from adf.ledger.errors import AccountNotFoundError, LedgerError
from adf.ledger.horizon import AccountRecord


def make_account_id(seed: int) -> str:
    """Deterministic, valid ed25519 public key for ``seed`` (0-255)."""
    return Keypair.from_raw_ed25519_seed(bytes([seed]) * 32).public_key


def encode_entries(entries: Dict[str, str]) -> Dict[str, str]:
    """Base64-encode text values the way Horizon returns them."""
    return {key: base64.b64encode(value.encode("utf-8")).decode("ascii") for key, value in entries.items()}


def account_payload(account_id: str, entries: Dict[str, str], sequence: int = 1000) -> Dict[str, Any]:
    return {
        "account_id": account_id,
        "sequence": str(sequence),
        "data": encode_entries(entries),
    }


class FakeHorizon:
    """Stands in for HorizonClient; records every call."""

    def __init__(
        self,
        payload: Optional[Dict[str, Any]] = None,
        sequence: int = 1000,
        error: Optional[LedgerError] = None,
    ):
        self.payload = payload
        self.sequence = sequence
        self.error = error
        self.calls: List[str] = []

    def load_account(self, account_id: str) -> AccountRecord:
        self.calls.append(f"load_account:{account_id}")
        if self.error is not None:
            raise self.error
        if self.payload is None:
            raise AccountNotFoundError()
        return AccountRecord(account_id=account_id, sequence=self.sequence, payload=self.payload)

    def load_sequence(self, account_id: str) -> int:
        self.calls.append(f"load_sequence:{account_id}")
        if self.error is not None:
            raise self.error
        return self.sequence

