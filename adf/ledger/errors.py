"""
Ledger error taxonomy.

Horizon responses and transport failures are mapped onto a small set of
categories so callers can show a specific message and decide on a retry.
Nothing here retries on its own.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests


class LedgerError(RuntimeError):
    """Base class for failures talking to the ledger."""

    category = "unknown"
    default_message = "The ledger request failed."

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        result_codes: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message or self.default_message)
        self.status_code = status_code
        self.result_codes = result_codes or {}

    @property
    def user_message(self) -> str:
        return self.default_message


class AccountNotFoundError(LedgerError):
    category = "not_found"
    default_message = "Account not found or not funded. Make sure the account exists on Stellar."


class BadSequenceError(LedgerError):
    category = "bad_sequence"
    default_message = "The account sequence number is stale. Reload the account and try again."


class FeeTooLowError(LedgerError):
    category = "fee_too_low"
    default_message = "The transaction fee is too low for current network conditions."


class InsufficientBalanceError(LedgerError):
    category = "insufficient_balance"
    default_message = "The account balance is too low to cover the fee and reserves."


class AuthorizationRequiredError(LedgerError):
    category = "bad_auth"
    default_message = "The account requires additional signatures to authorize this transaction."


class OperationFailedError(LedgerError):
    category = "operation_failed"
    default_message = "One or more operations in the transaction failed."

    @property
    def operation_codes(self) -> List[str]:
        return list(self.result_codes.get("operations") or [])

    @property
    def user_message(self) -> str:
        codes = [code for code in self.operation_codes if code != "op_success"]
        if not codes:
            return self.default_message
        return f"{self.default_message} Codes: {', '.join(codes)}"


class RateLimitedError(LedgerError):
    category = "rate_limited"
    default_message = "Too many requests to the ledger server. Wait a moment and try again."


class ServerUnavailableError(LedgerError):
    category = "server_unavailable"
    default_message = "The ledger server is unavailable. Try again later."


class TimeoutAmbiguousError(LedgerError):
    category = "timeout"
    default_message = (
        "The ledger server timed out. The request may or may not have been applied; "
        "check the account before retrying."
    )


class AssemblyError(LedgerError):
    category = "assembly"
    default_message = "The transaction could not be assembled."

    @property
    def user_message(self) -> str:
        return str(self)


_TRANSACTION_CODES = {
    "tx_bad_seq": BadSequenceError,
    "tx_insufficient_fee": FeeTooLowError,
    "tx_insufficient_balance": InsufficientBalanceError,
    "tx_bad_auth": AuthorizationRequiredError,
    "tx_bad_auth_extra": AuthorizationRequiredError,
    "tx_no_account": AccountNotFoundError,
    "tx_failed": OperationFailedError,
}


def extract_result_codes(body: Any) -> Dict[str, Any]:
    """Pull ``extras.result_codes`` out of a Horizon problem document."""
    if not isinstance(body, dict):
        return {}
    extras = body.get("extras")
    if not isinstance(extras, dict):
        return {}
    codes = extras.get("result_codes")
    return codes if isinstance(codes, dict) else {}


def classify_horizon_error(status_code: int, body: Any = None) -> LedgerError:
    """
    Map a non-2xx Horizon response onto a LedgerError.

    Args:
        status_code: HTTP status of the response
        body: Decoded JSON body (a Horizon problem document), if any

    Returns:
        The LedgerError subclass instance matching the response
    """
    detail = None
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("title")

    result_codes = extract_result_codes(body)
    tx_code = result_codes.get("transaction")
    if tx_code in _TRANSACTION_CODES:
        error_cls = _TRANSACTION_CODES[tx_code]
        return error_cls(detail, status_code=status_code, result_codes=result_codes)

    if status_code == 404:
        error_cls = AccountNotFoundError
    elif status_code == 429:
        error_cls = RateLimitedError
    elif status_code == 504:
        error_cls = TimeoutAmbiguousError
    elif status_code >= 500:
        error_cls = ServerUnavailableError
    else:
        error_cls = LedgerError
        detail = detail or f"Ledger request failed with HTTP {status_code}"
    return error_cls(detail, status_code=status_code, result_codes=result_codes)


def classify_transport_error(error: requests.exceptions.RequestException) -> LedgerError:
    """Map a ``requests`` failure onto a LedgerError."""
    if isinstance(error, requests.exceptions.Timeout):
        return TimeoutAmbiguousError(str(error))
    if isinstance(error, requests.exceptions.ConnectionError):
        return ServerUnavailableError(str(error))
    return LedgerError(str(error))
