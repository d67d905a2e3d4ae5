"""
Transaction assembly.

Wraps reconciled operations into an unsigned transaction envelope.
Signing happens elsewhere (a wallet reached through a signing URI).
"""

from __future__ import annotations

from typing import Iterable, Protocol

from stellar_sdk import Account, TransactionBuilder

from adf.config.models import NetworkConfig
from adf.ledger.errors import AssemblyError
from adf.ledger.models import Operation
from adf.logging import get_logger

logger = get_logger(__name__)


class SequenceSource(Protocol):
    def load_sequence(self, account_id: str) -> int:
        ...


def build_envelope_xdr(
    account_id: str,
    sequence: int,
    operations: Iterable[Operation],
    config: NetworkConfig,
) -> str:
    """
    Build the base64 XDR of an unsigned envelope from a known sequence number.

    Raises:
        AssemblyError: If there are no operations or the SDK rejects the input.
    """
    operations = list(operations)
    if not operations:
        raise AssemblyError("Nothing to submit: the form matches the account's current data")

    try:
        builder = TransactionBuilder(
            source_account=Account(account_id, sequence),
            network_passphrase=config.network_passphrase,
            base_fee=config.base_fee,
        )
        if config.has_expiry:
            builder.set_timeout(config.timeout_seconds)
        else:
            builder.add_time_bounds(0, 0)

        for operation in operations:
            builder.append_manage_data_op(data_name=operation.key, data_value=operation.value)

        envelope = builder.build()
        return envelope.to_xdr()
    except AssemblyError:
        raise
    except Exception as exc:
        raise AssemblyError(f"Could not assemble transaction for {account_id}: {exc}") from exc


def assemble(
    account_id: str,
    sequence_source: SequenceSource,
    operations: Iterable[Operation],
    config: NetworkConfig,
) -> str:
    """
    Assemble an unsigned transaction envelope.

    The sequence number is fetched from ``sequence_source`` right before the
    envelope is built.

    Args:
        account_id: Source account address
        sequence_source: Anything with ``load_sequence(account_id)``, usually a HorizonClient
        operations: Operations in the order they should be applied
        config: Network settings (passphrase, fee per operation, validity window)

    Returns:
        Base64 XDR of the unsigned envelope

    Raises:
        AssemblyError: If the envelope cannot be built
        LedgerError: If the sequence number cannot be fetched
    """
    operations = list(operations)
    if not operations:
        raise AssemblyError("Nothing to submit: the form matches the account's current data")

    sequence = sequence_source.load_sequence(account_id)
    logger.debug(f"Assembling {len(operations)} operations for {account_id} at sequence {sequence}")
    return build_envelope_xdr(account_id, sequence, operations, config)
