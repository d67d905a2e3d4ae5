"""
End-to-end flow: load an account into a form, then turn a submission into
an unsigned transaction.

The snapshot is read and reconciled before the sequence number is fetched,
so the envelope never carries a sequence older than the data it was diffed
against.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import List, Optional

from adf.config.models import ADFConfig
from adf.forms.schemas import FormSchema
from adf.forms.state import build_desired_state, load_form_state
from adf.forms.validation import ensure_valid
from adf.ledger.assembler import assemble
from adf.ledger.horizon import HorizonClient
from adf.ledger.models import FormState, Operation
from adf.ledger.reconcile import reconcile
from adf.ledger.snapshot import AccountSnapshot, SnapshotReader
from adf.logging import get_logger
from adf.relay.sep7 import build_transaction_uri

logger = get_logger(__name__)


@dataclass
class LoadedAccount:
    account_id: str
    snapshot: AccountSnapshot
    state: FormState

    @property
    def has_data(self) -> bool:
        return len(self.snapshot) > 0


@dataclass
class BuiltTransaction:
    account_id: str
    xdr: str
    operations: List[Operation] = field(default_factory=list)


def load_account_form(
    account_id: str,
    schema: FormSchema,
    config: ADFConfig,
    client: Optional[HorizonClient] = None,
) -> LoadedAccount:
    """
    Read an account and populate ``schema`` from its data entries.

    An unknown account loads as an empty form.
    """
    reader = SnapshotReader(config.network, client=client)
    snapshot = reader.fetch_snapshot(account_id)
    state = load_form_state(snapshot, schema)
    if not snapshot:
        logger.info(f"No existing data found for {account_id}")
    return LoadedAccount(account_id=account_id, snapshot=snapshot, state=state)


async def load_account_form_async(
    account_id: str,
    schema: FormSchema,
    config: ADFConfig,
    client: Optional[HorizonClient] = None,
) -> LoadedAccount:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, load_account_form, account_id, schema, config, client)


def build_transaction(
    account_id: str,
    submission: FormState,
    schema: FormSchema,
    config: ADFConfig,
    original: Optional[FormState] = None,
    snapshot: Optional[AccountSnapshot] = None,
    client: Optional[HorizonClient] = None,
) -> BuiltTransaction:
    """
    Validate a submission and assemble the transaction that applies it.

    Args:
        account_id: Account the data entries belong to
        submission: Values currently in the form
        schema: Form the submission comes from
        config: Configuration (network settings are used)
        original: State loaded into the form earlier; None for a new account
        snapshot: Already-fetched snapshot; fetched when None
        client: Horizon client override (tests, custom sessions)

    Returns:
        BuiltTransaction with the envelope XDR and the operations it carries

    Raises:
        ValidationError: If the submission is invalid
        AssemblyError: If there is nothing to change or the envelope cannot be built
        LedgerError: If the sequence number cannot be fetched
    """
    ensure_valid(account_id, submission, schema)

    client = client or HorizonClient(config.network)
    if snapshot is None:
        snapshot = SnapshotReader(config.network, client=client).fetch_snapshot(account_id)

    desired = build_desired_state(account_id, submission, schema, original)
    operations = reconcile(snapshot, desired)
    logger.info(f"{len(operations)} operations for {account_id}")

    xdr = assemble(account_id, client, operations, config.network)
    return BuiltTransaction(account_id=account_id, xdr=xdr, operations=operations)


async def build_transaction_async(
    account_id: str,
    submission: FormState,
    schema: FormSchema,
    config: ADFConfig,
    original: Optional[FormState] = None,
    snapshot: Optional[AccountSnapshot] = None,
    client: Optional[HorizonClient] = None,
) -> BuiltTransaction:
    """
    Async twin of :func:`build_transaction`.

    The snapshot fetch is awaited before reconciliation, and the sequence
    fetch plus assembly run only after that.
    """
    ensure_valid(account_id, submission, schema)

    client = client or HorizonClient(config.network)
    if snapshot is None:
        snapshot = await SnapshotReader(config.network, client=client).fetch_snapshot_async(account_id)

    desired = build_desired_state(account_id, submission, schema, original)
    operations = reconcile(snapshot, desired)

    loop = asyncio.get_running_loop()
    xdr = await loop.run_in_executor(None, assemble, account_id, client, operations, config.network)
    return BuiltTransaction(account_id=account_id, xdr=xdr, operations=operations)


def build_signing_uri(built: BuiltTransaction, config: ADFConfig) -> str:
    """Signing URI for ``built``, using the relay settings for message and return URL."""
    return build_transaction_uri(
        built.xdr,
        network_passphrase=config.network.network_passphrase,
        msg=config.relay.message,
        return_url=config.relay.return_url,
        pubkey=built.account_id,
    )
