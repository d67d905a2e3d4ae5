"""
End-to-end tests for loading an account into a form and building the
transaction for a submission.
"""

import asyncio

import pytest
from stellar_sdk import TransactionEnvelope

from adf.forms import ORGANIZATION, PARTICIPANT, PERSONAL, ValidationError
from adf.ledger.errors import AssemblyError
from adf.ledger.models import CollectionEntry, FormState
from adf.relay.sep7 import parse_uri_params
from adf.service import (
    build_signing_uri,
    build_transaction,
    build_transaction_async,
    load_account_form,
    load_account_form_async,
)
from tests.helpers import FakeHorizon, account_payload


def _operations(xdr, config):
    transaction = TransactionEnvelope.from_xdr(xdr, config.network.network_passphrase).transaction
    return [(op.data_name, op.data_value) for op in transaction.operations]


class TestLoadAccountForm:
    def test_loads_existing_account(self, adf_config, account_id, refs):
        client = FakeHorizon(account_payload(account_id, {
            "Name": "Guild",
            "About": "Builders",
            "MyPart001": refs["A"],
            "TagBlogger": account_id,
        }))

        loaded = load_account_form(account_id, ORGANIZATION, adf_config, client=client)

        assert loaded.has_data
        assert loaded.state.fields == {"Name": "Guild", "About": "Builders"}
        assert loaded.state.entries == [CollectionEntry("1", refs["A"], key="MyPart001")]
        assert loaded.state.tags == ["blogger"]

    def test_unknown_account_loads_empty_form(self, adf_config, account_id):
        loaded = load_account_form(account_id, PARTICIPANT, adf_config, client=FakeHorizon())
        assert not loaded.has_data
        assert loaded.snapshot == {}
        assert loaded.state == FormState()

    def test_async(self, adf_config, account_id):
        client = FakeHorizon(account_payload(account_id, {"Name": "Ana"}))
        loaded = asyncio.run(load_account_form_async(account_id, PERSONAL, adf_config, client=client))
        assert loaded.state.fields == {"Name": "Ana"}


class TestBuildTransaction:
    def test_new_account_writes_everything(self, adf_config, account_id, refs):
        client = FakeHorizon(account_payload(account_id, {}), sequence=500)
        submission = FormState(
            fields={"Name": "Ana", "About": "Hello"},
            entries=[CollectionEntry("1", refs["A"])],
            tags=["programmer"],
        )

        built = build_transaction(account_id, submission, PARTICIPANT, adf_config, client=client)

        assert _operations(built.xdr, adf_config) == [
            ("PartOf001", refs["A"].encode()),
            ("Name", b"Ana"),
            ("About", b"Hello"),
            ("TagProgrammer", account_id.encode()),
        ]
        assert len(built.operations) == 4

    def test_snapshot_is_read_before_sequence(self, adf_config, account_id):
        client = FakeHorizon(account_payload(account_id, {}))
        submission = FormState(fields={"Name": "Ana", "About": "Hello"})

        build_transaction(account_id, submission, PERSONAL, adf_config, client=client)

        assert client.calls == [f"load_account:{account_id}", f"load_sequence:{account_id}"]

    def test_edit_after_load(self, adf_config, account_id, refs):
        client = FakeHorizon(account_payload(account_id, {
            "Name": "Guild",
            "About": "Builders",
            "MyPart001": refs["A"],
            "MyPart005": refs["B"],
            "MyPart023": refs["C"],
            "TagProgrammer": account_id,
        }))
        loaded = load_account_form(account_id, ORGANIZATION, adf_config, client=client)

        submission = FormState(
            fields={"Name": "Guild", "About": "Builders and makers"},
            entries=[
                CollectionEntry("1", refs["A"], key="MyPart001"),
                CollectionEntry("5", refs["F"], key="MyPart005"),
                CollectionEntry("23", refs["C"], key="MyPart023"),
                CollectionEntry("new", refs["D"]),
            ],
            tags=["programmer", "blockchain"],
        )
        built = build_transaction(
            account_id,
            submission,
            ORGANIZATION,
            adf_config,
            original=loaded.state,
            snapshot=loaded.snapshot,
            client=client,
        )

        assert _operations(built.xdr, adf_config) == [
            ("MyPart005", None),
            ("MyPart005", refs["F"].encode()),
            ("MyPart024", refs["D"].encode()),
            ("About", b"Builders and makers"),
            ("TagBlockchain", account_id.encode()),
        ]

    def test_unchanged_form_has_nothing_to_submit(self, adf_config, account_id):
        client = FakeHorizon(account_payload(account_id, {"Name": "Ana", "About": "Hello"}))
        loaded = load_account_form(account_id, PERSONAL, adf_config, client=client)

        with pytest.raises(AssemblyError):
            build_transaction(
                account_id, loaded.state, PERSONAL, adf_config,
                original=loaded.state, snapshot=loaded.snapshot, client=client,
            )

    def test_invalid_submission_never_touches_ledger(self, adf_config, account_id):
        client = FakeHorizon(account_payload(account_id, {}))

        with pytest.raises(ValidationError):
            build_transaction(account_id, FormState(fields={"Name": "Ana"}), PERSONAL, adf_config, client=client)
        assert client.calls == []

    def test_async(self, adf_config, account_id):
        client = FakeHorizon(account_payload(account_id, {}))
        submission = FormState(fields={"Name": "Ana", "About": "Hello"})

        built = asyncio.run(build_transaction_async(account_id, submission, PERSONAL, adf_config, client=client))

        assert _operations(built.xdr, adf_config) == [("Name", b"Ana"), ("About", b"Hello")]
        assert client.calls == [f"load_account:{account_id}", f"load_sequence:{account_id}"]


def test_build_signing_uri(adf_config, account_id):
    client = FakeHorizon(account_payload(account_id, {}))
    built = build_transaction(
        account_id, FormState(fields={"Name": "Ana", "About": "Hello"}), PERSONAL, adf_config, client=client
    )

    params = parse_uri_params(build_signing_uri(built, adf_config))

    assert params["xdr"] == built.xdr
    assert params["network_passphrase"] == adf_config.network.network_passphrase
    assert params["return_url"] == "https://app.example.test/"
    assert params["pubkey"] == account_id
