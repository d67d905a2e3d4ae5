"""
Tests for account snapshot normalization and fetching.
"""

import asyncio
import base64
import logging
from unittest.mock import patch

import pytest
import requests

from adf.ledger.errors import ServerUnavailableError
from adf.ledger.snapshot import (
    AccountSnapshot,
    DataShape,
    SnapshotReader,
    decode_value,
    detect_shape,
    fetch_snapshot,
    normalize_account_data,
)
from tests.helpers import FakeHorizon, account_payload, encode_entries


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


class TestNormalizeAccountData:
    def test_mapping_shape(self):
        payload = {"data": encode_entries({"Name": "Alice", "About": "Hi"})}
        assert detect_shape(payload) is DataShape.MAPPING
        assert normalize_account_data(payload) == {"Name": b"Alice", "About": b"Hi"}

    def test_alternate_mapping_shape(self):
        payload = {"data_attr": encode_entries({"Website": "https://example.org"})}
        assert detect_shape(payload) is DataShape.ALTERNATE
        assert normalize_account_data(payload) == {"Website": b"https://example.org"}

    def test_records_shape(self):
        payload = {
            "data_entries": [
                {"name": "MyPart001", "value": _b64("GABC")},
                {"name": "", "value": _b64("ignored")},
                "not a record",
            ]
        }
        assert detect_shape(payload) is DataShape.RECORDS
        assert normalize_account_data(payload) == {"MyPart001": b"GABC"}

    def test_all_shapes_agree(self):
        entries = {"Name": "Alice", "TagProgrammer": "GSELF"}
        records = [{"name": key, "value": value} for key, value in encode_entries(entries).items()]
        shapes = [
            {"data": encode_entries(entries)},
            {"data_attr": encode_entries(entries)},
            {"data_entries": records},
        ]
        snapshots = [normalize_account_data(payload) for payload in shapes]
        assert snapshots[0] == snapshots[1] == snapshots[2]

    def test_unknown_shape_is_empty(self):
        assert detect_shape({"balances": []}) is DataShape.UNKNOWN
        assert detect_shape(None) is DataShape.UNKNOWN
        assert normalize_account_data({"balances": []}) == {}

    def test_bad_base64_entry_is_dropped_and_logged(self, caplog):
        payload = {"data": {"Name": _b64("Alice"), "About": "%%% not base64 %%%"}}
        with caplog.at_level(logging.WARNING, logger="adf"):
            snapshot = normalize_account_data(payload)

        assert snapshot == {"Name": b"Alice"}
        assert "About" in caplog.text

    def test_values_stay_bytes(self):
        raw = bytes([0xFF, 0x00, 0x10])
        payload = {"data": {"Blob": base64.b64encode(raw).decode("ascii")}}
        assert normalize_account_data(payload)["Blob"] == raw


def test_decode_value():
    assert decode_value(_b64("x")) == b"x"
    assert decode_value(b"raw") == b"raw"
    with pytest.raises(ValueError):
        decode_value("a")
    with pytest.raises(ValueError):
        decode_value(12)


class TestAccountSnapshot:
    def test_text_decodes_utf8(self):
        snapshot = AccountSnapshot.from_text({"Name": "Ђорђе"})
        assert snapshot["Name"] == "Ђорђе".encode("utf-8")
        assert snapshot.text("Name") == "Ђорђе"
        assert snapshot.text("Missing") is None
        assert snapshot.text("Missing", "") == ""

    def test_text_replaces_invalid_bytes(self):
        snapshot = AccountSnapshot({"Blob": b"\xff"})
        assert snapshot.text("Blob") == "�"

    def test_is_read_only_mapping(self):
        snapshot = AccountSnapshot({"Name": b"x"})
        with pytest.raises(TypeError):
            snapshot["Name"] = b"y"  # type: ignore[index]


class TestSnapshotReader:
    def test_fetch_snapshot(self, network_config, account_id):
        client = FakeHorizon(account_payload(account_id, {"Name": "Alice"}))
        snapshot = SnapshotReader(network_config, client=client).fetch_snapshot(account_id)

        assert snapshot == {"Name": b"Alice"}
        assert client.calls == [f"load_account:{account_id}"]

    def test_missing_account_yields_empty_snapshot(self, network_config, account_id):
        client = FakeHorizon(payload=None)
        snapshot = SnapshotReader(network_config, client=client).fetch_snapshot(account_id)
        assert snapshot == {}

    def test_ledger_failure_yields_empty_snapshot(self, network_config, account_id):
        client = FakeHorizon(error=ServerUnavailableError())
        assert SnapshotReader(network_config, client=client).fetch_snapshot(account_id) == {}

    def test_fetch_snapshot_async(self, network_config, account_id):
        client = FakeHorizon(account_payload(account_id, {"About": "Hi"}))
        reader = SnapshotReader(network_config, client=client)

        snapshot = asyncio.run(reader.fetch_snapshot_async(account_id))

        assert snapshot == {"About": b"Hi"}


@patch("requests.get")
def test_fetch_snapshot_never_raises_on_transport_failure(mock_get, network_config, account_id):
    mock_get.side_effect = requests.exceptions.ConnectionError("refused")
    assert fetch_snapshot(account_id, network_config) == {}
