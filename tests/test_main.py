from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import Mock

import pytest

import adf.__main__ as adf_main
from adf.config.models import NetworkConfig
from adf.ledger.assembler import build_envelope_xdr
from adf.ledger.errors import BadSequenceError
from adf.ledger.models import Operation
from tests.helpers import account_payload


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(adf_main, "configure_logging_from_args", lambda **kwargs: None)
    monkeypatch.setenv("ADF_NETWORK_TYPE", "TESTNET")
    monkeypatch.delenv("ADF_HORIZON_URL", raising=False)


def _horizon(monkeypatch: pytest.MonkeyPatch, payload: dict) -> Mock:
    response = Mock()
    response.status_code = 200
    response.json.return_value = payload
    mock_get = Mock(return_value=response)
    monkeypatch.setattr("requests.get", mock_get)
    return mock_get


def test_main_missing_config_returns_1(tmp_path: Path, capsys) -> None:
    missing = tmp_path / "missing.json"

    code = adf_main.main(["--config", str(missing), "verify", "AAAA"])
    err = capsys.readouterr().err
    assert code == 1
    assert "Configuration file not found" in err


def test_main_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        adf_main.main([])


def test_main_dispatches_show(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    cfg_file = tmp_path / "config.json"
    cfg_file.write_text("{}", encoding="utf-8")
    seen = {}

    def _fake_show(args, config):
        seen["config"] = config
        return 4

    monkeypatch.setattr(adf_main, "run_show", _fake_show)

    code = adf_main.main(["--config", str(cfg_file), "show", "GABC"])
    assert code == 4
    assert seen["config"].config_path == cfg_file.resolve()


def test_show_prints_form_json(monkeypatch: pytest.MonkeyPatch, capsys, account_id, refs) -> None:
    _horizon(monkeypatch, account_payload(account_id, {"Name": "Ana", "PartOf001": refs["A"]}))

    code = adf_main.main(["show", account_id, "--form", "participant"])
    data = json.loads(capsys.readouterr().out)

    assert code == 0
    assert data["account_id"] == account_id
    assert data["name"] == "Ana"
    assert data["entries"] == [{"id": "1", "account_id": refs["A"], "key": "PartOf001"}]
    assert data["tags"] == []


def test_build_prints_xdr(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys, account_id) -> None:
    _horizon(monkeypatch, account_payload(account_id, {"Name": "Ana", "About": "Hello"}))
    form = tmp_path / "form.json"
    form.write_text(json.dumps({"name": "Ana", "about": "Hello again"}), encoding="utf-8")

    code = adf_main.main(["build", account_id, "--form", "personal", "--input", str(form)])
    captured = capsys.readouterr()

    assert code == 0
    assert "set About = Hello again" in captured.err
    assert "1 to set, 0 to delete" in captured.err
    assert adf_main.main(["verify", captured.out.strip()]) == 0


def test_build_prints_uri(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys, account_id) -> None:
    _horizon(monkeypatch, account_payload(account_id, {}))
    form = tmp_path / "form.json"
    form.write_text(json.dumps({"name": "Ana", "about": "Hello"}), encoding="utf-8")

    code = adf_main.main(["build", account_id, "--form", "personal", "--input", str(form), "--uri"])

    assert code == 0
    assert capsys.readouterr().out.startswith("web+stellar:tx?xdr=")


def test_build_reports_field_errors(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys, account_id) -> None:
    _horizon(monkeypatch, account_payload(account_id, {}))
    form = tmp_path / "form.json"
    form.write_text(json.dumps({"name": "Ana", "website": "nope"}), encoding="utf-8")

    code = adf_main.main(["build", account_id, "--form", "personal", "--input", str(form)])
    err = capsys.readouterr().err

    assert code == 1
    assert "about: About is required" in err
    assert "website: Must be a valid URL" in err


def test_build_reports_ledger_errors(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys, account_id) -> None:
    form = tmp_path / "form.json"
    form.write_text(json.dumps({"name": "Ana", "about": "Hello"}), encoding="utf-8")

    def _fail(args, config):
        raise BadSequenceError()

    monkeypatch.setattr(adf_main, "run_build", _fail)

    code = adf_main.main(["build", account_id, "--form", "personal", "--input", str(form)])
    assert code == 1
    assert BadSequenceError.default_message in capsys.readouterr().err


def test_verify(capsys, account_id) -> None:
    xdr = build_envelope_xdr(account_id, 1, [Operation.write("Name", "Ana")], NetworkConfig(network_type="TESTNET"))

    assert adf_main.main(["verify", xdr]) == 0
    assert adf_main.main(["verify", "not-a-real-envelope"]) == 1
    assert capsys.readouterr().out.split() == ["valid", "invalid"]


def test_uri(capsys, account_id) -> None:
    xdr = build_envelope_xdr(account_id, 1, [Operation.write("Name", "Ana")], NetworkConfig(network_type="TESTNET"))

    assert adf_main.main(["uri", xdr]) == 0
    assert capsys.readouterr().out.startswith("web+stellar:tx?xdr=")


def test_uri_rejects_malformed_xdr(capsys) -> None:
    assert adf_main.main(["uri", "AAAA"]) == 1
    assert "Not a transaction envelope" in capsys.readouterr().err


def test_main_handles_keyboard_interrupt(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    def _interrupt(args, config):
        raise KeyboardInterrupt

    monkeypatch.setattr(adf_main, "run_uri", _interrupt)

    assert adf_main.main(["uri", "AAAA"]) == 130
    assert "Interrupted" in capsys.readouterr().err


def test_main_summarizes_unexpected_errors(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    def _boom(args, config):
        raise RuntimeError("something\nbroke")

    monkeypatch.setattr(adf_main, "run_uri", _boom)

    assert adf_main.main(["uri", "AAAA"]) == 1
    assert "RuntimeError: something broke" in capsys.readouterr().err


def test_init_writes_loadable_config(tmp_path: Path, capsys) -> None:
    target = tmp_path / "conf" / "adf.yaml"

    assert adf_main.main(["init", str(target)]) == 0
    assert "Wrote configuration" in capsys.readouterr().out

    from adf.config import load_config_from_file

    config = load_config_from_file(target)
    assert config.network.network_type == "TESTNET"


def test_init_refuses_to_overwrite(tmp_path: Path, capsys) -> None:
    target = tmp_path / "adf.json"
    target.write_text("{}", encoding="utf-8")

    assert adf_main.main(["init", str(target)]) == 1
    assert "already exists" in capsys.readouterr().err
    assert target.read_text(encoding="utf-8") == "{}"

    assert adf_main.main(["init", str(target), "--force"]) == 0
    assert json.loads(target.read_text(encoding="utf-8"))["network"]["network_type"] == "TESTNET"
