"""
Tests for the sign-txs command line interface.
"""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from signtxs import cli
from signtxs.backends.base import GatewayError
from signtxs.config import FailurePolicy
from signtxs.constants import GET_RAW_TRANSACTION

runner = CliRunner()

WITNESS = ["304402aa01", "02" + "cd" * 32]


@pytest.fixture
def use_gateway(monkeypatch, gateway):
    """Route the CLI to the scripted gateway and capture the config it was built from."""
    configs = []

    def fake_create_gateway(config):
        configs.append(config)
        return gateway

    monkeypatch.setattr(cli, "create_gateway", fake_create_gateway)
    monkeypatch.delenv("BITCOIND_CONTAINER", raising=False)
    return configs


@pytest.fixture
def batch_file(tmp_path, gateway, txid_a, p2wpkh_script):
    gateway.add_decoded("0200raw", [{"txid": txid_a, "vout": 0}])
    gateway.add_transaction(txid_a, [("0.01", p2wpkh_script)])
    gateway.add_signed("0200raw", "0200signed")
    gateway.add_decoded("0200done", [{"txid": txid_a, "vout": 0, "txinwitness": WITNESS}])

    path = tmp_path / "txs.json"
    path.write_text(json.dumps([{"bitcoin": "0200raw", "memo": "a"}, {"bitcoin": "0200done"}]))
    return path


def test_sign_file_to_output(use_gateway, gateway, batch_file, tmp_path):
    out = tmp_path / "signed.json"

    result = runner.invoke(cli.app, [str(batch_file), "--output", str(out)])

    assert result.exit_code == 0
    assert json.loads(out.read_text()) == [
        {"bitcoin": "0200signed", "memo": "a"},
        {"bitcoin": "0200done"},
    ]
    assert gateway.closed


def test_sign_stdin_to_stdout(use_gateway, batch_file):
    result = runner.invoke(cli.app, [], input=batch_file.read_text())

    assert result.exit_code == 0
    assert '"bitcoin": "0200signed"' in result.stdout


def test_container_from_environment(use_gateway, batch_file, tmp_path):
    out = tmp_path / "signed.json"

    result = runner.invoke(
        cli.app,
        [str(batch_file), "-o", str(out), "--cli-arg=-regtest", "--rpc-timeout", "5"],
        env={"BITCOIND_CONTAINER": "bitcoind-regtest"},
    )

    assert result.exit_code == 0
    [config] = use_gateway
    assert config.bitcoind_container == "bitcoind-regtest"
    assert config.cli_args == ["-regtest"]
    assert config.rpc_timeout == 5
    assert config.failure_policy == FailurePolicy.ABORT


def test_gateway_failure_writes_nothing(use_gateway, gateway, batch_file, tmp_path):
    out = tmp_path / "signed.json"
    gateway.failures[GET_RAW_TRANSACTION] = GatewayError(
        "bitcoin-cli failed: error: Could not connect to the server",
        returncode=1,
        stderr="error: Could not connect to the server",
    )

    result = runner.invoke(cli.app, [str(batch_file), "-o", str(out)])

    assert result.exit_code == 1
    assert not out.exists()
    assert "0200raw" not in result.stdout
    assert gateway.closed


def test_collect_policy_exit_code(use_gateway, gateway, tmp_path):
    gateway.decoded["0200bad"] = "not json"
    path = tmp_path / "txs.json"
    path.write_text(json.dumps([{"bitcoin": "0200bad"}]))
    out = tmp_path / "signed.json"

    result = runner.invoke(
        cli.app, [str(path), "-o", str(out), "--failure-policy", "collect"]
    )

    assert result.exit_code == 2
    assert json.loads(out.read_text()) == [{"bitcoin": "0200bad"}]


def test_invalid_input_json(use_gateway, gateway, tmp_path):
    path = tmp_path / "txs.json"
    path.write_text('{"bitcoin": "0200raw"}')

    result = runner.invoke(cli.app, [str(path)])

    assert result.exit_code == 1
    assert gateway.calls == []


def test_missing_input_file(use_gateway, tmp_path):
    result = runner.invoke(cli.app, [str(tmp_path / "missing.json")])

    assert result.exit_code == 1


def test_invalid_timeout(use_gateway, batch_file):
    result = runner.invoke(cli.app, [str(batch_file), "--rpc-timeout", "0"])

    assert result.exit_code == 1


def test_non_utf8_input_file(use_gateway, gateway, tmp_path):
    path = tmp_path / "txs.json"
    path.write_bytes(b'[{"bitcoin": "\xff"}]')

    result = runner.invoke(cli.app, [str(path)])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert gateway.calls == []


def test_unwritable_output_file(use_gateway, gateway, batch_file, tmp_path):
    out = tmp_path / "missing-dir" / "signed.json"

    result = runner.invoke(cli.app, [str(batch_file), "-o", str(out)])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert not out.exists()
    assert gateway.closed
