"""
Pytest configuration and fixtures for signtxs tests.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Sequence
from typing import Any

import pytest
from loguru import logger

from signtxs.backends.base import GatewayError, NodeGateway
from signtxs.constants import (
    DECODE_RAW_TRANSACTION,
    GET_RAW_TRANSACTION,
    SIGN_RAW_TRANSACTION_WITH_WALLET,
)

UNKNOWN_TX_STDERR = (
    "error code: -5\n"
    "error message:\n"
    "No such mempool or blockchain transaction. "
    "Use gettransaction for wallet transactions."
)


class ScriptedGateway(NodeGateway):
    """
    Fake gateway answering from canned responses and recording every call.

    Unknown txids for getrawtransaction fail the same way bitcoin-cli does
    (exit code 5, "error code: -5" on stderr).
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, list[str]]] = []
        self.decoded: dict[str, str] = {}
        self.transactions: dict[str, str] = {}
        self.signed: dict[str, str] = {}
        self.failures: dict[str, GatewayError] = {}
        self.closed = False

    async def invoke(self, command: str, args: Sequence[str] = ()) -> str:
        args = list(args)
        self.calls.append((command, args))

        if command in self.failures:
            raise self.failures[command]

        if command == DECODE_RAW_TRANSACTION:
            return self.decoded[args[0]]
        if command == GET_RAW_TRANSACTION:
            if args[0] not in self.transactions:
                raise GatewayError(
                    f"bitcoin-cli failed: {UNKNOWN_TX_STDERR}",
                    returncode=5,
                    stderr=UNKNOWN_TX_STDERR,
                )
            return self.transactions[args[0]]
        if command == SIGN_RAW_TRANSACTION_WITH_WALLET:
            return self.signed[args[0]]

        raise AssertionError(f"Unexpected command: {command}")

    async def close(self) -> None:
        self.closed = True

    def add_decoded(self, raw_tx: str, vin: list[dict[str, Any]]) -> None:
        self.decoded[raw_tx] = json.dumps({"txid": "ff" * 32, "version": 2, "vin": vin})

    def add_transaction(self, txid: str, outputs: list[tuple[str, str]]) -> None:
        """outputs: (value in BTC as text, scriptPubKey hex)"""
        # Written by hand so values keep their exact decimal text
        vout = ", ".join(
            f'{{"value": {value}, "n": {n}, "scriptPubKey": {{"hex": "{script}"}}}}'
            for n, (value, script) in enumerate(outputs)
        )
        self.transactions[txid] = f'{{"txid": "{txid}", "vout": [{vout}]}}'

    def add_signed(
        self,
        raw_tx: str,
        signed_hex: str,
        complete: bool = True,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        result: dict[str, Any] = {"hex": signed_hex, "complete": complete}
        if errors is not None:
            result["errors"] = errors
        self.signed[raw_tx] = json.dumps(result)

    def commands(self) -> list[str]:
        return [command for command, _ in self.calls]

    def calls_for(self, command: str) -> list[list[str]]:
        return [args for cmd, args in self.calls if cmd == command]


@pytest.fixture
def gateway() -> ScriptedGateway:
    return ScriptedGateway()


@pytest.fixture
def txid_a() -> str:
    return "aa" * 32


@pytest.fixture
def txid_b() -> str:
    return "bb" * 32


@pytest.fixture
def p2wpkh_script() -> str:
    return "0014" + "11" * 20


@pytest.fixture(autouse=True)
def reset_logging():
    """CLI tests replace the loguru sinks; restore a plain stderr sink afterwards."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="DEBUG")
