"""
Batch orchestration: decode, resolve, sign, one transaction at a time.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from loguru import logger

from signtxs.backends.base import NodeGateway
from signtxs.config import FailurePolicy
from signtxs.decoder import decode_transaction
from signtxs.models import PrevOut, SigningResult, TxSignerError
from signtxs.prevouts import resolve_inputs
from signtxs.signer import build_signing_request, sign_with_wallet


class BatchItemState(str, Enum):
    PENDING = "pending"
    DECODED = "decoded"
    RESOLVED = "resolved"
    SIGNED = "signed"
    PASSTHROUGH = "passthrough"
    FAILED = "failed"


@dataclass
class BatchItem:
    """One transaction of the batch and how far it got."""

    index: int
    raw_tx: str
    state: BatchItemState = BatchItemState.PENDING
    prevouts: list[PrevOut] = field(default_factory=list)
    skipped_inputs: int = 0
    unresolved_inputs: int = 0
    result: SigningResult | None = None
    witnessed_inputs: list[int] | None = None
    error: str | None = None

    @property
    def output_hex(self) -> str:
        if self.state == BatchItemState.SIGNED and self.result is not None:
            return self.result.hex
        return self.raw_tx

    @property
    def complete(self) -> bool:
        return self.result is not None and self.result.complete


@dataclass
class BatchReport:
    items: list[BatchItem] = field(default_factory=list)

    def outputs(self) -> list[str]:
        return [item.output_hex for item in self.items]

    def incomplete(self) -> list[BatchItem]:
        return [
            item
            for item in self.items
            if item.state == BatchItemState.SIGNED and not item.complete
        ]

    def failed(self) -> list[BatchItem]:
        return [item for item in self.items if item.state == BatchItemState.FAILED]


class BatchSigner:
    """
    Signs a batch of raw transactions with the node's wallet.

    Transactions are processed strictly in order and every node call is
    awaited before the next one is issued. With FailurePolicy.ABORT the
    first fatal error propagates out of sign_batch() and no report exists,
    so callers never see partial output.
    """

    def __init__(
        self,
        gateway: NodeGateway,
        policy: FailurePolicy = FailurePolicy.ABORT,
        verify: bool = False,
    ):
        self.gateway = gateway
        self.policy = policy
        self.verify = verify

    async def sign_transaction(self, raw_tx: str, index: int = 0) -> BatchItem:
        item = BatchItem(index=index, raw_tx=raw_tx)
        logger.info(f"Processing transaction {index + 1}...")

        decoded = await decode_transaction(self.gateway, raw_tx)
        item.state = BatchItemState.DECODED

        resolved = await resolve_inputs(self.gateway, decoded.vin)
        item.prevouts = resolved.prevouts
        item.skipped_inputs = resolved.skipped
        item.unresolved_inputs = resolved.unresolved
        item.state = BatchItemState.RESOLVED

        request = build_signing_request(raw_tx, resolved.prevouts)
        if request is None:
            logger.info("  No inputs to sign, returning original transaction")
            item.state = BatchItemState.PASSTHROUGH
            return item

        logger.info(f"  Signing {len(request.prevouts)} input(s) with wallet...")
        result = await sign_with_wallet(self.gateway, request)
        item.result = result
        item.state = BatchItemState.SIGNED

        if result.complete:
            logger.info("  Transaction fully signed")
        else:
            logger.warning(
                "  Warning: Transaction not fully signed. Errors: "
                f"{json.dumps(result.errors, indent=2, default=str)}"
            )

        if self.verify:
            try:
                item.witnessed_inputs = await self.verify_signed(item)
            except TxSignerError as e:
                logger.warning(f"  Could not verify signed transaction: {e}")

        return item

    async def verify_signed(self, item: BatchItem) -> list[int]:
        """
        Decode the signed hex and report which inputs carry witness data.

        Inputs signed with a scriptSig only (legacy) are not reported.
        Output of the batch is never changed by this check.
        """
        decoded = await decode_transaction(self.gateway, item.output_hex)
        requested = {(p.txid, p.vout) for p in item.prevouts}

        witnessed: list[int] = []
        for i, tx_input in enumerate(decoded.vin):
            if not tx_input.has_witness:
                continue
            witnessed.append(i)
            if (tx_input.txid, tx_input.vout) not in requested:
                logger.debug(f"  Input {i}: witnessed without a prevout in the request")

        logger.info(f"  Verified: {len(witnessed)}/{len(decoded.vin)} input(s) carry witness data")
        return witnessed

    async def sign_batch(self, raw_txs: Sequence[str]) -> BatchReport:
        logger.info(f"Found {len(raw_txs)} transaction(s) to process")
        report = BatchReport()

        for index, raw_tx in enumerate(raw_txs):
            try:
                item = await self.sign_transaction(raw_tx, index)
            except TxSignerError as e:
                if self.policy == FailurePolicy.ABORT:
                    raise
                logger.error(f"Transaction {index + 1} failed, keeping original hex: {e}")
                item = BatchItem(
                    index=index, raw_tx=raw_tx, state=BatchItemState.FAILED, error=str(e)
                )
            report.items.append(item)

        logger.info(
            f"All transactions processed: {len(report.items)} total, "
            f"{len(report.incomplete())} incomplete, {len(report.failed())} failed"
        )
        return report
