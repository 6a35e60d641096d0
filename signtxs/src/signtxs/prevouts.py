"""
Previous output resolution.

A prevout that the node cannot see is expected when the spending
transaction depends on an earlier, not yet broadcast transaction of the
same batch. Lookups therefore have three outcomes: a PrevOut, None
(not visible), or an exception (the query itself failed).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from loguru import logger

from signtxs.backends.base import GatewayError, NodeGateway
from signtxs.constants import GET_RAW_TRANSACTION, RPC_INVALID_ADDRESS_OR_KEY
from signtxs.models import PrevOut, RawTransactionInfo, ResolveError, TxInput, parse_response


@dataclass
class ResolvedInputs:
    """Outcome of resolving every input of one transaction."""

    prevouts: list[PrevOut] = field(default_factory=list)
    skipped: int = 0  # already witnessed or coinbase, never queried
    unresolved: int = 0  # node does not know the referenced output


async def resolve_prevout(gateway: NodeGateway, txid: str, vout: int) -> PrevOut | None:
    """
    Look up the value and scriptPubKey of `txid:vout`.

    Returns:
        PrevOut, or None if the node does not know the transaction or the
        output index is out of range

    Raises:
        GatewayError: On any other node failure
        ResolveError: If the response is not a verbose transaction
    """
    try:
        output = await gateway.invoke(GET_RAW_TRANSACTION, [txid, "true"])
    except GatewayError as e:
        if e.rpc_code == RPC_INVALID_ADDRESS_OR_KEY:
            logger.debug(f"Transaction {txid} unknown to node: {e.stderr}")
            return None
        raise

    tx_info = parse_response(output, RawTransactionInfo, ResolveError, "transaction info")

    if vout >= len(tx_info.vout):
        logger.debug(f"Transaction {txid} has only {len(tx_info.vout)} output(s), no vout {vout}")
        return None

    entry = tx_info.vout[vout]
    return PrevOut(
        txid=txid,
        vout=vout,
        amount=entry.value,
        script_pubkey=entry.script_pubkey.hex,
    )


async def resolve_inputs(gateway: NodeGateway, inputs: Sequence[TxInput]) -> ResolvedInputs:
    """Resolve prevouts for every input that still needs signing, in input order."""
    resolved = ResolvedInputs()

    for i, tx_input in enumerate(inputs):
        if tx_input.has_witness:
            logger.info(f"  Input {i}: already signed, skipping")
            resolved.skipped += 1
            continue
        if tx_input.is_coinbase:
            logger.info(f"  Input {i}: coinbase, skipping")
            resolved.skipped += 1
            continue

        logger.info(f"  Input {i}: {tx_input.outpoint} - fetching prevout info...")
        txid, vout = tx_input.prevout_key()
        prevout = await resolve_prevout(gateway, txid, vout)

        if prevout is None:
            logger.info(
                f"  Input {i}: prevout not found on chain, may be from earlier tx in batch"
            )
            resolved.unresolved += 1
            continue

        logger.info(
            f"  Input {i}: amount={format(prevout.amount, 'f')}, "
            f"scriptPubKey={prevout.script_pubkey}"
        )
        resolved.prevouts.append(prevout)

    return resolved
