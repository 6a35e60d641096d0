"""
Transaction decoding via the node.
"""

from __future__ import annotations

from signtxs.backends.base import NodeGateway
from signtxs.constants import DECODE_RAW_TRANSACTION
from signtxs.models import DecodedTransaction, DecodeError, parse_response


async def decode_transaction(gateway: NodeGateway, raw_tx: str) -> DecodedTransaction:
    """
    Decode a raw transaction into its inputs.

    Raises:
        GatewayError: If the node could not be queried
        DecodeError: If the response is not a decoded transaction
    """
    output = await gateway.invoke(DECODE_RAW_TRANSACTION, [raw_tx])
    return parse_response(output, DecodedTransaction, DecodeError, "decoded transaction")
