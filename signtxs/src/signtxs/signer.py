"""
Signing request assembly and wallet signing.
"""

from __future__ import annotations

from collections.abc import Sequence

from signtxs.backends.base import NodeGateway
from signtxs.constants import SIGN_RAW_TRANSACTION_WITH_WALLET
from signtxs.models import PrevOut, SigningRequest, SigningResult, SignError, parse_response


def build_signing_request(raw_tx: str, prevouts: Sequence[PrevOut]) -> SigningRequest | None:
    """Bundle a raw transaction with its resolved prevouts; None if nothing to sign."""
    if not prevouts:
        return None
    return SigningRequest(raw_tx=raw_tx, prevouts=list(prevouts))


async def sign_with_wallet(gateway: NodeGateway, request: SigningRequest) -> SigningResult:
    """
    Sign with the node's wallet.

    An incomplete result (complete=False) is returned as-is, it is not an error.

    Raises:
        GatewayError: If the wallet could not be invoked
        SignError: If the response is not a signing result
    """
    output = await gateway.invoke(
        SIGN_RAW_TRANSACTION_WITH_WALLET, [request.raw_tx, request.prevouts_json()]
    )
    return parse_response(output, SigningResult, SignError, "sign result")
