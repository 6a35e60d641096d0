"""
signtxs - Batch-sign raw Bitcoin transactions with a Bitcoin Core wallet

Resolves the previous outputs of each transaction's inputs through the node
and delegates the signature to signrawtransactionwithwallet.
"""

__version__ = "0.1.0"

from signtxs.backends import (
    BitcoinCliGateway,
    DockerExecGateway,
    GatewayError,
    NodeGateway,
    create_gateway,
)
from signtxs.batch import BatchItem, BatchItemState, BatchReport, BatchSigner
from signtxs.config import FailurePolicy, SignerConfig
from signtxs.decoder import decode_transaction
from signtxs.models import (
    DecodedTransaction,
    DecodeError,
    InputFormatError,
    PrevOut,
    ResolveError,
    ResponseParseError,
    SigningRequest,
    SigningResult,
    SignError,
    TxEntry,
    TxInput,
    TxSignerError,
)
from signtxs.prevouts import ResolvedInputs, resolve_inputs, resolve_prevout
from signtxs.signer import build_signing_request, sign_with_wallet

__all__ = [
    "BatchItem",
    "BatchItemState",
    "BatchReport",
    "BatchSigner",
    "BitcoinCliGateway",
    "DecodeError",
    "DecodedTransaction",
    "DockerExecGateway",
    "FailurePolicy",
    "GatewayError",
    "InputFormatError",
    "NodeGateway",
    "PrevOut",
    "ResolveError",
    "ResolvedInputs",
    "ResponseParseError",
    "SignError",
    "SignerConfig",
    "SigningRequest",
    "SigningResult",
    "TxEntry",
    "TxInput",
    "TxSignerError",
    "build_signing_request",
    "create_gateway",
    "decode_transaction",
    "resolve_inputs",
    "resolve_prevout",
    "sign_with_wallet",
]
