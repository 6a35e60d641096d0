"""
Bitcoin Core command names and transport defaults.
"""

from __future__ import annotations

# Executables
BITCOIN_CLI = "bitcoin-cli"
DOCKER = "docker"

# RPC commands issued against the node/wallet
DECODE_RAW_TRANSACTION = "decoderawtransaction"
GET_RAW_TRANSACTION = "getrawtransaction"
SIGN_RAW_TRANSACTION_WITH_WALLET = "signrawtransactionwithwallet"

# Bitcoin Core JSON-RPC error code for unknown transactions/keys.
# getrawtransaction answers this when the txid is neither in the mempool
# nor in a block the node can see (e.g. produced by an unbroadcast tx).
RPC_INVALID_ADDRESS_OR_KEY = -5

# Timeout per bitcoin-cli invocation (seconds)
DEFAULT_RPC_TIMEOUT = 120.0

# Environment variable holding the default bitcoind container
BITCOIND_CONTAINER_ENV = "BITCOIND_CONTAINER"

# Key of the raw transaction field in input/output records
TX_FIELD = "bitcoin"
