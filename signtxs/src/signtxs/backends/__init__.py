"""
Node/wallet gateway implementations.

Available gateways:
- BitcoinCliGateway: runs a local bitcoin-cli
- DockerExecGateway: runs bitcoin-cli inside a bitcoind container via docker exec
"""

from __future__ import annotations

from loguru import logger

from signtxs.backends.base import GatewayError, NodeGateway
from signtxs.backends.bitcoin_cli import BitcoinCliGateway
from signtxs.backends.docker import DockerExecGateway
from signtxs.config import SignerConfig


def create_gateway(config: SignerConfig) -> NodeGateway:
    """Build the gateway selected by the configuration."""
    if config.bitcoind_container is not None:
        logger.info(f"Using bitcoind container: {config.bitcoind_container}")
        return DockerExecGateway(
            config.bitcoind_container,
            docker_path=config.docker,
            cli_path=config.bitcoin_cli,
            cli_args=config.cli_args,
            timeout=config.rpc_timeout,
        )

    logger.info(f"Using local {config.bitcoin_cli}")
    return BitcoinCliGateway(
        cli_path=config.bitcoin_cli,
        cli_args=config.cli_args,
        timeout=config.rpc_timeout,
    )


__all__ = [
    "BitcoinCliGateway",
    "DockerExecGateway",
    "GatewayError",
    "NodeGateway",
    "create_gateway",
]
