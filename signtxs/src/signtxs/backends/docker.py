"""
Container-proxied bitcoin-cli transport.
Runs bitcoin-cli inside a running bitcoind container via `docker exec`.
"""

from __future__ import annotations

from collections.abc import Sequence

from signtxs.backends.bitcoin_cli import BitcoinCliGateway
from signtxs.constants import BITCOIN_CLI, DEFAULT_RPC_TIMEOUT, DOCKER


class DockerExecGateway(BitcoinCliGateway):
    """
    Gateway launching `docker exec <container> bitcoin-cli ...`.
    Same argument order and failure contract as BitcoinCliGateway,
    only the process launch differs.
    """

    def __init__(
        self,
        container: str,
        docker_path: str = DOCKER,
        cli_path: str = BITCOIN_CLI,
        cli_args: Sequence[str] = (),
        timeout: float = DEFAULT_RPC_TIMEOUT,
    ):
        if not container or not container.strip():
            raise ValueError("Container identifier must not be empty")
        super().__init__(cli_path=cli_path, cli_args=cli_args, timeout=timeout)
        self.container = container.strip()
        self.docker_path = docker_path

    @property
    def label(self) -> str:
        return f"{self.docker_path} exec {self.cli_path}"

    def build_argv(self, command: str, args: Sequence[str] = ()) -> list[str]:
        return [self.docker_path, "exec", self.container, *super().build_argv(command, args)]
