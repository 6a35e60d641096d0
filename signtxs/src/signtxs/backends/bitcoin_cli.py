"""
Direct bitcoin-cli transport.
Runs the node's command line client as a local child process.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from loguru import logger

from signtxs.backends.base import GatewayError, NodeGateway
from signtxs.constants import BITCOIN_CLI, DEFAULT_RPC_TIMEOUT


class BitcoinCliGateway(NodeGateway):
    """
    Gateway launching `bitcoin-cli [cli_args...] <command> <args...>`.

    Only one child process is alive at a time; every invocation is awaited
    to completion (or killed on timeout) before the next one starts.
    """

    def __init__(
        self,
        cli_path: str = BITCOIN_CLI,
        cli_args: Sequence[str] = (),
        timeout: float = DEFAULT_RPC_TIMEOUT,
    ):
        self.cli_path = cli_path
        self.cli_args = list(cli_args)
        self.timeout = timeout

    @property
    def label(self) -> str:
        return self.cli_path

    def build_argv(self, command: str, args: Sequence[str] = ()) -> list[str]:
        return [self.cli_path, *self.cli_args, command, *args]

    async def invoke(self, command: str, args: Sequence[str] = ()) -> str:
        argv = self.build_argv(command, args)
        logger.debug(f"Running {self.label} {command} ({len(args)} arg(s))")

        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.error(f"Failed to execute {self.label}: {e}")
            raise GatewayError(f"Failed to execute {self.label}: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except TimeoutError as e:
            proc.kill()
            await proc.wait()
            logger.error(f"{self.label} {command} timed out after {self.timeout}s")
            raise GatewayError(
                f"{self.label} {command} timed out after {self.timeout}s"
            ) from e

        output = stdout.decode("utf-8", errors="replace").strip()
        diagnostics = stderr.decode("utf-8", errors="replace").strip()

        if proc.returncode != 0:
            raise GatewayError(
                f"{self.label} failed: {diagnostics}",
                returncode=proc.returncode,
                stderr=diagnostics,
            )

        return output
