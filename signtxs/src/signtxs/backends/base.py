"""
Base node/wallet gateway interface.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Sequence

from signtxs.models import TxSignerError

_RPC_CODE_RE = re.compile(r"error code:\s*(-?\d+)")


class GatewayError(TxSignerError):
    """
    The gateway could not launch the command or it exited non-zero.

    Carries the captured diagnostic text so callers can surface the
    node's own error message.
    """

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr

    @property
    def rpc_code(self) -> int | None:
        """JSON-RPC error code reported by bitcoin-cli, if any."""
        match = _RPC_CODE_RE.search(self.stderr)
        if match is None:
            return None
        return int(match.group(1))


class NodeGateway(ABC):
    """
    Abstract node/wallet gateway.
    Implementations run a bitcoin-cli command and hand back its raw output;
    they never interpret the response body and never retry.
    """

    @abstractmethod
    async def invoke(self, command: str, args: Sequence[str] = ()) -> str:
        """Run `command` with ordered string args, return stripped stdout"""

    async def close(self) -> None:
        """Release transport resources"""
        pass
