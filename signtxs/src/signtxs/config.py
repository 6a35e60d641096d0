"""
Configuration for the batch signer.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator

from signtxs.constants import BITCOIN_CLI, DEFAULT_RPC_TIMEOUT, DOCKER


class FailurePolicy(str, Enum):
    """What to do when one transaction of the batch hits a fatal error."""

    ABORT = "abort"  # all-or-nothing: no output at all
    COLLECT = "collect"  # keep the original hex for the failed item, continue


class SignerConfig(BaseModel):
    """Configuration for a sign-txs run."""

    # Transport settings
    # None = run bitcoin-cli locally, otherwise `docker exec <container>`
    bitcoind_container: str | None = None
    bitcoin_cli: str = Field(default=BITCOIN_CLI, min_length=1)
    docker: str = Field(default=DOCKER, min_length=1)
    # Extra bitcoin-cli options placed before the command (-regtest, -rpcwallet=...)
    cli_args: list[str] = Field(default_factory=list)
    rpc_timeout: float = Field(
        default=DEFAULT_RPC_TIMEOUT, gt=0, description="Seconds per bitcoin-cli invocation"
    )

    # Batch behaviour
    failure_policy: FailurePolicy = FailurePolicy.ABORT
    verify_signed: bool = Field(
        default=False, description="Decode signed hex and log which inputs carry witnesses"
    )

    @field_validator("bitcoind_container")
    @classmethod
    def blank_container_is_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()
