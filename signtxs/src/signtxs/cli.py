"""
sign-txs CLI - Sign Bitcoin transactions from a JSON file or stdin.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import typer
from loguru import logger
from pydantic import ValidationError

from signtxs.backends import create_gateway
from signtxs.batch import BatchReport, BatchSigner
from signtxs.config import FailurePolicy, SignerConfig
from signtxs.constants import BITCOIN_CLI, BITCOIND_CONTAINER_ENV, DEFAULT_RPC_TIMEOUT, DOCKER
from signtxs.models import InputFormatError, TxEntry, TxSignerError, dump_entries, load_entries

app = typer.Typer(
    name="sign-txs",
    help="Sign Bitcoin transactions from a JSON file or stdin",
    add_completion=False,
)


def setup_logging(level: str = "INFO") -> None:
    """Configure loguru logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


def read_input(input_file: Path | None) -> tuple[str, str]:
    """Return the raw input text and a description of where it came from."""
    if input_file is None:
        return sys.stdin.read(), "stdin"
    return input_file.read_text(), str(input_file)


@app.command()
def sign(
    input_file: Path | None = typer.Argument(
        None,
        help="Input JSON file containing transactions (reads from stdin if not provided)",
    ),
    bitcoind_container: str | None = typer.Option(
        None,
        "--bitcoind-container",
        envvar=BITCOIND_CONTAINER_ENV,
        help="Docker container running bitcoind with the wallet (local bitcoin-cli if unset)",
    ),
    bitcoin_cli: str = typer.Option(BITCOIN_CLI, "--bitcoin-cli", envvar="BITCOIN_CLI"),
    docker: str = typer.Option(DOCKER, "--docker", help="Docker executable"),
    cli_args: list[str] | None = typer.Option(
        None, "--cli-arg", help="Extra bitcoin-cli option, repeatable (e.g. --cli-arg=-regtest)"
    ),
    rpc_timeout: float = typer.Option(
        DEFAULT_RPC_TIMEOUT, "--rpc-timeout", help="Seconds allowed per bitcoin-cli call"
    ),
    failure_policy: FailurePolicy = typer.Option(
        FailurePolicy.ABORT,
        "--failure-policy",
        help="abort: no output on first error | collect: keep original hex for failed items",
    ),
    verify: bool = typer.Option(
        False, "--verify", help="Decode signed transactions and report witnessed inputs"
    ),
    output_file: Path | None = typer.Option(
        None, "--output", "-o", help="Write JSON here instead of stdout"
    ),
    log_level: str = typer.Option("INFO", "--log-level", "-l"),
) -> None:
    """Sign every transaction of the batch with the node's wallet."""
    setup_logging(log_level)

    try:
        config = SignerConfig(
            bitcoind_container=bitcoind_container,
            bitcoin_cli=bitcoin_cli,
            docker=docker,
            cli_args=cli_args or [],
            rpc_timeout=rpc_timeout,
            failure_policy=failure_policy,
            verify_signed=verify,
        )
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        raise typer.Exit(1)

    try:
        content, source = read_input(input_file)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read input file: {e}")
        raise typer.Exit(1)

    try:
        entries = load_entries(content)
    except InputFormatError as e:
        logger.error(str(e))
        raise typer.Exit(1)

    logger.info(f"Reading transactions from: {source}")

    try:
        report = asyncio.run(_sign_entries(config, entries))
    except TxSignerError as e:
        logger.error(f"Signing aborted, no output written: {e}")
        raise typer.Exit(1)

    signed = [
        entry.with_hex(tx_hex) for entry, tx_hex in zip(entries, report.outputs(), strict=True)
    ]
    rendered = dump_entries(signed)

    if output_file is not None:
        try:
            output_file.write_text(rendered + "\n")
        except OSError as e:
            logger.error(f"Failed to write output file: {e}")
            raise typer.Exit(1)
        logger.info(f"Signed transactions written to {output_file}")
    else:
        logger.info("All transactions processed. Output:")
        typer.echo(rendered)

    if report.failed():
        logger.error(f"{len(report.failed())} transaction(s) failed and were left unsigned")
        raise typer.Exit(2)


async def _sign_entries(config: SignerConfig, entries: list[TxEntry]) -> BatchReport:
    """Run the batch against the configured gateway."""
    gateway = create_gateway(config)
    signer = BatchSigner(gateway, policy=config.failure_policy, verify=config.verify_signed)

    try:
        return await signer.sign_batch([entry.bitcoin for entry in entries])
    finally:
        await gateway.close()


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
