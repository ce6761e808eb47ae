"""
Command-line interface for txinfo.
"""

from __future__ import annotations

import asyncio
import sys
from typing import Annotated

import typer
from loguru import logger
from pydantic import ValidationError

from txinfo import __version__
from txinfo.annotate import SerializationError
from txinfo.config import get_settings
from txinfo.pipeline import get_tx_info
from txinfo.resolver import InputResolutionError, InputResolver
from txinfo.transaction import DecodeError

app = typer.Typer(
    name="txinfo",
    help="Decode a Bitcoin transaction and explain its fields",
    add_completion=False,
)


def setup_logging(level: str) -> None:
    """Configure loguru logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"txinfo {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
        ),
    ] = False,
) -> None:
    """Decode a Bitcoin transaction and explain its fields."""


@app.command()
def gettxinfo(
    rawtx: Annotated[str, typer.Argument(help="Raw transaction hex or 64-character txid")],
    debug: Annotated[
        int,
        typer.Option("--debug", "-d", count=True, help="Turn debugging information on"),
    ] = 0,
    network: Annotated[
        str | None,
        typer.Option(
            "--network", "-n", help="Network for txid lookups: mainnet | testnet | signet"
        ),
    ] = None,
    explorer_url: Annotated[
        str | None,
        typer.Option("--explorer-url", help="Esplora API base URL for txid lookups"),
    ] = None,
    timeout: Annotated[
        float | None, typer.Option("--timeout", help="Explorer request timeout in seconds")
    ] = None,
    log_level: Annotated[str | None, typer.Option("--log-level", "-l", help="Log level")] = None,
) -> None:
    """Print an annotated breakdown of a transaction as JSON."""
    # Command-line options take priority over TXINFO_* environment variables
    overrides: dict[str, object] = {}
    if network is not None:
        overrides["network"] = network
    if explorer_url is not None:
        overrides["explorer_api_url"] = explorer_url
    if timeout is not None:
        overrides["request_timeout"] = timeout
    if log_level is not None:
        overrides["log_level"] = log_level

    try:
        settings = get_settings(**overrides)
    except ValidationError as e:
        typer.echo(f"Error: invalid configuration: {e}", err=True)
        raise typer.Exit(1)

    if debug >= 2:
        setup_logging("TRACE")
    elif debug == 1:
        setup_logging("DEBUG")
    else:
        setup_logging(settings.log_level)

    resolver = InputResolver(
        explorer_api_url=settings.get_explorer_api_url(),
        timeout=settings.request_timeout,
    )

    try:
        document = asyncio.run(get_tx_info(rawtx, resolver))
    except (InputResolutionError, DecodeError, SerializationError) as e:
        logger.error(f"Error: {e}")
        raise typer.Exit(1)

    typer.echo(document)


def main() -> None:
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
