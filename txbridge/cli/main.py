# txbridge/cli/main.py
"""
Command-line interface for decoding and translating legacy transactions.
"""

import asyncio
import sys

import click
from rich.console import Console
from rich.json import JSON
from rich.panel import Panel
from rich.table import Table

from txbridge import __version__
from txbridge.bridge import LegacyTransactionBridge
from txbridge.config.settings import configure_logging, settings
from txbridge.decoder import FIELD_NAMES, decode_raw_transaction
from txbridge.errors import BridgeError
from txbridge.transport import HttpActionTransport


@click.group()
@click.option("--log-level", default=None, help="Override TXBRIDGE_LOG_LEVEL.")
def txbridge(log_level):
    """
    🔁 Translate EIP-155 signed legacy transactions into action envelopes.
    """
    configure_logging(log_level)


@txbridge.command("decode")
@click.argument("raw")
def decode_cmd(raw):
    """
    📦 Decode a raw legacy transaction (0x-prefixed hex).
    """
    console = Console()
    try:
        tx = decode_raw_transaction(raw)
    except BridgeError as e:
        console.print(f"❌ [bold red]Error:[/bold red] {e}")
        sys.exit(1)

    table = Table(title="Legacy Transaction", border_style="blue")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    for name in FIELD_NAMES:
        value = getattr(tx, name)
        if isinstance(value, bytes):
            value = "0x" + value.hex()
        table.add_row(name, str(value))
    table.add_row("recipient", tx.recipient or "<contract creation>")
    console.print(table)


@txbridge.command("translate")
@click.argument("raw")
@click.option(
    "--chain-id",
    type=int,
    default=None,
    help="Target chain id (uses TXBRIDGE_TARGET_CHAIN_ID by default).",
)
@click.option(
    "--legacy-chain-id",
    type=int,
    default=None,
    help="Chain id encoded in v when it differs from the target chain id.",
)
@click.option("--sender", default=None, help="Expected sender address.")
@click.option(
    "--gateway",
    default=None,
    help="Gateway URL (uses TXBRIDGE_GATEWAY_URL by default).",
)
@click.option(
    "--submit/--dry-run",
    default=False,
    help="Submit the envelope instead of printing it.",
)
def translate_cmd(raw, chain_id, legacy_chain_id, sender, gateway, submit):
    """
    🔁 Translate a raw legacy transaction and optionally submit it.
    """
    console = Console()
    console.print("⏳ Translating legacy transaction...")

    async def run():
        async with HttpActionTransport(gateway or settings.GATEWAY_URL) as transport:
            bridge = LegacyTransactionBridge(transport)
            if submit:
                return await bridge.translate_and_submit(
                    raw,
                    target_chain_id=chain_id,
                    legacy_chain_id=legacy_chain_id,
                    expected_sender=sender,
                )
            return await bridge.translate(
                raw,
                target_chain_id=chain_id,
                legacy_chain_id=legacy_chain_id,
                expected_sender=sender,
            )

    try:
        result = asyncio.run(run())
    except (BridgeError, ValueError) as e:
        console.print(f"❌ [bold red]Error:[/bold red] {e}")
        sys.exit(1)

    if submit:
        console.print(
            Panel(
                f"[bold]Action hash:[/bold] [yellow]{result}[/yellow]",
                title="✅ Submitted",
                expand=False,
            )
        )
    else:
        console.print(JSON.from_data(result.to_request()))


@txbridge.command()
def version():
    """Show version information"""
    click.echo(f"txbridge {__version__}")


def main():
    txbridge()


if __name__ == "__main__":
    main()
