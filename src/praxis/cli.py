"""
Praxis CLI

Command-line interface for resolving and executing remote action
manifests against a local wallet.

Commands:
  show    - Resolve a manifest and print its layout
  run     - Execute one action (sign, submit, confirm)
  whoami  - Show current wallet address
  info    - Show configuration
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from .config import EngineConfig
from .logging_config import configure_logging
from .sigil.eth import get_address, load_private_key


# ============ Constants ============

VERSION = "0.3.0"


# ============ Banner ============


def _print_banner() -> None:
    """Print the Praxis CLI banner."""
    border = click.style("  ◆ ═══════════════════════════════════════ ◆", fg="cyan")
    click.echo()
    click.echo(border)
    click.echo()
    click.echo(
        click.style("        P R A X I S", fg="bright_white", bold=True)
        + click.style(f"            v{VERSION}", dim=True)
    )
    click.secho("        ─── Action Manifest Runner ───", fg="cyan")
    click.echo()
    click.echo(border)
    click.echo()


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="praxis")
@click.option("--log-level", default=None, help="Log level (default: PRAXIS_LOG_LEVEL or WARNING)")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines")
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str], json_logs: bool) -> None:
    """Praxis: resolve and execute remote action manifests."""
    config = EngineConfig.from_env()
    configure_logging(level=log_level or config.log_level, json_format=json_logs)
    ctx.obj = config
    if ctx.invoked_subcommand is None:
        _print_banner()
        click.echo(ctx.get_help())


# ============ Top-level Commands ============

from .theurgy.show import show
from .theurgy.run import run

cli.add_command(show)
cli.add_command(run)


# ============ Identity ============


@cli.command()
def whoami() -> None:
    """Show current wallet identity."""
    try:
        pk = load_private_key()
        address = get_address(pk)
        click.echo(f"Address: {address}")
    except ValueError:
        click.echo("No wallet found.")
        click.echo("Set PRIVATE_KEY in the environment or in ~/.praxis/.env.")
        sys.exit(1)


# ============ Info ============


@cli.command()
@click.pass_obj
def info(config: EngineConfig) -> None:
    """Show configuration."""
    _print_banner()

    click.secho("  Status ─────────────────────────────────", fg="cyan")
    click.echo()

    try:
        address = get_address(load_private_key())
        click.echo(
            click.style("  Address:      ", dim=True)
            + click.style(address, fg="bright_white")
        )
    except ValueError:
        click.echo(
            click.style("  Address:      ", dim=True)
            + click.style("not connected", fg="yellow")
            + click.style("  (set PRIVATE_KEY)", dim=True)
        )

    rows = [
        ("Network:     ", f"{config.network.name} (chain {config.network.chain_id})"),
        ("RPC:         ", config.network.rpc_url),
        ("Counterparty:", config.counterparty),
        ("Timeouts:    ", f"request {config.request_timeout:g}s, confirm {config.confirm_timeout:g}s"),
    ]
    for name, value in rows:
        click.echo(click.style(f"  {name} ", dim=True) + click.style(value, fg="bright_white"))

    click.echo()


# ============ Entry Points ============


def main() -> None:
    """Praxis CLI entry point."""
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
        except (AttributeError, OSError):
            pass  # old Python or non-tty
    cli()


if __name__ == "__main__":
    main()
