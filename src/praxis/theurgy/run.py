"""
Theurgy Run - execute one action from a manifest.

Flow:
1. Resolve the manifest behind the locator
2. Pick the action by label or index
3. Bind --param values, POST for the unsigned transaction
4. Sign and submit with the local wallet, wait for confirmation
"""

from __future__ import annotations

import sys

import click

from ..config import EngineConfig
from ..engine.session import ActionSession
from ..spec.models import DispatchState, ExecutionOutcome


def _parse_params(params: tuple[str, ...]) -> dict[str, str]:
    values: dict[str, str] = {}
    for item in params:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected name=value, got {item!r}", param_hint="--param")
        values[name] = value
    return values


def _echo_state(state: DispatchState) -> None:
    click.echo(click.style("  · ", fg="cyan") + click.style(state.value, dim=True))


def _echo_outcome(outcome: ExecutionOutcome) -> None:
    click.echo("")
    if outcome.succeeded:
        click.secho("SUCCESS: Transaction confirmed!", fg="green")
        click.echo(f"  TX: {outcome.tx_hash}")
        if outcome.explorer_link:
            click.echo(f"  Explorer: {outcome.explorer_link}")
        if outcome.message:
            click.echo(f"  Message: {outcome.message}")
        return

    click.secho(f"FAILED: {outcome.error}", fg="red")
    if outcome.tx_hash:
        click.echo(f"  TX: {outcome.tx_hash}")


@click.command()
@click.argument("locator")
@click.option("--action", "selector", required=True, help="Action label or index (see 'praxis show')")
@click.option("--param", "params", multiple=True, help="Parameter value as name=value (repeatable)")
@click.pass_obj
def run(config: EngineConfig, locator: str, selector: str, params: tuple[str, ...]) -> None:
    """
    Execute an action from the manifest behind LOCATOR.

    Signs with the local wallet (PRIVATE_KEY) and waits for
    confirmation. Failures are never retried.
    """
    values = _parse_params(params)

    click.echo("=== Praxis Run ===")
    click.echo("")

    with ActionSession.from_config(config, notify=_echo_outcome, on_transition=_echo_state) as session:
        if session.load(locator) is None:
            error = session.last_error
            click.secho(f"ERROR: {error}", fg="red")
            sys.exit(error.exit_code if error else 1)

        try:
            action = session.find_action(selector)
        except LookupError as exc:
            click.secho(f"ERROR: {exc}", fg="red")
            sys.exit(1)

        click.echo(f"  Action: {action.label}")
        click.echo(f"  Network: {config.network.name}")
        click.echo("")

        outcome = session.dispatch(action, values)

    if not outcome.succeeded:
        sys.exit(getattr(outcome.error, "exit_code", 1))
