"""
Theurgy Show - resolve a manifest and print its layout.
"""

from __future__ import annotations

import sys

import click

from ..config import EngineConfig
from ..engine.session import ActionSession


@click.command()
@click.argument("locator")
@click.pass_obj
def show(config: EngineConfig, locator: str) -> None:
    """
    Resolve LOCATOR and print its actions.

    LOCATOR is a manifest URL, or any path carrying one after
    ``api-action=``.
    """
    with ActionSession.from_config(config) as session:
        layout = session.load(locator)
        if layout is None:
            error = session.last_error
            click.secho(f"ERROR: {error}", fg="red")
            sys.exit(error.exit_code if error else 1)

        click.secho(f"=== {layout.title} ===", bold=True)
        if layout.description:
            click.echo(f"  {layout.description}")
        click.echo(f"  Website: {layout.website_text}")
        click.echo(f"  Icon:    {layout.image}")
        click.echo("")

        index = 0
        for button in layout.buttons:
            click.echo(f"  [{index}] {button.text}")
            index += 1

        seen = set()
        for field in layout.inputs:
            button = field.button
            if id(button.action) not in seen:
                seen.add(id(button.action))
                click.echo(f"  [{index}] {button.text}")
                index += 1
            marker = click.style("*", fg="red") if field.required else " "
            click.echo(f"       {marker} --param {field.name}=<{field.placeholder}>")

        if index == 0:
            click.echo("  (no actions)")
