"""Route command implementation for shipver.

Shows where a version category is published: its promotion tier, the
artifact store and the container registry for that tier. Publishing steps
that only have the ``version_category`` output use this to pick targets
without re-implementing the mapping.

Typical usage::

    $ shipver route rc
    $ shipver route "$VERSION_CATEGORY" --format github
"""

from __future__ import annotations

import json

import click

from shipver.context import ShipverContext, pass_context
from shipver.core.routing import select_publish_target
from shipver.utils import colorize_category, print_outputs, print_table


@click.command()
@click.argument("category")
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json", "github"], case_sensitive=False),
    default="table",
    show_default=True,
    help="Output format; github prints key=value lines.",
)
@pass_context
def route(ctx: ShipverContext, category: str, format: str) -> None:
    """Show the publish targets for a version CATEGORY."""
    target = select_publish_target(category, ctx.get_config())
    outputs = {
        "version_category": target.category,
        "publish_tier": target.tier,
        "artifact_store": target.artifact_store,
        "container_registry": target.container_registry,
    }

    format = format.lower()
    if format == "json":
        click.echo(json.dumps(outputs, indent=2))
    elif format == "github":
        print_outputs(outputs)
    else:
        row = {
            "Category": colorize_category(target.category),
            "Tier": colorize_category(target.tier),
            "Artifact store": target.artifact_store,
            "Container registry": target.container_registry,
        }
        print_table([row], title="Publish target")
