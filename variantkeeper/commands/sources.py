"""Informational commands: source priority order and version comparison."""

from __future__ import annotations

import click
from typing import Dict, List

from variantkeeper.core.distro import HostDistro, UNKNOWN_DISTRO, detect_host_distro
from variantkeeper.core.priority import DEFAULT_PRIORITY_TABLE
from variantkeeper.models.source import coerce_source
from variantkeeper.context import pass_context, VariantKeeperContext
from variantkeeper.utils import (
    compare_versions,
    format_source_badge,
    get_raw_console,
    print_table,
)


@click.command()
@pass_context
def sources(ctx: VariantKeeperContext) -> None:
    """Show the source priority order and any risk for this host."""
    if ctx.config.host_distro:
        host = HostDistro(ctx.config.host_distro, ctx.config.host_distro)
    else:
        host = detect_host_distro()

    table = DEFAULT_PRIORITY_TABLE
    if ctx.config.preferred_source:
        table = table.with_preferred(ctx.config.preferred_source)

    rows: List[Dict[str, str]] = []
    for rank, source_id in enumerate(table.order, start=1):
        source = coerce_source(source_id)
        reason = table.risk_reason(host.id, source)
        rows.append(
            {
                "#": str(rank),
                "Source": format_source_badge(source.id),
                "Name": source.label,
                "Type": source.type.value,
                "Risk": f"[yellow]{reason}[/yellow]" if reason else "[dim]-[/dim]",
            }
        )

    get_raw_console().print(
        f"Host: {host.pretty_name}"
        + ("" if host.id != UNKNOWN_DISTRO.id else " [dim](not detected)[/dim]")
    )
    print_table(
        rows,
        title="Source priority",
        column_styles={"#": {"justify": "right"}, "Risk": {"no_wrap": False}},
    )


@click.command()
@click.argument("a")
@click.argument("b")
def compare(a: str, b: str) -> None:
    """Compare package versions A and B; prints -1, 0 or 1."""
    click.echo(str(compare_versions(a, b)))
