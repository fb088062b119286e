"""Resolve command implementation for variantkeeper.

Runs a :class:`PackageView` for one package against the local pacman
databases (and the AUR unless disabled), then reports the available
variants, the selected source, what is installed, and whether the
installed package conflicts with the selection or can be updated.

Typical usage::

    $ variantkeeper resolve firefox
    $ variantkeeper resolve firefox --prefer chaotic
    $ variantkeeper resolve neovim --select aur --format json
"""

from __future__ import annotations

import sys
import json
import click
import asyncio
from typing import Any, Dict, List, Optional

from variantkeeper.constants import SOURCE_AUR
from variantkeeper.core.distro import detect_host_distro
from variantkeeper.models import PackageIdentity, Source, ViewState
from variantkeeper.exceptions import OperationError, VariantKeeperError
from variantkeeper.context import pass_context, VariantKeeperContext
from variantkeeper.backends import AURClient, CompositeVariantSource, PacmanBackend
from variantkeeper.core import (
    DEFAULT_PRIORITY_TABLE,
    EventBus,
    LoggingErrorSink,
    PackageView,
    VariantCache,
)
from variantkeeper.utils import (
    HTTPClient,
    colorize_update_type,
    format_source_badge,
    get_logger,
    get_raw_console,
    print_error,
    print_success,
    print_table,
    print_warning,
)

logger = get_logger("commands.resolve")


class ReadOnlyExecutor:
    """Operation executor that refuses every transaction.

    The CLI only inspects state; package transactions belong to the
    installer front-end.
    """

    async def install(
        self, name: str, source: Source, repo_name: Optional[str] = None
    ) -> None:
        raise OperationError(
            "variantkeeper does not install packages",
            operation="install",
            package_name=name,
        )

    async def uninstall(self, name: str, source: Source) -> None:
        raise OperationError(
            "variantkeeper does not remove packages",
            operation="uninstall",
            package_name=name,
        )

    async def launch(self, name: str) -> None:
        raise OperationError(
            "variantkeeper does not launch applications",
            operation="launch",
            package_name=name,
        )


@click.command()
@click.argument("name")
@click.option(
    "--prefer",
    "prefer",
    metavar="SOURCE",
    help="Source to prefer when the package is not installed.",
)
@click.option(
    "--select",
    "select",
    metavar="SOURCE",
    help="Explicitly view this source, as a user choice.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@click.option(
    "--no-aur",
    is_flag=True,
    help="Do not query the AUR.",
)
@pass_context
def resolve(
    ctx: VariantKeeperContext,
    name: str,
    prefer: Optional[str],
    select: Optional[str],
    format: str,
    no_aur: bool,
) -> None:
    """Show the variants of NAME and how they relate to what is installed.

    Exits 0 on success, 1 if the package could not be resolved.
    """
    try:
        asyncio.run(
            _resolve_async(
                ctx,
                name,
                prefer=prefer,
                select=select,
                format=format.lower(),
                enable_aur=ctx.config.enable_aur and not no_aur,
            )
        )
    except VariantKeeperError as e:
        print_error(f"{e}")
        sys.exit(1)
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        logger.exception("Error in resolve command")
        sys.exit(1)


# ---------------------------------------------------------------------------
# Async orchestration
# ---------------------------------------------------------------------------


async def _resolve_async(
    ctx: VariantKeeperContext,
    name: str,
    *,
    prefer: Optional[str],
    select: Optional[str],
    format: str,
    enable_aur: bool,
) -> None:
    config = ctx.config
    host = config.host_distro or detect_host_distro().id
    identity = PackageIdentity(name)
    sink = LoggingErrorSink()
    pacman = PacmanBackend()

    async with HTTPClient() as http:
        sources: List[Any] = [pacman]
        if enable_aur:
            sources.append(AURClient(http))

        view = PackageView(
            identity,
            variant_source=CompositeVariantSource(sources),
            state_source=pacman,
            executor=ReadOnlyExecutor(),
            error_sink=sink,
            bus=EventBus(),
            priority_table=DEFAULT_PRIORITY_TABLE,
            preferred_source=prefer or config.preferred_source,
            host_distro=host,
            cache=VariantCache(ttl=config.cache_ttl),
        )

        async with view:
            if select and not await view.select_source(select):
                raise VariantKeeperError(
                    f"{select} does not provide {name}",
                    {"available": ", ".join(v.source.id for v in view.choices) or "none"},
                )

            if format == "json":
                payload = view.to_json()
                payload["errors"] = list(sink.reports)
                click.echo(json.dumps(payload, indent=2))
                return

            _display(view)

    if sink.reports:
        print_warning(f"{len(sink.reports)} problem(s) occurred; results may be incomplete")


# ---------------------------------------------------------------------------
# Display renderers
# ---------------------------------------------------------------------------


def _display(view: PackageView) -> None:
    choices = view.choices
    if not choices:
        print_warning(f"No source provides {view.identity.name}")
        return

    status = view.status
    installed_name = status.package_name if status and status.installed else None
    selected = view.selected_source

    rows: List[Dict[str, str]] = []
    for variant in choices:
        marker = "[bold]>[/bold]" if variant.source == selected else ""
        package_name = variant.package_name or view.identity.name
        if installed_name and package_name == installed_name:
            package_name += " [green](installed)[/green]"
        rows.append(
            {
                "": marker,
                "Source": format_source_badge(variant.source.id),
                "Package": package_name,
                "Version": variant.version or "[dim]-[/dim]",
                "Repository": variant.repo_name
                or ("aur" if variant.source.id == SOURCE_AUR else "[dim]-[/dim]"),
            }
        )

    print_table(
        rows,
        title=f"Variants of {view.identity.name}",
        column_styles={
            "": {"no_wrap": True, "width": 1},
            "Package": {"style": "bold cyan"},
            "Version": {"justify": "center"},
        },
    )

    console = get_raw_console()
    console.print(f"Selected: {format_source_badge(selected.id) if selected else '-'}")
    console.print(f"Installed: {status if status else '[dim]unknown[/dim]'}")

    evaluation = view.evaluation
    state = view.state
    if state is ViewState.INSTALLED_CONFLICTING:
        print_warning(
            f"Installed from {status.label if status else '?'}, "
            f"not {selected.label if selected else '?'}; switching source would "
            f"install {evaluation.candidate_version}"
        )
    elif evaluation.is_update_available:
        update_type = colorize_update_type(evaluation.update_type or "update")
        console.print(
            f"Update available: {evaluation.installed_version} -> "
            f"{evaluation.candidate_version} ({update_type})"
        )
    elif state is ViewState.INSTALLED_MATCHING:
        print_success("Installed version is up to date")
    elif state is ViewState.UNKNOWN:
        print_warning("Installation status could not be determined; run again to retry")

    risk = view.risk
    if risk.risky:
        print_warning(f"{selected.label if selected else 'This source'} on {risk.host}: {risk.reason}")
