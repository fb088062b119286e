"""
Shared context object for variantkeeper CLI commands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from variantkeeper.config import VariantKeeperConfig


class VariantKeeperContext:
    """Per-invocation state shared by all subcommands.

    Attributes:
        config_path: Path to the configuration file, if provided.
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        color: Whether colored terminal output is enabled.
        config: Loaded configuration; defaults until the group callback runs.
    """

    __slots__ = ("config_path", "verbose", "color", "config")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.verbose: int = 0
        self.color: bool = True
        self.config: VariantKeeperConfig = VariantKeeperConfig()


#: Click decorator for injecting :class:`VariantKeeperContext` into commands.
pass_context = click.make_pass_decorator(VariantKeeperContext, ensure=True)
