"""Configuration file loader for variantkeeper.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``variantkeeper.toml`` with settings under a ``[variantkeeper]`` table
- ``pyproject.toml`` with settings under a ``[tool.variantkeeper]`` table

Discovery order:

1. Explicit path from ``--config`` or ``VARIANTKEEPER_CONFIG``
2. ``variantkeeper.toml`` in the current directory
3. ``pyproject.toml`` with a ``[tool.variantkeeper]`` section

Configuration precedence: defaults < config file < CLI args.

Example (``variantkeeper.toml``)::

    [variantkeeper]
    enable_aur = true
    preferred_source = "official"
    host_distro = "manjaro"
    cache_ttl = 120
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field

from variantkeeper.exceptions import ConfigError
from variantkeeper.utils.logger import get_logger
from variantkeeper.constants import (
    DEFAULT_CACHE_TTL,
    DEFAULT_ENABLE_AUR,
    KNOWN_DISTROS,
    MAX_FILE_SIZE,
)

logger = get_logger("config")

CONFIG_SECTION = "variantkeeper"
CONFIG_FILENAME = "variantkeeper.toml"


@dataclass
class VariantKeeperConfig:
    """Parsed and validated variantkeeper configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        enable_aur: Query the AUR RPC for variants.
        preferred_source: Source id preferred when nothing is installed.
        host_distro: Overrides os-release detection for risk checks.
        cache_ttl: Lifetime of cached variant listings, in seconds.
        source_path: Path to the loaded config file, or ``None``.
    """

    enable_aur: bool = DEFAULT_ENABLE_AUR
    preferred_source: Optional[str] = None
    host_distro: Optional[str] = None
    cache_ttl: float = DEFAULT_CACHE_TTL

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return the user-facing options for debug logging."""
        return {
            "enable_aur": self.enable_aur,
            "preferred_source": self.preferred_source,
            "host_distro": self.host_distro,
            "cache_ttl": self.cache_ttl,
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to the config file, or ``None`` if none was found.

    Raises:
        ConfigError: An explicit path was given but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    candidate = cwd / CONFIG_FILENAME
    if candidate.is_file():
        logger.debug("Found %s: %s", CONFIG_FILENAME, candidate)
        return candidate

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_section(pyproject_toml):
        logger.debug("Found [tool.%s] in %s", CONFIG_SECTION, pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_section(path: Path) -> bool:
    # A broken pyproject.toml that doesn't configure us is not our error
    try:
        raw = _read_toml(path)
    except ConfigError as exc:
        logger.debug("Ignoring unreadable %s: %s", path, exc)
        return False
    tool = raw.get("tool", {})
    return isinstance(tool, dict) and CONFIG_SECTION in tool


def load_config(config_path: Optional[Path] = None) -> VariantKeeperConfig:
    """Load and validate variantkeeper configuration.

    Args:
        config_path: Explicit path to a config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`VariantKeeperConfig`, defaults if no file exists.

    Raises:
        ConfigError: The file cannot be parsed, has unknown keys, or
            holds invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        return VariantKeeperConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        tool = raw.get("tool", {})
        section = tool.get(CONFIG_SECTION, {}) if isinstance(tool, dict) else {}
    else:
        section = raw.get(CONFIG_SECTION, {})

    if not isinstance(section, dict):
        raise ConfigError(
            f"[{CONFIG_SECTION}] must be a table",
            config_path=str(resolved),
        )

    if not section:
        logger.debug("Config file has no %s section, using defaults", CONFIG_SECTION)
        return VariantKeeperConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        if path.stat().st_size > MAX_FILE_SIZE:
            raise ConfigError(
                f"Configuration file too large: {path.name}",
                config_path=str(path),
            )
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _require_str(section: Dict[str, Any], option: str, config_path: str) -> str:
    val = section[option]
    if not isinstance(val, str) or not val.strip():
        raise ConfigError(
            f"{option} must be a non-empty string, got {type(val).__name__}",
            config_path=config_path,
            option=option,
        )
    return val.strip().lower()


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> VariantKeeperConfig:
    """Validate a ``[variantkeeper]`` table.

    Raises:
        ConfigError: Unknown keys or values of the wrong type.
    """
    config = VariantKeeperConfig()

    known = {"enable_aur", "preferred_source", "host_distro", "cache_ttl"}
    unknown = set(section.keys()) - known
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    if "enable_aur" in section:
        val = section["enable_aur"]
        if not isinstance(val, bool):
            raise ConfigError(
                f"enable_aur must be a boolean, got {type(val).__name__}",
                config_path=config_path,
                option="enable_aur",
            )
        config.enable_aur = val

    if "preferred_source" in section:
        config.preferred_source = _require_str(section, "preferred_source", config_path)

    if "host_distro" in section:
        distro = _require_str(section, "host_distro", config_path)
        if distro not in KNOWN_DISTROS:
            raise ConfigError(
                f"host_distro must be one of {', '.join(KNOWN_DISTROS)}, got {distro!r}",
                config_path=config_path,
                option="host_distro",
            )
        config.host_distro = distro

    if "cache_ttl" in section:
        val = section["cache_ttl"]
        # bool is an int subclass
        if isinstance(val, bool) or not isinstance(val, (int, float)) or val < 0:
            raise ConfigError(
                "cache_ttl must be a non-negative number",
                config_path=config_path,
                option="cache_ttl",
            )
        config.cache_ttl = float(val)

    return config
