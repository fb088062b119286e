"""
Centralized constants for variantkeeper.

This module defines immutable configuration values used across
variantkeeper, including source identifiers, the default source priority
order, known-risky host/source pairs, network settings, and logging
formats. All values are intended to be treated as read-only.
"""

from typing import Final, Mapping, Sequence, Tuple

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "variantkeeper/{version}"

# ---------------------------------------------------------------------------
# Source identifiers
# ---------------------------------------------------------------------------

SOURCE_OFFICIAL: Final[str] = "official"
SOURCE_CHAOTIC: Final[str] = "chaotic"
SOURCE_AUR: Final[str] = "aur"
SOURCE_CACHYOS: Final[str] = "cachyos"
SOURCE_GARUDA: Final[str] = "garuda"
SOURCE_ENDEAVOUR: Final[str] = "endeavour"
SOURCE_MANJARO: Final[str] = "manjaro"
SOURCE_FLATPAK: Final[str] = "flatpak"
SOURCE_LOCAL: Final[str] = "local"

#: Sync database name of the Chaotic-AUR repository.
CHAOTIC_REPO_NAME: Final[str] = "chaotic-aur"

#: Sync databases that belong to the official Arch repositories.
OFFICIAL_REPO_NAMES: Final[Sequence[str]] = (
    "core",
    "extra",
    "community",
    "multilib",
    "core-testing",
    "extra-testing",
    "multilib-testing",
)

#: Repository name prefixes used by distribution spins.
SPIN_REPO_PREFIXES: Final[Mapping[str, str]] = {
    "cachyos": SOURCE_CACHYOS,
    "garuda": SOURCE_GARUDA,
    "endeavour": SOURCE_ENDEAVOUR,
    "manjaro": SOURCE_MANJARO,
}

#: Default selection order when several sources provide a package.
#: Prebuilt community binaries first, then official, spins, and finally
#: source builds.
DEFAULT_SOURCE_PRIORITY: Final[Sequence[str]] = (
    SOURCE_CHAOTIC,
    SOURCE_OFFICIAL,
    SOURCE_CACHYOS,
    SOURCE_GARUDA,
    SOURCE_ENDEAVOUR,
    SOURCE_MANJARO,
    SOURCE_AUR,
)

# ---------------------------------------------------------------------------
# Host distributions
# ---------------------------------------------------------------------------

DISTRO_ARCH: Final[str] = "arch"
DISTRO_MANJARO: Final[str] = "manjaro"
DISTRO_ENDEAVOUROS: Final[str] = "endeavouros"
DISTRO_GARUDA: Final[str] = "garuda"
DISTRO_CACHYOS: Final[str] = "cachyos"
DISTRO_UNKNOWN: Final[str] = "unknown"

KNOWN_DISTROS: Final[Sequence[str]] = (
    DISTRO_ARCH,
    DISTRO_MANJARO,
    DISTRO_ENDEAVOUROS,
    DISTRO_GARUDA,
    DISTRO_CACHYOS,
)

#: Default location of the os-release file.
OS_RELEASE_PATH: Final[str] = "/etc/os-release"

#: (host distro, source id) pairs that are unsafe to mix, with the reason
#: shown to the user.
DEFAULT_RISK_PAIRS: Final[Mapping[Tuple[str, str], str]] = {
    (DISTRO_MANJARO, SOURCE_CHAOTIC): (
        "Chaotic-AUR builds are tied to Arch's glibc and kernel ABI; on "
        "Manjaro these differ and can cause library conflicts and partial "
        "upgrades."
    ),
}

# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

#: Signal emitted by the external installer when an install or uninstall
#: transaction has finished.
OPERATION_COMPLETED: Final[str] = "install-complete"

# ---------------------------------------------------------------------------
# AUR endpoints
# ---------------------------------------------------------------------------

#: AUR RPC search endpoint (search by package name).
AUR_RPC_SEARCH: Final[str] = "https://aur.archlinux.org/rpc/v5/search/{query}?by=name"

#: Packaging suffixes stripped when matching variant names to an identity.
PACKAGE_NAME_SUFFIXES: Final[Sequence[str]] = (
    "-bin",
    "-git",
    "-nightly",
    "-beta",
    "-dev",
    "-appimage",
    "-wayland",
    "-x11",
    "-hg",
    "-svn",
    "-fresh",
    "-still",
    "-native",
    "-lts",
    "-edge",
    "-stable",
)

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Default network timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 30

#: Maximum number of retries for failed HTTP requests.
DEFAULT_MAX_RETRIES: Final[int] = 3

#: How many 429 responses to wait out before giving up.
DEFAULT_MAX_RATE_LIMIT_RETRIES: Final[int] = 5

#: Maximum concurrent requests per client.
DEFAULT_HTTP_CONCURRENCY: Final[int] = 10

# ---------------------------------------------------------------------------
# Configuration defaults
# ---------------------------------------------------------------------------

#: Query the AUR for variants.
DEFAULT_ENABLE_AUR: Final[bool] = True

#: Lifetime (seconds) of cached backend variant listings.
DEFAULT_CACHE_TTL: Final[float] = 300.0

#: Maximum allowed size (in bytes) of files read by variantkeeper.
MAX_FILE_SIZE: Final[int] = 1024 * 1024  # 1 MB

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
