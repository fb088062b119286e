"""
Host distribution detection.

Reads ``/etc/os-release`` and maps its ``ID`` to one of the Arch-based
families variantkeeper knows about.
"""

from __future__ import annotations

from pathlib import Path
from dataclasses import dataclass
from typing import Dict, Optional, Union

from variantkeeper.utils.logger import get_logger
from variantkeeper.constants import (
    DISTRO_UNKNOWN,
    KNOWN_DISTROS,
    MAX_FILE_SIZE,
    OS_RELEASE_PATH,
)

logger = get_logger("distro")


@dataclass(frozen=True)
class HostDistro:
    id: str
    pretty_name: str

    @property
    def is_known(self) -> bool:
        return self.id != DISTRO_UNKNOWN


UNKNOWN_DISTRO = HostDistro(DISTRO_UNKNOWN, "Unknown Linux")


def parse_os_release(text: str) -> Dict[str, str]:
    """Parse os-release ``KEY=value`` lines, stripping optional quotes."""
    fields: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        fields[key.strip()] = value
    return fields


def normalize_distro_id(raw: Optional[str]) -> str:
    """Map a raw ``ID`` value to a known distro id or ``unknown``."""
    value = (raw or "").strip().lower()
    return value if value in KNOWN_DISTROS else DISTRO_UNKNOWN


def detect_host_distro(os_release_path: Union[str, Path] = OS_RELEASE_PATH) -> HostDistro:
    """Detect the running distribution.

    Unreadable or oversized files yield :data:`UNKNOWN_DISTRO`; detection
    never raises.
    """
    path = Path(os_release_path)
    try:
        if path.stat().st_size > MAX_FILE_SIZE:
            logger.warning("Ignoring oversized os-release file: %s", path)
            return UNKNOWN_DISTRO
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.debug("Cannot read %s: %s", path, exc)
        return UNKNOWN_DISTRO

    fields = parse_os_release(text)
    distro_id = normalize_distro_id(fields.get("ID"))
    pretty = fields.get("PRETTY_NAME") or fields.get("NAME") or UNKNOWN_DISTRO.pretty_name
    logger.debug("Detected host distro %s (%s)", distro_id, pretty)
    return HostDistro(distro_id, pretty)
