"""
pacman-backed variant and installation state source.

Runs ``pacman`` as a subprocess with a C locale and parses its
human-readable output. Only read-only queries are issued.
"""

from __future__ import annotations

import os
import re
import asyncio
from typing import Dict, List, Optional, Tuple

from variantkeeper.utils.logger import get_logger
from variantkeeper.exceptions import BackendError
from variantkeeper.constants import SOURCE_AUR
from variantkeeper.models.source import OFFICIAL, source_for_repo
from variantkeeper.models.status import InstallationStatus
from variantkeeper.models.variant import Variant
from variantkeeper.backends.naming import base_name, matches_identity

logger = get_logger("pacman")

_NOT_FOUND_RE = re.compile(r"not found", re.IGNORECASE)
_ERE_SPECIAL_RE = re.compile(r"([.^$*+?()[\]{}|\\])")
_SEARCH_LINE_RE = re.compile(r"^(?P<repo>[^/\s]+)/(?P<name>\S+)\s+(?P<version>\S+)")


def parse_info_blocks(text: str) -> List[Dict[str, str]]:
    """Parse ``pacman -Qi``/``-Si`` output into one dict per package.

    Continuation lines of multi-line fields are joined with a space.
    """
    blocks: List[Dict[str, str]] = []
    current: Dict[str, str] = {}
    last_key: Optional[str] = None

    for line in text.splitlines():
        if not line.strip():
            if current:
                blocks.append(current)
            current, last_key = {}, None
            continue

        if line[0].isspace() and last_key is not None:
            current[last_key] = f"{current[last_key]} {line.strip()}".strip()
            continue

        key, sep, value = line.partition(":")
        if not sep:
            continue
        last_key = key.strip()
        current[last_key] = value.strip()

    if current:
        blocks.append(current)
    return blocks


def parse_search_output(text: str) -> List[Tuple[str, str, str]]:
    """Parse ``pacman -Ss`` output into ``(repo, name, version)`` triples."""
    results: List[Tuple[str, str, str]] = []
    for line in text.splitlines():
        if not line or line[0].isspace():
            continue
        match = _SEARCH_LINE_RE.match(line)
        if match:
            results.append((match["repo"], match["name"], match["version"]))
    return results


class PacmanBackend:
    """Query the local pacman databases.

    Args:
        pacman: Executable to run.
    """

    def __init__(self, pacman: str = "pacman") -> None:
        self.pacman = pacman

    async def _run(self, *args: str) -> Tuple[int, str, str]:
        command = [self.pacman, *args]
        logger.debug("Running %s", " ".join(command))
        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env={**os.environ, "LC_ALL": "C"},
            )
        except OSError as exc:
            raise BackendError(
                f"Cannot run {self.pacman}: {exc}",
                command=" ".join(command),
            ) from exc

        stdout, stderr = await proc.communicate()
        returncode = proc.returncode if proc.returncode is not None else -1
        return (
            returncode,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
        )

    def _fail(self, args: Tuple[str, ...], returncode: int, stderr: str) -> BackendError:
        return BackendError(
            f"{self.pacman} {args[0]} failed",
            command=" ".join((self.pacman,) + args),
            returncode=returncode,
            stderr=stderr,
        )

    # ------------------------------------------------------------------
    # Install state
    # ------------------------------------------------------------------

    async def query_installed(self, name: str) -> InstallationStatus:
        """Return the installation status of *name*.

        The originating repository is looked up in the sync databases;
        a package missing from all of them is reported as an AUR build.
        """
        args = ("-Qi", name)
        returncode, stdout, stderr = await self._run(*args)
        if returncode != 0:
            if _NOT_FOUND_RE.search(stderr):
                return InstallationStatus.not_installed()
            raise self._fail(args, returncode, stderr)

        blocks = parse_info_blocks(stdout)
        if not blocks:
            return InstallationStatus.not_installed()
        info = blocks[0]
        package_name = info.get("Name", name)
        version = info.get("Version")

        repo = await self._sync_repo(package_name, version)
        if repo is None:
            return InstallationStatus(
                installed=True,
                version=version,
                source=SOURCE_AUR,
                package_name=package_name,
            )

        # Unrecognized sync databases count as official, as in list_variants
        mapped = source_for_repo(repo) or OFFICIAL
        return InstallationStatus(
            installed=True,
            version=version,
            source=mapped.id,
            repo=repo,
            package_name=package_name,
        )

    async def _sync_repo(self, name: str, version: Optional[str]) -> Optional[str]:
        args = ("-Si", name)
        returncode, stdout, stderr = await self._run(*args)
        if returncode != 0:
            if _NOT_FOUND_RE.search(stderr):
                return None
            raise self._fail(args, returncode, stderr)

        blocks = parse_info_blocks(stdout)
        for block in blocks:
            if version and block.get("Version") == version:
                return block.get("Repository")
        if not blocks:
            return None

        repo = blocks[0].get("Repository")
        if len(blocks) > 1:
            logger.debug(
                "No sync entry of %s matches installed version %s; assuming %s",
                name,
                version,
                repo,
            )
        return repo

    # ------------------------------------------------------------------
    # Variants
    # ------------------------------------------------------------------

    async def list_variants(self, name: str) -> List[Variant]:
        """Return sync database packages that package *name*."""
        pattern = _ERE_SPECIAL_RE.sub(r"\\\1", base_name(name))
        args = ("-Ss", f"^{pattern}")
        returncode, stdout, stderr = await self._run(*args)
        # pacman -Ss exits 1 with no output when nothing matches
        if returncode != 0:
            if not stderr.strip():
                return []
            raise self._fail(args, returncode, stderr)

        variants: List[Variant] = []
        for repo, package_name, version in parse_search_output(stdout):
            if not matches_identity(package_name, name):
                continue
            source = source_for_repo(repo) or OFFICIAL
            variants.append(
                Variant(source, version, repo_name=repo, package_name=package_name)
            )
        logger.debug("pacman lists %d variant(s) of %s", len(variants), name)
        return variants
