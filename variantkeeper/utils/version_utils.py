"""
Version comparison helpers for Arch-style package versions.

Versions follow the ``[epoch:]upstream[-release]`` layout used by pacman.
:func:`compare_versions` is total and deterministic: it never raises,
whatever it is given, and falls back to plain string ordering when a value
cannot be tokenized.
"""

from __future__ import annotations

import re
from typing import Any, List, Optional, Tuple, Union

_EPOCH_RE = re.compile(r"^(\d+):")
_TOKEN_RE = re.compile(r"[0-9]+|[A-Za-z]+")

Token = Union[int, str]

# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def split_version(version: str) -> Tuple[int, str, Optional[str]]:
    """Split a version into ``(epoch, upstream, release)``.

    The epoch defaults to ``0``; the release is whatever follows the last
    ``-`` and is ``None`` when there is none.

    Example:
        >>> split_version("1:2.3.4-5")
        (1, '2.3.4', '5')
    """
    epoch = 0
    match = _EPOCH_RE.match(version)
    if match:
        epoch = int(match.group(1))
        version = version[match.end():]

    upstream, sep, release = version.rpartition("-")
    if not sep:
        return epoch, version, None
    return epoch, upstream, release


def _tokenize(text: str) -> List[Token]:
    return [int(t) if t.isdigit() else t for t in _TOKEN_RE.findall(text)]


def _compare_tokens(left: List[Token], right: List[Token]) -> int:
    for a, b in zip(left, right):
        if isinstance(a, int) and isinstance(b, int):
            if a != b:
                return 1 if a > b else -1
        elif isinstance(a, int):
            # numeric segments sort after alphabetic ones (1.0.1 > 1.0rc)
            return 1
        elif isinstance(b, int):
            return -1
        elif a != b:
            return 1 if a > b else -1

    if len(left) != len(right):
        return 1 if len(left) > len(right) else -1
    return 0


def _lexical(a: Any, b: Any) -> int:
    left, right = str(a), str(b)
    if left == right:
        return 0
    return 1 if left > right else -1


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def compare_versions(a: Any, b: Any) -> int:
    """Compare two version strings.

    Returns ``1`` when *a* is newer than *b*, ``-1`` when it is older and
    ``0`` when they are equivalent. Non-string or untokenizable input is
    ordered lexically on its string form rather than raising.
    """
    if not isinstance(a, str) or not isinstance(b, str):
        return _lexical(a, b)
    if a == b:
        return 0

    epoch_a, upstream_a, release_a = split_version(a.strip())
    epoch_b, upstream_b, release_b = split_version(b.strip())

    tokens_a = _tokenize(upstream_a)
    tokens_b = _tokenize(upstream_b)
    if not tokens_a or not tokens_b:
        return _lexical(a, b)

    if epoch_a != epoch_b:
        return 1 if epoch_a > epoch_b else -1

    result = _compare_tokens(tokens_a, tokens_b)
    if result:
        return result

    if release_a is None and release_b is None:
        return 0
    if release_a is None:
        return -1
    if release_b is None:
        return 1
    return _compare_tokens(_tokenize(release_a), _tokenize(release_b))


def is_newer(candidate: Optional[str], current: Optional[str]) -> bool:
    """Return True if *candidate* is strictly newer than *current*.

    Missing values never count as newer.
    """
    if not candidate or not current:
        return False
    return compare_versions(candidate, current) > 0


def get_update_type(current: Optional[str], target: Optional[str]) -> str:
    """Classify the move from *current* to *target*.

    Returns one of ``new``, ``same``, ``downgrade``, ``epoch``, ``major``,
    ``minor``, ``patch``, ``release``, ``update`` or ``unknown``.
    """
    if not target:
        return "unknown"
    if not current:
        return "new"

    result = compare_versions(target, current)
    if result == 0:
        return "same"
    if result < 0:
        return "downgrade"

    epoch_c, upstream_c, release_c = split_version(current)
    epoch_t, upstream_t, release_t = split_version(target)
    if epoch_c != epoch_t:
        return "epoch"

    tokens_c = _tokenize(upstream_c)
    tokens_t = _tokenize(upstream_t)
    if tokens_c == tokens_t:
        return "release" if release_c != release_t else "update"

    for index, label in enumerate(("major", "minor", "patch")):
        left = tokens_c[index] if index < len(tokens_c) else None
        right = tokens_t[index] if index < len(tokens_t) else None
        if left != right:
            return label
    return "update"
