from __future__ import annotations

"""Map decoded request paths onto files beneath the configured root.

A file that does not exist and a file that exists outside the root produce
the same :data:`Outcome.NOT_FOUND` result, so callers cannot tell them apart.
"""

import errno
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .config import ServeConfig
from .errors import ServerFault

INDEX_PAGE = "index.html"
NOT_FOUND_PAGE = "404.html"

# errnos meaning "no file by that name", as opposed to a broken filesystem
_MISSING_ERRNOS = frozenset({errno.ENOENT, errno.ENOTDIR, errno.ELOOP, errno.ENAMETOOLONG})


class Outcome(Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"


@dataclass(frozen=True, slots=True)
class ResolvedPath:
    path: Path
    contained: bool


@dataclass(frozen=True, slots=True)
class Resolution:
    outcome: Outcome
    path: Optional[Path] = None

    @property
    def found(self) -> bool:
        return self.outcome is Outcome.FOUND


NOT_FOUND = Resolution(Outcome.NOT_FOUND)


def candidate_path(decoded_path: str, config: ServeConfig) -> Path:
    if decoded_path == "/":
        return config.root / INDEX_PAGE
    stripped = decoded_path[1:] if decoded_path.startswith("/") else decoded_path
    return Path(os.path.join(config.root, stripped + config.suffix))


def is_contained(path: Path, root: Path) -> bool:
    """Component-wise check that ``path`` is ``root`` or lies beneath it."""

    return path == root or root in path.parents


def canonicalize(candidate: Path, root: Path) -> Optional[ResolvedPath]:
    """Resolve ``candidate`` the way the filesystem would.

    Returns ``None`` when nothing exists at that path. Other OS errors are
    raised as :class:`ServerFault`, unless the part of the path that could be
    resolved already points outside ``root``.
    """

    try:
        canonical = Path(os.path.realpath(candidate, strict=True))
    except OSError as exc:
        if exc.errno in _MISSING_ERRNOS:
            return None
        partial = Path(os.path.realpath(candidate))
        if not is_contained(partial, root):
            return ResolvedPath(partial, False)
        raise ServerFault(f"cannot resolve {candidate}: {exc}") from exc
    return ResolvedPath(canonical, is_contained(canonical, root))


def resolve_file(candidate: Path, config: ServeConfig) -> Resolution:
    resolved = canonicalize(candidate, config.root)
    if resolved is None or not resolved.contained:
        return NOT_FOUND
    return Resolution(Outcome.FOUND, resolved.path)


def resolve(decoded_path: str, config: ServeConfig) -> Resolution:
    return resolve_file(candidate_path(decoded_path, config), config)


def resolve_not_found_page(config: ServeConfig) -> Resolution:
    return resolve_file(config.root / NOT_FOUND_PAGE, config)


__all__ = [
    "INDEX_PAGE",
    "NOT_FOUND",
    "NOT_FOUND_PAGE",
    "Outcome",
    "Resolution",
    "ResolvedPath",
    "candidate_path",
    "canonicalize",
    "is_contained",
    "resolve",
    "resolve_file",
    "resolve_not_found_page",
]
