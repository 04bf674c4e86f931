"""Project file enumeration."""

from __future__ import annotations

import os
import re
from fnmatch import fnmatchcase
from functools import lru_cache
from pathlib import Path
from typing import Iterator, List, Sequence, Tuple

from .config import DEFAULT_EXCLUDE_DIRS, ScanConfig
from .errors import FilesystemError
from .logging import get_logger
from .models import FileRecord

SOURCE_PATTERNS: tuple[str, ...] = ("**/*.{tsx,jsx,ts,js}",)
COMPONENT_PATTERNS: tuple[str, ...] = ("**/*.{tsx,jsx}",)
ALL_FILES: tuple[str, ...] = ("**/*",)

_LOGGER = get_logger("scanner")


def expand_braces(pattern: str) -> List[str]:
    """Expand ``{a,b}`` alternations, including nested groups, into plain globs."""
    start = pattern.find("{")
    if start == -1:
        return [pattern]

    depth = 0
    end = -1
    splits: List[int] = []
    for index in range(start, len(pattern)):
        char = pattern[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                end = index
                break
        elif char == "," and depth == 1:
            splits.append(index)
    if end == -1:
        # Unbalanced brace: treat the remainder literally.
        return [pattern]

    bounds = [start] + splits + [end]
    prefix, suffix = pattern[:start], pattern[end + 1 :]
    expanded: List[str] = []
    for left, right in zip(bounds, bounds[1:]):
        option = pattern[left + 1 : right]
        for tail in expand_braces(suffix):
            for head in expand_braces(prefix + option):
                candidate = head + tail
                if candidate not in expanded:
                    expanded.append(candidate)
    return expanded


@lru_cache(maxsize=256)
def _compile_glob(pattern: str) -> re.Pattern[str]:
    parts: List[str] = []
    index = 0
    while index < len(pattern):
        if pattern.startswith("**/", index):
            parts.append("(?:[^/]+/)*")
            index += 3
        elif pattern.startswith("**", index):
            parts.append(".*")
            index += 2
        elif pattern[index] == "*":
            parts.append("[^/]*")
            index += 1
        elif pattern[index] == "?":
            parts.append("[^/]")
            index += 1
        else:
            parts.append(re.escape(pattern[index]))
            index += 1
    return re.compile("".join(parts) + r"\Z")


def compile_patterns(patterns: Sequence[str]) -> Tuple[re.Pattern[str], ...]:
    """Return compiled matchers for fast-glob style include patterns."""
    compiled: List[re.Pattern[str]] = []
    for pattern in patterns:
        for expanded in expand_braces(pattern.lstrip("/")):
            compiled.append(_compile_glob(expanded))
    return tuple(compiled)


def matches_any(rel_path: str, matchers: Sequence[re.Pattern[str]]) -> bool:
    return any(matcher.match(rel_path) for matcher in matchers)


def _is_excluded(name: str, exclude_dirs: Sequence[str]) -> bool:
    return any(fnmatchcase(name, pattern) for pattern in exclude_dirs)


def _check_root(root: Path) -> None:
    if not root.exists():
        raise FilesystemError(f"Project path not found: {root}")
    if not root.is_dir():
        raise FilesystemError(f"Project path is not a directory: {root}")
    try:
        with os.scandir(root):
            pass
    except OSError as exc:
        raise FilesystemError(f"Project path is not readable: {root} ({exc})") from exc


def _log_walk_error(error: OSError) -> None:
    _LOGGER.debug("Skipping unreadable directory %s: %s", error.filename, error)


class ProjectScanner:
    """Walks the project tree and returns files matching include patterns."""

    def __init__(
        self,
        exclude_dirs: Sequence[str] = DEFAULT_EXCLUDE_DIRS,
        *,
        include_dotfiles: bool = False,
    ) -> None:
        self.exclude_dirs = tuple(exclude_dirs)
        self.include_dotfiles = include_dotfiles

    @classmethod
    def from_config(cls, config: ScanConfig) -> "ProjectScanner":
        return cls(config.exclude_dirs, include_dotfiles=config.include_dotfiles)

    def scan(self, root: str | Path, patterns: Sequence[str]) -> List[FileRecord]:
        """Return records for regular files under ``root`` matching ``patterns``.

        Raises FilesystemError when the root itself cannot be read.
        """
        root_path = Path(root).expanduser().resolve()
        _check_root(root_path)
        matchers = compile_patterns(patterns)

        records = [
            FileRecord.from_relative(rel_path)
            for rel_path in self._iter_files(root_path)
            if matches_any(rel_path, matchers)
        ]
        _LOGGER.debug("Enumerated %d files for %s", len(records), ", ".join(patterns))
        return records

    def _iter_files(self, root: Path) -> Iterator[str]:
        for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

            dirnames[:] = sorted(
                name
                for name in dirnames
                if not _is_excluded(name, self.exclude_dirs)
                and (self.include_dotfiles or not name.startswith("."))
                and not os.path.islink(os.path.join(dirpath, name))
            )

            for filename in sorted(filenames):
                if not self.include_dotfiles and filename.startswith("."):
                    continue
                full_path = os.path.join(dirpath, filename)
                if os.path.islink(full_path) or not os.path.isfile(full_path):
                    continue
                yield f"{rel_dir}/{filename}" if rel_dir else filename


def enumerate_files(
    root: str | Path,
    patterns: Sequence[str],
    exclude_dirs: Sequence[str] = DEFAULT_EXCLUDE_DIRS,
) -> List[FileRecord]:
    """Convenience wrapper around ProjectScanner.scan with default settings."""
    return ProjectScanner(exclude_dirs).scan(root, patterns)


__all__ = [
    "ALL_FILES",
    "COMPONENT_PATTERNS",
    "ProjectScanner",
    "SOURCE_PATTERNS",
    "compile_patterns",
    "enumerate_files",
    "expand_braces",
]
