"""
File Filter

Selects which changed files get reviewed: glob include/exclude patterns
and a volume-prioritized cap on the number of files.
"""

import re
from collections.abc import Iterable, Sequence
from typing import Protocol

from .models import FileChange


class FilterOptions(Protocol):
    """The part of the review configuration the filter reads."""

    ignore: Sequence[str]
    include_only: Sequence[str] | None


def compile_glob(pattern: str) -> re.Pattern[str]:
    """Translate a glob pattern into a whole-path regex.

    ``**`` crosses directory separators (``**/`` may match nothing), ``*``
    and ``?`` stay within one segment, everything else is literal. Patterns
    that do not start with ``**`` or ``/`` may match at any segment
    boundary, so ``*.min.js`` matches ``dist/app.min.js``. A leading ``/``
    anchors the pattern at the repository root.

    Use ``fullmatch`` on the result.
    """
    anchored = pattern.startswith(("**", "/"))
    body = pattern[1:] if pattern.startswith("/") else pattern

    parts: list[str] = [] if anchored else ["(?:.*/)?"]
    i = 0
    while i < len(body):
        if body.startswith("**/", i):
            parts.append("(?:.*/)?")
            i += 3
        elif body.startswith("**", i):
            parts.append(".*")
            i += 2
        elif body[i] == "*":
            parts.append("[^/]*")
            i += 1
        elif body[i] == "?":
            parts.append("[^/]")
            i += 1
        else:
            parts.append(re.escape(body[i]))
            i += 1

    return re.compile("".join(parts))


class FileFilter:
    """Include/exclude files by glob pattern.

    Patterns are compiled once per instance.
    """

    def __init__(
        self,
        ignore: Iterable[str] = (),
        include_only: Iterable[str] | None = None,
    ):
        self._ignore = [compile_glob(p) for p in ignore]
        self._include_only = [compile_glob(p) for p in include_only or ()]

    @classmethod
    def from_config(cls, config: FilterOptions) -> "FileFilter":
        """Build a filter from the review configuration."""
        return cls(ignore=config.ignore or (), include_only=config.include_only)

    def should_ignore(self, path: str) -> bool:
        """Check whether a path is excluded from review."""
        if self._include_only and not any(
            p.fullmatch(path) for p in self._include_only
        ):
            return True

        return any(p.fullmatch(path) for p in self._ignore)

    def filter(self, files: Iterable[FileChange]) -> list[FileChange]:
        """Keep the files that should be reviewed, preserving order."""
        return [f for f in files if not self.should_ignore(f.path)]


def filter_files(files: Iterable[FileChange], config: FilterOptions) -> list[FileChange]:
    """Apply the configured include/ignore patterns to parsed files."""
    return FileFilter.from_config(config).filter(files)


def should_ignore_file(path: str, config: FilterOptions) -> bool:
    """Check a single path against the configured patterns."""
    return FileFilter.from_config(config).should_ignore(path)


def limit_files(files: list[FileChange], max_files: int) -> list[FileChange]:
    """Cap the number of files, keeping the largest changes.

    Within the limit the input is returned unchanged. Over the limit the
    result is ordered by lines changed (descending); ties keep input order.
    """
    if len(files) <= max_files:
        return files

    ranked = sorted(files, key=lambda f: f.total_lines_changed, reverse=True)
    return ranked[: max(max_files, 0)]
