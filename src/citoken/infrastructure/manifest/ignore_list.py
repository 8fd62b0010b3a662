"""
Ignore list files (.gitignore, .Rbuildignore).

Glob lists follow gitignore rules closely enough for single-file entries:
anchored patterns when they contain a slash ("*" stays within one path
segment, "**" spans several), basename patterns otherwise,
directory patterns, negation with "!" and last-match-wins. Regex lists
hold one Perl-compatible regex per line, matched case-insensitively
against the project-relative path as R CMD build does.
"""

from __future__ import annotations

import fnmatch
import logging
import re
from pathlib import Path, PurePosixPath
from typing import List, Tuple

from citoken.domain.config.enums import IgnoreStyle
from citoken.domain.errors import ManifestError

logger = logging.getLogger(__name__)


def canonical_entry(path: str, style: IgnoreStyle) -> str:
    """The line added for a path."""
    if style is IgnoreStyle.REGEX:
        return f"^{re.escape(path)}$"
    return path


def _match_segments(pattern: Tuple[str, ...], parts: Tuple[str, ...]) -> bool:
    """Match path segments one by one; only "**" spans several segments."""
    if not pattern:
        return not parts
    head, rest = pattern[0], pattern[1:]
    if head == "**":
        return any(_match_segments(rest, parts[i:]) for i in range(len(parts) + 1))
    return bool(parts) and fnmatch.fnmatchcase(parts[0], head) and _match_segments(rest, parts[1:])


def _glob_matches(pattern: str, path: str) -> bool:
    directory_only = pattern.endswith("/")
    pattern = pattern.rstrip("/")
    parts = PurePosixPath(path).parts
    # Every prefix of the path: a matching directory excludes what is inside it
    prefixes = [parts[:i] for i in range(1, len(parts) + 1)]
    if directory_only:
        prefixes = prefixes[:-1]

    if "/" in pattern:
        segments = tuple(PurePosixPath(pattern.lstrip("/")).parts)
        return any(_match_segments(segments, prefix) for prefix in prefixes)

    names = parts[:-1] if directory_only else parts
    return any(fnmatch.fnmatchcase(name, pattern) for name in names)


class IgnoreList:
    """An ignore list file held in memory until save()."""

    def __init__(self, path: Path, style: IgnoreStyle, lines: List[str] | None = None):
        self.path = path
        self.style = style
        self.lines: List[str] = list(lines or [])
        self._dirty = False

    @classmethod
    def load(cls, path: Path, style: IgnoreStyle) -> "IgnoreList":
        """Read the file; a missing file is an empty list."""
        try:
            lines = path.read_text(encoding="utf-8").splitlines() if path.exists() else []
        except UnicodeDecodeError as e:
            logger.error("Failed to read %s: %s", path, e)
            raise ManifestError(f"{path.name} is not valid UTF-8 text: {e}") from e
        return cls(path, style, lines)

    @property
    def entries(self) -> List[str]:
        return [
            line.strip() for line in self.lines
            if line.strip() and not line.lstrip().startswith("#")
        ]

    @property
    def dirty(self) -> bool:
        return self._dirty

    def _entry_matches(self, entry: str, path: str) -> bool:
        if self.style is IgnoreStyle.REGEX:
            try:
                return re.search(entry, path, re.IGNORECASE) is not None
            except re.error:
                logger.warning("Skipping invalid regex in %s: %s", self.path.name, entry)
                return False
        return _glob_matches(entry, path)

    def contains(self, path: str) -> bool:
        """Whether the list excludes the path."""
        if self.style is IgnoreStyle.REGEX:
            return any(self._entry_matches(entry, path) for entry in self.entries)

        ignored = False
        for entry in self.entries:
            negated = entry.startswith("!")
            pattern = entry[1:] if negated else entry
            if _glob_matches(pattern, path):
                ignored = not negated
        return ignored

    def matching_entries(self, path: str) -> List[str]:
        return [
            entry for entry in self.entries
            if not entry.startswith("!") and self._entry_matches(entry, path)
        ]

    def ensure(self, path: str) -> bool:
        """Append the canonical entry if the path is not excluded yet. Returns whether it changed."""
        if self.contains(path):
            return False
        self.lines.append(canonical_entry(path, self.style))
        self._dirty = True
        logger.debug("Added %s to %s", path, self.path.name)
        return True

    def remove(self, path: str) -> bool:
        """
        Drop the entries written for exactly this path.

        Broader patterns that also match are left alone; check contains()
        afterwards.
        """
        own = {canonical_entry(path, self.style), path, f"/{path}"}
        kept = [line for line in self.lines if line.strip() not in own]
        if len(kept) == len(self.lines):
            return False
        self.lines = kept
        self._dirty = True
        logger.debug("Removed %s from %s", path, self.path.name)
        return True

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        content = "\n".join(self.lines)
        self.path.write_text(content + "\n" if content else "", encoding="utf-8")
        self._dirty = False
        logger.info("Saved %s", self.path)
