"""The .adl-ignore pattern engine.

Paths matching a pattern in ``<output>/.adl-ignore`` are never rendered or
written on regeneration, regardless of ``--overwrite``.

Matching rules, tried per pattern in file order (first match wins):

- ``build/`` (trailing slash): the path starts with the pattern.
- ``tools/*`` (contains ``*``): single-segment glob against the whole path.
  A ``dir/*`` pattern also matches anything below ``dir/``.
- ``go.sum`` (anything else): the path equals the pattern or contains it.
  A short bare pattern can therefore match more than intended, e.g.
  ``go.sum`` also protects ``vendor/go.sum``.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path

from adl.errors import AdlError

logger = logging.getLogger(__name__)

IGNORE_FILENAME = ".adl-ignore"

# Paths whose generated bodies are TODO stubs the user is expected to fill in,
# keyed by (language, template).
IGNORE_PATTERNS: dict[tuple[str, str], tuple[str, ...]] = {
    ("go", "minimal"): ("tools/*",),
    ("rust", "minimal"): ("src/tools/*",),
    ("typescript", "minimal"): ("src/tools/*",),
}

_IGNORE_FILE_HEADER = """\
# .adl-ignore
# Files matching these patterns are never overwritten by `adl generate`
# or `adl sync`. They usually hold implementations you have completed.
#
# Supported patterns:
#   tools/*        everything below tools/
#   *.go           single-segment wildcard
#   build/         directory prefix
#   handlers.go    exact name, also matched anywhere inside a path
#   # comment      ignored
"""

_IGNORE_FILE_FOOTER = """
# Add your own patterns below:
# internal/handlers.go
# config/secrets.yaml
"""


class IgnoreFileError(AdlError):
    """Raised when the ignore file exists but cannot be read or written."""


@lru_cache(maxsize=128)
def _glob_regex(pattern: str) -> re.Pattern[str]:
    """Compile a glob where ``*`` and ``?`` never cross a ``/``."""
    parts: list[str] = []
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "*":
            parts.append("[^/]*")
        elif char == "?":
            parts.append("[^/]")
        elif char == "[":
            end = pattern.find("]", i + 1)
            if end == -1:
                parts.append(re.escape(char))
            else:
                body = pattern[i + 1 : end]
                if body.startswith("!"):
                    body = "^" + body[1:]
                body = body.replace("\\", "\\\\")
                parts.append("[" + body + "]")
                i = end
        else:
            parts.append(re.escape(char))
        i += 1
    return re.compile("".join(parts) + r"\Z")


def normalize_path(path: str | Path) -> str:
    """Return a path in forward-slash form."""
    return str(path).replace("\\", "/")


def match_pattern(pattern: str, path: str) -> bool:
    """Return True if a single ignore pattern matches a normalized path."""
    if pattern.endswith("/"):
        return path.startswith(pattern)
    if "*" in pattern:
        if _glob_regex(pattern).match(path):
            return True
        if pattern.endswith("/*"):
            return path.startswith(pattern[:-1])
        return False
    return path == pattern or pattern in path


class IgnoreChecker:
    """Ordered, read-only set of ignore patterns for one generation run."""

    def __init__(self, patterns: list[str] | tuple[str, ...] = ()) -> None:
        self._patterns = tuple(patterns)

    @property
    def patterns(self) -> tuple[str, ...]:
        return self._patterns

    @classmethod
    def parse(cls, text: str) -> IgnoreChecker:
        """Parse ignore-file text, skipping blank lines and comments."""
        patterns = []
        for raw in text.splitlines():
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            patterns.append(line)
        return cls(patterns)

    @classmethod
    def load(cls, output_dir: Path) -> IgnoreChecker:
        """Load patterns from ``<output_dir>/.adl-ignore``; empty if absent."""
        ignore_path = output_dir / IGNORE_FILENAME
        if not ignore_path.is_file():
            return cls()
        try:
            text = ignore_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise IgnoreFileError(f"failed to read {ignore_path}: {e}") from e
        checker = cls.parse(text)
        logger.debug("Loaded %d ignore patterns from %s", len(checker), ignore_path)
        return checker

    def should_ignore(self, path: str | Path) -> bool:
        """Return True if the path is protected from regeneration."""
        normalized = normalize_path(path)
        return any(match_pattern(p, normalized) for p in self._patterns)

    def __len__(self) -> int:
        return len(self._patterns)


def ignore_file_content(patterns: list[str] | tuple[str, ...]) -> str:
    """Build the text of a fresh .adl-ignore file."""
    body = "".join(f"{pattern}\n" for pattern in patterns)
    return f"{_IGNORE_FILE_HEADER}\n{body}{_IGNORE_FILE_FOOTER}"


def default_patterns(language: str, template: str) -> tuple[str, ...]:
    """Return the patterns written to a new ignore file for a project type."""
    return IGNORE_PATTERNS.get((language, template), ())


def write_ignore_file(output_dir: Path, patterns: list[str] | tuple[str, ...]) -> bool:
    """Create the ignore file if it does not exist yet.

    An existing file belongs to the user and is never rewritten. Returns True
    if a file was created.
    """
    ignore_path = output_dir / IGNORE_FILENAME
    if ignore_path.exists():
        logger.debug("%s already exists, leaving it untouched", ignore_path)
        return False
    if not patterns:
        return False
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        ignore_path.write_text(ignore_file_content(patterns), encoding="utf-8")
    except OSError as e:
        raise IgnoreFileError(f"failed to write {ignore_path}: {e}") from e
    return True
