"""Utility helpers for working with workspace files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

from memorylens.models import DAILY_DIR, LONG_TERM_NOTE


class InvalidNotePath(ValueError):
    """Raised when a note path escapes the workspace root."""


def iter_note_paths(root: Path) -> Iterator[Path]:
    """Yield ``MEMORY.md`` and the markdown files directly under ``memory/``."""
    long_term = root / LONG_TERM_NOTE
    if long_term.is_file():
        yield long_term

    daily_dir = root / DAILY_DIR
    if daily_dir.is_dir():
        for child in sorted(daily_dir.iterdir()):
            if child.is_file() and child.suffix == ".md":
                yield child


def resolve_within(root: Path, relative: str) -> Path:
    """Resolve ``relative`` against ``root`` refusing anything outside it."""
    clean = relative.strip().replace("\r", "").replace("\n", "")
    if not clean or "\0" in clean:
        raise InvalidNotePath(f"Invalid path: {relative!r}")

    normalized = os.path.normpath(clean)
    if os.path.isabs(normalized) or normalized == ".." or normalized.startswith(".." + os.sep):
        raise InvalidNotePath(f"Invalid path: {relative!r}")

    base = os.path.realpath(root)
    candidate = os.path.realpath(os.path.join(base, normalized))
    # Compare with a trailing separator so /ws does not admit /ws2.
    if not (candidate + os.sep).startswith(base + os.sep):
        raise InvalidNotePath(f"Invalid path: {relative!r}")
    return Path(candidate)
