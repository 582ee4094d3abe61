"""Shared fixtures for MemoryLens tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from memorylens.models import Note

DAY = 24 * 60 * 60


def make_note(path: str, content: str | None = "", *, size: int | None = None, modified: float = 0.0) -> Note:
    if size is None:
        size = len(content.encode("utf-8")) if content is not None else 0
    return Note(
        name=path.rsplit("/", 1)[-1],
        path=path,
        content=content,
        size=size,
        modified=modified,
    )


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """A workspace with a long-term note and two daily notes."""
    root = tmp_path / "workspace"
    daily = root / "memory"
    daily.mkdir(parents=True)
    (root / "MEMORY.md").write_text("# Long term\n\n**Aaron** likes **OpenClaw**.\n", encoding="utf-8")
    (daily / "2024-01-01.md").write_text("# Aaron\n\n**OpenClaw** helps Aaron.", encoding="utf-8")
    (daily / "2024-01-02.md").write_text("## Standup\n\nUsed git and Cursor.\n", encoding="utf-8")
    (daily / "notes.txt").write_text("ignored", encoding="utf-8")
    os.utime(root / "MEMORY.md", (3 * DAY, 3 * DAY))
    os.utime(daily / "2024-01-01.md", (1 * DAY, 1 * DAY))
    os.utime(daily / "2024-01-02.md", (2 * DAY, 2 * DAY))
    return root
