"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

WORKSPACE_ENV = "MEMORYLENS_WORKSPACE"
INDEX_DB_ENV = "MEMORYLENS_INDEX_DB"
INDEXER_BIN_ENV = "MEMORYLENS_INDEXER_BIN"
VOCABULARY_ENV = "MEMORYLENS_VOCABULARY"


def _expand_home(value: str) -> Path:
    if value.startswith("~"):
        value = str(Path.home()) + value[1:]
    return Path(value)


def _get_default_workspace() -> Path:
    """Get the workspace root, honouring the environment override."""
    env = os.environ.get(WORKSPACE_ENV)
    if env:
        return _expand_home(env)
    return Path.home() / ".openclaw" / "workspace"


def _get_default_index_db() -> Path:
    env = os.environ.get(INDEX_DB_ENV)
    if env:
        return _expand_home(env)
    return Path.home() / ".openclaw" / "memory" / "main.sqlite"


def _get_default_indexer_bin() -> str:
    return os.environ.get(INDEXER_BIN_ENV) or "openclaw"


@dataclass(slots=True)
class AppConfig:
    workspace: Path | None = None
    index_db: Path | None = None
    indexer_bin: str | None = None
    vocabulary_path: Path | None = None
    stale_after_days: int = 30
    coverage_window_days: int = 30
    tag_limit: int = 50
    snippet_cap: int = 5

    def __post_init__(self) -> None:
        if self.workspace is None:
            self.workspace = _get_default_workspace()
        if self.index_db is None:
            self.index_db = _get_default_index_db()
        if self.indexer_bin is None:
            self.indexer_bin = _get_default_indexer_bin()
        if self.vocabulary_path is None and os.environ.get(VOCABULARY_ENV):
            self.vocabulary_path = _expand_home(os.environ[VOCABULARY_ENV])

    def resolve_workspace(self, base_dir: Path | None = None) -> Path:
        if self.workspace is None:
            self.workspace = _get_default_workspace()
        if Path(self.workspace).is_absolute() or base_dir is None:
            return Path(self.workspace)
        return base_dir / self.workspace
