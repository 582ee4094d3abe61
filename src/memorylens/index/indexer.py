"""Wrapper around the external memory indexer command."""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass
from typing import Any, List

LOGGER = logging.getLogger(__name__)

INDEX_TIMEOUT = 30
SEARCH_TIMEOUT = 15


class IndexerError(RuntimeError):
    """Raised when the external indexer cannot answer a query."""


@dataclass(slots=True)
class IndexResult:
    success: bool
    output: str

    def to_dict(self) -> dict:
        return {"success": self.success, "output": self.output}


class ExternalIndexer:
    """Runs ``<binary> memory ...`` subcommands."""

    def __init__(
        self,
        binary: str = "openclaw",
        *,
        index_timeout: float = INDEX_TIMEOUT,
        search_timeout: float = SEARCH_TIMEOUT,
    ) -> None:
        self.binary = binary
        self.index_timeout = index_timeout
        self.search_timeout = search_timeout

    def _run(self, args: List[str], timeout: float) -> subprocess.CompletedProcess:
        return subprocess.run(
            [self.binary, *args],
            capture_output=True,
            text=True,
            timeout=timeout,
            check=True,
        )

    def reindex(self) -> IndexResult:
        """Rebuild the index. Failures are reported, never raised."""
        try:
            completed = self._run(["memory", "index"], self.index_timeout)
        except (OSError, subprocess.SubprocessError) as exc:
            LOGGER.warning("Indexer run failed: %s", exc)
            return IndexResult(success=False, output=str(exc))
        output = (completed.stdout + completed.stderr).strip()
        LOGGER.debug("Indexer output: %s", output)
        return IndexResult(success=True, output=output)

    def semantic_search(self, query: str) -> List[Any]:
        if not query.strip():
            return []
        try:
            completed = self._run(["memory", "search", query, "--json"], self.search_timeout)
            return json.loads(completed.stdout)
        except (OSError, subprocess.SubprocessError, json.JSONDecodeError) as exc:
            LOGGER.error("Semantic search failed: %s", exc)
            raise IndexerError(str(exc) or "Semantic search failed") from exc
