"""Read-only access to the external full-text memory index."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class SearchResult:
    file: str
    chunk: str
    score: float


@dataclass(slots=True)
class IndexStatus:
    files_indexed: int
    total_files: int
    total_chunks: int
    raw: str

    def to_dict(self) -> dict:
        return {
            "filesIndexed": self.files_indexed,
            "totalFiles": self.total_files,
            "totalChunks": self.total_chunks,
            "raw": self.raw,
        }


@dataclass(slots=True)
class IndexStats:
    total_files: int = 0
    total_size: int = 0
    total_chunks: int = 0
    last_indexed: str = ""

    def to_dict(self) -> dict:
        return {
            "totalFiles": self.total_files,
            "totalSize": self.total_size,
            "totalChunks": self.total_chunks,
            "lastIndexed": self.last_indexed,
        }


class IndexReader:
    """Queries the SQLite index maintained by the external indexer.

    Every call opens its own read-only connection, so the reader never holds
    the database open between requests.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        if not self.db_path.exists():
            raise FileNotFoundError(f"Index database not found: {self.db_path}")
        conn = sqlite3.connect(f"file:{self.db_path}?mode=ro", uri=True)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def search(self, query: str, *, limit: int = 20) -> List[SearchResult]:
        query = query.strip()
        if not query:
            return []

        # Quote as a single FTS5 phrase so user input cannot inject operators.
        phrase = '"' + query.replace('"', '""') + '"'
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    """
                    SELECT path, snippet(chunks_fts, 0, '', '', '…', 40) AS chunk, rank
                    FROM chunks_fts
                    WHERE chunks_fts MATCH ?
                    ORDER BY rank
                    LIMIT ?
                    """,
                    (phrase, limit),
                ).fetchall()
        except (sqlite3.Error, FileNotFoundError) as exc:
            LOGGER.warning("Full-text search failed: %s", exc)
            return []

        return [SearchResult(file=row["path"], chunk=row["chunk"], score=0.0) for row in rows]

    def status(self) -> IndexStatus:
        try:
            with self._connect() as conn:
                file_count = conn.execute("SELECT COUNT(*) AS c FROM files").fetchone()["c"]
                chunk_count = conn.execute("SELECT COUNT(*) AS c FROM chunks").fetchone()["c"]
        except (sqlite3.Error, FileNotFoundError) as exc:
            LOGGER.warning("Index status check failed: %s", exc)
            return IndexStatus(files_indexed=0, total_files=0, total_chunks=0, raw=str(exc))

        return IndexStatus(
            files_indexed=file_count,
            total_files=file_count,
            total_chunks=chunk_count,
            raw=f"{file_count} files indexed, {chunk_count} chunks",
        )

    def stats(self) -> IndexStats:
        stats = IndexStats()
        try:
            with self._connect() as conn:
                stats.total_files = conn.execute("SELECT COUNT(*) AS c FROM files").fetchone()["c"]
                stats.total_size = conn.execute(
                    "SELECT COALESCE(SUM(size), 0) AS s FROM files"
                ).fetchone()["s"]
                stats.total_chunks = conn.execute("SELECT COUNT(*) AS c FROM chunks").fetchone()["c"]
                meta = conn.execute("SELECT value FROM meta WHERE key = 'last_indexed'").fetchone()
                stats.last_indexed = meta["value"] if meta else ""
        except (sqlite3.Error, FileNotFoundError) as exc:
            LOGGER.warning("Index stats unavailable: %s", exc)
        return stats
