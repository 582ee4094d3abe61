"""FastAPI application exposing the workspace and its analytics."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from memorylens.analytics.graph import build_entity_graph
from memorylens.analytics.health import analyze_health
from memorylens.analytics.tags import build_tag_index
from memorylens.config import AppConfig
from memorylens.index.indexer import ExternalIndexer, IndexerError
from memorylens.index.search import IndexReader
from memorylens.ingestion.notes import NoteStore
from memorylens.utils.files import InvalidNotePath
from memorylens.vocabulary import load_vocabulary

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="MemoryLens", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class WritePayload(BaseModel):
    content: str


def _config() -> AppConfig:
    return AppConfig()


def _store(config: AppConfig) -> NoteStore:
    return NoteStore(config.resolve_workspace(Path.cwd()))


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@app.get("/memories")
async def list_memories() -> List[dict[str, Any]]:
    store = _store(_config())
    return [note.to_dict() for note in store.list_notes()]


@app.get("/memories/{note_path:path}")
async def read_memory(note_path: str) -> dict[str, str]:
    store = _store(_config())
    try:
        content = store.read_note(note_path)
    except InvalidNotePath as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except (OSError, UnicodeDecodeError):
        raise HTTPException(status_code=404, detail="Not found")
    return {"path": note_path, "content": content}


@app.put("/memories/{note_path:path}")
async def write_memory(note_path: str, payload: WritePayload) -> dict[str, Any]:
    config = _config()
    store = _store(config)
    try:
        store.write_note(note_path, payload.content)
    except InvalidNotePath as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except OSError as exc:
        LOGGER.error("Write of %s failed: %s", note_path, exc)
        raise HTTPException(status_code=500, detail=str(exc))

    indexer = ExternalIndexer(config.indexer_bin or "openclaw")
    result = await asyncio.to_thread(indexer.reindex)
    return {"ok": True, "index": result.to_dict()}


@app.get("/search")
async def search(q: str = "") -> List[dict[str, Any]]:
    if not q.strip():
        return []
    config = _config()
    reader = IndexReader(config.index_db)
    results = reader.search(q)
    return [{"file": r.file, "chunk": r.chunk, "score": r.score} for r in results]


@app.get("/search/semantic")
async def semantic_search(q: str = "") -> Any:
    if not q.strip():
        return []
    config = _config()
    indexer = ExternalIndexer(config.indexer_bin or "openclaw")
    try:
        return await asyncio.to_thread(indexer.semantic_search, q)
    except IndexerError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@app.get("/status")
async def index_status() -> dict[str, Any]:
    config = _config()
    return IndexReader(config.index_db).status().to_dict()


@app.get("/graph")
async def entity_graph() -> dict[str, Any]:
    config = _config()
    vocabulary = load_vocabulary(config.vocabulary_path)
    notes = _store(config).load_corpus()
    graph = build_entity_graph(notes, vocabulary, snippet_cap=config.snippet_cap)
    return graph.to_dict()


@app.get("/tags")
async def tag_index() -> List[dict[str, Any]]:
    config = _config()
    notes = _store(config).load_corpus()
    return [entry.to_dict() for entry in build_tag_index(notes, limit=config.tag_limit)]


@app.get("/dashboard")
async def dashboard() -> dict[str, Any]:
    config = _config()
    notes = _store(config).list_notes()
    summary = analyze_health(
        notes,
        stale_after_days=config.stale_after_days,
        window_days=config.coverage_window_days,
    )
    stats = IndexReader(config.index_db).stats()
    return {**stats.to_dict(), **summary.to_dict()}
