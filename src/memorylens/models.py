"""Core MemoryLens data models."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal

EntityType = Literal["person", "project", "tool", "other"]

DAILY_DIR = "memory"
LONG_TERM_NOTE = "MEMORY.md"

_DAILY_RE = re.compile(r"memory/([0-9]{4}-[0-9]{2}-[0-9]{2})\.md")


@dataclass(slots=True)
class Note:
    """One markdown file of the workspace.

    ``path`` is relative to the workspace root and is the note's identity.
    ``content`` is ``None`` when the file could not be read.
    """

    name: str
    path: str
    content: str | None
    size: int
    modified: float

    @property
    def date(self) -> str | None:
        match = _DAILY_RE.fullmatch(self.path)
        return match.group(1) if match else None

    @property
    def is_daily(self) -> bool:
        return self.date is not None

    def to_dict(self) -> Dict[str, Any]:
        """Metadata-only listing shape."""
        data: Dict[str, Any] = {
            "name": self.name,
            "path": self.path,
            "isDaily": self.is_daily,
            "size": self.size,
            "modified": datetime.fromtimestamp(self.modified, tz=timezone.utc).isoformat(),
        }
        if self.date is not None:
            data["date"] = self.date
        return data


@dataclass(slots=True)
class Occurrence:
    """A raw mention of a candidate entity name inside one file."""

    name: str
    snippet: str
    source: str


@dataclass(slots=True)
class Snippet:
    file: str
    text: str


@dataclass(slots=True)
class Entity:
    id: str
    label: str
    type: EntityType
    count: int = 0
    snippets: List[Snippet] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "type": self.type,
            "val": self.count,
            "snippets": [{"file": s.file, "text": s.text} for s in self.snippets],
        }


@dataclass(slots=True)
class Edge:
    source: str
    target: str
    weight: int

    def to_dict(self) -> Dict[str, Any]:
        return {"source": self.source, "target": self.target, "value": self.weight}


@dataclass(slots=True)
class EntityGraph:
    nodes: List[Entity]
    edges: List[Edge]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "links": [edge.to_dict() for edge in self.edges],
        }


@dataclass(slots=True)
class TagEntry:
    tag: str
    count: int
    files: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"tag": self.tag, "count": self.count, "files": list(self.files)}


@dataclass(slots=True)
class StaleFile:
    name: str
    path: str
    days_since_update: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "path": self.path, "daysSinceUpdate": self.days_since_update}


@dataclass(slots=True)
class HealthSummary:
    """Point-in-time corpus health derived from note metadata."""

    heatmap: Dict[str, int]
    stale_files: List[StaleFile]
    coverage_gaps: List[str]
    memory_md_size: int
    daily_total_size: int
    file_count: int = 0

    @property
    def distillation_ratio(self) -> float:
        if not self.daily_total_size:
            return 0.0
        return self.memory_md_size / self.daily_total_size

    def to_dict(self) -> Dict[str, Any]:
        return {
            "heatmap": dict(self.heatmap),
            "staleFiles": [item.to_dict() for item in self.stale_files],
            "coverageGaps": list(self.coverage_gaps),
            "memoryMdSize": self.memory_md_size,
            "dailyTotalSize": self.daily_total_size,
            "distillationRatio": self.distillation_ratio,
            "fileCount": self.file_count,
        }
