"""Known-name vocabularies and the entity classifier."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Tuple

from memorylens.models import EntityType

LOGGER = logging.getLogger(__name__)


def _normalize(names: Iterable[str]) -> frozenset[str]:
    return frozenset(name.strip().lower() for name in names if name and name.strip())


@dataclass(frozen=True)
class Vocabulary:
    """Static lists of known people, projects and tools (lower-case)."""

    people: frozenset[str] = frozenset()
    projects: frozenset[str] = frozenset()
    tools: frozenset[str] = frozenset()
    _patterns: Tuple[Tuple[str, re.Pattern[str]], ...] = field(
        default=(), init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "people", _normalize(self.people))
        object.__setattr__(self, "projects", _normalize(self.projects))
        object.__setattr__(self, "tools", _normalize(self.tools))
        patterns: List[Tuple[str, re.Pattern[str]]] = []
        for group in (self.people, self.projects, self.tools):
            for term in sorted(group):
                patterns.append((term, re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE)))
        object.__setattr__(self, "_patterns", tuple(patterns))

    def terms(self) -> Tuple[Tuple[str, re.Pattern[str]], ...]:
        """Known terms with their whole-word patterns: people, projects, then tools."""
        return self._patterns


DEFAULT_VOCABULARY = Vocabulary(
    people=frozenset({"aaron", "grace"}),
    projects=frozenset({"orgnext", "recall", "clawmemory", "openclaw memory manager"}),
    tools=frozenset(
        {
            "openclaw",
            "claude code",
            "claude",
            "cursor",
            "github",
            "git",
            "npm",
            "next.js",
            "nextjs",
            "tailwind",
            "shadcn",
            "elevenlabs",
        }
    ),
)


def load_vocabulary(path: Path | None) -> Vocabulary:
    """Load a user-editable JSON vocabulary, or the built-in default.

    The file holds ``{"people": [...], "projects": [...], "tools": [...]}``;
    missing keys are treated as empty lists.
    """
    if path is None:
        return DEFAULT_VOCABULARY
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Vocabulary file must hold a JSON object: {path}")
    groups = {}
    for key in ("people", "projects", "tools"):
        names = data.get(key, [])
        if not isinstance(names, list) or not all(isinstance(name, str) for name in names):
            raise ValueError(f"Vocabulary {key!r} must be a list of strings: {path}")
        groups[key] = frozenset(names)
    LOGGER.debug("Loaded vocabulary from %s", path)
    return Vocabulary(**groups)


def classify_entity(name: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> EntityType:
    lower = name.lower()
    if lower in vocabulary.people:
        return "person"
    if lower in vocabulary.projects:
        return "project"
    if lower in vocabulary.tools:
        return "tool"
    return "other"
