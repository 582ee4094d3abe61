"""Workspace note store and corpus loader."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from memorylens.models import Note
from memorylens.utils.files import iter_note_paths, resolve_within

LOGGER = logging.getLogger(__name__)


class NoteStore:
    """Read/write access to the markdown notes of one workspace."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def _relative(self, path: Path) -> str:
        return path.relative_to(self.root).as_posix()

    def _note(self, path: Path, content: str | None) -> Note:
        stat = path.stat()
        return Note(
            name=path.name,
            path=self._relative(path),
            content=content,
            size=stat.st_size,
            modified=stat.st_mtime,
        )

    def list_notes(self) -> List[Note]:
        """Note metadata without content, most recently modified first."""
        notes: List[Note] = []
        for path in iter_note_paths(self.root):
            try:
                notes.append(self._note(path, None))
            except OSError as exc:
                LOGGER.warning("Unable to stat %s: %s", path, exc)
        return sorted(notes, key=lambda note: note.modified, reverse=True)

    def load_corpus(self) -> List[Note]:
        """Every note with its content, in path order.

        A file that cannot be decoded or read is kept with ``content=None``
        so metadata-only consumers still see it.
        """
        notes: List[Note] = []
        for path in iter_note_paths(self.root):
            try:
                content: str | None = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                LOGGER.warning("Unable to read %s: %s", path, exc)
                content = None
            try:
                notes.append(self._note(path, content))
            except OSError as exc:
                LOGGER.warning("Unable to stat %s: %s", path, exc)
        return notes

    def read_note(self, relative: str) -> str:
        path = resolve_within(self.root, relative)
        if not path.is_file():
            raise FileNotFoundError(relative)
        return path.read_text(encoding="utf-8")

    def write_note(self, relative: str, content: str) -> Path:
        path = resolve_within(self.root, relative)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        LOGGER.info("Wrote %s (%d chars)", relative, len(content))
        return path
