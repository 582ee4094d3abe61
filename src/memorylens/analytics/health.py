"""Corpus health: activity heatmap, staleness, coverage gaps, distillation."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Dict, Iterable, List

from memorylens.models import LONG_TERM_NOTE, HealthSummary, Note, StaleFile

DAY_SECONDS = 24 * 60 * 60
STALE_AFTER_DAYS = 30
COVERAGE_WINDOW_DAYS = 30


def _utc_date(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d")


def coverage_window(now: float, days: int = COVERAGE_WINDOW_DAYS) -> List[str]:
    """UTC dates of the last ``days`` days, today first."""
    return [_utc_date(now - i * DAY_SECONDS) for i in range(days)]


def analyze_health(
    notes: Iterable[Note],
    now: float | None = None,
    *,
    stale_after_days: int = STALE_AFTER_DAYS,
    window_days: int = COVERAGE_WINDOW_DAYS,
) -> HealthSummary:
    """Summarise corpus health from note metadata only.

    ``now`` is a POSIX timestamp and defaults to the current time. Content is
    never inspected, so unreadable notes still contribute their size and
    modification time.
    """
    if now is None:
        now = time.time()

    notes = list(notes)
    heatmap: Dict[str, int] = {}
    daily_total_size = 0
    memory_md_size = 0
    stale_files: List[StaleFile] = []

    for note in notes:
        date = note.date
        if date is not None:
            heatmap[date] = note.size
            daily_total_size += note.size
        elif note.path == LONG_TERM_NOTE:
            memory_md_size = note.size

        age = now - note.modified
        if age > stale_after_days * DAY_SECONDS:
            stale_files.append(
                StaleFile(
                    name=note.name,
                    path=note.path,
                    days_since_update=int(age // DAY_SECONDS),
                )
            )

    coverage_gaps = [day for day in coverage_window(now, window_days) if day not in heatmap]

    return HealthSummary(
        heatmap=heatmap,
        stale_files=stale_files,
        coverage_gaps=coverage_gaps,
        memory_md_size=memory_md_size,
        daily_total_size=daily_total_size,
        file_count=len(notes),
    )
