"""
JSON-backed store of analysis records.

A local stand-in for the hosted database: records are kept as a JSON list
with camelCase keys and re-validated on load.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

from config import RESULTS_PATH
from estimator.energy import summarize
from schemas import AnalysisRecord, DashboardSummary


class ResultStore:
    """
    Usage::

        store = ResultStore()
        store.add(record)
        store.all(user_id="alice")
        store.summary()
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else RESULTS_PATH

    # ── Write ────────────────────────────────────────────────────────────────

    def add(self, record: AnalysisRecord) -> None:
        rows = self._read()
        rows.append(record.model_dump(by_alias=True))
        self._write(rows)

    def extend(self, records: List[AnalysisRecord]) -> None:
        rows = self._read()
        rows.extend(r.model_dump(by_alias=True) for r in records)
        self._write(rows)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()

    # ── Read ─────────────────────────────────────────────────────────────────

    def all(self, user_id: Optional[str] = None) -> List[AnalysisRecord]:
        """Stored records, newest first, optionally for one user."""
        records = [AnalysisRecord.model_validate(row) for row in self._read()]
        if user_id is not None:
            records = [r for r in records if r.user_id == user_id]
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    def summary(self, user_id: Optional[str] = None) -> DashboardSummary:
        return summarize(self.all(user_id))

    @property
    def size(self) -> int:
        return len(self._read())

    # ── Persistence ──────────────────────────────────────────────────────────

    def _read(self) -> list:
        if not self.path.exists():
            return []
        return json.loads(self.path.read_text(encoding="utf-8"))

    def _write(self, rows: list) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(rows, indent=2), encoding="utf-8")
