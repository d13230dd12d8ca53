from __future__ import annotations

import threading
from typing import Any, Iterable

from .derive import EnrichedRecord, Summary, derive_view
from .edit import EditableField, apply_edit
from .records import PeriodRecord


class ProjectionState:
    """Single owner of the in-memory record sequence.

    Every change goes through :meth:`replace` or :meth:`apply_edit`, which
    install a new tuple and bump ``version`` while holding the lock, so
    callers on different threads never interleave a read-modify-write. The
    derived view is cached per version, so it is recomputed exactly once
    after each change.
    """

    def __init__(self, records: Iterable[PeriodRecord] = ()):
        self._lock = threading.Lock()
        self._records: tuple[PeriodRecord, ...] = tuple(records)
        self.version = 0
        self._view: tuple[int, tuple[list[EnrichedRecord], Summary]] | None = None

    @property
    def records(self) -> tuple[PeriodRecord, ...]:
        return self._records

    def snapshot(self) -> tuple[int, tuple[PeriodRecord, ...]]:
        with self._lock:
            return self.version, self._records

    def replace(self, records: Iterable[PeriodRecord]) -> int:
        records = tuple(records)
        with self._lock:
            self._records = records
            self.version += 1
            return self.version

    def apply_edit(self, record_id: int, field: EditableField | str, value: Any) -> bool:
        with self._lock:
            updated = apply_edit(self._records, record_id, field, value)
            if updated is self._records:
                return False
            self._records = tuple(updated)
            self.version += 1
            return True

    def versioned_view(self) -> tuple[int, list[EnrichedRecord], Summary]:
        """Derived view together with the version it was computed from."""
        with self._lock:
            if self._view is None or self._view[0] != self.version:
                self._view = (self.version, derive_view(self._records))
            version, (enriched, summary) = self._view
        return version, list(enriched), summary

    def view(self) -> tuple[list[EnrichedRecord], Summary]:
        _, enriched, summary = self.versioned_view()
        return enriched, summary
