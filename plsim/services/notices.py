from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field

from ..utils import now_utc_iso

LEVELS = ("info", "warning", "error")


@dataclass(frozen=True)
class Notice:
    level: str
    message: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at_utc: str = field(default_factory=now_utc_iso)


class NoticeBoard:
    """Dismissible user-facing notices, oldest first."""

    def __init__(self):
        self._lock = threading.Lock()
        self._items: dict[str, Notice] = {}

    def post(self, level: str, message: str) -> Notice:
        if level not in LEVELS:
            raise ValueError(f"level must be one of {'|'.join(LEVELS)}")
        notice = Notice(level=level, message=message)
        with self._lock:
            self._items[notice.id] = notice
        return notice

    def items(self) -> list[Notice]:
        with self._lock:
            return list(self._items.values())

    def dismiss(self, notice_id: str) -> bool:
        with self._lock:
            return self._items.pop(notice_id, None) is not None
