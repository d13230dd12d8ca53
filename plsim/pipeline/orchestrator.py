from __future__ import annotations

import threading
from typing import Any

import structlog

from ..services.notices import NoticeBoard
from .derive import EnrichedRecord, Summary
from .edit import EditableField
from .state import ProjectionState
from .store import LoadResult, SaveResult, StoreClient

log = structlog.get_logger()


class ProjectionSession:
    """Wires the store client, the owned state and the notice board together.

    Saving only ever happens through :meth:`save`; there is no timer or
    background loop behind this object. Store round-trips (load, reload,
    save) run one at a time; edits only contend on the state's own lock.
    """

    def __init__(self, client: StoreClient | None = None, notices: NoticeBoard | None = None):
        self.client = client or StoreClient()
        self.notices = notices or NoticeBoard()
        self.state = ProjectionState()
        self.source: str | None = None
        self._sync_lock = threading.Lock()

    @property
    def started(self) -> bool:
        return self.source is not None

    def start(self) -> LoadResult:
        with self._sync_lock:
            return self._load(keep_on_failure=False)

    def ensure_started(self) -> None:
        with self._sync_lock:
            if not self.started:
                self._load(keep_on_failure=False)

    def reload(self) -> LoadResult:
        """Load again from the store.

        When the store cannot be read and records are already loaded, the
        current records (including unsaved edits) stay in place and only the
        warning is posted.
        """
        with self._sync_lock:
            return self._load(keep_on_failure=self.started)

    def _load(self, keep_on_failure: bool) -> LoadResult:
        result = self.client.load()
        if result.warning:
            self.notices.post("warning", result.warning)
        if keep_on_failure and result.warning and result.source == "seed":
            log.warning(
                "session_reload_kept_state",
                warning=result.warning,
                count=len(self.state.records),
                version=self.state.version,
            )
            return result
        self.state.replace(result.records)
        self.source = result.source
        log.info(
            "session_loaded",
            source=result.source,
            count=len(result.records),
            version=self.state.version,
            sync_state=self.client.state.value,
        )
        return result

    def edit(self, record_id: int, field: EditableField | str, value: Any) -> bool:
        changed = self.state.apply_edit(record_id, field, value)
        if not changed:
            log.debug("edit_target_missing", record_id=record_id, field=EditableField(field).value)
        return changed

    def view(self) -> tuple[list[EnrichedRecord], Summary]:
        return self.state.view()

    def save(self) -> SaveResult:
        with self._sync_lock:
            _, records = self.state.snapshot()
            result = self.client.save(records)
        if result.ok:
            self.notices.post("info", f"Saved {len(records)} months to the store.")
        else:
            self.notices.post("error", f"Save failed ({result.error}); your edits are kept in memory.")
        return result
