from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Sequence

import httpx
import structlog
from pydantic import TypeAdapter, ValidationError

from ..config import settings
from ..utils import retry_call, sha256_json
from .records import PeriodRecord, serialize_records
from .seed import generate_seed
from .validation import validate_sequence

log = structlog.get_logger()

_RECORDS = TypeAdapter(list[PeriodRecord])


class SyncState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    LOAD_FAILED = "load_failed"
    SAVING = "saving"
    SAVE_FAILED = "save_failed"


class LoadFailure(Exception):
    pass


class SaveFailure(Exception):
    pass


@dataclass(frozen=True)
class LoadResult:
    records: list[PeriodRecord]
    source: str  # 'remote'|'seed'
    warning: str | None = None


@dataclass(frozen=True)
class SaveResult:
    ok: bool
    error: str | None = None
    payload_sha256: str | None = None


@dataclass
class SeedDefaults:
    anchor_year: int = field(default_factory=lambda: settings.seed_anchor_year)
    anchor_month: int = field(default_factory=lambda: settings.seed_anchor_month)
    count: int = field(default_factory=lambda: settings.seed_months)
    base_sales: int = field(default_factory=lambda: settings.seed_base_sales)

    def build(self) -> list[PeriodRecord]:
        return generate_seed(self.anchor_year, self.anchor_month, self.count, base_sales=self.base_sales)


class StoreClient:
    """Load-or-seed and explicit save against the remote document store.

    The store holds one JSON array of period records at a single endpoint:
    GET returns it (``[]`` or ``null`` when nothing was saved yet), POST
    replaces it wholesale. Last writer wins; nothing here detects or merges
    concurrent writers, and nothing saves on its own.

    ``load`` and ``save`` never raise for store problems. Failures come back
    as a warning on :class:`LoadResult` (with seed data in place of the
    store's) or as ``SaveResult(ok=False)``.
    """

    def __init__(
        self,
        endpoint: str | None = None,
        *,
        timeout: float | None = None,
        content_type: str | None = None,
        retry_attempts: int | None = None,
        retry_backoff: float | None = None,
        seed: SeedDefaults | None = None,
        transport: httpx.BaseTransport | None = None,
        on_transition: Callable[[SyncState, SyncState], None] | None = None,
    ):
        self.endpoint = (settings.store_url if endpoint is None else endpoint).strip()
        timeout = settings.http_timeout_seconds if timeout is None else timeout
        self.timeout = timeout if timeout and timeout > 0 else None
        self.content_type = content_type or settings.store_content_type
        self.retry_attempts = settings.http_retry_attempts if retry_attempts is None else retry_attempts
        self.retry_backoff = settings.http_retry_backoff_seconds if retry_backoff is None else retry_backoff
        self.seed = seed or SeedDefaults()
        self.transport = transport
        self.on_transition = on_transition
        self.state = SyncState.IDLE

    def _set_state(self, new: SyncState):
        old, self.state = self.state, new
        if old is not new:
            log.debug("sync_state_changed", old=old.value, new=new.value)
            if self.on_transition:
                self.on_transition(old, new)

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout, follow_redirects=True, transport=self.transport)

    def _retry(self, fn):
        return retry_call(fn, attempts=self.retry_attempts, base_delay=self.retry_backoff)

    def _fetch(self) -> list[PeriodRecord]:
        if not self.endpoint:
            raise LoadFailure("store_url_not_configured")

        def _call():
            with self._client() as client:
                r = client.get(self.endpoint, headers={"Accept": "application/json"})
                r.raise_for_status()
                return r.json()

        try:
            data = self._retry(_call)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            # ValueError covers undecodable JSON bodies
            raise LoadFailure(f"{type(e).__name__}: {e}") from e
        if data is None:
            return []
        if not isinstance(data, list):
            raise LoadFailure(f"expected a JSON array, got {type(data).__name__}")
        try:
            records = _RECORDS.validate_python(data)
        except ValidationError as e:
            raise LoadFailure(f"schema: {e.error_count()} invalid field(s)") from e
        ok, reasons = validate_sequence(records)
        if not ok:
            raise LoadFailure("; ".join(reasons))
        return records

    def load(self) -> LoadResult:
        self._set_state(SyncState.LOADING)
        try:
            records = self._fetch()
        except LoadFailure as e:
            log.warning("store_load_failed", endpoint=self.endpoint, err=str(e))
            self._set_state(SyncState.LOAD_FAILED)
            return LoadResult(
                records=self.seed.build(),
                source="seed",
                warning=f"Could not load saved data ({e}); showing default projection.",
            )
        self._set_state(SyncState.READY)
        if not records:
            log.info("store_load_empty", endpoint=self.endpoint)
            return LoadResult(records=self.seed.build(), source="seed")
        log.info("store_load_done", endpoint=self.endpoint, count=len(records))
        return LoadResult(records=records, source="remote")

    def _push(self, body: bytes):
        if not self.endpoint:
            raise SaveFailure("store_url_not_configured")

        def _call():
            with self._client() as client:
                r = client.post(self.endpoint, content=body, headers={"Content-Type": self.content_type})
                r.raise_for_status()

        try:
            self._retry(_call)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise SaveFailure(f"{type(e).__name__}: {e}") from e

    def save(self, records: Sequence[PeriodRecord]) -> SaveResult:
        payload = serialize_records(records)
        sha = sha256_json(payload)
        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        self._set_state(SyncState.SAVING)
        try:
            self._push(body)
        except SaveFailure as e:
            log.error("store_save_failed", endpoint=self.endpoint, err=str(e), count=len(payload))
            self._set_state(SyncState.SAVE_FAILED)
            self._set_state(SyncState.READY)
            return SaveResult(ok=False, error=str(e), payload_sha256=sha)
        self._set_state(SyncState.READY)
        log.info("store_save_done", endpoint=self.endpoint, count=len(payload), payload_sha256=sha)
        return SaveResult(ok=True, payload_sha256=sha)
