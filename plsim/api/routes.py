import threading

from fastapi import APIRouter, Depends, HTTPException
from ..pipeline.derive import break_even_month_key
from ..pipeline.edit import EditableField
from ..pipeline.orchestrator import ProjectionSession
from .schemas import (
    EditRequest,
    EditResponse,
    HealthResponse,
    NoticeOut,
    ProjectionResponse,
    SaveResponse,
    SummaryOut,
)

router = APIRouter()

_session: ProjectionSession | None = None
_session_lock = threading.Lock()

def get_session() -> ProjectionSession:
    global _session
    with _session_lock:
        if _session is None:
            _session = ProjectionSession()
    _session.ensure_started()
    return _session

def _projection(session: ProjectionSession) -> ProjectionResponse:
    version, records, summary = session.state.versioned_view()
    return ProjectionResponse(
        version=version,
        source=session.source,
        records=records,
        summary=SummaryOut(
            totals=summary,
            profit_margin_display=summary.profit_margin_display,
            break_even_month=break_even_month_key(records),
        ),
    )

@router.get(
    '/health',
    response_model=HealthResponse,
    summary="Health check",
    description="Returns sync state and the size/version of the in-memory projection.",
    tags=["Health"],
)
def health(session: ProjectionSession = Depends(get_session)):
    version, records = session.state.snapshot()
    return HealthResponse(
        ok=True,
        sync_state=session.client.state.value,
        records=len(records),
        version=version,
    )

@router.get(
    '/projection',
    response_model=ProjectionResponse,
    summary="Get projection",
    description="Monthly records with derived fields plus the portfolio summary.",
    tags=["Projection"],
)
def projection(session: ProjectionSession = Depends(get_session)):
    return _projection(session)

@router.patch(
    '/records/{record_id}',
    response_model=EditResponse,
    summary="Edit one field of one month",
    description=(
        "Sets a single editable field on the record with this id. "
        "Amount fields parse non-numeric input as 0. "
        "An unknown id leaves the projection unchanged."
    ),
    tags=["Projection"],
)
def edit_record(record_id: int, req: EditRequest, session: ProjectionSession = Depends(get_session)):
    try:
        field = EditableField(req.field)
    except ValueError:
        allowed = "|".join(f.value for f in EditableField)
        raise HTTPException(400, f'field must be {allowed}')
    changed = session.edit(record_id, field, req.value)
    return EditResponse(changed=changed, projection=_projection(session))

@router.post(
    '/save',
    response_model=SaveResponse,
    summary="Save to store",
    description="Writes the whole in-memory projection to the remote store (last writer wins).",
    tags=["Sync"],
)
def save(session: ProjectionSession = Depends(get_session)):
    result = session.save()
    return SaveResponse(ok=result.ok, error=result.error, payload_sha256=result.payload_sha256)

@router.post(
    '/reload',
    response_model=ProjectionResponse,
    summary="Reload from store",
    description=(
        "Replaces the in-memory projection with the store contents (seed data if the store is empty). "
        "If the store is unreachable the current projection is kept and a warning notice is posted."
    ),
    tags=["Sync"],
)
def reload(session: ProjectionSession = Depends(get_session)):
    session.reload()
    return _projection(session)

@router.get(
    '/notices',
    response_model=list[NoticeOut],
    summary="List notices",
    tags=["Notices"],
)
def notices(session: ProjectionSession = Depends(get_session)):
    return [NoticeOut(**vars(n)) for n in session.notices.items()]

@router.delete(
    '/notices/{notice_id}',
    summary="Dismiss a notice",
    tags=["Notices"],
)
def dismiss_notice(notice_id: str, session: ProjectionSession = Depends(get_session)):
    if not session.notices.dismiss(notice_id):
        raise HTTPException(404, 'notice not found')
    return {'ok': True, 'dismissed': notice_id}
