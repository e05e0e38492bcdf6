"""Debug endpoints."""
from fastapi import APIRouter, Depends
from .schemas import PayloadLogResponse
from .dependencies import get_payload_log
from ..services.payload_log import PayloadLog

router = APIRouter(prefix="/api/v1/debug", tags=["debug"])


@router.get("/payloads", response_model=PayloadLogResponse)
def list_payloads(payload_log: PayloadLog = Depends(get_payload_log)):
    """
    Snapshot of the in-memory payload log, oldest entry first.

    The log is bounded and process-local; entries are lost on restart.
    """
    entries = payload_log.snapshot()
    return PayloadLogResponse(
        enabled=payload_log.enabled,
        capacity=payload_log.capacity,
        count=len(entries),
        entries=entries,
    )
