from fastapi import APIRouter, Depends
from .schemas import EventRequest, MetricRequest, IngestResponse
from .dependencies import get_ingestion_service
from ..services.ingestion import IngestionService

router = APIRouter(prefix="/api/v1/ingest", tags=["ingestion"])

_ERROR_RESPONSES = {
    400: {"description": "Invalid request"},
    401: {"description": "Invalid or missing API key"},
}


# Plain def: handlers run on the worker thread pool, one request per thread
@router.post("/events", response_model=IngestResponse, responses=_ERROR_RESPONSES)
def ingest_event(
    req: EventRequest,
    service: IngestionService = Depends(get_ingestion_service),
):
    """Accept and store one analytics event."""
    service.ingest_event(req)
    return IngestResponse(status="success", message="Event ingested successfully")


@router.post("/metrics", response_model=IngestResponse, responses=_ERROR_RESPONSES)
def ingest_metric(
    req: MetricRequest,
    service: IngestionService = Depends(get_ingestion_service),
):
    """Accept and store one metric sample."""
    service.ingest_metric(req)
    return IngestResponse(status="success", message="Metric ingested successfully")
