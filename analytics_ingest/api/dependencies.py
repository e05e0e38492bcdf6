"""Request-scoped access to the components built by the application factory."""
from fastapi import Request
from ..services.ingestion import IngestionService
from ..services.payload_log import PayloadLog


def get_ingestion_service(request: Request) -> IngestionService:
    return request.app.state.ingestion_service


def get_payload_log(request: Request) -> PayloadLog:
    return request.app.state.payload_log
