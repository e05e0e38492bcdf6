"""Validation middleware for request payload size and JSON structure."""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
import structlog
import orjson

log = structlog.get_logger()


class ValidationMiddleware(BaseHTTPMiddleware):
    """Rejects oversized bodies and malformed JSON before they reach the routes."""

    def __init__(self, app, max_payload_size: int):
        super().__init__(app)
        self.max_payload_size = max_payload_size

    def _too_large(self, size: int, path: str) -> JSONResponse:
        log.warning("payload.too_large", size=size, max_size=self.max_payload_size, path=path)
        return JSONResponse(
            status_code=413,
            content={
                "status": "error",
                "error": "PayloadTooLarge",
                "message": f"Request payload exceeds maximum size of {self.max_payload_size} bytes",
                "max_size": self.max_payload_size,
                "received_size": size,
            },
        )

    async def dispatch(self, request: Request, call_next):
        if request.method not in ["POST", "PUT", "PATCH"]:
            return await call_next(request)

        path = request.url.path

        # Check content-length header first
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_payload_size:
            return self._too_large(int(content_length), path)

        if request.headers.get("content-type", "").startswith("application/json"):
            body = await request.body()
            if len(body) > self.max_payload_size:
                return self._too_large(len(body), path)

            if body:
                try:
                    orjson.loads(body)
                except orjson.JSONDecodeError as e:
                    log.warning("invalid.json", error=str(e), path=path)
                    return JSONResponse(
                        status_code=400,
                        content={
                            "status": "error",
                            "error": "InvalidJSON",
                            "message": "Request body is not valid JSON",
                            "detail": str(e),
                        },
                    )

        return await call_next(request)
