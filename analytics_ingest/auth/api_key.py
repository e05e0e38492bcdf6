"""API key authentication."""
import hmac
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
import structlog

log = structlog.get_logger()

API_KEY_HEADER = "X-API-Key"
PROTECTED_PREFIX = "/api/"
# Health, metrics and documentation endpoints stay reachable without a key
PUBLIC_PREFIXES = ("/health", "/metrics", "/docs", "/redoc", "/openapi.json")


def is_public_path(path: str) -> bool:
    return path.startswith(PUBLIC_PREFIXES)


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """
    Rejects requests under /api/ that do not carry the shared secret.

    The check runs before body parsing, so unauthenticated requests never
    reach validation or the ingestion pipeline.
    """

    def __init__(self, app, api_key: str):
        super().__init__(app)
        self._api_key = api_key.encode()

    def validate(self, key: str | None) -> bool:
        """
        Validate an API key.

        Args:
            key: Value of the X-API-Key header, if any

        Returns:
            True if key matches the configured secret
        """
        if not key:
            return False
        return hmac.compare_digest(key.encode(), self._api_key)

    async def dispatch(self, request: Request, call_next):
        path = request.url.path

        if is_public_path(path) or not path.startswith(PROTECTED_PREFIX):
            return await call_next(request)

        api_key = request.headers.get(API_KEY_HEADER)
        if not self.validate(api_key):
            log.warning("auth.failed", reason="missing_key" if not api_key else "invalid_key", path=path)
            return JSONResponse(
                status_code=401,
                content={"error": "Invalid or missing API key"},
                headers={"WWW-Authenticate": "ApiKey"},
            )

        log.debug("auth.success")
        return await call_next(request)
