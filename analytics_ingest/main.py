"""
Analytics Ingest - event and metric ingestion service.

Features:
- API-key protected ingestion endpoints for events and metrics
- Relational persistence through SQLAlchemy
- Bounded in-memory log of recently ingested payloads
- Structured logging with correlation IDs
- Prometheus metrics
- Health checks (liveness and readiness)
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
from .config import Settings, get_settings, warn_if_insecure_api_key
from .logging import SERVICE_NAME, setup_logging, get_logger
from .api.router import router
from .api.debug_router import router as debug_router
from .auth.api_key import ApiKeyMiddleware
from .db.database import Database
from .health import HealthChecker
from .metrics import Metrics
from .middleware.correlation import CorrelationIdMiddleware
from .middleware.error_handler import register_exception_handlers
from .middleware.metrics import MetricsMiddleware
from .middleware.validation import ValidationMiddleware
from .services.database_service import DatabaseService
from .services.ingestion import IngestionService
from .services.payload_log import PayloadLog

VERSION = "0.1.0"

logger = get_logger()


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application and wire its components.

    Every component (database, payload log, ingestion service, metrics)
    is created here and attached to ``app.state``; routes reach them
    through dependencies.
    """
    settings = settings or get_settings()

    setup_logging(json_output=settings.LOG_JSON, service_name=SERVICE_NAME)
    warn_if_insecure_api_key(settings)

    metrics = Metrics(service_name=SERVICE_NAME, version=VERSION)
    database = Database(settings.DATABASE_URL)
    payload_log = PayloadLog(
        max_size=settings.PAYLOAD_LOG_MAX_SIZE,
        enabled=settings.PAYLOAD_LOG_ENABLED,
    )
    store = DatabaseService(database)
    ingestion_service = IngestionService(store, payload_log, metrics=metrics)
    health_checker = HealthChecker(database, service_name=SERVICE_NAME, version=VERSION)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "service_starting",
            version=VERSION,
            env=settings.ENV,
            payload_log_enabled=payload_log.enabled,
            payload_log_max_size=payload_log.capacity,
        )
        database.create_all()
        yield
        logger.info("service_stopping")
        metrics.app_up.labels(service=SERVICE_NAME, version=VERSION).set(0)
        database.dispose()

    app = FastAPI(
        title="Analytics Ingest",
        version=VERSION,
        description="Event and metric ingestion service",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.metrics = metrics
    app.state.database = database
    app.state.store = store
    app.state.payload_log = payload_log
    app.state.ingestion_service = ingestion_service

    register_exception_handlers(app)

    # Last added runs first: correlation ID -> metrics -> auth -> body validation
    app.add_middleware(ValidationMiddleware, max_payload_size=settings.MAX_PAYLOAD_SIZE)
    app.add_middleware(ApiKeyMiddleware, api_key=settings.API_KEY)
    app.add_middleware(MetricsMiddleware, metrics=metrics)
    app.add_middleware(CorrelationIdMiddleware)

    app.include_router(router)
    app.include_router(debug_router)

    app.mount("/metrics", make_asgi_app(registry=metrics.registry))

    @app.get("/health")
    def health():
        """
        Liveness check - basic health check.

        Returns 200 if service is running.
        """
        logger.debug("health_check_liveness")
        return health_checker.liveness()

    @app.get("/health/ready")
    def health_ready():
        """
        Readiness check - comprehensive health check.

        Returns:
            200: Service is ready to handle traffic
            503: Service is not ready
        """
        logger.debug("health_check_readiness")
        result = health_checker.readiness()
        status_code = 200 if result["status"] == "ready" else 503
        return JSONResponse(result, status_code=status_code)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "analytics_ingest.main:app",
        host="0.0.0.0",
        port=get_settings().SERVICE_PORT,
    )
