"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Configure middleware (CORS, request context)
  - Mount auth routes and the resource / time entry routers
  - Expose health check and Prometheus metrics endpoints

Collaborators:
  - FastAPI: ASGI web framework
  - CORSMiddleware: Cross-Origin Resource Sharing handler
  - RequestContextMiddleware: Request ID and logging context
  - interfaces.api.http.router: resource, time entry and profile endpoints
  - auth_routes: register / login / password recovery / verification

Constraints:
  - CORS configurable via ALLOWED_ORIGINS env var (comma-separated)
  - APP_ENV=test skips the DB pool (in-memory repositories)

Notes:
  - Middleware order matters: RequestContext -> CORS -> routes
  - /healthz follows Kubernetes health check convention
  - /metrics exposes Prometheus metrics (text exposition format)
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..crosscutting.metrics import get_metrics_response
from ..crosscutting.middleware import RequestContextMiddleware
from ..infrastructure.db.pool import close_pool, get_pool, init_pool
from ..interfaces.api.http.router import router
from .auth_routes import router as auth_router
from .exception_handlers import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Initializes the pool outside tests."""
    settings = get_settings()
    use_db = not settings.is_test()

    if use_db:
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )

    try:
        logger.info(
            "Time Tracker API starting up",
            extra={
                "app_env": settings.app_env,
                "email_backend": settings.email_backend,
                "db_pool_min": settings.db_pool_min_size,
                "db_pool_max": settings.db_pool_max_size,
            },
        )
        yield
    finally:
        if use_db:
            close_pool()
        logger.info("Time Tracker API shutting down")


def _check_database() -> str:
    try:
        with get_pool().connection() as conn:
            conn.execute("SELECT 1")
        return "connected"
    except Exception as exc:
        logger.warning("Health check: DB no disponible", extra={"error": str(exc)})
        return "disconnected"


def create_app() -> FastAPI:
    settings = get_settings()

    # R: Create FastAPI application instance with API metadata
    app = FastAPI(
        title="Time Tracker API",
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "auth", "description": "Sessions, password recovery, email verification"},
            {"name": "users", "description": "Profile of the authenticated user"},
            {"name": "time-entries", "description": "Time entries and running timer"},
        ],
    )

    # R: Add request context middleware
    app.add_middleware(RequestContextMiddleware)

    # R: Configure CORS (credentials off unless explicitly enabled)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins_list(),
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-Id"],
        expose_headers=["X-Request-Id"],
    )

    app.include_router(auth_router)
    app.include_router(router)

    # R: Register exception handlers for structured error responses
    register_exception_handlers(app)

    # R: Health check endpoint for monitoring/orchestration
    @app.get("/healthz")
    def healthz(request: Request):
        """
        Returns:
            ok: True if all checked systems operational
            db: "connected", "disconnected" or "skipped" (APP_ENV=test)
            request_id: Correlation ID for this request
        """
        db_status = "skipped" if get_settings().is_test() else _check_database()
        return {
            "ok": db_status != "disconnected",
            "db": db_status,
            "request_id": getattr(request.state, "request_id", None),
        }

    # R: Prometheus metrics endpoint
    @app.get("/metrics", include_in_schema=False)
    def metrics():
        body, content_type = get_metrics_response()
        return Response(content=body, media_type=content_type)

    return app


app = create_app()
