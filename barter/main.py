"""FastAPI application - Barter Trade Engine.

Wires the layers together:
- Domain: Trade, InventoryRecord and Order aggregates
- Application: one handler per command / query
- Infrastructure: SQLAlchemy unit of work, in-process event bus, JWT
- Presentation: REST routes (here) and Celery workers (presentation.workers)

Run with ``uvicorn barter.main:app`` or ``python -m barter.main``.
"""

import asyncio
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from starlette.middleware.base import BaseHTTPMiddleware

from barter import __version__
from barter.config import (
    bind_request_context,
    clear_request_context,
    get_logger,
    get_settings,
    setup_logging,
)
from barter.infrastructure.persistence.sqlalchemy import Base
from barter.presentation.api import dependencies
from barter.presentation.api.errors import register_exception_handlers
from barter.presentation.api.v1.routes import (
    health_router,
    orders_router,
    products_router,
    trades_router,
)

settings = get_settings()

setup_logging()
logger = get_logger(__name__)


# ============================================================================
# LIFESPAN
# ============================================================================


def _engine_options() -> dict:
    options = {"echo": settings.db_echo, "pool_pre_ping": True}
    # SQLite (local runs) has no connection pool to size
    if not settings.database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
        )
    return options


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database engine for the lifetime of the process.

    Outside production the schema is created directly; production databases
    are migrated with Alembic before the API starts.
    """
    engine = create_async_engine(settings.database_url, **_engine_options())

    if not settings.is_production:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("application.database.tables_created")

    dependencies.init_dependencies(
        session_factory=async_sessionmaker(engine, expire_on_commit=False),
    )
    logger.info("application.startup.completed", environment=settings.environment)

    yield

    await engine.dispose()
    logger.info("application.shutdown.completed")


app = FastAPI(
    title=settings.app_name,
    description=(
        "Trade lifecycle and fulfillment engine for a peer-to-peer barter marketplace: "
        "negotiation with a fairness ratio, shipping with dual delivery confirmation, "
        "exactly-once inventory materialization with provenance, and seller-side "
        "order fulfillment."
    ),
    version=__version__,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan,
)


# ============================================================================
# MIDDLEWARE
# ============================================================================


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind X-Request-ID (generated when absent) to every log line."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        bind_request_context(
            request_id=request_id,
            path=request.url.path,
            method=request.method,
        )
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_request_context()


class TimeoutMiddleware(BaseHTTPMiddleware):
    """Answer 504 when a request runs longer than ``timeout`` seconds.

    Use cases commit in one transaction, so an abandoned request leaves
    nothing half-written.
    """

    def __init__(self, app, timeout: float) -> None:
        super().__init__(app)
        self.timeout = timeout

    async def dispatch(self, request: Request, call_next):
        try:
            return await asyncio.wait_for(call_next(request), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "api.request_timeout",
                path=request.url.path,
                timeout_seconds=self.timeout,
            )
            return JSONResponse(
                status_code=status.HTTP_504_GATEWAY_TIMEOUT,
                content={
                    "success": False,
                    "error": "RequestTimeout",
                    "message": "The request took too long. Re-fetch before retrying.",
                },
            )


# Last added runs first
app.add_middleware(TimeoutMiddleware, timeout=settings.request_timeout_seconds)
app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(health_router)
app.include_router(trades_router, prefix="/api")
app.include_router(products_router, prefix="/api")
app.include_router(orders_router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("barter.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
