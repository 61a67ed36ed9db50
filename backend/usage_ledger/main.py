import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from usage_ledger import models  # noqa: F401  (register tables on Base.metadata)
from usage_ledger.core.config import settings
from usage_ledger.core.database import Database
from usage_ledger.core.exception_handlers import register_exception_handlers
from usage_ledger.routers import customers, usage
from usage_ledger.schemas.base import ApiResponse, MessageResponse

logger = logging.getLogger(__name__)

OPENAPI_TAGS = [
    {"name": "Health", "description": "Liveness probe."},
    {"name": "Customers", "description": "Create and read customers."},
    {"name": "Usage", "description": "Record idempotent usage events."},
]


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(database: Database | None = None) -> FastAPI:
    """Build the API.

    ``database`` is owned by the app: it is disposed when the app shuts down.
    When omitted, one is created from ``APP_DATABASE_DSN``.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        logger.info("Disposing database engine")
        app.state.database.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.version,
        description="Records customer usage for billing, storing each distinct submission once.",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )
    app.state.database = database or Database()

    register_exception_handlers(app)

    app.include_router(customers.router, prefix="/customers", tags=["Customers"])
    app.include_router(usage.router, prefix="/usage", tags=["Usage"])

    @app.get("/", response_model=ApiResponse[MessageResponse], tags=["Health"])
    async def root() -> ApiResponse[MessageResponse]:
        return ApiResponse.success(MessageResponse(message="Billing System API is working!"))

    return app


app = create_app()


def run() -> None:
    """Start the API with uvicorn, creating tables if they do not exist."""
    import uvicorn

    configure_logging()
    app.state.database.create_all()
    logger.info("%s listening on %s:%s", settings.APP_NAME, settings.HOST, settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
