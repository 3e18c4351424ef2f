"""
FastAPI application entry point.

Sets up the application with:
- Lifespan management (startup/shutdown of the record store)
- Route registration
- Middleware configuration
- Static mounts for uploads and the public site
- Error handling
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.routes import (
    customers_router,
    health_router,
    orders_router,
    products_router,
    statistics_router,
)
from api.schemas import ErrorResponse
from core.config import Settings, get_settings
from core.errors import AppError
from core.logging import configure_logging, get_logger
from core.storage import BaseRecordStore, create_record_store
from core.uploads import LocalUploadStorage
from services import CustomerService, OrderService


logger = get_logger(__name__)

# Collections listed newest first get a descending index on their timestamp
TIMESTAMP_INDEXES = {
    CustomerService.COLLECTION_NAME: CustomerService.TIMESTAMP_FIELD,
    OrderService.COLLECTION_NAME: OrderService.TIMESTAMP_FIELD,
}

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Malformed input"},
    404: {"model": ErrorResponse, "description": "Unknown record"},
    500: {"model": ErrorResponse, "description": "Store or internal failure"},
}


def error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=headers,
    )


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        message = error.get("msg", "Invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan.

    Startup: create (unless injected) and set up the record store, prepare
    the upload directory.
    Shutdown: close the record store if this lifespan created it.
    """
    settings: Settings = app.state.settings
    configure_logging(settings)

    logger.info(
        "Starting store API...",
        storage_backend=settings.storage_backend,
    )

    store: Optional[BaseRecordStore] = app.state.injected_store
    owns_store = store is None
    if store is None:
        store = create_record_store(settings, indexes=TIMESTAMP_INDEXES)
    await store.setup()

    uploads = LocalUploadStorage(settings.upload_dir)
    uploads.setup()

    app.state.store = store
    app.state.uploads = uploads

    logger.info(
        "Store API started",
        host=settings.server_host,
        port=settings.server_port,
        upload_dir=str(uploads.directory),
    )

    yield

    logger.info("Shutting down store API...")

    if owns_store:
        await store.close()
    app.state.store = None

    logger.info("Store API stopped")


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Render every failure as ``{"success": false, "error": ...}``."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        log = logger.error if exc.status_code >= 500 else logger.info
        log(
            "Request failed",
            path=request.url.path,
            method=request.method,
            status_code=exc.status_code,
            error=exc.message,
        )
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message = _validation_message(exc)
        logger.info(
            "Invalid request",
            path=request.url.path,
            method=request.method,
            error=message,
        )
        return error_response(400, message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail), headers=exc.headers)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=True,
        )
        return error_response(
            500,
            str(exc) if settings.debug else "Internal server error",
        )


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[BaseRecordStore] = None,
) -> FastAPI:
    """
    Application factory.

    Args:
        settings: Settings to use instead of the environment
        store: Record store to use instead of creating one from settings.
            An injected store is set up but not closed by the app.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Loja API",
        description=(
            "Customers, products and orders for a small store.\n\n"
            "Records live in a document database; product images on local disk."
        ),
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.injected_store = store
    app.state.store = None
    app.state.uploads = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    for router in (customers_router, products_router, orders_router, statistics_router):
        app.include_router(router, responses=ERROR_RESPONSES)

    # The upload directory is created by the lifespan
    app.mount(
        LocalUploadStorage.URL_PREFIX,
        StaticFiles(directory=settings.upload_dir, check_dir=False),
        name="uploads",
    )

    # Mounted last so it never shadows the API routes
    if Path(settings.public_dir).is_dir():
        app.mount(
            "/",
            StaticFiles(directory=settings.public_dir, html=True),
            name="public",
        )

    register_exception_handlers(app, settings)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "api.server:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.debug and settings.is_development,
    )
