"""
FastAPI Application
==================

Main FastAPI application serving the editable page and its htmx fragment
endpoints.
"""

from contextlib import asynccontextmanager
import uuid
from typing import AsyncGenerator, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from pagecraft.config.settings import get_settings
from pagecraft.config.logging import get_logger
from pagecraft.core.rendering.escaping import InvalidInputError
from pagecraft.core.rendering.page_shell import PageShell
from pagecraft.models.schemas import ErrorResponse
from pagecraft.api.dependencies import EditingServices, get_services
from pagecraft.api.routes import editing, health, modules, pending

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("Starting FastAPI application")
    services = get_services()
    logger.info(
        "Editing services ready",
        modules=len(services.store),
        pending_edits=len(services.queue),
    )
    try:
        yield
    finally:
        logger.info("Shutting down FastAPI application")


async def add_request_id(request: Request, call_next):  # type: ignore
    """Add request ID to all requests."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    return response


async def invalid_input_exception_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
    """Reject values that cannot be placed in markup, before any fragment is produced."""
    error_response = ErrorResponse(
        error=str(exc),
        error_code="INVALID_INPUT",
        details={"field": exc.field},
        request_id=getattr(request.state, "request_id", None),
    )

    logger.warning(
        "Invalid input rejected",
        field=exc.field,
        error=str(exc),
        path=request.url.path,
        request_id=error_response.request_id,
    )

    return JSONResponse(status_code=400, content=error_response.model_dump(mode="json"))


async def custom_http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Custom HTTP exception handler with structured error response."""
    error_response = ErrorResponse(
        error=str(exc.detail),
        error_code=str(exc.status_code),
        details=None,
        request_id=getattr(request.state, "request_id", None),
    )

    logger.error(
        "HTTP exception",
        status_code=exc.status_code,
        detail=exc.detail,
        request_id=error_response.request_id,
    )

    return JSONResponse(status_code=exc.status_code, content=error_response.model_dump(mode="json"))


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """General exception handler for unexpected errors."""
    settings = get_settings()
    error_response = ErrorResponse(
        error="Internal server error",
        error_code="INTERNAL_ERROR",
        details={"exception": str(exc)} if settings.debug else None,
        request_id=getattr(request.state, "request_id", None),
    )

    logger.error(
        "Unhandled exception",
        exception=str(exc),
        request_id=error_response.request_id,
        exc_info=True,
    )

    return JSONResponse(status_code=500, content=error_response.model_dump(mode="json"))


async def root(
    user: Optional[str] = None, services: EditingServices = Depends(get_services)
) -> HTMLResponse:
    """Full page document with the editable modules."""
    html = PageShell().render(services.modules.page_view(user).build(), context=services.render_context())
    return HTMLResponse(html)


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title="pagecraft",
        description="Server-rendered editable pages with htmx out-of-band updates",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.enable_docs else None,
        redoc_url="/redoc" if settings.enable_docs else None,
    )

    # Add middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_hosts,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.middleware("http")(add_request_id)

    # Exception handlers
    app.add_exception_handler(InvalidInputError, invalid_input_exception_handler)  # type: ignore
    app.add_exception_handler(StarletteHTTPException, custom_http_exception_handler)  # type: ignore
    app.add_exception_handler(Exception, general_exception_handler)

    app.add_api_route("/", root, methods=["GET"], response_class=HTMLResponse, tags=["Page"])
    app.include_router(editing.router)
    app.include_router(modules.router)
    app.include_router(pending.router)
    app.include_router(health.router)

    return app


app = create_app()


def run_development_server() -> None:
    """Run development server."""
    settings = get_settings()
    uvicorn.run(
        "pagecraft.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    run_development_server()
