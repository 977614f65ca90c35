"""FastAPI main application with app factory and route configuration."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings
from .deps import get_settings
from .routes import tasks
from .schemas import HealthResponse
from .services.task_service import initialize_task_service
from .services.validation import TaskValidationError
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events.

    Args:
        app: FastAPI application instance
    """
    settings: Settings = app.state.settings

    setup_logging(settings)
    logger.info("Starting up task list application")

    try:
        app.state.task_service = initialize_task_service(settings)
        logger.info(f"Task service initialized from {settings.storage_file}")
    except Exception as e:
        logger.error(f"Error during application startup: {str(e)}")
        raise

    yield

    logger.info("Shutting down task list application")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use; read from the environment when omitted

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="Task List",
        description="Create, edit, complete, delete and filter tasks stored locally",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings or get_settings()

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all HTTP requests."""
        logger.info(f"Request: {request.method} {request.url}")

        response = await call_next(request)

        logger.info(
            f"Response: {response.status_code} for {request.method} {request.url}"
        )
        return response

    @app.exception_handler(TaskValidationError)
    async def task_validation_handler(request: Request, exc: TaskValidationError):
        """Report missing task fields as a list of messages."""
        logger.warning(f"Invalid task input for {request.method} {request.url}: {exc.errors}")

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Validation error",
                "errors": exc.errors,
                "status_code": 400,
                "path": str(request.url),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions with proper logging."""
        logger.warning(
            f"HTTP {exc.status_code}: {exc.detail} for {request.method} {request.url}"
        )

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.detail,
                "status_code": exc.status_code,
                "path": str(request.url),
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        """Handle request validation errors with detailed information."""
        logger.warning(
            f"Validation error for {request.method} {request.url}: {exc.errors()}"
        )

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": "Request validation error",
                "details": jsonable_errors(exc),
                "status_code": 422,
                "path": str(request.url),
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions, including storage write failures."""
        logger.error(
            f"Unexpected error for {request.method} {request.url}: {str(exc)}",
            exc_info=True,
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "status_code": 500,
                "path": str(request.url),
            },
        )

    @app.get("/healthz", tags=["health"], response_model=HealthResponse)
    async def health_check(request: Request) -> HealthResponse:
        """Health check endpoint."""
        task_service = getattr(request.app.state, "task_service", None)
        if task_service is None:
            return HealthResponse(status="degraded")
        return HealthResponse(tasks=task_service.get_counts().total)

    @app.get("/", tags=["root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "Task List API",
            "version": "1.0.0",
            "docs_url": "/docs",
            "health_check": "/healthz",
            "endpoints": {
                "tasks": "/tasks",
                "counts": "/tasks/counts",
            },
        }

    app.include_router(tasks.router)

    logger.info("FastAPI application created and configured")

    return app


def jsonable_errors(exc: RequestValidationError) -> list:
    """Strip non-serializable context from request validation errors."""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


# Create the app instance
app = create_app()
