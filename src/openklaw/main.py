"""
FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from openklaw import __version__
from openklaw.api.deps import container
from openklaw.api.v1 import health, models, reports
from openklaw.core.config import settings
from openklaw.core.constants import API_PREFIX
from openklaw.core.exceptions import OpenKlawError
from openklaw.core.logging import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info(
        "Starting OpenKlaw",
        app_name=settings.app_name,
        env=settings.app_env,
        ollama_url=settings.ollama.base_url,
    )

    container.initialize()
    logger.info(
        "Service container initialized",
        templates=len(container.template_registry.list_templates()),
    )

    yield

    logger.info("Shutting down OpenKlaw")
    await container.close()


app = FastAPI(
    title="OpenKlaw Report API",
    description="Template-driven business report generation on a local model",
    version=__version__,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan,
)


@app.exception_handler(OpenKlawError)
async def openklaw_error_handler(
    request: Request,
    exc: OpenKlawError,
) -> JSONResponse:
    """Handle application errors."""
    logger.error(
        "Application error",
        error_code=exc.code,
        error_message=exc.message,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle unexpected errors."""
    logger.exception(
        "Unexpected error",
        error=str(exc),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
            }
        },
    )


app.include_router(health.router, prefix=API_PREFIX, tags=["Health"])
app.include_router(reports.router, prefix=API_PREFIX, tags=["Reports"])
app.include_router(models.router, prefix=API_PREFIX, tags=["Models"])


@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs" if settings.debug else "Disabled in production",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "openklaw.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
    )
