"""
Chrome Rendering Service - FastAPI Application.

A microservice that turns raw HTML into PDF documents or PNG screenshots by
driving a Chromium engine over the DevTools protocol, with an optional
PDF/A conversion step.

Usage:
    Direct: chrome-service  (or python -m chrome_service)
    Docker: uvicorn chrome_service.main:app --host 0.0.0.0 --port 8080
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .models import ErrorResponse
from .services.engine import chrome_engine
from .api.v1.routers import render as render_router
from .api.v1.routers import system as system_router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("chrome_service.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - connect to and release the engine."""
    # Startup
    logger.info(f"Starting Chrome service on port {settings.port}")
    try:
        await chrome_engine.initialize()
    except Exception as e:
        # Sessions reconnect lazily, so the service still comes up.
        logger.error(f"Chromium engine unavailable at startup: {e}")
    yield
    # Shutdown
    logger.info("Shutting down Chrome service")
    await chrome_engine.shutdown()


app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    debug=settings.debug,
    openapi_url="/v1/openapi.json",
    docs_url="/v1/docs",
    redoc_url="/v1/redoc",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_credentials,
    allow_methods=settings.cors_methods,
    allow_headers=settings.cors_headers,
)


# ============================================================================
# ERROR HANDLERS
# ============================================================================


def _format_validation_errors(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages) or "invalid request"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed or incomplete request bodies are client errors (400)."""
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error=_format_validation_errors(exc)).model_dump(),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail)).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything unhandled becomes a 500 with a JSON error body."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error=f"Internal error: {exc}").model_dump(),
    )


# Include routers
app.include_router(system_router.router, prefix="/v1")
app.include_router(render_router.router, prefix="/v1")

# Root-level health check for Docker healthcheck
app.include_router(system_router.router, prefix="")


def run() -> None:
    """Serve the application on the configured host and port."""
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port, log_level="debug" if settings.debug else "info")


if __name__ == "__main__":
    run()
