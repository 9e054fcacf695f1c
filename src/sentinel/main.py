"""
Sentinel - UPI Fraud Awareness Risk Core

FastAPI application entry point.
"""

import argparse
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from sentinel import __version__
from sentinel.config import settings
from sentinel.risk import (
    InvalidArgumentError,
    RiskPipeline,
    default_reference_data,
    load_reference_data,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Level reported when a payment could not be scored
UNSCORED_LEVEL = "unknown"


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject oversized request bodies before they are parsed."""

    async def dispatch(self, request: Request, call_next) -> Response:
        content_length = request.headers.get("content-length")
        if content_length:
            try:
                if int(content_length) > settings.max_body_size:
                    return JSONResponse(
                        status_code=413,
                        content={
                            "error": "Request entity too large",
                            "message": f"Request body exceeds maximum size of {settings.max_body_size // 1024}KB",
                            "max_size_bytes": settings.max_body_size,
                        },
                    )
            except ValueError:
                pass

        return await call_next(request)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        if settings.is_production:
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )

        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log requests and their timings."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.time()
        request_id = request.headers.get("X-Request-ID", f"req_{int(time.time() * 1000)}")

        logger.info(
            f"Request: {request.method} {request.url.path} "
            f"[{request_id}] from {request.client.host if request.client else 'unknown'}"
        )

        response = await call_next(request)

        process_time = time.time() - start_time
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(process_time)

        logger.info(
            f"Response: {request.method} {request.url.path} "
            f"[{request_id}] status={response.status_code} time={process_time:.3f}s"
        )

        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the shared risk pipeline at startup."""
    logger.info("Starting Sentinel risk service...")

    if settings.reference_data_path:
        reference = load_reference_data(settings.reference_data_path)
    else:
        reference = default_reference_data()
        logger.info("Using built-in reference data")

    app.state.pipeline = RiskPipeline(reference=reference, timezone=settings.timezone)

    logger.info("Sentinel risk service started successfully")

    yield

    logger.info("Sentinel risk service shutdown complete")


app = FastAPI(
    title="Sentinel",
    description="Rule-based fraud risk scoring for UPI payee identifiers",
    version=__version__,
    lifespan=lifespan,
    # Disable docs in production
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
    openapi_url="/openapi.json" if not settings.is_production else None,
)

app.add_middleware(RequestSizeLimitMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-ID"],
    expose_headers=["X-Request-ID", "X-Process-Time"],
    max_age=600,
)


@app.exception_handler(InvalidArgumentError)
async def invalid_argument_handler(request: Request, exc: InvalidArgumentError) -> JSONResponse:
    """Report mis-invocations as unscored, never as safe."""
    logger.warning(f"Rejected evaluation request: {exc}")
    return JSONResponse(
        status_code=422,
        content={
            "error": "Invalid request",
            "message": str(exc),
            "level": UNSCORED_LEVEL,
        },
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Schema violations are unscored as well."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "Invalid request",
            "message": "Request body failed validation",
            "detail": jsonable_encoder(exc.errors()),
            "level": UNSCORED_LEVEL,
        },
    )


@app.get("/health")
async def health_check(request: Request) -> dict[str, Any]:
    """Health check endpoint."""
    pipeline = getattr(request.app.state, "pipeline", None)
    return {
        "status": "healthy" if pipeline is not None else "starting",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
        "reference": {
            "blacklisted": len(pipeline.reference.blacklist) if pipeline else 0,
            "trusted": len(pipeline.reference.trusted) if pipeline else 0,
        },
    }


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with API information."""
    return {
        "name": "Sentinel",
        "description": "UPI fraud risk scoring",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions securely."""
    logger.exception(f"Unhandled exception: {exc}")

    if settings.is_production:
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred. Please contact support.",
                "level": UNSCORED_LEVEL,
            },
        )

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": str(exc),
            "type": type(exc).__name__,
            "level": UNSCORED_LEVEL,
        },
    )


from sentinel.api.routes import risk_router  # noqa: E402

app.include_router(risk_router, prefix="/api/v1")


def run():
    """Run the API with uvicorn."""
    parser = argparse.ArgumentParser(description="Sentinel risk scoring API")
    parser.add_argument("--host", default="127.0.0.1", help="Bind host (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    parser.add_argument("--reload", action="store_true", help="Enable hot reload for development")
    args = parser.parse_args()

    uvicorn.run(
        "sentinel.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
