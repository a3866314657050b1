"""
Lexi Simplify FastAPI Application

Upload a legal document, extract its text with Google Cloud Vision, have
Gemini explain it in plain language, and keep the results per user.
"""

# Load environment variables FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from loguru import logger
import uvicorn

from . import __version__
from .clients import build_client_bundle
from .config import settings
from .exceptions import LexiError
from .models.requests import ErrorResponse
from .routers import health_router, analysis_router, history_router


# Application lifespan management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager for startup and shutdown events
    """
    # Startup
    logger.info("Starting Lexi Simplify API...")

    if getattr(app.state, "clients", None) is None:
        try:
            app.state.clients = build_client_bundle(settings)
            await app.state.clients.history.ensure_indexes()
            logger.info("🎯 API is ready to process requests!")
        except Exception as e:
            app.state.clients = None
            logger.error(f"Failed to initialize services: {e}")
            # Continue startup; requests needing clients fail with 500 until fixed

    yield

    # Shutdown
    logger.info("Shutting down Lexi Simplify API...")

    clients = getattr(app.state, "clients", None)
    if clients is not None:
        try:
            clients.close()
        except Exception as e:
            logger.error(f"Error during shutdown: {e}")


# Create FastAPI application
app = FastAPI(
    title="Lexi Simplify API",
    description="""
    Plain-language analysis of legal documents.

    ## Features

    * **Document Analysis**: Upload a PDF or image; text is extracted with Google Cloud Vision OCR
    * **AI-Powered Insights**: Gemini produces a category, summary, risks and a jargon glossary
    * **Translation**: Summary and risks translated into the language of your choice
    * **Follow-up Q&A**: Ask questions answered strictly from the summary
    * **History**: Saved analyses per signed-in user, with PDF export

    ## Authentication

    History endpoints require a Firebase ID token: `Authorization: Bearer <token>`.
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.state.clients = None

# Configure logging
logger.add(
    "logs/api.log",
    rotation="1 day",
    retention="30 days",
    level=settings.log_level,
    format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function}:{line} | {message}"
)

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request ID middleware
@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add unique request ID to each request for tracking"""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()

    # Add request ID to logger context
    with logger.contextualize(request_id=request_id):
        logger.info(f"Request started: {request.method} {request.url.path}")

        response = await call_next(request)

        process_time = time.time() - start_time
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(process_time)

        logger.info(
            f"Request completed: {request.method} {request.url.path} "
            f"(status: {response.status_code}, time: {process_time:.3f}s)"
        )

    return response


def _error_response(request: Request, status_code: int, message: str) -> JSONResponse:
    error_response = ErrorResponse(
        error=message,
        timestamp=datetime.now(timezone.utc),
        request_id=getattr(request.state, 'request_id', None)
    )
    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode='json')
    )


# Exception handlers
@app.exception_handler(LexiError)
async def lexi_exception_handler(request: Request, exc: LexiError):
    """Render domain errors with their static user-facing message"""
    if exc.status_code >= 500:
        logger.error(f"{exc.__class__.__name__}: {exc.detail or exc.message}")
    else:
        logger.warning(f"{exc.__class__.__name__} ({exc.status_code}): {exc.detail or exc.message}")

    return _error_response(request, exc.status_code, exc.message)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with consistent error format"""
    logger.warning(f"HTTP Exception: {exc.status_code} - {exc.detail}")
    return _error_response(request, exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors"""
    error_details = [
        f"{' -> '.join(str(x) for x in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]
    logger.warning(f"Validation Error: {error_details}")
    return _error_response(request, 400, "Invalid request.")


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions"""
    logger.opt(exception=exc).error(f"Unexpected error: {exc}")
    return _error_response(request, 500, "An unexpected error occurred")


# Include routers
app.include_router(health_router)
app.include_router(analysis_router)
app.include_router(history_router)


# Root endpoint
@app.get("/", tags=["root"])
async def root():
    """
    Root endpoint with API information
    """
    return {
        "name": "Lexi Simplify API",
        "version": __version__,
        "description": "AI-powered plain-language analysis of legal documents",
        "docs_url": "/docs",
        "health_check": "/health",
        "endpoints": {
            "analyze": "/analyze",
            "ask": "/ask",
            "history": "/history",
            "clear_history": "/history/clear",
            "export": "/history/{record_id}/export"
        },
        "supported_formats": {
            "input": ["PDF documents", "TIFF/GIF files", "PNG/JPEG images"],
            "output": ["JSON analysis", "PDF report"]
        }
    }


# Development server
if __name__ == "__main__":
    uvicorn.run(
        "lexi_simplify.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug_mode,
        log_level=settings.log_level.lower(),
        access_log=True
    )
