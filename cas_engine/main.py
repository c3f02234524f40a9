import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cas_engine.core.logging_config import configure_logging

configure_logging()

from cas_engine.api.v1 import statements
from cas_engine.core.config import settings
from cas_engine.middleware import TraceMiddleware

logger = structlog.get_logger()

_is_production = settings.environment == "production"

app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    docs_url=None if _is_production else f"{settings.api_v1_prefix}/docs",
    redoc_url=None if _is_production else f"{settings.api_v1_prefix}/redoc",
    openapi_url=None if _is_production else f"{settings.api_v1_prefix}/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "X-Trace-Id"],
    expose_headers=["X-Trace-Id"],
    max_age=600,
)
app.add_middleware(TraceMiddleware)

app.include_router(statements.router, prefix=settings.api_v1_prefix)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Missing form fields (e.g. no `pdf` part) come back in the gateway's error shape"""
    logger.warning("validation_error", errors=str(exc.errors()), path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "error_code": "VALIDATION_ERROR",
            "error": "Request validation failed",
            "title": "Invalid Request",
            "help": "Send the statement as a multipart form field named 'pdf'.",
        },
    )


@app.get(f"{settings.api_v1_prefix}/health")
async def health() -> JSONResponse:
    """Health check endpoint"""
    logger.info("healthcheck", status="ok")
    return JSONResponse({"status": "ok", "version": settings.api_version})
