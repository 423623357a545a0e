"""FastAPI application entrypoint. No business logic; only wiring, middleware and error mapping."""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1 import router as api_router
from app.core.config import settings
from app.core.exceptions import AuthenticationError, ConfigurationError, CRMError
from app.core.logging_config import configure_logging
from app.schemas.health import ErrorResponse

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="CRM API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [o for o in [settings.CLIENT_URL] if o],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(api_router, prefix=settings.API_PREFIX)


@app.exception_handler(CRMError)
async def crm_error_handler(request: Request, exc: CRMError) -> JSONResponse:
    """Serialize service errors as {error, message, details} with the error's status code."""
    if isinstance(exc, ConfigurationError):
        logger.critical(
            "Configuration error on %s %s: %s",
            request.method,
            request.url.path,
            exc.message,
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="internal_error", message="Internal server error").model_dump(),
        )
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 422 with the failing fields when request body or params fail validation."""
    errors = {
        ".".join(str(p) for p in err.get("loc", ()) if p != "body"): err.get("msg", "")
        for err in exc.errors()
    }
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(
            error="VALIDATION_ERROR", message="Validation Error", details=errors
        ).model_dump(),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all: log the traceback server-side, return a generic 500."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error="internal_error", message="Internal server error").model_dump(),
    )


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "CRM API"}
