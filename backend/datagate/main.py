"""
Datagate Application Entry Point

FastAPI application main entry, including router registration and exception handlers.
"""

import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRouter
from starlette.exceptions import HTTPException as StarletteHTTPException

from datagate import __version__
from datagate.api import clients_router
from datagate.common.errors import AppError
from datagate.common.responses import ApiResponder
from datagate.config import get_settings
from datagate.db.session import init_db
from datagate.logging_config import setup_logging

logger = logging.getLogger(__name__)

# Initialize logging configuration
setup_logging()


# Application Lifecycle Management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application Lifecycle Management

    Initialize database on startup.
    """
    await init_db()
    yield


# Create FastAPI application
settings = get_settings()

app = FastAPI(
    title=settings.APP_NAME,
    description="Generic repository and JSON envelope service",
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS
# Parse ALLOWED_ORIGINS from comma-separated string to list
allowed_origins_str = settings.ALLOWED_ORIGINS.strip()
if allowed_origins_str:
    allowed_origins = [origin.strip() for origin in allowed_origins_str.split(",") if origin.strip()]
elif settings.DEBUG:
    allowed_origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
else:
    allowed_origins = []

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global Exception Handlers
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """
    Handle application custom exceptions (including ErrorException)

    In production mode, error details are hidden to prevent information leakage.
    """
    settings = get_settings()
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(include_details=settings.DEBUG or exc.status_code == 422),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Render request validation failures as a 422 error envelope"""
    response = ApiResponder().error_unprocessable_entity("Request validation failed")
    logger.info("Request validation failed on %s: %s", request.url.path, exc.errors())
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render framework HTTP errors (unknown route, wrong method) as error envelopes"""
    responder = ApiResponder().set_status_code(exc.status_code)
    codes = {404: responder.CODE_NOT_FOUND, 405: "method_not_allowed"}
    return responder.respond_with_error(str(exc.detail), codes.get(exc.status_code, "http_error"))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """
    Handle uncaught exceptions

    In production mode, stack traces and error details are logged but not returned to clients.
    """
    settings = get_settings()
    logger.error(
        "Uncaught exception: %s\nPath: %s\nTraceback:\n%s",
        str(exc),
        request.url.path,
        traceback.format_exc(),
    )

    if settings.DEBUG:
        return ApiResponder().error_internal_error(str(exc))
    return ApiResponder().error_internal_error("Internal server error")


# Health Check Endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health Check

    Used for service liveness probe.
    """
    return {"status": "healthy"}


# Register API Routers
api_router = APIRouter(prefix="/api")
api_router.include_router(clients_router)
app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "datagate.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
