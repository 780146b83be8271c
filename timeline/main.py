"""
School Timeline application.

Main application entry point that configures:
- CORS middleware
- API routers
- Database lifecycle
- Logging system
- Exception handlers
- Prometheus metrics
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from timeline.config import DEFAULT_JWT_SECRET, get_settings
from timeline.database import close_db, init_db
from timeline.middlewares.logging_middleware import LoggingMiddleware
from timeline.routers import auth_router, health_router, photos_router, uploads_router
from timeline.utils.logger import get_request_id, log_error, log_info, setup_logging
from timeline.utils.prometheus_metrics import exceptions_total, setup_prometheus

settings = get_settings()
logger = logging.getLogger("timeline")

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Create tables on startup and dispose the engine on shutdown."""
    if settings.is_production and settings.jwt_secret_key == DEFAULT_JWT_SECRET:
        log_error("Startup failed: JWT_SECRET_KEY is not set", event="lifecycle")
        raise RuntimeError("JWT_SECRET_KEY must be set in production")

    await init_db()
    log_info(
        "Application startup completed",
        event="lifecycle",
        version=settings.app_version,
        environment=settings.environment.value,
    )

    yield

    await close_db()
    log_info("Application shutdown completed", event="lifecycle")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
## School Timeline

A shared photo timeline for a school community:

- **Authentication**: registration and JWT bearer tokens
- **Photos**: upload (file or image URL), browse the shared feed, like, delete your own
- **Uploads**: uploaded image files are served from `/uploads/{filename}`

Every `/photos` endpoint requires `Authorization: Bearer <token>` from `/auth/login`.
    """,
    openapi_tags=[
        {"name": "Authentication", "description": "User registration and login"},
        {"name": "Photos", "description": "Shared photo feed"},
        {"name": "Uploads", "description": "Uploaded image files"},
    ],
    lifespan=lifespan,
)

setup_prometheus(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Malformed path parameters and request bodies answer 400, not 422.
    """
    detail = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Unhandled exception handler.

    Logs at ERROR with the traceback and answers 500 with the request id,
    never the exception text.
    """
    exceptions_total.inc()
    rid = get_request_id()

    log_error(
        "Unhandled exception occurred",
        error_type=type(exc).__name__,
        error_message=str(exc),
        http_method=request.method,
        http_path=request.url.path,
        event="exception",
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error",
            "request_id": rid,
        },
    )


app.include_router(health_router)
app.include_router(auth_router)
app.include_router(photos_router)
app.include_router(uploads_router)


@app.get(
    "/",
    tags=["Root"],
    summary="API information",
)
async def root():
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
