"""
FastAPI application factory and main app configuration.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .adapters.db.mongo.client import connect_database
from .adapters.db.mongo.seed import seed_demo_patients, seed_symptom_vocabulary
from .api.errors import APIError
from .api.routers import auth, check_in, health, patients, reports
from .api.schemas.common import ErrorResponse
from .core.config import get_settings
from .core.exceptions import (
    ConfigurationError,
    ExternalServiceError,
    IdentityProviderError,
    StoreError,
)
from .core.structured_logger import configure_logging
from .domain.errors import DomainError
from .middleware.performance_middleware import PerformanceMiddleware
from .middleware.request_id_middleware import RequestIDMiddleware

logger = logging.getLogger("clinicintake")

DOMAIN_ERROR_STATUS = {
    "VALIDATION_ERROR": 422,
    "PATIENT_NOT_FOUND": 404,
    "INVALID_TRANSITION": 409,
    "SPEECH_UNAVAILABLE": 503,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    configure_logging(settings.logging)
    logger.info(f"Starting Clinic-Intake v{settings.app_version} ({settings.app_env})")

    app.state.database = None
    try:
        database = await connect_database(settings.database)
        app.state.database = database
        if settings.checkin.seed_demo_data:
            await seed_demo_patients()
            await seed_symptom_vocabulary()
    except Exception as e:
        # The service still starts; readiness reports the database as down.
        logger.error(f"Database connection failed: {type(e).__name__}: {e}", exc_info=True)

    if settings.file_storage.storage_type == "azure":
        from .api.deps import get_report_storage

        try:
            await get_report_storage().ensure_container_exists()
        except StoreError as e:
            logger.error(f"Report container check failed: {e.message}", exc_info=True)

    yield

    if app.state.database is not None:
        app.state.database.client.close()
    logger.info("Clinic-Intake shutdown complete")


def _error_body(request: Request, error: str, message: str, details: dict = None) -> dict:
    req_id = getattr(request.state, "request_id", None)
    return ErrorResponse(
        error=error,
        message=message,
        request_id=req_id or "",
        details=details or {},
    ).model_dump(mode="json")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Clinic-Intake Check-in Service",
        description="Patient check-in: registration, returning-patient lookup, symptom analysis and reports",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID", "Accept", "Origin"],
        max_age=600,
        expose_headers=["X-Request-ID", "X-Process-Time"],
    )
    app.add_middleware(PerformanceMiddleware)
    # Added last so it runs first and every other layer sees the request id.
    app.add_middleware(RequestIDMiddleware)

    app.include_router(health.router)
    app.include_router(patients.router)
    app.include_router(check_in.router)
    app.include_router(reports.router)
    app.include_router(auth.router)

    @app.get("/", tags=["health"])
    async def root():
        """Root endpoint with API information."""
        return {
            "service": "Clinic-Intake Check-in Service",
            "version": settings.app_version,
            "environment": settings.app_env,
            "status": "running",
            "docs": "/docs",
            "endpoints": {
                "health": "/health",
                "create_patient": "POST /patients",
                "get_patient": "GET /patients/{patient_id}",
                "start_check_in": "POST /check-in/sessions",
                "register": "POST /check-in/sessions/{session_id}/register",
                "verify": "POST /check-in/sessions/{session_id}/verify",
                "symptoms": "POST /check-in/sessions/{session_id}/symptoms",
                "report": "POST /check-in/sessions/{session_id}/report",
                "dictation": "POST /check-in/sessions/{session_id}/dictation/{target}",
                "download_report": "GET /reports/{key}",
                "sign_in": "POST /auth/sign-in",
            },
        }

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        logger.warning(f"APIError: {exc.code} ({exc.http_status}) {exc.message}")
        return JSONResponse(
            status_code=exc.http_status,
            content=_error_body(request, exc.code, exc.message, exc.details),
        )

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        code = exc.error_code or "DOMAIN_ERROR"
        return JSONResponse(
            status_code=DOMAIN_ERROR_STATUS.get(code, 400),
            content=_error_body(request, code, exc.message, exc.details),
        )

    @app.exception_handler(IdentityProviderError)
    async def identity_error_handler(request: Request, exc: IdentityProviderError):
        return JSONResponse(
            status_code=exc.status,
            content=_error_body(request, exc.error_code, exc.message, exc.details),
        )

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.error(f"StoreError: {exc.message}", exc_info=exc)
        return JSONResponse(
            status_code=502,
            content=_error_body(request, exc.error_code, "The patient store is unavailable. Please try again."),
        )

    @app.exception_handler(ExternalServiceError)
    async def external_error_handler(request: Request, exc: ExternalServiceError):
        logger.error(f"ExternalServiceError: {exc.message}", exc_info=exc)
        return JSONResponse(
            status_code=502,
            content=_error_body(request, exc.error_code, f"{exc.service} is unavailable. Please try again."),
        )

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        logger.error(f"ConfigurationError: {exc.message}")
        return JSONResponse(
            status_code=503,
            content=_error_body(request, exc.error_code, exc.message),
        )

    @app.exception_handler(RequestValidationError)
    async def pydantic_error_handler(request: Request, exc: RequestValidationError):
        error_details = exc.errors()
        logger.warning(f"ValidationError on {request.method} {request.url.path}: {error_details}")

        error_messages = []
        for error in error_details:
            loc = " -> ".join(str(x) for x in error.get("loc", []))
            msg = error.get("msg", "Validation error")
            error_messages.append(f"{loc}: {msg}")

        return JSONResponse(
            status_code=422,
            content=_error_body(
                request,
                "INVALID_INPUT",
                f"Input validation failed: {'; '.join(error_messages)}",
                {"errors": error_messages, "path": request.url.path},
            ),
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error: {type(exc).__name__}: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                request,
                "INTERNAL_ERROR",
                "An unexpected error has occurred. Please try again later.",
            ),
        )

    return app


# Create the app instance
app = create_app()
