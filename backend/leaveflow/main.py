import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError

from leaveflow.core.config import settings
from leaveflow.core.exceptions import (
    ConflictError,
    DependencyError,
    LeaveFlowError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from leaveflow.core.logging import configure_logging
from leaveflow.services.channels.email import email_service

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[LeaveFlowError], int] = {
    ValidationError: 422,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    DependencyError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info(
        "%s starting (email provider: %s, approval policy: %s)",
        settings.APP_NAME,
        email_service.provider or "not configured",
        settings.APPROVAL_POLICY,
    )
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LeaveFlowError)
async def leaveflow_error_handler(request: Request, exc: LeaveFlowError):
    status_code = next(
        (code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    if status_code >= 500:
        logger.error("%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.error_code, "detail": exc.message, "details": exc.details},
    )


@app.exception_handler(OperationalError)
@app.exception_handler(InterfaceError)
async def storage_error_handler(request: Request, exc: Exception):
    logger.error("Storage unavailable on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "error": DependencyError.__name__,
            "detail": "Leave storage is unavailable, please retry",
            "details": {},
        },
    )


# ── Routers ───────────────────────────────────────────────────────────────────
from leaveflow.api.v1.employees import router as employees_router  # noqa: E402
from leaveflow.api.v1.leave import router as leave_router  # noqa: E402

app.include_router(employees_router, prefix="/api/v1")
app.include_router(leave_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "email": email_service.provider or "not configured",
    }
