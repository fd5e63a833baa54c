"""Main FastAPI application."""
import logging
import uuid

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from app.core.config import settings
from app.core.exceptions import SurveyNotFoundError
from app.core.limiter import limiter
from app.api import auth, admin_surveys, public_surveys, exports, analytics, users

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Feedback Survey API",
    description="Survey management, response collection and results analytics",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)


def _error_payload(
    request: Request,
    *,
    code: str,
    message: str,
    retriable: bool,
) -> dict:
    return {
        "code": code,
        "message": message,
        "retriable": retriable,
        "request_id": getattr(request.state, "request_id", "unknown"),
    }


def _request_id_header(request: Request) -> dict:
    return {"X-Request-Id": getattr(request.state, "request_id", "unknown")}


@app.middleware("http")
async def request_context(request: Request, call_next):
    request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
    request.state.request_id = request_id

    response = await call_next(request)

    response.headers["X-Request-Id"] = request_id
    return response


@app.exception_handler(SurveyNotFoundError)
async def survey_not_found_handler(request: Request, exc: SurveyNotFoundError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=_error_payload(
            request,
            code="survey_not_found",
            message=str(exc),
            retriable=False,
        ),
        headers=_request_id_header(request),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    detail = exc.detail
    if isinstance(detail, dict):
        code = str(detail.get("code") or f"http_{exc.status_code}")
        message = str(detail.get("message") or "Request failed")
        retriable = bool(
            detail.get("retriable")
            if detail.get("retriable") is not None
            else exc.status_code in {408, 409, 425, 429} or exc.status_code >= 500
        )
    else:
        code = f"http_{exc.status_code}"
        message = str(detail)
        retriable = exc.status_code in {408, 409, 425, 429} or exc.status_code >= 500

    headers = _request_id_header(request)
    if exc.headers:
        headers.update(exc.headers)

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_payload(
            request,
            code=code,
            message=message,
            retriable=retriable,
        ),
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_payload(
            request,
            code="validation_error",
            message="Request validation failed",
            retriable=False,
        ),
        headers=_request_id_header(request),
    )


@app.exception_handler(RateLimitExceeded)
async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=_error_payload(
            request,
            code="rate_limited",
            message="Too many requests",
            retriable=True,
        ),
        headers=_request_id_header(request),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_payload(
            request,
            code="internal_error",
            message="Unexpected server error",
            retriable=True,
        ),
        headers=_request_id_header(request),
    )

# Rate limiter
app.state.limiter = limiter

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "Origin", "X-Requested-With"],
)

# Include routers
app.include_router(auth.router)
app.include_router(admin_surveys.router)
app.include_router(public_surveys.router)
app.include_router(exports.router)
app.include_router(analytics.router)
app.include_router(users.router)


@app.get("/")
def root():
    """Health check endpoint."""
    return {
        "message": "Feedback Survey API",
        "status": "running",
        "environment": settings.ENVIRONMENT
    }


@app.get("/health")
def health():
    """Health check endpoint with real DB connectivity test."""
    from app.core.database import SessionLocal
    from sqlalchemy import text
    from sqlalchemy.exc import SQLAlchemyError

    result = {"status": "healthy", "database": "disconnected"}
    http_status = 200

    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
            result["database"] = "connected"
        finally:
            db.close()
    except SQLAlchemyError as exc:
        result["status"] = "degraded"
        result["database"] = f"error: {str(exc)[:120]}"
        http_status = 503

    return JSONResponse(content=result, status_code=http_status)
