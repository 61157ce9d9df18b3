import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from rehearsal.system.exceptions.base_exception import BaseHTTPException
from rehearsal.system.exceptions.interview_exception import (
    GenerationError,
    InterviewError,
    PreconditionError,
    ScoringError,
    SessionNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


async def common_exception_handler(request: Request, exc: BaseHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "path": str(request.url)}
    )


def status_for(exc: InterviewError) -> int:
    if isinstance(exc, SessionNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ValidationError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(exc, PreconditionError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, (GenerationError, ScoringError)):
        if exc.retryable:
            return status.HTTP_503_SERVICE_UNAVAILABLE
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_400_BAD_REQUEST


async def interview_exception_handler(request: Request, exc: InterviewError) -> JSONResponse:
    status_code = status_for(exc)
    logger.info(f"{exc.kind} on {request.url.path}: {exc.message} (retryable={exc.retryable})")
    content = {
        "detail": exc.message,
        "error": exc.kind,
        "retryable": exc.retryable,
        "session_id": exc.session_id,
        "path": str(request.url),
    }
    if isinstance(exc, ValidationError):
        content["field"] = exc.field
    return JSONResponse(status_code=status_code, content=content)
