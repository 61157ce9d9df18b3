from rehearsal.system.exceptions.api_exception_handler import (
    common_exception_handler,
    interview_exception_handler,
)
from rehearsal.system.exceptions.base_exception import (
    BaseHTTPException,
    UnauthorizedException,
)
from rehearsal.system.exceptions.interview_exception import (
    GenerationError,
    InterviewError,
    PreconditionError,
    ScoringError,
    SessionAbandonedError,
    SessionNotFoundError,
    ValidationError,
)

__all__ = [
    "BaseHTTPException",
    "UnauthorizedException",
    "common_exception_handler",
    "interview_exception_handler",
    "InterviewError",
    "ValidationError",
    "GenerationError",
    "ScoringError",
    "PreconditionError",
    "SessionAbandonedError",
    "SessionNotFoundError",
]
