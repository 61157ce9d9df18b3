from rehearsal.api.schemas.interview import (
    AnswerRequest,
    FinishResponse,
    ReportListResponse,
    ReportResponse,
    TimeoutRequest,
)

__all__ = [
    "AnswerRequest",
    "FinishResponse",
    "ReportListResponse",
    "ReportResponse",
    "TimeoutRequest"
]
