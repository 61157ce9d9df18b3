from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from rehearsal.core.models import Report, SessionSnapshot


class AnswerRequest(BaseModel):
    question_id: str
    text: str = ""


class TimeoutRequest(BaseModel):
    timeout_s: float | None = Field(default=None, gt=0)


class ReportResponse(BaseModel):
    id: str | None
    role: str
    company: str
    confidence: int
    correctness: int
    depth_of_knowledge: int
    role_fit: int
    created_at: datetime

    @classmethod
    def from_report(cls, report: Report) -> "ReportResponse":
        return cls(
            id=report.id,
            role=report.role,
            company=report.company,
            confidence=report.scores.confidence,
            correctness=report.scores.correctness,
            depth_of_knowledge=report.scores.depth_of_knowledge,
            role_fit=report.scores.role_fit,
            created_at=report.created_at,
        )


class FinishResponse(BaseModel):
    session: SessionSnapshot
    report: ReportResponse | None = None


class ReportListResponse(BaseModel):
    reports: List[ReportResponse] = []
