from datetime import datetime
from enum import Enum
from typing import Dict, Iterator, List, Tuple

from pydantic import BaseModel, ConfigDict, Field


class SessionState(str, Enum):
    CONFIGURING = "configuring"
    AWAITING_QUESTIONS = "awaiting_questions"
    IN_PROGRESS = "in_progress"
    AWAITING_SCORING = "awaiting_scoring"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.COMPLETED, SessionState.FAILED)


class SessionConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: str
    company: str
    resume_content: str = Field(repr=False)


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    text: str


class Answer(BaseModel):
    model_config = ConfigDict(frozen=True)

    question_id: str
    text: str


class TranscriptEntry(BaseModel):
    """A question paired with its answer, or ``answer=None`` when unanswered."""

    model_config = ConfigDict(frozen=True)

    question: Question
    answer: Answer | None = None

    @property
    def is_answered(self) -> bool:
        return self.answer is not None


class Transcript(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: str
    company: str
    entries: Tuple[TranscriptEntry, ...]

    def __iter__(self) -> Iterator[TranscriptEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def answered_count(self) -> int:
        return sum(1 for entry in self.entries if entry.is_answered)


class ScoreSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    confidence: int
    correctness: int
    depth_of_knowledge: int
    role_fit: int


class Report(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str | None = None
    user_id: str
    role: str
    company: str
    scores: ScoreSet
    created_at: datetime


class ErrorInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    error: str
    message: str
    retryable: bool


class SessionSnapshot(BaseModel):
    """Read-only view of a session for the presentation layer."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    state: SessionState
    attempt: int
    role: str | None = None
    company: str | None = None
    questions: List[Question] = Field(default_factory=list)
    answers: Dict[str, str] = Field(default_factory=dict)
    answered_count: int = 0
    total_questions: int = 0
    next_question_id: str | None = None
    scores: ScoreSet | None = None
    error: ErrorInfo | None = None
    retried_as: str | None = None
