import asyncio
import os

os.environ.setdefault("MISTRAL_API_KEY", "test-key")

import pytest

from rehearsal.core.gateway import QuestionGateway
from rehearsal.core.intake import ResumeFile
from rehearsal.core.models import Question
from rehearsal.core.scoring import ScoringEngine
from rehearsal.core.session import Session
from rehearsal.core.use_case import InterviewUseCase
from rehearsal.storages.report_storage import InMemoryReportStore
from rehearsal.storages.session_storage import SessionStorage
from rehearsal.utils.logger import InterviewLogger

DEFAULT_QUESTIONS = [
    "Describe a production incident you resolved.",
    "How do you design for idempotence?",
]
DEFAULT_SCORES = {"confidence": 70, "correctness": 65, "depthOfKnowledge": 60, "roleFit": 75}
PDF_BYTES = b"%PDF-1.4\n1 0 obj << /Type /Catalog >> endobj\n%%EOF"
RESUME_URI = "data:application/pdf;base64,JVBERi0xLjQ="


class FakeCompletionService:
    """Stands in for the Mistral-backed engine."""

    def __init__(self, questions=None, scores=None):
        self.questions = list(DEFAULT_QUESTIONS) if questions is None else questions
        self.scores = dict(DEFAULT_SCORES) if scores is None else scores
        self.generate_error: Exception | None = None
        self.evaluate_error: Exception | None = None
        self.generate_delay = 0.0
        self.evaluate_delay = 0.0
        self.generate_calls = []
        self.evaluate_calls = []

    async def generate(self, role, company, resume_content):
        self.generate_calls.append((role, company, resume_content))
        if self.generate_delay:
            await asyncio.sleep(self.generate_delay)
        if self.generate_error is not None:
            raise self.generate_error
        return self.questions

    async def evaluate(self, transcript):
        self.evaluate_calls.append(transcript)
        if self.evaluate_delay:
            await asyncio.sleep(self.evaluate_delay)
        if self.evaluate_error is not None:
            raise self.evaluate_error
        return self.scores


@pytest.fixture
def interview_logger(tmp_path):
    return InterviewLogger(str(tmp_path / "logs"))


@pytest.fixture
def service():
    return FakeCompletionService()


@pytest.fixture
def use_case(service, interview_logger):
    return InterviewUseCase(
        QuestionGateway(service, interview_logger, timeout_s=2.0),
        ScoringEngine(service, interview_logger, timeout_s=2.0),
        SessionStorage(),
        InMemoryReportStore(),
        interview_logger,
    )


@pytest.fixture
def pdf_resume():
    return ResumeFile(content=PDF_BYTES, declared_type="application/pdf", size=len(PDF_BYTES), filename="cv.pdf")


def make_questions(*texts):
    return [Question(id=f"q{index}", text=text) for index, text in enumerate(texts, start=1)]


def session_in_progress(*texts, role="Backend Engineer", company="Acme"):
    session = Session()
    session.configure(role=role, company=company, resume_content=RESUME_URI)
    epoch = session.begin_generation()
    session.accept_questions(make_questions(*(texts or DEFAULT_QUESTIONS)), epoch)
    return session
