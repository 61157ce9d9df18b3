from fastapi import Header

from rehearsal.config.settings import settings
from rehearsal.core.engine import CompletionEngine
from rehearsal.core.gateway import QuestionGateway
from rehearsal.core.scoring import ScoringEngine
from rehearsal.core.use_case import InterviewUseCase
from rehearsal.storages.report_storage import InMemoryReportStore
from rehearsal.storages.session_storage import SessionStorage
from rehearsal.utils.logger import InterviewLogger

_engine: CompletionEngine | None = None
_logger: InterviewLogger | None = None
_storage: SessionStorage | None = None
_reports: InMemoryReportStore | None = None
_use_case: InterviewUseCase | None = None


def get_engine() -> CompletionEngine:
    global _engine
    if _engine is None:
        _engine = CompletionEngine()
    return _engine


def get_logger() -> InterviewLogger:
    global _logger
    if _logger is None:
        _logger = InterviewLogger(settings.LOG_DIR)
    return _logger


def get_storage() -> SessionStorage:
    global _storage
    if _storage is None:
        _storage = SessionStorage()
    return _storage


def get_report_store() -> InMemoryReportStore:
    global _reports
    if _reports is None:
        _reports = InMemoryReportStore()
    return _reports


def get_use_case() -> InterviewUseCase:
    global _use_case
    if _use_case is None:
        engine = get_engine()
        logger = get_logger()
        _use_case = InterviewUseCase(
            QuestionGateway(engine, logger),
            ScoringEngine(engine, logger),
            get_storage(),
            get_report_store(),
            logger,
        )
    return _use_case


def get_current_user_id(x_user_id: str | None = Header(default=None)) -> str | None:
    if x_user_id is None or not x_user_id.strip():
        return None
    return x_user_id.strip()
