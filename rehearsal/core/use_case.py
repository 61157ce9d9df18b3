from typing import List

from rehearsal.config.settings import settings
from rehearsal.core.gateway import QuestionGateway
from rehearsal.core.intake import ResumeFile, ingest
from rehearsal.core.models import Report, SessionSnapshot, SessionState
from rehearsal.core.report import assemble
from rehearsal.core.scoring import ScoringEngine
from rehearsal.core.session import Session
from rehearsal.core.validation import validate_timeout
from rehearsal.storages.report_storage import ReportStore
from rehearsal.storages.session_storage import SessionStorage
from rehearsal.system.exceptions.interview_exception import (
    GenerationError,
    InterviewError,
    PreconditionError,
    ScoringError,
    SessionNotFoundError,
    ValidationError,
)
from rehearsal.utils.logger import InterviewLogger


class InterviewUseCase:
    def __init__(self, gateway: QuestionGateway, scoring: ScoringEngine, storage: SessionStorage,
                 reports: ReportStore, logger: InterviewLogger):
        self.gateway = gateway
        self.scoring = scoring
        self.storage = storage
        self.reports = reports
        self.logger = logger

    def _log_transition(self, session_id: str, from_state: SessionState, to_state: SessionState, reason: str):
        self.logger.log_state_transition(session_id, from_state.value, to_state.value, reason)

    def _require_session(self, session_id: str) -> Session:
        session = self.storage.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def _mark_failed(self, session: Session, exc: InterviewError) -> InterviewError:
        exc.session_id = session.session_id
        self.logger.record_outcome(session.session_id, {"state": session.state.value, "error": exc.kind,
                                                        "message": exc.message, "retryable": exc.retryable})
        return exc

    def _ignore_stale(self, session: Session, what: str) -> SessionSnapshot:
        self.logger.log("Session", f"Ignoring stale {what}; interview is {session.state.value}",
                        {"epoch": session.epoch}, session.session_id)
        return session.snapshot()

    def create_session(self, role: str | None = None, company: str | None = None,
                       resume: ResumeFile | None = None) -> Session:
        session = Session(on_transition=self._log_transition)
        resume_content = ingest(resume) if resume is not None else None
        session.configure(role=role, company=company, resume_content=resume_content)
        self.storage.save(session)
        self.logger.start_session(session.session_id, role or "", company or "")
        if resume is not None:
            self.logger.log("Intake", f"Resume accepted ({resume.declared_type}, {resume.size} bytes)",
                            session_id=session.session_id)
        return session

    async def start_interview(self, session_id: str, timeout_s: float | None = None) -> SessionSnapshot:
        timeout_s = validate_timeout(timeout_s)
        session = self._require_session(session_id)
        epoch = session.begin_generation()
        try:
            questions = await self.gateway.generate_questions(session.config, session_id, timeout_s)
            if not session.accept_questions(questions, epoch):
                return self._ignore_stale(session, "question set")
        except GenerationError as exc:
            if session.error is not exc and not session.fail(exc, epoch):
                return self._ignore_stale(session, "generation failure")
            raise self._mark_failed(session, exc)
        return session.snapshot()

    def submit_answer(self, session_id: str, question_id: str, text: str) -> SessionSnapshot:
        session = self._require_session(session_id)
        answer = session.submit_answer(question_id, text)
        if answer is None:
            self.logger.log("Session", f"Question {question_id} skipped", session_id=session_id)
        else:
            self.logger.log("Session", f"Answer recorded for {question_id}", {"length": len(answer.text)},
                            session_id)
        return session.snapshot()

    async def finish_interview(self, session_id: str, timeout_s: float | None = None) -> SessionSnapshot:
        timeout_s = validate_timeout(timeout_s)
        session = self._require_session(session_id)
        epoch = session.begin_scoring()
        transcript = session.transcript()
        try:
            scores = await self.scoring.score(transcript, session_id, timeout_s)
        except (ScoringError, ValidationError) as exc:
            if not session.fail(exc, epoch):
                return self._ignore_stale(session, "scoring failure")
            raise self._mark_failed(session, exc)

        if not session.accept_scores(scores, epoch):
            return self._ignore_stale(session, "score set")
        self.logger.record_outcome(session_id, {"state": session.state.value, "scores": scores.model_dump()})
        return session.snapshot()

    def abandon_interview(self, session_id: str) -> SessionSnapshot:
        session = self._require_session(session_id)
        session.abandon()
        self.logger.record_outcome(session_id, {"state": session.state.value, "error": session.error.kind})
        return session.snapshot()

    async def retry_interview(self, session_id: str, timeout_s: float | None = None) -> SessionSnapshot:
        timeout_s = validate_timeout(timeout_s)
        failed = self._require_session(session_id)
        if failed.state != SessionState.FAILED:
            raise PreconditionError("Only a failed interview can be retried.")
        if failed.retried_as is not None:
            raise PreconditionError("This interview has already been retried.")
        if failed.error is None or not failed.error.retryable:
            raise ValidationError("This interview cannot be retried. Please start a new one.", field="session_id")
        if failed.attempt >= settings.MAX_SESSION_ATTEMPTS:
            raise ValidationError("Retry limit reached. Please start a new interview.", field="session_id")

        session = Session.retry_from(failed, reuse_questions=settings.RETRY_REUSES_QUESTIONS,
                                     on_transition=self._log_transition)
        failed.retried_as = session.session_id
        self.storage.save(session)
        snapshot = session.snapshot()
        self.logger.start_session(session.session_id, snapshot.role or "", snapshot.company or "")
        self.logger.log("Session", f"Retry of {failed.session_id}, attempt {session.attempt}",
                        {"reuses_questions": session.state == SessionState.IN_PROGRESS}, session.session_id)

        if session.state == SessionState.CONFIGURING:
            return await self.start_interview(session.session_id, timeout_s)
        return snapshot

    def create_report(self, session_id: str, user_id: str) -> Report:
        session = self._require_session(session_id)
        report = assemble(session, user_id)
        report_id = self.reports.save(report)
        self.logger.log("Report", f"Report {report_id} saved", session_id=session_id)
        return report.model_copy(update={"id": report_id})

    def list_reports(self, user_id: str) -> List[Report]:
        return self.reports.query(user_id)

    def get_session(self, session_id: str) -> Session | None:
        return self.storage.get(session_id)

    def get_snapshot(self, session_id: str) -> SessionSnapshot:
        return self._require_session(session_id).snapshot()

    def delete_session(self, session_id: str) -> None:
        """Forget a finished session and its in-memory log. Saved reports are kept."""
        session = self._require_session(session_id)
        if not session.state.is_terminal:
            raise PreconditionError("Finish or abandon the interview before deleting it.")
        self.storage.delete(session_id)
        self.logger.discard(session_id)
