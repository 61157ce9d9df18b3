import uuid
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Mapping, Tuple

from rehearsal.core.models import (
    Answer,
    ErrorInfo,
    Question,
    ScoreSet,
    SessionConfig,
    SessionSnapshot,
    SessionState,
    Transcript,
    TranscriptEntry,
)
from rehearsal.core.validation import validate_answer_text, validate_text_field
from rehearsal.system.exceptions.interview_exception import (
    GenerationError,
    InterviewError,
    PreconditionError,
    SessionAbandonedError,
    ValidationError,
)

TransitionListener = Callable[[str, SessionState, SessionState, str], None]

_TRANSITIONS: Dict[SessionState, Tuple[SessionState, ...]] = {
    SessionState.CONFIGURING: (SessionState.AWAITING_QUESTIONS, SessionState.FAILED),
    SessionState.AWAITING_QUESTIONS: (SessionState.IN_PROGRESS, SessionState.FAILED),
    SessionState.IN_PROGRESS: (SessionState.AWAITING_SCORING, SessionState.FAILED),
    SessionState.AWAITING_SCORING: (SessionState.COMPLETED, SessionState.FAILED),
    SessionState.COMPLETED: (),
    SessionState.FAILED: (),
}


class Session:
    """One interview rehearsal attempt.

    Transitions only move forward; ``FAILED`` can be entered from any
    non-terminal state. Every external call is tied to the ``epoch`` current
    when it was issued, and results for an older epoch are refused.
    """

    def __init__(self, session_id: str | None = None, attempt: int = 1,
                 on_transition: TransitionListener | None = None):
        self.session_id = session_id or f"session_{uuid.uuid4().hex[:8]}"
        self.attempt = attempt
        self.state = SessionState.CONFIGURING
        self.config: SessionConfig | None = None
        self.questions: Tuple[Question, ...] = ()
        self.scores: ScoreSet | None = None
        self.error: InterviewError | None = None
        self.epoch = 0
        self.retried_as: str | None = None
        self._draft: Dict[str, str] = {}
        self._answers: Dict[str, Answer] = {}
        self._on_transition = on_transition

    def _move(self, target: SessionState, reason: str = "") -> None:
        if target not in _TRANSITIONS[self.state]:
            raise PreconditionError(
                f"Cannot move interview from {self.state.value} to {target.value}."
            )
        previous = self.state
        self.state = target
        if self._on_transition is not None:
            self._on_transition(self.session_id, previous, target, reason)

    def _require(self, *states: SessionState) -> None:
        if self.state not in states:
            raise PreconditionError(f"This action is not available while the interview is {self.state.value}.")

    # Configuring

    def configure(self, role: str | None = None, company: str | None = None,
                  resume_content: str | None = None) -> None:
        self._require(SessionState.CONFIGURING)
        updates: Dict[str, str] = {}
        if role is not None:
            updates["role"] = validate_text_field("role", role)
        if company is not None:
            updates["company"] = validate_text_field("company", company)
        if resume_content is not None:
            if not isinstance(resume_content, str) or not resume_content.startswith("data:"):
                raise ValidationError("Resume file is required.", field="resume")
            updates["resume_content"] = resume_content
        self._draft.update(updates)

    def build_config(self) -> SessionConfig:
        role = validate_text_field("role", self._draft.get("role"))
        company = validate_text_field("company", self._draft.get("company"))
        if not self._draft.get("resume_content"):
            raise ValidationError("Resume file is required.", field="resume")
        return SessionConfig(role=role, company=company, resume_content=self._draft["resume_content"])

    def begin_generation(self) -> int:
        self._require(SessionState.CONFIGURING)
        self.config = self.build_config()
        self._move(SessionState.AWAITING_QUESTIONS, "questions requested")
        self.epoch += 1
        return self.epoch

    def accept_questions(self, questions: Iterable[Question], epoch: int) -> bool:
        if epoch != self.epoch or self.state != SessionState.AWAITING_QUESTIONS:
            return False
        questions = tuple(questions)
        ids = [question.id for question in questions]
        if not questions or len(set(ids)) != len(ids):
            error = GenerationError("No interview questions were generated. Please start a new interview.",
                                    retryable=False)
            self.fail(error, epoch)
            raise error
        self.questions = questions
        self._answers = {}
        self._move(SessionState.IN_PROGRESS, f"{len(questions)} questions ready")
        return True

    # In progress

    @property
    def answers(self) -> Mapping[str, Answer]:
        return MappingProxyType(self._answers)

    def submit_answer(self, question_id: str, text: str) -> Answer | None:
        """Store or replace the answer for ``question_id``.

        Blank text counts as a skip and clears any earlier answer.
        """
        if self.state != SessionState.IN_PROGRESS:
            raise ValidationError("Answers can only be submitted while the interview is in progress.",
                                  field="question_id")
        if question_id not in {question.id for question in self.questions}:
            raise ValidationError("This question is not part of the interview.", field="question_id")
        normalized = validate_answer_text(text)
        if not normalized:
            self._answers.pop(question_id, None)
            return None
        answer = Answer(question_id=question_id, text=normalized)
        self._answers[question_id] = answer
        return answer

    def begin_scoring(self) -> int:
        self._require(SessionState.IN_PROGRESS)
        self._move(SessionState.AWAITING_SCORING, f"{len(self._answers)}/{len(self.questions)} answered")
        self.epoch += 1
        return self.epoch

    def transcript(self) -> Transcript:
        if not self.questions or self.config is None:
            raise PreconditionError("The interview has no questions yet.")
        entries = tuple(
            TranscriptEntry(question=question, answer=self._answers.get(question.id))
            for question in self.questions
        )
        return Transcript(role=self.config.role, company=self.config.company, entries=entries)

    def accept_scores(self, scores: ScoreSet, epoch: int) -> bool:
        if epoch != self.epoch or self.state != SessionState.AWAITING_SCORING:
            return False
        self.scores = scores
        self._move(SessionState.COMPLETED, "scored")
        return True

    # Termination

    def fail(self, error: InterviewError, epoch: int | None = None) -> bool:
        if epoch is not None and epoch != self.epoch:
            return False
        if self.state.is_terminal:
            return False
        self.error = error
        self._move(SessionState.FAILED, error.message)
        return True

    def abandon(self) -> None:
        if self.state.is_terminal:
            raise PreconditionError("The interview has already ended.")
        self.epoch += 1
        self.fail(SessionAbandonedError())

    @classmethod
    def retry_from(cls, failed: "Session", reuse_questions: bool = False,
                   on_transition: TransitionListener | None = None) -> "Session":
        """Start a new attempt seeded from a failed session's configuration."""
        session = cls(attempt=failed.attempt + 1, on_transition=on_transition)
        session._draft = dict(failed._draft)
        if reuse_questions and failed.questions:
            epoch = session.begin_generation()
            session.accept_questions(failed.questions, epoch)
            session._answers = dict(failed._answers)
        return session

    def snapshot(self) -> SessionSnapshot:
        next_question = next((q.id for q in self.questions if q.id not in self._answers), None)
        error = None
        if self.error is not None:
            error = ErrorInfo(error=self.error.kind, message=self.error.message, retryable=self.error.retryable)
        return SessionSnapshot(
            session_id=self.session_id,
            state=self.state,
            attempt=self.attempt,
            role=self.config.role if self.config else self._draft.get("role"),
            company=self.config.company if self.config else self._draft.get("company"),
            questions=list(self.questions),
            answers={qid: answer.text for qid, answer in self._answers.items()},
            answered_count=len(self._answers),
            total_questions=len(self.questions),
            next_question_id=next_question,
            scores=self.scores,
            error=error,
            retried_as=self.retried_as,
        )
