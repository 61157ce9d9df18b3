import asyncio
import time
import uuid
from typing import Any, List

from rehearsal.config.settings import settings
from rehearsal.core.engine import QuestionService, is_transient_failure
from rehearsal.core.models import Question, SessionConfig
from rehearsal.core.validation import validate_timeout
from rehearsal.system.exceptions.interview_exception import GenerationError
from rehearsal.utils.logger import InterviewLogger


class QuestionGateway:
    """Asks the generation service for questions and normalizes the answer."""

    def __init__(self, service: QuestionService, logger: InterviewLogger,
                 timeout_s: float | None = None):
        self.service = service
        self.logger = logger
        self.timeout_s = settings.GENERATION_TIMEOUT_S if timeout_s is None else validate_timeout(timeout_s)

    async def generate_questions(self, config: SessionConfig, session_id: str | None = None,
                                 timeout_s: float | None = None) -> List[Question]:
        if not isinstance(config, SessionConfig):
            raise GenerationError("Interview setup is incomplete.", retryable=False)

        timeout_s = validate_timeout(timeout_s)
        timeout = self.timeout_s if timeout_s is None else timeout_s
        self.logger.log("Gateway", f"Requesting questions for {config.role} at {config.company}",
                        {"timeout_s": timeout}, session_id)
        start_time = time.time()
        try:
            raw = await asyncio.wait_for(
                self.service.generate(config.role, config.company, config.resume_content),
                timeout=timeout,
            )
        except Exception as exc:
            retryable = is_transient_failure(exc)
            self.logger.log("Gateway", f"Generation call failed: {type(exc).__name__}: {exc}",
                            {"retryable": retryable}, session_id)
            if isinstance(exc, asyncio.TimeoutError):
                message = "Question generation timed out. Please try again."
            elif retryable:
                message = "The question service is unavailable. Please try again."
            else:
                message = "There was a problem with the AI. Please start a new interview."
            raise GenerationError(message, retryable=retryable) from exc
        finally:
            self.logger.log_latency((time.time() - start_time) * 1000, session_id, "Gateway")

        questions = self._to_questions(raw, session_id)
        self.logger.log("Gateway", f"Received {len(questions)} questions", session_id=session_id)
        return questions

    def _to_questions(self, raw: Any, session_id: str | None) -> List[Question]:
        if not isinstance(raw, (list, tuple)) or not raw:
            self.logger.log("Gateway", "Generation returned no question list",
                            {"type": type(raw).__name__}, session_id)
            raise GenerationError("No interview questions were generated. Please start a new interview.",
                                  retryable=False)

        questions: List[Question] = []
        for item in raw:
            if not isinstance(item, str) or not item.strip():
                self.logger.log("Gateway", "Generation returned a malformed question",
                                {"item": repr(item)[:200]}, session_id)
                raise GenerationError("The generated questions were malformed. Please start a new interview.",
                                      retryable=False)
            questions.append(Question(id=f"q_{uuid.uuid4().hex}", text=item.strip()))
        return questions
