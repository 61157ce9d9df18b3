import asyncio
import time
from collections.abc import Mapping

from rehearsal.config.settings import settings
from rehearsal.core.engine import ScoringService, is_transient_failure
from rehearsal.core.models import ScoreSet, Transcript
from rehearsal.core.validation import validate_scores, validate_timeout
from rehearsal.system.exceptions.interview_exception import ScoringError, ValidationError
from rehearsal.utils.logger import InterviewLogger


class ScoringEngine:
    def __init__(self, service: ScoringService, logger: InterviewLogger,
                 timeout_s: float | None = None):
        self.service = service
        self.logger = logger
        self.timeout_s = settings.SCORING_TIMEOUT_S if timeout_s is None else validate_timeout(timeout_s)

    async def score(self, transcript: Transcript, session_id: str | None = None,
                    timeout_s: float | None = None) -> ScoreSet:
        """Score a transcript along the four dimensions.

        Out-of-range or missing dimensions raise ``ValidationError``: a wrong
        score is never clamped or defaulted.
        """
        timeout_s = validate_timeout(timeout_s)
        timeout = self.timeout_s if timeout_s is None else timeout_s
        self.logger.log("Scoring", f"Scoring {len(transcript)} questions "
                                   f"({transcript.answered_count} answered)",
                        {"timeout_s": timeout}, session_id)
        start_time = time.time()
        try:
            raw = await asyncio.wait_for(self.service.evaluate(transcript), timeout=timeout)
        except Exception as exc:
            retryable = is_transient_failure(exc)
            self.logger.log("Scoring", f"Scoring call failed: {type(exc).__name__}: {exc}",
                            {"retryable": retryable}, session_id)
            if isinstance(exc, asyncio.TimeoutError):
                message = "Scoring timed out. Please try again."
            elif retryable:
                message = "The scoring service is unavailable. Please try again."
            else:
                message = "There was a problem scoring your interview."
            raise ScoringError(message, retryable=retryable) from exc
        finally:
            self.logger.log_latency((time.time() - start_time) * 1000, session_id, "Scoring")

        if not isinstance(raw, Mapping):
            self.logger.log("Scoring", "Scoring returned a non-object result",
                            {"type": type(raw).__name__}, session_id)
            raise ScoringError("There was a problem scoring your interview.", retryable=False)

        try:
            scores = validate_scores(raw)
        except ValidationError as exc:
            self.logger.log("Scoring", f"Rejected score set: {exc.reason}", {"raw": dict(raw)}, session_id)
            raise

        self.logger.log("Scoring", "Scores accepted", scores.model_dump(), session_id)
        return scores
