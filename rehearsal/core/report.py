from datetime import datetime, timezone
from typing import Callable

from rehearsal.core.models import Report, SessionState
from rehearsal.core.session import Session
from rehearsal.system.exceptions.interview_exception import PreconditionError, ValidationError


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def assemble(session: Session, user_id: str, clock: Callable[[], datetime] = utc_now) -> Report:
    """Build the report for a completed session. Does not persist it."""
    if session.state != SessionState.COMPLETED or session.scores is None or session.config is None:
        raise PreconditionError("A report can only be created for a completed interview.")
    if not isinstance(user_id, str) or not user_id.strip():
        raise ValidationError("Sign in to save your interview report.", field="user_id")

    return Report(
        user_id=user_id.strip(),
        role=session.config.role,
        company=session.config.company,
        scores=session.scores,
        created_at=clock(),
    )
