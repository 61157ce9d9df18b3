"""Error taxonomy shared by every interview operation.

Messages are safe to show to the candidate as-is. The collaborator failure
that caused an error is chained through ``__cause__`` and logged, never put
into ``message``.
"""


class InterviewError(Exception):
    retryable: bool = False

    def __init__(self, message: str, retryable: bool | None = None):
        super().__init__(message)
        self.message = message
        if retryable is not None:
            self.retryable = retryable
        self.session_id: str | None = None

    @property
    def kind(self) -> str:
        return type(self).__name__


class ValidationError(InterviewError):
    """Input to an operation violates a stated constraint. Never retryable."""

    def __init__(self, reason: str, field: str | None = None):
        super().__init__(reason, retryable=False)
        self.reason = reason
        self.field = field


class GenerationError(InterviewError):
    pass


class ScoringError(InterviewError):
    pass


class PreconditionError(InterviewError):
    """Operation invoked against a session in the wrong state."""


class SessionAbandonedError(InterviewError):
    def __init__(self, message: str = "The interview was abandoned."):
        super().__init__(message, retryable=False)


class SessionNotFoundError(InterviewError):
    def __init__(self, session_id: str):
        super().__init__("Interview session not found. Please start a new interview.", retryable=False)
        self.session_id = session_id
