"""Pure validation functions for interview inputs.

Each function returns the normalized value or raises ``ValidationError`` with
a reason that can be shown to the candidate directly.
"""
from typing import Any, Mapping

from rehearsal.config.settings import settings
from rehearsal.core.models import ScoreSet
from rehearsal.system.exceptions.interview_exception import ValidationError

SCORE_FIELDS = {
    "confidence": "confidence",
    "correctness": "correctness",
    "depthOfKnowledge": "depth_of_knowledge",
    "roleFit": "role_fit",
}


def validate_text_field(field: str, value: Any,
                        min_length: int | None = None, max_length: int | None = None) -> str:
    min_length = settings.FIELD_MIN_LENGTH if min_length is None else min_length
    max_length = settings.FIELD_MAX_LENGTH if max_length is None else max_length
    label = field.replace("_", " ").capitalize()

    if not isinstance(value, str):
        raise ValidationError(f"{label} is required.", field=field)
    normalized = value.strip()
    if len(normalized) < min_length:
        raise ValidationError(f"{label} must be at least {min_length} characters.", field=field)
    if len(normalized) > max_length:
        raise ValidationError(f"{label} must be at most {max_length} characters.", field=field)
    return normalized


def validate_answer_text(value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError("Answer must be text.", field="text")
    normalized = value.strip()
    if len(normalized) > settings.ANSWER_MAX_LENGTH:
        raise ValidationError(
            f"Answer must be at most {settings.ANSWER_MAX_LENGTH} characters.", field="text"
        )
    return normalized


def validate_timeout(value: float | None) -> float | None:
    """``None`` means the configured default; anything else must be positive."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ValidationError("Timeout must be a positive number of seconds.", field="timeout_s")
    return float(value)


def validate_score_value(field: str, value: Any,
                         minimum: int | None = None, maximum: int | None = None) -> int:
    minimum = settings.SCORE_MIN if minimum is None else minimum
    maximum = settings.SCORE_MAX if maximum is None else maximum

    if isinstance(value, bool):
        raise ValidationError(f"Score '{field}' must be an integer.", field=field)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"Score '{field}' must be an integer.", field=field)
        value = int(value)
    if not isinstance(value, int):
        raise ValidationError(f"Score '{field}' must be an integer.", field=field)
    if value < minimum or value > maximum:
        raise ValidationError(
            f"Score '{field}' must be between {minimum} and {maximum}.", field=field
        )
    return value


def validate_scores(payload: Mapping[str, Any],
                    minimum: int | None = None, maximum: int | None = None) -> ScoreSet:
    values = {}
    for external_name, field in SCORE_FIELDS.items():
        if external_name not in payload:
            raise ValidationError(f"Score '{external_name}' is missing.", field=external_name)
        values[field] = validate_score_value(external_name, payload[external_name], minimum, maximum)
    return ScoreSet(**values)
