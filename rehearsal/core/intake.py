import base64
from dataclasses import dataclass

from rehearsal.config.settings import settings
from rehearsal.system.exceptions.interview_exception import ValidationError


@dataclass(frozen=True)
class ResumeFile:
    content: bytes
    declared_type: str
    size: int
    filename: str = ""


def check_resume_size(size: int) -> None:
    if size > settings.RESUME_MAX_BYTES:
        max_mib = settings.RESUME_MAX_BYTES / (1024 * 1024)
        raise ValidationError(f"Max file size is {max_mib:g}MB.", field="resume")


def ingest(file: ResumeFile | None) -> str:
    """Validate an uploaded résumé and encode it as a ``data:`` URI.

    The document itself is not parsed; the URI embeds the declared media type
    so the generation service can interpret the payload.
    """
    if file is None or not file.content or file.size <= 0:
        raise ValidationError("Resume file is required.", field="resume")

    check_resume_size(file.size)

    if file.size != len(file.content):
        raise ValidationError("Resume upload is incomplete. Please upload it again.", field="resume")

    declared_type = (file.declared_type or "").split(";")[0].strip().lower()
    if declared_type not in settings.RESUME_ALLOWED_TYPES:
        raise ValidationError(".pdf and .docx files are accepted.", field="resume")

    payload = base64.b64encode(file.content).decode("ascii")
    return f"data:{declared_type};base64,{payload}"
