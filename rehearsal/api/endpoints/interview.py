import json
import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import Response

from rehearsal.api.deps import get_current_user_id, get_use_case
from rehearsal.api.schemas import AnswerRequest, FinishResponse, ReportResponse, TimeoutRequest
from rehearsal.config.settings import settings
from rehearsal.core.intake import ResumeFile, check_resume_size
from rehearsal.core.models import SessionSnapshot
from rehearsal.core.use_case import InterviewUseCase
from rehearsal.system.exceptions import SessionNotFoundError

logger = logging.getLogger(__name__)
interview_router = APIRouter()


async def read_resume(upload: UploadFile | None) -> ResumeFile | None:
    if upload is None:
        return None
    if upload.size is not None:
        check_resume_size(upload.size)
    content = await upload.read(settings.RESUME_MAX_BYTES + 1)
    size = upload.size if upload.size is not None else len(content)
    return ResumeFile(
        content=content,
        declared_type=upload.content_type or "",
        size=size,
        filename=upload.filename or "",
    )


@interview_router.post("/sessions", response_model=SessionSnapshot, status_code=status.HTTP_201_CREATED)
async def start_session(
    role: str = Form(""),
    company: str = Form(""),
    resume: UploadFile | None = File(None),
    timeout_s: float | None = Form(None, gt=0),
    use_case: InterviewUseCase = Depends(get_use_case),
):
    resume_file = await read_resume(resume)
    if resume_file is None:
        resume_file = ResumeFile(content=b"", declared_type="", size=0)
    session = use_case.create_session(role=role, company=company, resume=resume_file)
    logger.info(f"Starting new session: {session.session_id}")
    return await use_case.start_interview(session.session_id, timeout_s)


@interview_router.get("/sessions/{session_id}", response_model=SessionSnapshot)
async def get_session(session_id: str, use_case: InterviewUseCase = Depends(get_use_case)):
    return use_case.get_snapshot(session_id)


@interview_router.post("/sessions/{session_id}/answers", response_model=SessionSnapshot)
async def submit_answer(session_id: str, body: AnswerRequest,
                        use_case: InterviewUseCase = Depends(get_use_case)):
    return use_case.submit_answer(session_id, body.question_id, body.text)


@interview_router.post("/sessions/{session_id}/finish", response_model=FinishResponse)
async def finish_session(
    session_id: str,
    body: TimeoutRequest | None = None,
    user_id: str | None = Depends(get_current_user_id),
    use_case: InterviewUseCase = Depends(get_use_case),
):
    snapshot = await use_case.finish_interview(session_id, body.timeout_s if body else None)
    if user_id is None or snapshot.scores is None:
        logger.info(f"Session {session_id} finished without saving a report")
        return FinishResponse(session=snapshot)
    report = use_case.create_report(session_id, user_id)
    return FinishResponse(session=snapshot, report=ReportResponse.from_report(report))


@interview_router.post("/sessions/{session_id}/abandon", response_model=SessionSnapshot)
async def abandon_session(session_id: str, use_case: InterviewUseCase = Depends(get_use_case)):
    return use_case.abandon_interview(session_id)


@interview_router.post("/sessions/{session_id}/retry", response_model=SessionSnapshot,
                       status_code=status.HTTP_201_CREATED)
async def retry_session(session_id: str, body: TimeoutRequest | None = None,
                        use_case: InterviewUseCase = Depends(get_use_case)):
    return await use_case.retry_interview(session_id, body.timeout_s if body else None)


@interview_router.get("/sessions/{session_id}/log")
async def download_session_log(session_id: str, use_case: InterviewUseCase = Depends(get_use_case)):
    logger.info(f"Download log requested for session: {session_id}")
    session = use_case.get_session(session_id)
    log_data = use_case.logger.get_log_data(session_id)
    if session is None or log_data is None:
        logger.warning(f"Session {session_id} not found. Available sessions: {use_case.storage.ids()}")
        raise SessionNotFoundError(session_id)

    log_data["final_state"] = session.snapshot().model_dump(mode="json")
    json_content = json.dumps(log_data, ensure_ascii=False, indent=2)

    return Response(
        content=json_content,
        headers={
            "Content-Disposition": f'attachment; filename="interview_log_{session_id}.json"',
        },
        media_type="application/json"
    )


@interview_router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: str, use_case: InterviewUseCase = Depends(get_use_case)):
    use_case.delete_session(session_id)
    logger.info(f"Session {session_id} deleted")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
