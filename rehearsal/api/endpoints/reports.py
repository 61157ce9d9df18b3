from fastapi import APIRouter, Depends

from rehearsal.api.deps import get_current_user_id, get_use_case
from rehearsal.api.schemas import ReportListResponse, ReportResponse
from rehearsal.core.use_case import InterviewUseCase
from rehearsal.system.exceptions import UnauthorizedException

reports_router = APIRouter()


@reports_router.get("", response_model=ReportListResponse)
async def list_reports(user_id: str | None = Depends(get_current_user_id),
                       use_case: InterviewUseCase = Depends(get_use_case)):
    if user_id is None:
        raise UnauthorizedException()
    reports = use_case.list_reports(user_id)
    return ReportListResponse(reports=[ReportResponse.from_report(report) for report in reports])
