from fastapi import APIRouter

from rehearsal.api.endpoints.interview import interview_router
from rehearsal.api.endpoints.reports import reports_router

api_router = APIRouter()

api_router.include_router(interview_router, prefix="/interview", tags=["interview"])
api_router.include_router(reports_router, prefix="/reports", tags=["reports"])
