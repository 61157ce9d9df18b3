import uuid
from typing import Dict, List, Protocol

from rehearsal.core.models import Report


class ReportStore(Protocol):
    def save(self, report: Report) -> str: ...

    def query(self, user_id: str) -> List[Report]: ...


class InMemoryReportStore:
    """Append-only report store. Reports are never updated or deleted."""

    def __init__(self):
        self._reports: Dict[str, Report] = {}

    def save(self, report: Report) -> str:
        report_id = uuid.uuid4().hex
        self._reports[report_id] = report.model_copy(update={"id": report_id})
        return report_id

    def get(self, report_id: str) -> Report | None:
        return self._reports.get(report_id)

    def query(self, user_id: str) -> List[Report]:
        reports = [report for report in self._reports.values() if report.user_id == user_id]
        return sorted(reports, key=lambda report: report.created_at, reverse=True)
