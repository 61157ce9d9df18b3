from datetime import datetime, timedelta, timezone

import pytest

from conftest import session_in_progress
from rehearsal.core.models import ScoreSet
from rehearsal.core.report import assemble
from rehearsal.storages.report_storage import InMemoryReportStore
from rehearsal.system.exceptions import PreconditionError, ValidationError

SCORES = ScoreSet(confidence=80, correctness=72, depth_of_knowledge=64, role_fit=90)


def _completed(role="Backend Engineer", company="Acme", scores=SCORES):
    session = session_in_progress(role=role, company=company)
    epoch = session.begin_scoring()
    session.accept_scores(scores, epoch)
    return session


def _clock(*moments):
    values = iter(moments)
    return lambda: next(values)


def test_assemble_copies_config_and_scores():
    created = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)

    report = assemble(_completed(), "user-1", clock=_clock(created))

    assert report.id is None
    assert report.user_id == "user-1"
    assert (report.role, report.company) == ("Backend Engineer", "Acme")
    assert report.scores == SCORES
    assert report.created_at == created


def test_assemble_twice_differs_only_in_timestamp():
    session = _completed()
    first_at = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)
    clock = _clock(first_at, first_at + timedelta(seconds=5))

    first = assemble(session, "user-1", clock=clock)
    second = assemble(session, "user-1", clock=clock)

    assert first.created_at != second.created_at
    assert first.model_dump(exclude={"created_at"}) == second.model_dump(exclude={"created_at"})


def test_report_is_immutable():
    report = assemble(_completed(), "user-1")
    with pytest.raises(Exception):
        report.role = "Something else"


def test_assemble_requires_completed_session():
    session = session_in_progress()
    with pytest.raises(PreconditionError):
        assemble(session, "user-1")

    session.begin_scoring()
    with pytest.raises(PreconditionError):
        assemble(session, "user-1")


def test_assemble_requires_a_user():
    with pytest.raises(ValidationError):
        assemble(_completed(), "   ")


def test_store_round_trip_preserves_role_company_and_scores():
    store = InMemoryReportStore()
    report = assemble(_completed(), "user-1")

    report_id = store.save(report)
    [stored] = store.query("user-1")

    assert stored.id == report_id
    assert report.id is None
    assert (stored.role, stored.company) == (report.role, report.company)
    assert stored.scores.model_dump() == SCORES.model_dump()
    assert store.get(report_id) == stored


def test_store_queries_per_user_newest_first():
    store = InMemoryReportStore()
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    older = assemble(_completed(company="Acme"), "user-1", clock=_clock(base))
    newer = assemble(_completed(company="Globex"), "user-1", clock=_clock(base + timedelta(days=1)))
    other = assemble(_completed(company="Initech"), "user-2", clock=_clock(base))

    for report in (older, newer, other):
        store.save(report)

    assert [report.company for report in store.query("user-1")] == ["Globex", "Acme"]
    assert [report.company for report in store.query("user-2")] == ["Initech"]
    assert store.query("nobody") == []
