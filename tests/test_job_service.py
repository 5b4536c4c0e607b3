from datetime import datetime, timedelta

import pytest
from sqlalchemy import delete, func, select

from jobboard.errors import NotFound, ValidationError
from jobboard.models.job import Job
from jobboard.services import job_service


@pytest.fixture
def dated_jobs(session):
    session.execute(delete(Job))
    base = datetime(2024, 1, 1, 9, 0, 0)
    rows = [
        ("Python Developer", "Remote", "Snake Oil Ltd", timedelta(days=2)),
        ("Data Engineer", "Berlin", "100% Data_Co", timedelta(days=5)),
        ("QA Analyst", "Austin, TX", "Testers Inc", timedelta(days=1)),
    ]
    for title, location, company, offset in rows:
        session.add(Job(
            type="Full-Time",
            title=title,
            location=location,
            company_name=company,
            contact_email="jobs@example.com",
            created_at=base + offset,
        ))
    session.commit()


def test_list_orders_by_created_at_desc(session, dated_jobs):
    page = job_service.list_jobs(session)
    assert not page.paginated
    assert [j.title for j in page.items] == ["Data Engineer", "Python Developer", "QA Analyst"]


def test_search_matches_any_column(session, dated_jobs):
    assert [j.title for j in job_service.list_jobs(session, search="snake oil").items] == ["Python Developer"]
    assert [j.title for j in job_service.list_jobs(session, search="austin").items] == ["QA Analyst"]
    assert len(job_service.list_jobs(session, search="full-time").items) == 3
    assert job_service.list_jobs(session, search="nothing like this").items == []


def test_search_treats_wildcards_literally(session, dated_jobs):
    assert [j.title for j in job_service.list_jobs(session, search="100%").items] == ["Data Engineer"]
    assert [j.title for j in job_service.list_jobs(session, search="a_c").items] == ["Data Engineer"]


def test_blank_search_is_ignored(session, dated_jobs):
    assert len(job_service.list_jobs(session, search="   ").items) == 3


def test_pagination_clamps_limit(session, dated_jobs):
    page = job_service.list_jobs(session, page="1", limit="1000")
    assert page.paginated
    assert page.limit == job_service.MAX_PAGE_LIMIT
    assert page.total == 3
    assert page.total_pages == 1


def test_pagination_past_the_end_is_empty(session, dated_jobs):
    page = job_service.list_jobs(session, page=5, limit=2)
    assert page.items == []
    assert page.total == 3
    assert page.total_pages == 2


def test_create_then_get_round_trips(session, job_payload):
    job = job_service.create_job(session, job_payload)
    fetched = job_service.get_job(session, job.id)
    for field, value in job_payload.items():
        assert getattr(fetched, field) == value
    assert fetched.created_at is not None


def test_update_missing_job_raises_not_found(session, job_payload):
    total = session.scalar(select(func.count()).select_from(Job))
    with pytest.raises(NotFound):
        job_service.update_job(session, 424242, job_payload)
    with pytest.raises(NotFound):
        job_service.delete_job(session, 424242)
    assert session.scalar(select(func.count()).select_from(Job)) == total


def test_get_job_outside_integer_range(session):
    for job_id in (0, -1, job_service.MAX_JOB_ID + 1):
        with pytest.raises(NotFound):
            job_service.get_job(session, job_id)


def test_update_validates_before_touching_the_row(session, job_payload):
    job = job_service.create_job(session, job_payload)
    with pytest.raises(ValidationError):
        job_service.update_job(session, job.id, {**job_payload, "location": ""})
    session.expire_all()
    assert job_service.get_job(session, job.id).location == "Remote"
