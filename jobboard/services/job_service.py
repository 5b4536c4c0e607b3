from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, List, Optional

from sqlalchemy import desc, func, or_, select
from sqlalchemy.orm import Session

from jobboard.errors import NotFound
from jobboard.models.job import Job
from jobboard.validators import parse_positive_int, validate_job

logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100
# keeps (page - 1) * limit well inside a signed 64-bit OFFSET
MAX_PAGE = 1_000_000
# largest value SQLite stores in an INTEGER column
MAX_JOB_ID = 2**63 - 1
SEARCH_COLUMNS = (Job.title, Job.description, Job.location, Job.company_name, Job.type)

JOB_NOT_FOUND = "Job not found"


@dataclass
class JobPage:
    items: List[Job]
    total: int
    page: Optional[int] = None
    limit: Optional[int] = None

    @property
    def paginated(self) -> bool:
        return self.page is not None

    @property
    def total_pages(self) -> int:
        if not self.limit:
            return 1
        return max(math.ceil(self.total / self.limit), 1)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def list_jobs(s: Session, search: Optional[str] = None, page: Any = None, limit: Any = None) -> JobPage:
    """Jobs newest first, optionally filtered and paginated.

    Without ``page``/``limit`` every matching row is returned and the caller
    renders the bare list; with either one the result is a single page.
    """
    page = parse_positive_int(page, "page", maximum=MAX_PAGE)
    limit = parse_positive_int(limit, "limit")

    stmt = select(Job)
    term = (search or "").strip()
    if term:
        like = f"%{_escape_like(term)}%"
        stmt = stmt.where(or_(*(col.ilike(like, escape="\\") for col in SEARCH_COLUMNS)))
    stmt = stmt.order_by(desc(Job.created_at), desc(Job.id))

    if page is None and limit is None:
        rows = s.scalars(stmt).all()
        return JobPage(items=list(rows), total=len(rows))

    page = page or 1
    limit = min(limit or DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT)
    total = s.scalar(select(func.count()).select_from(stmt.subquery()))
    rows = s.scalars(stmt.offset((page - 1) * limit).limit(limit)).all()
    return JobPage(items=list(rows), total=int(total or 0), page=page, limit=limit)


def get_job(s: Session, job_id: int) -> Job:
    if not 1 <= job_id <= MAX_JOB_ID:
        raise NotFound(JOB_NOT_FOUND)
    job = s.get(Job, job_id)
    if job is None:
        raise NotFound(JOB_NOT_FOUND)
    return job


def create_job(s: Session, payload: Any) -> Job:
    fields = validate_job(payload)
    job = Job(**fields)
    s.add(job)
    s.commit()
    s.refresh(job)
    logger.info("Created job %s (%s)", job.id, job.title)
    return job


def update_job(s: Session, job_id: int, payload: Any) -> Job:
    """Replace every editable column of an existing job."""
    fields = validate_job(payload)
    job = get_job(s, job_id)
    for key, value in fields.items():
        setattr(job, key, value)
    s.commit()
    s.refresh(job)
    logger.info("Updated job %s", job.id)
    return job


def delete_job(s: Session, job_id: int) -> None:
    job = get_job(s, job_id)
    s.delete(job)
    s.commit()
    logger.info("Deleted job %s", job_id)
