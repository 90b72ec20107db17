from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.core.query import PageParams, QueryFilter, fetch_page
from app.core.security import generate_id
from app.models.job import Job

SORT_COLUMNS = {
    "createdAt": Job.created_at,
    "updatedAt": Job.updated_at,
    "appliedDate": Job.applied_date,
    "company": Job.company,
    "position": Job.position,
    "status": Job.status,
    "salary": Job.salary,
}
SEARCH_FIELDS = ("company", "position")


def create(db: Session, user_id: str, **fields) -> Job:
    if fields.get("applied_date") is None:
        fields.pop("applied_date", None)
    job = Job(id=generate_id(), user_id=user_id, **fields)
    db.add(job)
    db.commit()
    db.refresh(job)
    return job


def get_for_user(db: Session, job_id: str, user_id: str) -> Job | None:
    """Fetch a job only if user_id owns it."""
    return (
        db.query(Job)
        .options(joinedload(Job.user))
        .filter(Job.id == job_id, Job.user_id == user_id)
        .first()
    )


def update(db: Session, job: Job, changes: dict) -> Job:
    for name, value in changes.items():
        setattr(job, name, value)
    db.commit()
    db.refresh(job)
    return job


def delete(db: Session, job: Job) -> None:
    db.delete(job)
    db.commit()


def get_paginated(db: Session, flt: QueryFilter, params: PageParams) -> tuple[list[Job], int]:
    """List jobs matching flt (owner, status, company/position search). Returns (items, total)."""
    q = flt.apply(db.query(Job), Job)
    return fetch_page(q, params, SORT_COLUMNS, Job.id, options=(joinedload(Job.user),))


def status_counts(db: Session, user_id: str | None = None) -> dict[str, int]:
    """Observed {status: count}; statuses with no rows are absent."""
    q = db.query(Job.status, func.count(Job.id))
    if user_id:
        q = q.filter(Job.user_id == user_id)
    return {s: n for s, n in q.group_by(Job.status).all()}


def count(db: Session, user_id: str | None = None) -> int:
    q = db.query(func.count(Job.id))
    if user_id:
        q = q.filter(Job.user_id == user_id)
    return q.scalar() or 0


def count_by_user(db: Session, user_ids: list[str]) -> dict[str, int]:
    if not user_ids:
        return {}
    rows = (
        db.query(Job.user_id, func.count(Job.id))
        .filter(Job.user_id.in_(user_ids))
        .group_by(Job.user_id)
        .all()
    )
    return {uid: n for uid, n in rows}


def count_created_since(db: Session, since: datetime) -> int:
    return db.query(func.count(Job.id)).filter(Job.created_at >= since).scalar() or 0


def get_recent(
    db: Session,
    user_id: str | None = None,
    limit: int = 5,
    by: str = "updated_at",
) -> list[Job]:
    column = getattr(Job, by)
    q = db.query(Job).options(joinedload(Job.user))
    if user_id:
        q = q.filter(Job.user_id == user_id)
    return q.order_by(column.desc(), Job.id.desc()).limit(limit).all()
