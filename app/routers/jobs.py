import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.errors import NotFound, ServerError
from app.core.query import PageParams, QueryFilter, page_params_for, paginated
from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.repos.job_repo import (
    SORT_COLUMNS,
    create as create_job,
    delete as delete_job,
    get_for_user,
    get_paginated,
    update as update_job,
)
from app.schemas.common import dump
from app.schemas.job import JobCreate, JobResponse, JobUpdate
from app.services.notifier import Notifier, get_notifier, publish
from app.services.stats_service import job_overview

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/jobs", tags=["jobs"])

job_page_params = page_params_for(SORT_COLUMNS)


def _describe(job: dict) -> str:
    return f"{job['position']} at {job['company']}"


@router.get("")
def list_jobs(
    status: str | None = None,
    params: PageParams = Depends(job_page_params),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """List the caller's jobs. status=all (or omitted) disables the status filter."""
    flt = QueryFilter().where("user_id", user.id).where("status", status)
    try:
        items, total = get_paginated(db, flt, params)
    except Exception as e:
        logger.exception("Job list failed for user=%s: %s", user.id, e)
        raise ServerError("Server error while fetching jobs") from e
    return paginated([dump(JobResponse, j) for j in items], total, params)


@router.get("/stats/overview")
def get_job_stats(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Per-status counts (every status present) plus the 5 most recently updated jobs."""
    try:
        return {"success": True, "data": job_overview(db, user.id)}
    except Exception as e:
        logger.exception("Job stats failed for user=%s: %s", user.id, e)
        raise ServerError("Server error while fetching statistics") from e


@router.get("/{job_id}")
def get_job(
    job_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        job = get_for_user(db, job_id, user.id)
    except Exception as e:
        logger.exception("Job fetch failed for user=%s job=%s: %s", user.id, job_id, e)
        raise ServerError("Server error while fetching job") from e
    if not job:
        raise NotFound("Job not found")
    return {"success": True, "data": dump(JobResponse, job)}


@router.post("", status_code=status.HTTP_201_CREATED)
def create(
    body: JobCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
):
    try:
        job = create_job(db, user.id, **body.model_dump())
        data = dump(JobResponse, job)
    except Exception as e:
        logger.exception("Job create failed for user=%s: %s", user.id, e)
        raise ServerError("Server error while creating job") from e
    logger.info("Job created: user=%s job=%s", user.id, job.id)
    publish(
        notifier,
        "job-created",
        {
            "message": f"New job application added: {_describe(data)}",
            "job": data,
            "user": user.name,
        },
    )
    return {"success": True, "message": "Job application created successfully", "data": data}


@router.put("/{job_id}")
def update(
    job_id: str,
    body: JobUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
):
    """Partial update. Emits job-status-updated only when status actually changes."""
    try:
        job = get_for_user(db, job_id, user.id)
        if not job:
            raise NotFound("Job not found")
        old_status = job.status
        job = update_job(db, job, body.changes())
        data = dump(JobResponse, job)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Job update failed for user=%s job=%s: %s", user.id, job_id, e)
        raise ServerError("Server error while updating job") from e
    if old_status != job.status:
        logger.info("Job status changed: job=%s %s -> %s", job.id, old_status, job.status)
        publish(
            notifier,
            "job-status-updated",
            {
                "message": f"Job status updated: {_describe(data)} - {job.status}",
                "job": data,
                "user": user.name,
                "oldStatus": old_status,
                "newStatus": job.status,
            },
        )
    return {"success": True, "message": "Job application updated successfully", "data": data}


@router.delete("/{job_id}")
def delete(
    job_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
):
    try:
        job = get_for_user(db, job_id, user.id)
        if not job:
            raise NotFound("Job not found")
        data = dump(JobResponse, job)
        delete_job(db, job)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Job delete failed for user=%s job=%s: %s", user.id, job_id, e)
        raise ServerError("Server error while deleting job") from e
    logger.info("Job deleted: user=%s job=%s", user.id, job_id)
    publish(
        notifier,
        "job-deleted",
        {
            "message": f"Job application deleted: {_describe(data)}",
            "job": data,
            "user": user.name,
        },
    )
    return {"success": True, "message": "Job application deleted successfully"}
