import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.errors import NotFound, ServerError, ValidationFailed
from app.core.query import PageParams, QueryFilter, page_params_for, paginated
from app.database import get_db
from app.dependencies import get_current_admin
from app.models.user import User
from app.repos import feedback_repo, job_repo, user_repo
from app.repos.admin_repo import get_stats
from app.schemas.admin import AdminUserResponse
from app.schemas.auth import UserResponse
from app.schemas.common import dump
from app.schemas.feedback import FeedbackResponse, FeedbackStatusUpdate
from app.schemas.job import JobResponse

logger = logging.getLogger(__name__)

# Every route below requires an admin caller.
router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(get_current_admin)])

user_page_params = page_params_for(user_repo.SORT_COLUMNS)
job_page_params = page_params_for(job_repo.SORT_COLUMNS)
feedback_page_params = page_params_for(feedback_repo.SORT_COLUMNS)


@router.get("/stats")
def get_admin_stats(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    """Dashboard: totals, zero-filled distributions, recent activity, 30-day growth."""
    try:
        return {"success": True, "data": get_stats(db)}
    except Exception as e:
        logger.exception("Admin stats failed for admin=%s: %s", admin.email, e)
        raise ServerError("Server error while fetching admin statistics") from e


@router.get("/users")
def list_users(
    search: str | None = None,
    role: str | None = None,
    params: PageParams = Depends(user_page_params),
    db: Session = Depends(get_db),
):
    """Users matching name/email search and role, each with their job count."""
    flt = QueryFilter().where("role", role).matching(search, user_repo.SEARCH_FIELDS)
    try:
        users, total = user_repo.get_paginated(db, flt, params)
        job_counts = job_repo.count_by_user(db, [u.id for u in users])
    except Exception as e:
        logger.exception("Admin user list failed: %s", e)
        raise ServerError("Server error while fetching users") from e
    rows = []
    for u in users:
        row = dump(AdminUserResponse, u)
        row["jobCount"] = job_counts.get(u.id, 0)
        rows.append(row)
    return paginated(rows, total, params)


@router.get("/jobs")
def list_all_jobs(
    status: str | None = None,
    search: str | None = None,
    params: PageParams = Depends(job_page_params),
    db: Session = Depends(get_db),
):
    flt = QueryFilter().where("status", status).matching(search, job_repo.SEARCH_FIELDS)
    try:
        items, total = job_repo.get_paginated(db, flt, params)
    except Exception as e:
        logger.exception("Admin job list failed: %s", e)
        raise ServerError("Server error while fetching jobs") from e
    return paginated([dump(JobResponse, j) for j in items], total, params)


@router.get("/feedback")
def list_all_feedback(
    rating: int | None = Query(None, ge=1, le=5),
    status: str | None = None,
    params: PageParams = Depends(feedback_page_params),
    db: Session = Depends(get_db),
):
    flt = QueryFilter().where("rating", rating).where("status", status)
    try:
        items, total = feedback_repo.get_paginated(db, flt, params)
    except Exception as e:
        logger.exception("Admin feedback list failed: %s", e)
        raise ServerError("Server error while fetching feedback") from e
    return paginated([dump(FeedbackResponse, f) for f in items], total, params)


@router.put("/feedback/{feedback_id}/status")
def update_feedback_status(
    feedback_id: str,
    body: FeedbackStatusUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    try:
        fb = feedback_repo.update_status(db, feedback_id, body.status)
    except Exception as e:
        logger.exception("Feedback status update failed for id=%s: %s", feedback_id, e)
        raise ServerError("Server error while updating feedback status") from e
    if not fb:
        raise NotFound("Feedback not found")
    logger.info("Admin %s set feedback %s status=%s", admin.email, feedback_id, body.status)
    return {"success": True, "message": "Feedback status updated successfully", "data": dump(FeedbackResponse, fb)}


@router.delete("/feedback/{feedback_id}")
def delete_feedback(
    feedback_id: str,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    try:
        deleted = feedback_repo.delete(db, feedback_id)
    except Exception as e:
        logger.exception("Feedback delete failed for id=%s: %s", feedback_id, e)
        raise ServerError("Server error while deleting feedback") from e
    if not deleted:
        raise NotFound("Feedback not found")
    logger.info("Admin %s deleted feedback %s", admin.email, feedback_id)
    return {"success": True, "message": "Feedback deleted successfully"}


@router.put("/users/{user_id}/toggle-status")
def toggle_user_status(
    user_id: str,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    """Activate/deactivate a user. Admins cannot deactivate themselves."""
    if user_id == admin.id:
        raise ValidationFailed("Cannot deactivate your own account")
    try:
        target = user_repo.toggle_active(db, user_id)
    except Exception as e:
        logger.exception("Toggle status failed for user=%s: %s", user_id, e)
        raise ServerError("Server error while updating user status") from e
    if not target:
        raise NotFound("User not found")
    state = "activated" if target.is_active else "deactivated"
    logger.info("Admin %s %s user %s", admin.email, state, user_id)
    return {"success": True, "message": f"User {state} successfully", "data": dump(UserResponse, target)}
