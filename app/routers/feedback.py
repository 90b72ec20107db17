import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.errors import ServerError
from app.core.query import PageParams, QueryFilter, page_params_for, paginated
from app.database import get_db
from app.repos.feedback_repo import create as create_feedback, get_paginated
from app.schemas.common import dump
from app.schemas.feedback import FeedbackCreate, FeedbackPublicResponse, FeedbackResponse
from app.services.notifier import ADMIN_ROOM, Notifier, get_notifier, publish
from app.services.stats_service import feedback_stats

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/feedback", tags=["feedback"])

public_page_params = page_params_for(("createdAt",))


@router.post("", status_code=status.HTTP_201_CREATED)
def submit_feedback(
    body: FeedbackCreate,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    """Submit feedback. No account required; admins are notified in real time."""
    try:
        fb = create_feedback(db, **body.model_dump())
        data = dump(FeedbackResponse, fb)
    except Exception as e:
        logger.exception("Feedback submit failed: %s", e)
        raise ServerError("Server error while submitting feedback") from e
    logger.info("Feedback received: id=%s rating=%d", fb.id, fb.rating)
    publish(
        notifier,
        "new-feedback",
        {
            "message": "New feedback received",
            "feedback": data,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        room=ADMIN_ROOM,
    )
    return {"success": True, "message": "Feedback submitted successfully", "data": data}


@router.get("/public")
def list_public_feedback(
    rating: int | None = Query(None, ge=1, le=5),
    params: PageParams = Depends(public_page_params),
    db: Session = Depends(get_db),
):
    """Public feedback, newest first. Submitter emails are never included."""
    flt = QueryFilter().where("is_public", True).where("rating", rating)
    try:
        items, total = get_paginated(db, flt, params)
    except Exception as e:
        logger.exception("Public feedback list failed: %s", e)
        raise ServerError("Server error while fetching feedback") from e
    return paginated([dump(FeedbackPublicResponse, f) for f in items], total, params)


@router.get("/stats")
def get_feedback_stats(db: Session = Depends(get_db)):
    try:
        return {"success": True, "data": feedback_stats(db)}
    except Exception as e:
        logger.exception("Feedback stats failed: %s", e)
        raise ServerError("Server error while fetching feedback statistics") from e
