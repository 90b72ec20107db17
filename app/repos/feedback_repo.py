from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.query import PageParams, QueryFilter, fetch_page
from app.core.security import generate_id
from app.models.feedback import Feedback

SORT_COLUMNS = {
    "createdAt": Feedback.created_at,
    "rating": Feedback.rating,
}


def create(db: Session, **fields) -> Feedback:
    fb = Feedback(id=generate_id(), **fields)
    db.add(fb)
    db.commit()
    db.refresh(fb)
    return fb


def get_by_id(db: Session, feedback_id: str) -> Feedback | None:
    return db.query(Feedback).filter(Feedback.id == feedback_id).first()


def update_status(db: Session, feedback_id: str, status: str) -> Feedback | None:
    fb = get_by_id(db, feedback_id)
    if not fb:
        return None
    fb.status = status
    db.commit()
    db.refresh(fb)
    return fb


def delete(db: Session, feedback_id: str) -> bool:
    fb = get_by_id(db, feedback_id)
    if not fb:
        return False
    db.delete(fb)
    db.commit()
    return True


def get_paginated(db: Session, flt: QueryFilter, params: PageParams) -> tuple[list[Feedback], int]:
    q = flt.apply(db.query(Feedback), Feedback)
    return fetch_page(q, params, SORT_COLUMNS, Feedback.id)


def rating_counts(db: Session) -> dict[int, int]:
    rows = db.query(Feedback.rating, func.count(Feedback.id)).group_by(Feedback.rating).all()
    return {r: n for r, n in rows}


def average_rating(db: Session) -> float:
    """Mean rating over all feedback, 0.0 when there is none."""
    avg = db.query(func.avg(Feedback.rating)).scalar()
    return float(avg) if avg is not None else 0.0


def count(db: Session) -> int:
    return db.query(func.count(Feedback.id)).scalar() or 0


def count_created_since(db: Session, since: datetime) -> int:
    return db.query(func.count(Feedback.id)).filter(Feedback.created_at >= since).scalar() or 0


def get_recent(db: Session, limit: int = 5) -> list[Feedback]:
    return db.query(Feedback).order_by(Feedback.created_at.desc(), Feedback.id.desc()).limit(limit).all()
