"""Grouped counts, averages and growth windows behind the stats endpoints. Nothing here is cached."""

import math
from datetime import datetime, timedelta, timezone
from typing import Hashable, Iterable

from sqlalchemy.orm import Session

from app.config import settings
from app.models.feedback import FEEDBACK_RATINGS
from app.models.job import JOB_STATUSES
from app.repos import feedback_repo, job_repo
from app.schemas.common import dump
from app.schemas.job import JobResponse

RECENT_LIMIT = 5


def zero_filled_counts(keys: Iterable[Hashable], observed: dict) -> dict:
    """Every key in keys at 0, overlaid with observed counts (unexpected keys kept)."""
    out = {k: 0 for k in keys}
    for k, n in observed.items():
        out[k] = n
    return out


def growth_cutoff(now: datetime | None = None, days: int | None = None) -> datetime:
    """Start of the growth window ending at now (evaluated per call)."""
    now = now or datetime.now(timezone.utc)
    days = settings.stats_growth_window_days if days is None else days
    return now - timedelta(days=days)


def round_rating(value: float) -> float:
    """One decimal place, halves rounded up."""
    return math.floor(value * 10 + 0.5) / 10


def job_overview(db: Session, user_id: str) -> dict:
    observed = job_repo.status_counts(db, user_id=user_id)
    recent = job_repo.get_recent(db, user_id=user_id, limit=RECENT_LIMIT, by="updated_at")
    return {
        "totalJobs": job_repo.count(db, user_id=user_id),
        "statusStats": zero_filled_counts(JOB_STATUSES, observed),
        "recentJobs": [dump(JobResponse, j) for j in recent],
    }


def feedback_stats(db: Session) -> dict:
    return {
        "totalFeedbacks": feedback_repo.count(db),
        "averageRating": feedback_repo.average_rating(db),
        "ratingDistribution": zero_filled_counts(FEEDBACK_RATINGS, feedback_repo.rating_counts(db)),
    }
