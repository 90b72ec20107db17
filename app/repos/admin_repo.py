"""Admin dashboard stats across users, jobs and feedback."""

from datetime import datetime

from sqlalchemy.orm import Session

from app.models.feedback import FEEDBACK_RATINGS
from app.models.job import JOB_STATUSES
from app.repos import feedback_repo, job_repo, user_repo
from app.schemas.auth import UserResponse
from app.schemas.common import dump
from app.schemas.feedback import FeedbackResponse
from app.schemas.job import JobResponse
from app.services.stats_service import RECENT_LIMIT, growth_cutoff, round_rating, zero_filled_counts

APPLICANT = "applicant"


def get_stats(db: Session, now: datetime | None = None) -> dict:
    """Return admin dashboard stats. User figures count applicants only."""
    since = growth_cutoff(now)
    recent_users = user_repo.get_recent(db, limit=RECENT_LIMIT, role=APPLICANT)
    recent_jobs = job_repo.get_recent(db, limit=RECENT_LIMIT, by="created_at")
    recent_feedbacks = feedback_repo.get_recent(db, limit=RECENT_LIMIT)
    return {
        "overview": {
            "totalUsers": user_repo.count(db, role=APPLICANT),
            "totalJobs": job_repo.count(db),
            "totalFeedbacks": feedback_repo.count(db),
            "averageRating": round_rating(feedback_repo.average_rating(db)),
        },
        "jobStatusStats": zero_filled_counts(JOB_STATUSES, job_repo.status_counts(db)),
        "feedbackRatingStats": zero_filled_counts(FEEDBACK_RATINGS, feedback_repo.rating_counts(db)),
        "recentActivity": {
            "users": [dump(UserResponse, u) for u in recent_users],
            "jobs": [dump(JobResponse, j) for j in recent_jobs],
            "feedbacks": [dump(FeedbackResponse, f) for f in recent_feedbacks],
        },
        "growth": {
            "newUsers": user_repo.count_created_since(db, since, role=APPLICANT),
            "newJobs": job_repo.count_created_since(db, since),
            "newFeedbacks": feedback_repo.count_created_since(db, since),
        },
    }
