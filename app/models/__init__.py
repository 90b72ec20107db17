from app.models.user import User
from app.models.job import Job
from app.models.feedback import Feedback

__all__ = [
    "User",
    "Job",
    "Feedback",
]
