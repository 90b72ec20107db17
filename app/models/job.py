from sqlalchemy import Column, String, Text, Float, ForeignKey, DateTime, Index, CheckConstraint
from sqlalchemy.orm import relationship

from app.database import Base, utcnow

JOB_STATUSES = ("applied", "interview", "offer", "rejected", "accepted")


class Job(Base):
    """A job application recorded by (and visible only to) its owner."""

    __tablename__ = "jobs"
    __table_args__ = (
        Index("ix_jobs_user_created", "user_id", "created_at"),
        CheckConstraint(
            "status IN ('applied', 'interview', 'offer', 'rejected', 'accepted')",
            name="ck_jobs_status",
        ),
        CheckConstraint("salary IS NULL OR salary >= 0", name="ck_jobs_salary_non_negative"),
    )

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    company = Column(String(100), nullable=False)
    position = Column(String(100), nullable=False)
    status = Column(String(20), nullable=False, default="applied", index=True)
    applied_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    notes = Column(Text)
    salary = Column(Float)
    location = Column(String(100))
    job_url = Column(String)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="jobs")
