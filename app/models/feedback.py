from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, CheckConstraint

from app.database import Base, utcnow

FEEDBACK_CATEGORIES = ("general", "feature", "bug", "improvement")
FEEDBACK_STATUSES = ("pending", "reviewed", "resolved")
FEEDBACK_RATINGS = (5, 4, 3, 2, 1)


class Feedback(Base):
    """Product feedback; may be submitted without an account."""

    __tablename__ = "feedback"
    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_feedback_rating_range"),
        CheckConstraint(
            "status IN ('pending', 'reviewed', 'resolved')",
            name="ck_feedback_status",
        ),
    )

    id = Column(String, primary_key=True, index=True)
    name = Column(String(50))
    email = Column(String)
    feedback = Column(Text, nullable=False)
    rating = Column(Integer, nullable=False, index=True)
    category = Column(String(20), nullable=False, default="general")
    is_public = Column(Boolean, nullable=False, default=True)
    status = Column(String(20), nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
