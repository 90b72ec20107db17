from sqlalchemy import Column, String, Boolean, DateTime, CheckConstraint
from sqlalchemy.orm import relationship

from app.database import Base, utcnow

USER_ROLES = ("applicant", "admin")


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('applicant', 'admin')", name="ck_users_role"),
    )

    id = Column(String, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(String(20), nullable=False, default="applicant", index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # No cascade: removing a user leaves their job rows in place.
    jobs = relationship("Job", back_populates="user", passive_deletes="all")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
