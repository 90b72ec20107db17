from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.query import PageParams, QueryFilter, fetch_page
from app.core.security import hash_password, generate_id
from app.models.user import User

SORT_COLUMNS = {
    "createdAt": User.created_at,
    "updatedAt": User.updated_at,
    "name": User.name,
    "email": User.email,
}
SEARCH_FIELDS = ("name", "email")


def get_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email.lower()).first()


def get_by_id(db: Session, user_id: str) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def create(db: Session, name: str, email: str, password: str, role: str = "applicant") -> User:
    user = User(
        id=generate_id(),
        name=name,
        email=email.lower(),
        password_hash=hash_password(password),
        role=role,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def set_role(db: Session, user_id: str, role: str) -> User | None:
    user = get_by_id(db, user_id)
    if not user:
        return None
    user.role = role
    db.commit()
    db.refresh(user)
    return user


def toggle_active(db: Session, user_id: str) -> User | None:
    """Flip is_active. Returns the updated user, or None if absent."""
    user = get_by_id(db, user_id)
    if not user:
        return None
    user.is_active = not user.is_active
    db.commit()
    db.refresh(user)
    return user


def get_paginated(db: Session, flt: QueryFilter, params: PageParams) -> tuple[list[User], int]:
    """List users matching flt (role, name/email search). Returns (items, total)."""
    q = flt.apply(db.query(User), User)
    return fetch_page(q, params, SORT_COLUMNS, User.id)


def count(db: Session, role: str | None = None) -> int:
    q = db.query(func.count(User.id))
    if role:
        q = q.filter(User.role == role)
    return q.scalar() or 0


def count_created_since(db: Session, since: datetime, role: str | None = None) -> int:
    q = db.query(func.count(User.id)).filter(User.created_at >= since)
    if role:
        q = q.filter(User.role == role)
    return q.scalar() or 0


def get_recent(db: Session, limit: int = 5, role: str | None = None) -> list[User]:
    q = db.query(User)
    if role:
        q = q.filter(User.role == role)
    return q.order_by(User.created_at.desc(), User.id.desc()).limit(limit).all()
