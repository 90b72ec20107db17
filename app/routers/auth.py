import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.errors import Forbidden, ServerError, Unauthorized, ValidationFailed
from app.core.security import verify_password, create_access_token
from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.repos.user_repo import get_by_email, create as create_user
from app.schemas.auth import UserLogin, UserRegister, UserResponse
from app.schemas.common import dump

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


def _token_response(user: User, message: str) -> dict:
    return {
        "success": True,
        "message": message,
        "data": {
            "token": create_access_token(user.id),
            "user": dump(UserResponse, user),
        },
    }


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(data: UserRegister, db: Session = Depends(get_db)):
    try:
        if get_by_email(db, data.email):
            raise ValidationFailed(
                "User already exists with this email",
                errors=[{"field": "email", "message": "Email already registered", "location": "body"}],
            )
        user = create_user(db, data.name, data.email, data.password, role=data.role)
        logger.info("User registered: %s role=%s", user.email, user.role)
        return _token_response(user, "User registered successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Register failed for email=%s: %s", data.email, e)
        raise ServerError("Server error during registration") from e


@router.post("/login")
def login(data: UserLogin, db: Session = Depends(get_db)):
    try:
        user = get_by_email(db, data.email)
        if not user or not verify_password(data.password, user.password_hash):
            raise Unauthorized("Invalid credentials")
        if not user.is_active:
            raise Forbidden("Account is deactivated. Please contact administrator.")
        logger.info("User logged in: %s", user.email)
        return _token_response(user, "Login successful")
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Login failed for email=%s: %s", data.email, e)
        raise ServerError("Server error during login") from e


@router.get("/me")
def get_me(user: User = Depends(get_current_user)):
    return {"success": True, "data": dump(UserResponse, user)}
