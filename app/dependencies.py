import logging

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.errors import Forbidden, Unauthorized
from app.core.security import decode_access_token
from app.database import get_db
from app.models.user import User
from app.repos.user_repo import get_by_id

logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)


def get_current_user(
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User:
    if not credentials:
        logger.info("Auth failed: missing bearer credentials")
        raise Unauthorized("Not authorized, no token")
    user_id = decode_access_token(credentials.credentials)
    if not user_id:
        logger.info("Auth failed: invalid or expired token")
        raise Unauthorized("Not authorized, token failed")
    user = get_by_id(db, user_id)
    if not user:
        logger.info("Auth failed: user from token not found")
        raise Unauthorized("Not authorized, user not found")
    if not user.is_active:
        logger.info("Auth failed: user %s is deactivated", user.id)
        raise Unauthorized("Account is deactivated")
    return user


def require_role(*roles: str):
    """Dependency factory: authenticated user whose role is one of roles."""

    def _authorized(user=Depends(get_current_user)):
        if user.role not in roles:
            logger.info("Auth failed: role %s not in %s for user %s", user.role, roles, user.id)
            raise Forbidden(f"User role {user.role} is not authorized to access this route")
        return user

    return _authorized


get_current_admin = require_role("admin")
