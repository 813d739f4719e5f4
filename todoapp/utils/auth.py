# todoapp/utils/auth.py
import logging

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from todoapp.database import get_db
from todoapp.models.user import User, UserRole
from todoapp.utils.errors import AuthenticationError, AuthorizationError
from todoapp.utils.security import decode_token

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    if not token:
        raise AuthenticationError("Not authorized to access this route")

    try:
        user_id = decode_token(token)
    except AuthenticationError:
        raise AuthenticationError("Invalid or expired token")

    user = db.get(User, user_id)
    if user is None or not user.is_active:
        raise AuthenticationError("User not found or inactive")

    return user


def require_roles(*roles: str):
    """Dependency factory that only lets users with one of ``roles`` through"""
    allowed = {r.value if isinstance(r, UserRole) else r for r in roles}

    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            logger.warning(f"User {current_user.id} with role '{current_user.role}' denied role-restricted route")
            raise AuthorizationError(f"Role '{current_user.role}' is not authorized to access this route")
        return current_user

    return dependency


require_admin = require_roles(UserRole.ADMIN)
