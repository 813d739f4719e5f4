# todoapp/utils/security.py
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from todoapp.config.settings import settings
from todoapp.utils.errors import AuthenticationError

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def _create_token(user_id: int, token_type: str, secret: str, expires_delta: timedelta) -> str:
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {"sub": str(user_id), "type": token_type, "exp": expire}
    return jwt.encode(to_encode, secret, algorithm=settings.JWT_ALGORITHM)


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    return _create_token(
        user_id,
        ACCESS_TOKEN,
        settings.JWT_SECRET,
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    return _create_token(
        user_id,
        REFRESH_TOKEN,
        settings.JWT_REFRESH_SECRET,
        expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )


def create_token_pair(user_id: int) -> dict:
    return {
        "access_token": create_access_token(user_id),
        "refresh_token": create_refresh_token(user_id),
        "token_type": "bearer",
    }


def decode_token(token: str, refresh: bool = False) -> int:
    """Verify a token and return the user id it carries.

    Raises AuthenticationError for expired, malformed or wrongly signed
    tokens, and for tokens of the other type.
    """
    secret = settings.JWT_REFRESH_SECRET if refresh else settings.JWT_SECRET
    expected_type = REFRESH_TOKEN if refresh else ACCESS_TOKEN
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except JWTError:
        raise AuthenticationError("Invalid token")

    subject = payload.get("sub")
    if subject is None or payload.get("type") != expected_type:
        raise AuthenticationError("Invalid token")
    try:
        return int(subject)
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid token")
