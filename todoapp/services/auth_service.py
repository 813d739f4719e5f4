# todoapp/services/auth_service.py
import logging

from sqlalchemy.orm import Session

from todoapp.models.user import User, UserRole
from todoapp.schemas.user import ProfileUpdate, UserRegister
from todoapp.utils.errors import AuthenticationError, ConflictError
from todoapp.utils.security import create_token_pair, decode_token, hash_password, verify_password

logger = logging.getLogger(__name__)


def _auth_result(user: User) -> dict:
    result = create_token_pair(user.id)
    result["user"] = user
    return result


class AuthService:
    @staticmethod
    def find_by_email(db: Session, email: str) -> User:
        return db.query(User).filter(User.email == email.lower()).first()

    @staticmethod
    def register(db: Session, data: UserRegister) -> dict:
        email = data.email.lower()
        if AuthService.find_by_email(db, email):
            raise ConflictError("Email already registered")

        # Public sign-up never grants admin
        user = User(
            name=data.name,
            email=email,
            hashed_password=hash_password(data.password),
            role=UserRole.USER.value,
            is_active=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)

        logger.info(f"User {user.id} registered")
        return _auth_result(user)

    @staticmethod
    def login(db: Session, email: str, password: str) -> dict:
        user = AuthService.find_by_email(db, email)
        if not user or not verify_password(password, user.hashed_password):
            logger.warning("Failed login attempt")
            raise AuthenticationError("Invalid email or password")

        if not user.is_active:
            raise AuthenticationError("Account is deactivated")

        return _auth_result(user)

    @staticmethod
    def refresh(db: Session, refresh_token: str) -> dict:
        user_id = decode_token(refresh_token, refresh=True)
        user = db.get(User, user_id)
        if user is None or not user.is_active:
            raise AuthenticationError("User not found or inactive")
        return create_token_pair(user.id)

    @staticmethod
    def get_profile(db: Session, user_id: int) -> User:
        user = db.get(User, user_id)
        if not user:
            raise AuthenticationError("User not found")
        return user

    @staticmethod
    def update_profile(db: Session, user_id: int, data: ProfileUpdate) -> User:
        user = AuthService.get_profile(db, user_id)
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)

        if "email" in update_data:
            update_data["email"] = update_data["email"].lower()
            existing = db.query(User).filter(User.email == update_data["email"], User.id != user_id).first()
            if existing:
                raise ConflictError("Email already in use")

        for field, value in update_data.items():
            setattr(user, field, value)

        db.commit()
        db.refresh(user)
        return user
