# todoapp/routers/auth.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from todoapp.database import get_db
from todoapp.models.user import User
from todoapp.schemas import AuthResult, ProfileUpdate, RefreshRequest, TokenPair, UserLogin, UserOut, UserRegister, envelope
from todoapp.services.auth_service import AuthService
from todoapp.utils.auth import get_current_user

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _auth_payload(result: dict) -> AuthResult:
    return AuthResult(
        user=UserOut.model_validate(result["user"]),
        access_token=result["access_token"],
        refresh_token=result["refresh_token"],
        token_type=result["token_type"],
    )


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: UserRegister, db: Session = Depends(get_db)):
    result = AuthService.register(db, payload)
    return envelope(_auth_payload(result), "User registered successfully")


@router.post("/login")
def login(payload: UserLogin, db: Session = Depends(get_db)):
    result = AuthService.login(db, payload.email, payload.password)
    return envelope(_auth_payload(result), "Login successful")


@router.post("/refresh")
def refresh(payload: RefreshRequest, db: Session = Depends(get_db)):
    tokens = AuthService.refresh(db, payload.refresh_token)
    return envelope(TokenPair(**tokens), "Token refreshed")


@router.post("/logout")
def logout(current_user: User = Depends(get_current_user)):
    # Tokens are stateless; the client discards them
    return envelope(message="Logout successful")


@router.get("/profile")
def get_profile(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    user = AuthService.get_profile(db, current_user.id)
    return envelope({"user": UserOut.model_validate(user)})


@router.put("/profile")
def update_profile(
    payload: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = AuthService.update_profile(db, current_user.id, payload)
    return envelope({"user": UserOut.model_validate(user)}, "Profile updated successfully")
