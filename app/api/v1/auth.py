"""
Authentication routes (register, login, logout, me)
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, EmailStr, Field, model_validator
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user, get_current_token
from app.application.users import RegisterUserUseCase, UserValidationError
from app.auth import verify_password, get_user_by_email, issue_access_token, revoke_access_token
from app.config import get_settings
from app.domain.activity import ACTIVITY_USER_LOGGED_IN, ACTIVITY_USER_LOGGED_OUT
from app.infrastructure.activitylog.repository import ActivityRecorder
from app.infrastructure.db.models import User, AccessToken


router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


# === Request/Response models ===

class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr = Field(max_length=255)
    password: str
    password_confirmation: str
    avatar: str | None = None
    phone_number: str | None = Field(default=None, max_length=20)

    @model_validator(mode="after")
    def check_password(self) -> "RegisterRequest":
        """Minimum length and confirmation match"""
        min_length = get_settings().PASSWORD_MIN_LENGTH
        if len(self.password) < min_length:
            raise ValueError(f"The password must be at least {min_length} characters.")
        if self.password != self.password_confirmation:
            raise ValueError("The password confirmation does not match.")
        return self


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    avatar: str | None
    phone_number: str | None
    is_admin: bool
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            avatar=user.avatar,
            phone_number=user.phone_number,
            is_admin=user.is_admin,
            created_at=user.created_at,
        )


class TokenResponse(BaseModel):
    message: str
    user: UserResponse
    access_token: str
    token_type: str = "Bearer"


class MeResponse(BaseModel):
    user: UserResponse


# === Endpoints ===

@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(req: RegisterRequest, db: Session = Depends(get_db)):
    """Register a user and issue a token"""
    try:
        user = RegisterUserUseCase(db).execute(
            name=req.name,
            email=req.email,
            password=req.password,
            avatar=req.avatar,
            phone_number=req.phone_number,
        )
    except UserValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    token = issue_access_token(db, user)
    db.commit()

    return TokenResponse(
        message="User registered successfully",
        user=UserResponse.from_user(user),
        access_token=token,
    )


@router.post("/login", response_model=TokenResponse)
def login(request: Request, req: LoginRequest, db: Session = Depends(get_db)):
    """Check credentials and issue a new token"""
    user = get_user_by_email(db, req.email)

    if not user or not verify_password(req.password, user.password_hash):
        raise HTTPException(status_code=422, detail="The provided credentials are incorrect.")

    token = issue_access_token(db, user)
    user.last_seen_at = datetime.now(timezone.utc)
    db.commit()

    ActivityRecorder(db).record(user.id, ACTIVITY_USER_LOGGED_IN, {
        "email": user.email,
        "ip_address": request.client.host if request.client else None,
    })

    return TokenResponse(
        message="Login successful",
        user=UserResponse.from_user(user),
        access_token=token,
    )


@router.post("/logout")
def logout(
    access_token: AccessToken = Depends(get_current_token),
    db: Session = Depends(get_db),
):
    """Revoke the token used for this request"""
    user = access_token.user
    user_id, email = user.id, user.email

    revoke_access_token(db, access_token)
    db.commit()

    ActivityRecorder(db).record(user_id, ACTIVITY_USER_LOGGED_OUT, {"email": email})

    return {"message": "Logout successful"}


@router.get("/me", response_model=MeResponse)
def me(user: User = Depends(get_current_user)):
    """Current user"""
    return MeResponse(user=UserResponse.from_user(user))
