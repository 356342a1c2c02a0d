"""
User use cases - registration and removal
"""
import logging

from sqlalchemy.orm import Session

from app.auth import hash_password, get_user_by_email
from app.domain.activity import ACTIVITY_USER_REGISTERED
from app.infrastructure.activitylog.repository import ActivityRecorder
from app.infrastructure.db.models import User

logger = logging.getLogger(__name__)


class UserValidationError(ValueError):
    """Invalid registration data"""
    pass


class UserNotFoundError(LookupError):
    pass


class RegisterUserUseCase:
    """Use case: register a user"""

    def __init__(self, db: Session):
        self.db = db
        self.recorder = ActivityRecorder(db)

    def execute(
        self,
        name: str,
        email: str,
        password: str,
        avatar: str | None = None,
        phone_number: str | None = None,
        is_admin: bool = False,
    ) -> User:
        """
        Create the user and record "User registered"

        Raises:
            UserValidationError: if the email is already registered
        """
        email = email.strip().lower()
        if get_user_by_email(self.db, email):
            raise UserValidationError("The email has already been taken.")

        user = User(
            name=name.strip(),
            email=email,
            password_hash=hash_password(password),
            avatar=avatar,
            phone_number=phone_number,
            is_admin=is_admin,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        self.recorder.record(user.id, ACTIVITY_USER_REGISTERED, {
            "email": user.email,
            "name": user.name,
        })

        return user


class DeleteUserUseCase:
    """
    Use case: remove a user together with savings, wishes, activity log
    entries and access tokens (ON DELETE CASCADE)
    """

    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: int) -> None:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise UserNotFoundError(f"User #{user_id} not found")

        self.db.delete(user)
        self.db.commit()
        logger.info("Deleted user %s with all owned rows", user_id)
