"""
Admin API routes.

Access: only users with is_admin=True.
"""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_admin
from app.api.v1.auth import UserResponse
from app.application.users import DeleteUserUseCase, UserNotFoundError
from app.infrastructure.db.models import User

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


class UsersEnvelope(BaseModel):
    message: str
    data: list[UserResponse]


@router.get("/users", response_model=UsersEnvelope)
def admin_users(admin_user: User = Depends(require_admin), db: Session = Depends(get_db)):
    users = db.query(User).order_by(User.id.asc()).all()
    return UsersEnvelope(
        message="Users retrieved successfully",
        data=[UserResponse.from_user(u) for u in users],
    )


@router.delete("/users/{user_id}")
def admin_user_delete(
    user_id: int,
    admin_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Remove a user with all savings, wishes, logs and tokens"""
    if user_id == admin_user.id:
        raise HTTPException(status_code=422, detail="Admins cannot delete themselves")

    try:
        DeleteUserUseCase(db).execute(user_id)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    return {"message": "User deleted successfully"}
