"""
Users router.

POST /users/me: create-or-update the signed-in user's row
"""
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.security import get_current_user_id
from app.db.base import get_db
from app.schemas.user import UserBootstrapRequest, UserOut
from app.services.users import ensure_user

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/me", response_model=UserOut, summary="Bootstrap the signed-in user")
def bootstrap_user(
    payload: Optional[UserBootstrapRequest] = None,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Idempotent: call once per session; repeated calls return the same row."""
    payload = payload or UserBootstrapRequest()
    user = ensure_user(db, user_id, name=payload.name, email=payload.email)
    return UserOut(
        id=user.id,
        name=user.name,
        email=user.email,
        created_at=user.created_at.isoformat() if user.created_at else "",
    )
