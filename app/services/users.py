"""
User bootstrap: makes sure a `users` row exists for the signed-in identity.
"""
from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.user import User


def ensure_user(
    db: Session,
    user_id: str,
    name: Optional[str] = None,
    email: Optional[str] = None,
) -> User:
    """
    Idempotent upsert keyed by the identity provider's user id.
    Existing rows keep their values unless a new non-empty value is supplied.
    """
    user = db.get(User, user_id)
    if user is None:
        user = User(id=user_id, name=name, email=email)
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Another request created it first
            db.rollback()
            user = db.get(User, user_id)
    else:
        changed = False
        if name and name != user.name:
            user.name = name
            changed = True
        if email and email != user.email:
            user.email = email
            changed = True
        if changed:
            db.commit()

    db.refresh(user)
    return user
