"""
Identity boundary.

Authentication is handled by the external identity provider in front of this
API; it forwards the signed-in user's id in the `X-User-Id` header. Only that
id is consumed here.
"""
from typing import Optional

from fastapi import Header

from app.core.errors import AuthenticationRequiredError

USER_ID_HEADER = "X-User-Id"


def get_current_user_id(
    x_user_id: Optional[str] = Header(default=None, alias=USER_ID_HEADER),
) -> str:
    if not x_user_id or not x_user_id.strip():
        raise AuthenticationRequiredError()
    return x_user_id.strip()
