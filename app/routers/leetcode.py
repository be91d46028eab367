"""
LeetCode proxy router.

GET /profile-lookup?username=: confirm a username and return its raw profile
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query

from app.services import leetcode_client

router = APIRouter(tags=["leetcode"])


@router.get(
    "/profile-lookup",
    summary="Look up a LeetCode profile",
    responses={
        200: {"description": "Raw upstream profile (`{matchedUser: {...}}`)."},
        400: {"description": "`username` missing or blank."},
        404: {"description": "LeetCode has no account with this username."},
        500: {"description": "LeetCode could not be reached or answered garbage."},
    },
)
def profile_lookup(
    username: Optional[str] = Query(
        default=None,
        description="LeetCode username to confirm.",
        examples=["ana_codes"],
    ),
):
    """
    Proxy a single profile lookup to LeetCode.

    Used by clients to confirm a username before adding it to a group.
    """
    return leetcode_client.fetch_profile(username)
