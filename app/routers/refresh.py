"""
Refresh router.

POST /refresh-stats: append a new stats snapshot for a scoped roster
"""
from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.db.base import get_db
from app.schemas.refresh import RefreshResponse
from app.services.refresh import RefreshScope, refresh_stats

logger = logging.getLogger(__name__)

router = APIRouter(tags=["refresh"])


def _optional_id(body: dict, key: str) -> str | None:
    value = body.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


async def _read_scope(request: Request) -> RefreshScope:
    """
    Parse `{group_id?, member_id?}` leniently.

    An empty, malformed or non-object body yields the unscoped default
    (every member) instead of a 4xx.
    """
    raw = await request.body()
    if not raw:
        return RefreshScope()
    try:
        body = json.loads(raw)
    except ValueError:
        logger.info("Ignoring malformed refresh body")
        return RefreshScope()
    if not isinstance(body, dict):
        return RefreshScope()
    return RefreshScope(
        group_id=_optional_id(body, "group_id"),
        member_id=_optional_id(body, "member_id"),
    )


@router.post(
    "/refresh-stats",
    response_model=RefreshResponse,
    summary="Refresh LeetCode stats for a group, a member, or everyone",
    responses={
        200: {"description": "Count of members that got a new snapshot (may be 0)."},
        500: {"description": "The roster itself could not be loaded."},
    },
)
async def refresh_stats_endpoint(request: Request, db: Session = Depends(get_db)):
    """
    Fetch fresh statistics for every member in scope and store one snapshot each.

    - `{"group_id": ...}` → members of that group
    - `{"member_id": ...}` → that single member
    - no body / no filters → **every member of every group**

    Members whose lookup fails are skipped; the response still succeeds.
    """
    scope = await _read_scope(request)
    result = await run_in_threadpool(refresh_stats, db, scope)
    return RefreshResponse(updated=result.updated)
