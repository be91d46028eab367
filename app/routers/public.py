"""
Public router (no authentication).

GET /public/{public_link}: read-only leaderboard for a shared group
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.routers.groups import leaderboard_to_response
from app.schemas.leaderboard import LeaderboardResponse, SortKey, SortOrder
from app.services.groups import get_group_by_public_link
from app.services.leaderboard import get_leaderboard

router = APIRouter(prefix="/public", tags=["public"])


@router.get(
    "/{public_link}",
    response_model=LeaderboardResponse,
    summary="Shared leaderboard",
    responses={404: {"description": "No group has this token."}},
)
def public_leaderboard(
    public_link: str,
    sort_by: SortKey = Query(default=SortKey.problems_solved),
    order: SortOrder = Query(default=SortOrder.desc),
    db: Session = Depends(get_db),
):
    """Anyone holding the token can read the group's latest leaderboard."""
    group = get_group_by_public_link(db, public_link)
    lb = get_leaderboard(db, group, sort_by=sort_by.value, descending=order == SortOrder.desc)
    return leaderboard_to_response(lb)
