"""
Groups router (owner-only).

GET    /groups
POST   /groups
GET    /groups/{group_id}
POST   /groups/{group_id}/members
POST   /groups/{group_id}/members/import
PATCH  /groups/{group_id}/members/{member_id}
DELETE /groups/{group_id}/members/{member_id}
GET    /groups/{group_id}/leaderboard
POST   /groups/{group_id}/share
DELETE /groups/{group_id}/share
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.core.errors import LeetBoardException
from app.core.security import get_current_user_id
from app.db.base import get_db
from app.models.group import Group
from app.models.group_member import GroupMember
from app.schemas.group import (
    GroupCreateRequest,
    GroupCreateResponse,
    GroupDetailOut,
    GroupSummaryOut,
    MemberCreateRequest,
    MemberImportRequest,
    MemberImportResponse,
    MemberOut,
    ShareLinkResponse,
)
from app.schemas.leaderboard import (
    DifficultyBreakdown,
    GroupTotalsOut,
    LeaderboardResponse,
    LeaderboardRowOut,
    SortKey,
    SortOrder,
)
from app.services import groups as group_service
from app.services.groups import MemberRow
from app.services.leaderboard import Leaderboard, get_leaderboard
from app.services.refresh import RefreshScope, refresh_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/groups", tags=["groups"])


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _member_to_response(m: GroupMember) -> MemberOut:
    return MemberOut(
        id=m.id,
        group_id=m.group_id,
        display_name=m.display_name,
        leetcode_username=m.leetcode_username,
        created_at=m.created_at.isoformat() if m.created_at else "",
    )


def _group_to_summary(g: Group, member_count: int) -> GroupSummaryOut:
    return GroupSummaryOut(
        id=g.id,
        name=g.name,
        description=g.description,
        owner_id=g.owner_id,
        is_public=g.is_public,
        public_link=g.public_link,
        created_at=g.created_at.isoformat() if g.created_at else "",
        member_count=member_count,
    )


def _group_to_detail(g: Group, members: list[GroupMember]) -> GroupDetailOut:
    summary = _group_to_summary(g, len(members))
    return GroupDetailOut(
        **summary.model_dump(),
        members=[_member_to_response(m) for m in members],
    )


def leaderboard_to_response(lb: Leaderboard) -> LeaderboardResponse:
    return LeaderboardResponse(
        group_id=lb.group.id,
        group_name=lb.group.name,
        description=lb.group.description,
        sort_by=SortKey(lb.sort_by),
        order=SortOrder.desc if lb.descending else SortOrder.asc,
        rows=[
            LeaderboardRowOut(
                member_id=r.member_id,
                name=r.name,
                username=r.username,
                problems_solved=r.problems_solved,
                problems_solved_by_difficulty=DifficultyBreakdown(**r.problems_solved_by_difficulty),
                total_submissions=r.total_submissions,
                recent_submissions=r.recent_submissions,
                contest_rating=r.contest_rating,
                acceptance_rate=r.acceptance_rate,
                ranking=r.ranking,
                badges=r.badges,
                fetched_at=r.fetched_at,
            )
            for r in lb.rows
        ],
        totals=GroupTotalsOut(
            problems_solved=lb.totals.problems_solved,
            easy=lb.totals.easy,
            medium=lb.totals.medium,
            hard=lb.totals.hard,
            total_submissions=lb.totals.total_submissions,
        ),
    )


def _owned_group(
    group_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> Group:
    return group_service.get_owned_group(db, group_id, user_id)


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------

@router.get("", response_model=list[GroupSummaryOut], summary="List my groups")
def list_groups(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return [_group_to_summary(g, n) for g, n in group_service.list_groups(db, user_id)]


@router.post(
    "",
    response_model=GroupCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a group",
)
def create_group(
    payload: GroupCreateRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Create a private group owned by the caller.

    Each initial member is confirmed against LeetCode; unconfirmed or duplicate
    usernames are reported back instead of failing the request. A stats refresh
    for the new group runs before the response is returned.
    """
    group, imported = group_service.create_group(
        db,
        owner_id=user_id,
        name=payload.name,
        description=payload.description,
        rows=[MemberRow(name=r.name, username=r.username) for r in payload.members],
    )
    updated = 0
    if imported.added:
        try:
            updated = refresh_stats(db, RefreshScope(group_id=group.id)).updated
        except LeetBoardException as exc:
            db.rollback()
            logger.warning("Initial refresh for group %s failed: %s", group.id, exc.message)

    return GroupCreateResponse(
        group=_group_to_detail(group, imported.added),
        rejected=imported.rejected,
        duplicates=imported.duplicates,
        updated=updated,
    )


@router.get("/{group_id}", response_model=GroupDetailOut, summary="Group with its members")
def get_group(group: Group = Depends(_owned_group), db: Session = Depends(get_db)):
    return _group_to_detail(group, group_service.list_members(db, group))


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------

@router.post(
    "/{group_id}/members",
    response_model=MemberOut,
    status_code=status.HTTP_201_CREATED,
    summary="Add a member",
    responses={
        404: {"description": "LeetCode has no such user."},
        500: {"description": "LeetCode could not be reached."},
    },
)
def add_member(
    payload: MemberCreateRequest,
    group: Group = Depends(_owned_group),
    db: Session = Depends(get_db),
):
    member = group_service.add_member(db, group, payload.name, payload.username)
    return _member_to_response(member)


@router.post(
    "/{group_id}/members/import",
    response_model=MemberImportResponse,
    summary="Bulk-add members from parsed spreadsheet rows",
)
def import_members(
    payload: MemberImportRequest,
    group: Group = Depends(_owned_group),
    db: Session = Depends(get_db),
):
    """
    Rows missing a name or username are ignored. Every remaining username is
    confirmed against LeetCode independently; usernames already in the group
    are skipped by exact match.
    """
    result = group_service.import_members(
        db, group, [MemberRow(name=r.name, username=r.username) for r in payload.rows]
    )
    return MemberImportResponse(
        added=[_member_to_response(m) for m in result.added],
        rejected=result.rejected,
        duplicates=result.duplicates,
    )


@router.patch(
    "/{group_id}/members/{member_id}",
    response_model=MemberOut,
    summary="Rename a member or change their username",
)
def update_member(
    member_id: str,
    payload: MemberCreateRequest,
    group: Group = Depends(_owned_group),
    db: Session = Depends(get_db),
):
    member = group_service.update_member(db, group, member_id, payload.name, payload.username)
    return _member_to_response(member)


@router.delete(
    "/{group_id}/members/{member_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a member",
)
def delete_member(
    member_id: str,
    group: Group = Depends(_owned_group),
    db: Session = Depends(get_db),
):
    group_service.delete_member(db, group, member_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Leaderboard & sharing
# ---------------------------------------------------------------------------

@router.get(
    "/{group_id}/leaderboard",
    response_model=LeaderboardResponse,
    summary="Leaderboard from each member's latest snapshot",
)
def group_leaderboard(
    sort_by: SortKey = Query(default=SortKey.problems_solved),
    order: SortOrder = Query(default=SortOrder.desc),
    group: Group = Depends(_owned_group),
    db: Session = Depends(get_db),
):
    lb = get_leaderboard(db, group, sort_by=sort_by.value, descending=order == SortOrder.desc)
    return leaderboard_to_response(lb)


@router.post(
    "/{group_id}/share",
    response_model=ShareLinkResponse,
    summary="Get (or create) the public share token",
)
def share_group(group: Group = Depends(_owned_group), db: Session = Depends(get_db)):
    """Idempotent: the first call issues a token, later calls return the same one."""
    return ShareLinkResponse(public_link=group_service.ensure_public_link(db, group))


@router.delete(
    "/{group_id}/share",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Revoke the public share token",
)
def unshare_group(group: Group = Depends(_owned_group), db: Session = Depends(get_db)):
    group_service.clear_public_link(db, group)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
