"""
Refresh service: fetches fresh LeetCode statistics for a roster and appends
one `leetcode_stats` snapshot per member.

Public API
----------
refresh_stats(db, scope)    → RefreshResult

Members are processed one after another in roster order. Every failure for a
member (lookup, auxiliary fetch, build or insert) is logged and the member is
skipped; nothing is written for it. Only a failure to load the roster aborts
the batch.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import StorageFailureError
from app.models.group_member import GroupMember
from app.models.leetcode_stats import LeetCodeStats
from app.services import leetcode_client
from app.services.snapshot import build_snapshot

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

@dataclass
class RefreshScope:
    """Roster filter. Both unset means every member of every group."""
    group_id: Optional[str] = None
    member_id: Optional[str] = None

    @property
    def is_global(self) -> bool:
        return self.group_id is None and self.member_id is None


@dataclass
class RefreshResult:
    updated: int = 0
    skipped: list[str] = field(default_factory=list)  # member ids


@dataclass
class _RosterEntry:
    member_id: str
    username: str


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_roster(db: Session, scope: RefreshScope) -> list[_RosterEntry]:
    try:
        query = db.query(GroupMember.id, GroupMember.leetcode_username)
        if scope.group_id:
            query = query.filter(GroupMember.group_id == scope.group_id)
        if scope.member_id:
            query = query.filter(GroupMember.id == scope.member_id)
        rows = query.order_by(GroupMember.created_at, GroupMember.id).all()
    except SQLAlchemyError as exc:
        logger.exception("Could not load roster for %s", scope)
        raise StorageFailureError("Failed to fetch members") from exc

    return [_RosterEntry(member_id=r.id, username=r.leetcode_username) for r in rows]


def _refresh_member(
    db: Session,
    entry: _RosterEntry,
    fetch_profile: Callable,
    fetch_language_stats: Callable,
    fetch_skill_stats: Callable,
) -> None:
    """Fetch → build → insert + commit for one member. Raises on any failure."""
    profile = fetch_profile(entry.username)
    snapshot = build_snapshot(
        profile,
        language_stats=fetch_language_stats(entry.username),
        skill_stats=fetch_skill_stats(entry.username),
    )
    db.add(LeetCodeStats(group_member_id=entry.member_id, **snapshot.as_row()))
    db.commit()


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def refresh_stats(
    db: Session,
    scope: Optional[RefreshScope] = None,
    fetch_profile: Optional[Callable] = None,
    fetch_language_stats: Optional[Callable] = None,
    fetch_skill_stats: Optional[Callable] = None,
) -> RefreshResult:
    """
    Append a fresh snapshot for every member in `scope`.

    The fetchers default to the live LeetCode clients and are resolved at call
    time so tests can patch `app.services.leetcode_client`.
    """
    scope = scope or RefreshScope()
    fetch_profile = fetch_profile or leetcode_client.fetch_profile
    fetch_language_stats = fetch_language_stats or leetcode_client.fetch_language_stats
    fetch_skill_stats = fetch_skill_stats or leetcode_client.fetch_skill_stats

    if scope.is_global:
        logger.warning("Refresh requested without a scope; refreshing every member")

    roster = _load_roster(db, scope)
    result = RefreshResult()

    for entry in roster:
        try:
            _refresh_member(db, entry, fetch_profile, fetch_language_stats, fetch_skill_stats)
        except Exception as exc:
            db.rollback()
            result.skipped.append(entry.member_id)
            logger.warning(
                "Skipping member %s (%s): %s", entry.member_id, entry.username, exc
            )
            continue
        result.updated += 1

    logger.info(
        "Refresh finished: %d updated, %d skipped of %d members",
        result.updated, len(result.skipped), len(roster),
    )
    return result
