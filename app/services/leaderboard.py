"""
Leaderboard service: joins a roster with each member's latest snapshot.

Public API
----------
latest_snapshots(db, member_ids)              -> dict[member_id, LeetCodeStats]
build_leaderboard(members, latest_by_member)  -> list[LeaderboardRow]
sort_leaderboard(rows, sort_by, descending)   -> list[LeaderboardRow]
group_totals(rows)                            -> GroupTotals
get_leaderboard(db, group, sort_by, descending) -> Leaderboard
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from sqlalchemy.orm import Session

from app.models.group import Group
from app.models.group_member import GroupMember
from app.models.leetcode_stats import LeetCodeStats

SORT_KEYS = ("problems_solved", "contest_rating")


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

def _empty_difficulty() -> dict[str, int]:
    return {"easy": 0, "medium": 0, "hard": 0}


@dataclass
class LeaderboardRow:
    member_id: str
    name: str
    username: str
    problems_solved: int = 0
    problems_solved_by_difficulty: dict[str, int] = field(default_factory=_empty_difficulty)
    total_submissions: int = 0
    recent_submissions: int = 0
    contest_rating: Optional[float] = None
    acceptance_rate: Optional[float] = None
    ranking: Optional[int] = None
    badges: list[Any] = field(default_factory=list)
    fetched_at: Optional[str] = None


@dataclass
class GroupTotals:
    problems_solved: int = 0
    easy: int = 0
    medium: int = 0
    hard: int = 0
    total_submissions: int = 0


@dataclass
class Leaderboard:
    group: Group
    sort_by: str
    descending: bool
    rows: list[LeaderboardRow]
    totals: GroupTotals


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def latest_snapshots(db: Session, member_ids: Iterable[str]) -> dict[str, LeetCodeStats]:
    """Most recent snapshot per member (greatest fetched_at, then greatest id)."""
    ids = list(member_ids)
    if not ids:
        return {}

    rows = (
        db.query(LeetCodeStats)
        .filter(LeetCodeStats.group_member_id.in_(ids))
        .order_by(
            LeetCodeStats.group_member_id,
            LeetCodeStats.fetched_at.desc(),
            LeetCodeStats.id.desc(),
        )
        .all()
    )
    latest: dict[str, LeetCodeStats] = {}
    for row in rows:
        latest.setdefault(row.group_member_id, row)
    return latest


# ---------------------------------------------------------------------------
# Aggregation (pure)
# ---------------------------------------------------------------------------

def build_leaderboard(
    members: Iterable[GroupMember],
    latest_by_member: dict[str, LeetCodeStats],
) -> list[LeaderboardRow]:
    """One row per member in roster order; members without a snapshot get defaults."""
    rows = []
    for member in members:
        row = LeaderboardRow(
            member_id=member.id,
            name=member.display_name,
            username=member.leetcode_username,
        )
        stat = latest_by_member.get(member.id)
        if stat is not None:
            difficulty = _empty_difficulty()
            difficulty.update(stat.problems_solved_by_difficulty or {})
            row.problems_solved = stat.problems_solved or 0
            row.problems_solved_by_difficulty = difficulty
            row.total_submissions = stat.total_submissions or 0
            row.recent_submissions = stat.recent_submissions or 0
            row.contest_rating = stat.contest_rating
            row.acceptance_rate = stat.acceptance_rate
            row.ranking = stat.ranking
            row.badges = stat.badges or []
            row.fetched_at = stat.fetched_at.isoformat() if stat.fetched_at else None
        rows.append(row)
    return rows


def sort_leaderboard(
    rows: list[LeaderboardRow],
    sort_by: str = "problems_solved",
    descending: bool = True,
) -> list[LeaderboardRow]:
    """Stable sort; ties keep roster order in both directions. None sorts as 0."""
    if sort_by not in SORT_KEYS:
        raise ValueError(f"Unsupported sort key: {sort_by}")
    return sorted(rows, key=lambda r: getattr(r, sort_by) or 0, reverse=descending)


def group_totals(rows: Iterable[LeaderboardRow]) -> GroupTotals:
    totals = GroupTotals()
    for row in rows:
        totals.problems_solved += row.problems_solved
        totals.easy += row.problems_solved_by_difficulty.get("easy", 0) or 0
        totals.medium += row.problems_solved_by_difficulty.get("medium", 0) or 0
        totals.hard += row.problems_solved_by_difficulty.get("hard", 0) or 0
        totals.total_submissions += row.total_submissions
    return totals


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def get_leaderboard(
    db: Session,
    group: Group,
    sort_by: str = "problems_solved",
    descending: bool = True,
) -> Leaderboard:
    members = (
        db.query(GroupMember)
        .filter(GroupMember.group_id == group.id)
        .order_by(GroupMember.created_at, GroupMember.id)
        .all()
    )
    rows = build_leaderboard(members, latest_snapshots(db, [m.id for m in members]))
    return Leaderboard(
        group=group,
        sort_by=sort_by,
        descending=descending,
        rows=sort_leaderboard(rows, sort_by, descending),
        totals=group_totals(rows),
    )
