"""
Snapshot builder: flattens a LeetCode profile payload into the columns of a
`leetcode_stats` row.

Public API
----------
build_snapshot(profile, language_stats, skill_stats, now) -> SnapshotData
recent_submission_count(calendar, now)                   -> int | None

Only the fields named below are read from the opaque upstream payload; the
payload itself is carried through untouched for audit.
"""
from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Optional

logger = logging.getLogger(__name__)

RECENT_WINDOW_SECONDS = 30 * 24 * 60 * 60

DIFFICULTY_LABELS = {"easy": "Easy", "medium": "Medium", "hard": "Hard"}
ALL_LABEL = "All"


# ---------------------------------------------------------------------------
# Result type (plain dataclass)
# ---------------------------------------------------------------------------

@dataclass
class SnapshotData:
    profile_data: dict[str, Any]
    problems_solved: int
    problems_solved_by_difficulty: dict[str, int]
    total_submissions: int
    contest_rating: float
    acceptance_rate: Optional[float]
    ranking: Optional[int]
    badges: Optional[list[Any]]
    recent_submissions: Optional[int]
    submission_calendar: Optional[str]
    language_stats: Optional[Any] = field(default=None)
    skill_stats: Optional[Any] = field(default=None)

    def as_row(self) -> dict[str, Any]:
        """Column → value mapping for a LeetCodeStats insert."""
        return {
            "profile_data": self.profile_data,
            "problems_solved": self.problems_solved,
            "problems_solved_by_difficulty": self.problems_solved_by_difficulty,
            "total_submissions": self.total_submissions,
            "contest_rating": self.contest_rating,
            "acceptance_rate": self.acceptance_rate,
            "ranking": self.ranking,
            "badges": self.badges,
            "recent_submissions": self.recent_submissions,
            "submission_calendar": self.submission_calendar,
            "language_stats": self.language_stats,
            "skill_stats": self.skill_stats,
        }


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _bucket(entries: Any, label: str, key: str = "count") -> int:
    """Value of `key` for the entry whose difficulty == label, else 0."""
    for entry in entries or []:
        if isinstance(entry, dict) and entry.get("difficulty") == label:
            return entry.get(key) or 0
    return 0


def recent_submission_count(calendar: Any, now: Optional[float] = None) -> Optional[int]:
    """
    Sum the submission calendar over the trailing 30 days.

    `calendar` maps Unix-seconds timestamps (as strings) to counts and usually
    arrives JSON-encoded. Returns None when it is missing or unreadable.
    """
    if calendar is None or calendar == "":
        return None

    now_s = int(now if now is not None else time.time())
    cutoff = now_s - RECENT_WINDOW_SECONDS

    try:
        parsed = json.loads(calendar) if isinstance(calendar, str) else calendar
        if not isinstance(parsed, dict):
            raise ValueError("submission calendar is not an object")
        return sum(
            int(count)
            for ts, count in parsed.items()
            if int(float(ts)) >= cutoff
        )
    except (TypeError, ValueError) as exc:
        logger.warning("Could not read submission calendar: %s", exc)
        return None


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def build_snapshot(
    profile: dict[str, Any],
    language_stats: Optional[Any] = None,
    skill_stats: Optional[Any] = None,
    now: Optional[float] = None,
) -> SnapshotData:
    """
    Derive a flat snapshot from a fetch_profile() result.

    problems_solved trusts the upstream "All" bucket and is never recomputed
    from the per-difficulty counts, even when the two disagree.
    """
    user = _as_dict(profile.get("matchedUser"))
    submit_stats = _as_dict(user.get("submitStats"))
    profile_meta = _as_dict(user.get("profile"))

    accepted = submit_stats.get("acSubmissionNum")
    by_difficulty = {
        key: _bucket(accepted, label) for key, label in DIFFICULTY_LABELS.items()
    }

    calendar = user.get("submissionCalendar")

    return SnapshotData(
        profile_data=profile,
        problems_solved=_bucket(accepted, ALL_LABEL),
        problems_solved_by_difficulty=by_difficulty,
        total_submissions=_bucket(
            submit_stats.get("totalSubmissionNum"), ALL_LABEL, key="submissions"
        ),
        contest_rating=profile_meta.get("starRating") or 0,
        acceptance_rate=profile_meta.get("acceptanceRate"),
        ranking=profile_meta.get("ranking") or None,
        badges=user.get("badges") if isinstance(user.get("badges"), list) else None,
        recent_submissions=recent_submission_count(calendar, now),
        submission_calendar=calendar if isinstance(calendar, str) else (
            json.dumps(calendar) if calendar else None
        ),
        language_stats=language_stats,
        skill_stats=skill_stats,
    )
