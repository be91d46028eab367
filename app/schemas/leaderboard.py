"""
Leaderboard schemas.

GET /groups/{id}/leaderboard → LeaderboardResponse
GET /public/{public_link}    → LeaderboardResponse
"""
import enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class SortKey(str, enum.Enum):
    problems_solved = "problems_solved"
    contest_rating = "contest_rating"


class SortOrder(str, enum.Enum):
    desc = "desc"
    asc = "asc"


class DifficultyBreakdown(BaseModel):
    easy: int = 0
    medium: int = 0
    hard: int = 0


class LeaderboardRowOut(BaseModel):
    member_id: str
    name: str
    username: str
    problems_solved: int = 0
    problems_solved_by_difficulty: DifficultyBreakdown = Field(default_factory=DifficultyBreakdown)
    total_submissions: int = 0
    recent_submissions: int = 0
    contest_rating: Optional[float] = None
    acceptance_rate: Optional[float] = None
    ranking: Optional[int] = None
    badges: list[Any] = Field(default_factory=list)
    fetched_at: Optional[str] = Field(
        default=None, description="Capture time of the snapshot shown; null if none yet."
    )


class GroupTotalsOut(BaseModel):
    problems_solved: int = 0
    easy: int = 0
    medium: int = 0
    hard: int = 0
    total_submissions: int = 0


class LeaderboardResponse(BaseModel):
    group_id: str
    group_name: str
    description: Optional[str] = None
    sort_by: SortKey
    order: SortOrder
    rows: list[LeaderboardRowOut]
    totals: GroupTotalsOut
