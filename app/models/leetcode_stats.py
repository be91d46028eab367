"""
LeetCodeStats: one immutable point-in-time snapshot of a member's statistics.

Append-only: rows are inserted by the refresh pipeline and never updated.
"Latest stats" for a member is the row with the greatest fetched_at
(ties broken by the greatest id). No retention policy; the table grows with
every refresh.

profile_data keeps the raw upstream payload verbatim for audit. The JSON
columns language_stats / skill_stats come from a second, independently
failable source and are NULL when that source was unavailable.
"""
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Integer, String, Text, Float, DateTime, ForeignKey, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class LeetCodeStats(Base):
    __tablename__ = "leetcode_stats"
    __table_args__ = (
        Index("ix_leetcode_stats_member_fetched", "group_member_id", "fetched_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    group_member_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("group_members.id", ondelete="CASCADE"), nullable=False
    )
    fetched_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    profile_data: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    problems_solved: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    problems_solved_by_difficulty: Mapped[dict[str, int]] = mapped_column(
        JSON, nullable=False,
        comment='{"easy": n, "medium": n, "hard": n}',
    )
    total_submissions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    recent_submissions: Mapped[int | None] = mapped_column(
        Integer, nullable=True,
        comment="Submissions in the trailing 30 days; NULL if the calendar was unreadable",
    )
    contest_rating: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    acceptance_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    ranking: Mapped[int | None] = mapped_column(Integer, nullable=True)
    badges: Mapped[list[Any] | None] = mapped_column(JSON, nullable=True)

    language_stats: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    skill_stats: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    submission_calendar: Mapped[str | None] = mapped_column(Text, nullable=True)
