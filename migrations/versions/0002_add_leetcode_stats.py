"""add leetcode_stats table

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19

Append-only statistics snapshots, one row per member per refresh.
Downgrade drops the table cleanly.
"""
from alembic import op
import sqlalchemy as sa

revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "leetcode_stats",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "group_member_id",
            sa.String(36),
            sa.ForeignKey("group_members.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("fetched_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("profile_data", sa.JSON(), nullable=True),
        sa.Column("problems_solved", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("problems_solved_by_difficulty", sa.JSON(), nullable=False),
        sa.Column("total_submissions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("recent_submissions", sa.Integer(), nullable=True),
        sa.Column("contest_rating", sa.Float(), nullable=False, server_default="0"),
        sa.Column("acceptance_rate", sa.Float(), nullable=True),
        sa.Column("ranking", sa.Integer(), nullable=True),
        sa.Column("badges", sa.JSON(), nullable=True),
        sa.Column("language_stats", sa.JSON(), nullable=True),
        sa.Column("skill_stats", sa.JSON(), nullable=True),
        sa.Column("submission_calendar", sa.Text(), nullable=True),
    )
    op.create_index("ix_leetcode_stats_id", "leetcode_stats", ["id"])
    op.create_index(
        "ix_leetcode_stats_member_fetched",
        "leetcode_stats",
        ["group_member_id", "fetched_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_leetcode_stats_member_fetched", table_name="leetcode_stats")
    op.drop_index("ix_leetcode_stats_id", table_name="leetcode_stats")
    op.drop_table("leetcode_stats")
