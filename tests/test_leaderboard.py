"""
Tests for the leaderboard aggregator.

Pure functions are exercised with plain GroupMember / LeetCodeStats objects
(no database); latest_snapshots is exercised against SQLite.
"""
from datetime import datetime, timedelta, timezone

import pytest

from app.models.group import Group
from app.models.group_member import GroupMember
from app.models.leetcode_stats import LeetCodeStats
from app.services.leaderboard import (
    build_leaderboard,
    get_leaderboard,
    group_totals,
    latest_snapshots,
    sort_leaderboard,
)

T0 = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


def _member(mid, name=None):
    return GroupMember(id=mid, group_id="g", display_name=name or mid.upper(), leetcode_username=mid)


def _stat(mid, solved=0, rating=0.0, easy=0, medium=0, hard=0, submissions=0, fetched_at=T0):
    return LeetCodeStats(
        group_member_id=mid,
        fetched_at=fetched_at,
        problems_solved=solved,
        problems_solved_by_difficulty={"easy": easy, "medium": medium, "hard": hard},
        total_submissions=submissions,
        recent_submissions=3,
        contest_rating=rating,
        acceptance_rate=55.0,
        ranking=100,
        badges=[{"id": "1"}],
    )


class TestBuildLeaderboard:
    def test_member_without_snapshot_gets_defaults(self):
        (row,) = build_leaderboard([_member("a", "Ana")], {})
        assert row.name == "Ana"
        assert row.username == "a"
        assert row.problems_solved == 0
        assert row.total_submissions == 0
        assert row.recent_submissions == 0
        assert row.problems_solved_by_difficulty == {"easy": 0, "medium": 0, "hard": 0}
        assert row.contest_rating is None
        assert row.acceptance_rate is None
        assert row.ranking is None
        assert row.badges == []
        assert row.fetched_at is None

    def test_snapshot_fields_merged(self):
        (row,) = build_leaderboard(
            [_member("a")], {"a": _stat("a", solved=17, rating=4.0, easy=10, medium=5, hard=2)}
        )
        assert row.problems_solved == 17
        assert row.problems_solved_by_difficulty == {"easy": 10, "medium": 5, "hard": 2}
        assert row.contest_rating == 4.0
        assert row.acceptance_rate == 55.0
        assert row.ranking == 100
        assert row.badges == [{"id": "1"}]
        assert row.fetched_at == T0.isoformat()

    def test_roster_order_kept(self):
        rows = build_leaderboard([_member("b"), _member("a"), _member("c")], {})
        assert [r.member_id for r in rows] == ["b", "a", "c"]


class TestSortLeaderboard:
    def _rows(self):
        members = [_member(m) for m in ("a", "b", "c", "d")]
        stats = {
            "a": _stat("a", solved=5, rating=2.0),
            "b": _stat("b", solved=50, rating=1.0),
            "c": _stat("c", solved=20, rating=3.0),
        }
        return build_leaderboard(members, stats)

    def test_descending_then_ascending_is_reversed(self):
        rows = self._rows()
        desc = [r.member_id for r in sort_leaderboard(rows, "contest_rating", descending=True)]
        asc = [r.member_id for r in sort_leaderboard(rows, "contest_rating", descending=False)]
        assert desc == ["c", "a", "b", "d"]
        assert asc == list(reversed(desc))

    def test_sort_by_problems_solved(self):
        desc = sort_leaderboard(self._rows(), "problems_solved")
        assert [r.member_id for r in desc] == ["b", "c", "a", "d"]

    def test_ties_keep_roster_order(self):
        members = [_member(m) for m in ("a", "b", "c")]
        stats = {m: _stat(m, solved=7) for m in ("a", "b", "c")}
        rows = build_leaderboard(members, stats)
        for descending in (True, False):
            ordered = sort_leaderboard(rows, "problems_solved", descending=descending)
            assert [r.member_id for r in ordered] == ["a", "b", "c"]

    def test_missing_rating_sorts_as_zero(self):
        members = [_member("none"), _member("neg")]
        rows = build_leaderboard(members, {"neg": _stat("neg", rating=-1.0)})
        asc = sort_leaderboard(rows, "contest_rating", descending=False)
        assert [r.member_id for r in asc] == ["neg", "none"]

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError):
            sort_leaderboard([], "ranking")

    def test_input_not_mutated(self):
        rows = self._rows()
        before = [r.member_id for r in rows]
        sort_leaderboard(rows, "problems_solved")
        assert [r.member_id for r in rows] == before


class TestGroupTotals:
    def test_totals_fold_over_rows(self):
        members = [_member(m) for m in ("a", "b", "c")]
        stats = {
            "a": _stat("a", solved=17, easy=10, medium=5, hard=2, submissions=40),
            "b": _stat("b", solved=99, easy=1, medium=1, hard=1, submissions=60),
        }
        totals = group_totals(build_leaderboard(members, stats))
        assert totals.problems_solved == 116
        assert (totals.easy, totals.medium, totals.hard) == (11, 6, 3)
        assert totals.total_submissions == 100

    def test_empty_group(self):
        totals = group_totals([])
        assert totals.problems_solved == 0
        assert totals.total_submissions == 0


class TestLatestSnapshots:
    def _seed(self, db):
        group = Group(name="club", owner_id="owner")
        db.add(group)
        db.flush()
        a = GroupMember(group_id=group.id, display_name="A", leetcode_username="a")
        b = GroupMember(group_id=group.id, display_name="B", leetcode_username="b")
        db.add_all([a, b])
        db.flush()
        return group, a, b

    def test_picks_greatest_fetched_at(self, db):
        group, a, b = self._seed(db)
        db.add_all([
            _stat(a.id, solved=1, fetched_at=T0),
            _stat(a.id, solved=3, fetched_at=T0 + timedelta(days=2)),
            _stat(a.id, solved=2, fetched_at=T0 + timedelta(days=1)),
        ])
        db.commit()

        latest = latest_snapshots(db, [a.id, b.id])

        assert latest[a.id].problems_solved == 3
        assert b.id not in latest

    def test_ties_broken_by_newest_row(self, db):
        group, a, _ = self._seed(db)
        db.add(_stat(a.id, solved=1, fetched_at=T0))
        db.flush()
        db.add(_stat(a.id, solved=2, fetched_at=T0))
        db.commit()

        assert latest_snapshots(db, [a.id])[a.id].problems_solved == 2

    def test_no_members(self, db):
        assert latest_snapshots(db, []) == {}

    def test_get_leaderboard(self, db):
        group, a, b = self._seed(db)
        db.add(_stat(b.id, solved=9, easy=9))
        db.commit()

        lb = get_leaderboard(db, group, "problems_solved", descending=True)

        assert [r.username for r in lb.rows] == ["b", "a"]
        assert lb.totals.problems_solved == 9
        assert lb.totals.easy == 9
