"""
Shared pytest fixtures.

Each test gets a fresh in-memory SQLite database so no Postgres is required
and snapshot counts never bleed between tests. Upstream LeetCode calls are
never made: tests patch `app.services.leetcode_client`.
"""
import os
import time
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_leetboard.db")

from app import models  # noqa: F401  (registers tables on Base.metadata)
from app.core.errors import ProfileNotFoundError
from app.db.base import Base, enable_sqlite_foreign_keys, get_db
from app.main import app

OWNER = "user_owner"
OTHER = "user_other"


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def owner_headers():
    return {"X-User-Id": OWNER}


@pytest.fixture()
def other_headers():
    return {"X-User-Id": OTHER}


# ---------------------------------------------------------------------------
# Upstream fakes
# ---------------------------------------------------------------------------

def make_profile(
    username: str,
    easy: int = 10,
    medium: int = 5,
    hard: int = 2,
    total: int | None = None,
    submissions: int = 40,
    star_rating: float = 3.5,
    ranking: int | None = 12345,
    calendar: str | None = None,
) -> dict:
    """A fetch_profile()-shaped payload."""
    if total is None:
        total = easy + medium + hard
    if calendar is None:
        calendar = '{"%d": 4}' % (int(time.time()) - 2 * 86400)
    return {
        "matchedUser": {
            "username": username,
            "profile": {"ranking": ranking, "starRating": star_rating, "realName": username},
            "badges": [{"id": "1", "displayName": "50 Days Badge 2026"}],
            "submitStats": {
                "acSubmissionNum": [
                    {"difficulty": "All", "count": total, "submissions": total * 2},
                    {"difficulty": "Easy", "count": easy, "submissions": easy * 2},
                    {"difficulty": "Medium", "count": medium, "submissions": medium * 2},
                    {"difficulty": "Hard", "count": hard, "submissions": hard * 2},
                ],
                "totalSubmissionNum": [
                    {"difficulty": "All", "count": total + 3, "submissions": submissions},
                ],
            },
            "submissionCalendar": calendar,
        }
    }


class FakeLeetCode:
    """
    Stand-in for the three upstream fetchers.

    `profiles` maps username → payload; unknown usernames raise
    ProfileNotFoundError, and usernames in `errors` raise the mapped exception.
    """

    def __init__(self, profiles=None, errors=None):
        self.profiles = dict(profiles or {})
        self.errors = dict(errors or {})
        self.profile_calls: list[str] = []
        self.language_calls: list[str] = []
        self.skill_calls: list[str] = []

    def fetch_profile(self, username):
        self.profile_calls.append(username)
        if username in self.errors:
            raise self.errors[username]
        if username not in self.profiles:
            raise ProfileNotFoundError(username)
        return self.profiles[username]

    def fetch_language_stats(self, username):
        self.language_calls.append(username)
        return {"languageProblemCount": [{"languageName": "Python3", "problemsSolved": 7}]}

    def fetch_skill_stats(self, username):
        self.skill_calls.append(username)
        return {"data": {"matchedUser": {"tagProblemCounts": {"advanced": []}}}}


@pytest.fixture()
def fake_leetcode():
    fake = FakeLeetCode()
    with patch("app.services.leetcode_client.fetch_profile", side_effect=fake.fetch_profile), \
            patch("app.services.leetcode_client.fetch_language_stats",
                  side_effect=fake.fetch_language_stats), \
            patch("app.services.leetcode_client.fetch_skill_stats",
                  side_effect=fake.fetch_skill_stats):
        yield fake
