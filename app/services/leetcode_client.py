"""
Upstream LeetCode statistics clients.

Public API
----------
fetch_profile(username)         -> dict        (raises; single attempt, no retries)
fetch_language_stats(username)  -> dict | None (best effort, never raises)
fetch_skill_stats(username)     -> dict | None (best effort, never raises)

The profile comes from the LeetCode GraphQL endpoint. Language and skill
breakdowns come from a second, independently failable REST source.
"""
from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import requests

from app.core.config import settings
from app.core.errors import (
    InvalidRequestError,
    ProfileNotFoundError,
    UpstreamUnavailableError,
)

logger = logging.getLogger(__name__)

REQUEST_HEADERS = {
    "Content-Type": "application/json",
    "User-Agent": "Mozilla/5.0 LeetBoard",
    "Referer": "https://leetcode.com",
    "Origin": "https://leetcode.com",
}

USER_PROFILE_QUERY = """
query getUserProfile($username: String!) {
  matchedUser(username: $username) {
    username
    githubUrl
    twitterUrl
    linkedinUrl
    profile {
      realName
      userAvatar
      birthday
      ranking
      reputation
      websites
      countryName
      company
      school
      skillTags
      aboutMe
      starRating
    }
    badges {
      id
      displayName
      icon
      creationDate
    }
    submitStats {
      acSubmissionNum {
        difficulty
        count
        submissions
      }
      totalSubmissionNum {
        difficulty
        count
        submissions
      }
    }
    submissionCalendar
  }
}
"""


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------

def fetch_profile(username: Optional[str]) -> dict[str, Any]:
    """
    Look up a single LeetCode account.

    Returns the GraphQL `data` object (`{"matchedUser": {...}}`) untouched so
    callers can persist it for audit.

    Raises InvalidRequestError before any network call when username is blank,
    ProfileNotFoundError when LeetCode answers without a matched account, and
    UpstreamUnavailableError on transport failures, non-2xx statuses or a
    body that is not a JSON object.
    """
    if not username or not username.strip():
        raise InvalidRequestError("Username required")

    try:
        response = requests.post(
            settings.LEETCODE_GRAPHQL_URL,
            json={"query": USER_PROFILE_QUERY, "variables": {"username": username}},
            headers=REQUEST_HEADERS,
            timeout=settings.upstream_timeout,
        )
        response.raise_for_status()
        body = response.json()
    except requests.exceptions.RequestException as exc:
        logger.error("LeetCode profile request failed for %s: %s", username, exc)
        raise UpstreamUnavailableError(source="leetcode") from exc
    except ValueError as exc:
        logger.error("LeetCode returned a non-JSON body for %s", username)
        raise UpstreamUnavailableError(source="leetcode") from exc

    if not isinstance(body, dict):
        raise UpstreamUnavailableError(source="leetcode")

    data = body.get("data")
    if not isinstance(data, dict):
        data = {}
    matched = data.get("matchedUser")
    if not isinstance(matched, dict) or not matched.get("username"):
        logger.info("No LeetCode account matches %s", username)
        raise ProfileNotFoundError(username)

    return data


# ---------------------------------------------------------------------------
# Auxiliary stats (best effort)
# ---------------------------------------------------------------------------

def _fetch_optional_json(url: str, params: Optional[dict] = None) -> Optional[Any]:
    """GET url and return the decoded JSON, or None on any failure."""
    try:
        response = requests.get(url, params=params, timeout=settings.upstream_timeout)
    except requests.exceptions.RequestException as exc:
        logger.warning("Auxiliary stats request to %s failed: %s", url, exc)
        return None

    if not response.ok:
        logger.warning("Auxiliary stats request to %s returned %d", url, response.status_code)
        return None
    try:
        return response.json()
    except ValueError:
        logger.warning("Auxiliary stats response from %s is not JSON", url)
        return None


def fetch_language_stats(username: str) -> Optional[Any]:
    """Per-language solved counts, or None when the source is unavailable."""
    base = settings.LEETCODE_STATS_API_URL.rstrip("/")
    return _fetch_optional_json(f"{base}/languageStats", params={"username": username})


def fetch_skill_stats(username: str) -> Optional[Any]:
    """Per-skill-tag solved counts, or None when the source is unavailable."""
    base = settings.LEETCODE_STATS_API_URL.rstrip("/")
    return _fetch_optional_json(f"{base}/skillStats/{quote(username, safe='')}")
