"""
Group service: groups, their members, and public share links.

Public API
----------
list_groups(db, owner_id)                          → list[(Group, member_count)]
create_group(db, owner_id, name, description, rows) → (Group, ImportResult)
get_owned_group(db, group_id, user_id)             → Group      (404 / 403)
list_members(db, group)                            → list[GroupMember]
add_member(db, group, name, username)              → GroupMember
update_member(db, group, member_id, name, username) → GroupMember
delete_member(db, group, member_id)                → None
import_members(db, group, rows)                    → ImportResult
ensure_public_link(db, group)                      → str        (idempotent)
clear_public_link(db, group)                       → None
get_group_by_public_link(db, token)                → Group      (404)

Every username that enters a roster is first confirmed against LeetCode via
the profile lookup.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import (
    GroupNotFoundError,
    ForbiddenError,
    MemberNotFoundError,
    PublicLinkNotFoundError,
    LeetBoardException,
)
from app.models.group import Group
from app.models.group_member import GroupMember
from app.services import leetcode_client

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

@dataclass
class MemberRow:
    """One candidate `{name, username}` pair, e.g. a parsed spreadsheet row."""
    name: str
    username: str


@dataclass
class ImportResult:
    added: list[GroupMember] = field(default_factory=list)
    rejected: list[str] = field(default_factory=list)    # usernames LeetCode did not confirm
    duplicates: list[str] = field(default_factory=list)  # usernames already in the roster


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _lookup() -> Callable:
    return leetcode_client.fetch_profile


def _clean_rows(rows: Iterable[MemberRow]) -> list[MemberRow]:
    """Strip whitespace and drop rows missing a name or username."""
    cleaned = []
    for row in rows:
        name = (row.name or "").strip()
        username = (row.username or "").strip()
        if name and username:
            cleaned.append(MemberRow(name=name, username=username))
    return cleaned


def _screen_rows(
    rows: Iterable[MemberRow],
    existing_usernames: set[str],
    lookup: Callable,
) -> tuple[list[MemberRow], list[str], list[str]]:
    """
    Validate each row independently and drop exact-username duplicates.
    Returns (accepted, rejected_usernames, duplicate_usernames).
    """
    accepted: list[MemberRow] = []
    rejected: list[str] = []
    duplicates: list[str] = []
    seen = set(existing_usernames)

    for row in _clean_rows(rows):
        if row.username in seen:
            duplicates.append(row.username)
            continue
        try:
            lookup(row.username)
        except LeetBoardException as exc:
            logger.info("Rejecting %s: %s", row.username, exc.message)
            rejected.append(row.username)
            continue
        seen.add(row.username)
        accepted.append(row)

    return accepted, rejected, duplicates


def _get_member(db: Session, group: Group, member_id: str) -> GroupMember:
    member = (
        db.query(GroupMember)
        .filter(GroupMember.id == member_id, GroupMember.group_id == group.id)
        .first()
    )
    if member is None:
        raise MemberNotFoundError(member_id)
    return member


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------

def list_groups(db: Session, owner_id: str) -> list[tuple[Group, int]]:
    """Owner's groups, newest first, each with its member count."""
    rows = (
        db.query(Group, func.count(GroupMember.id))
        .outerjoin(GroupMember, GroupMember.group_id == Group.id)
        .filter(Group.owner_id == owner_id)
        .group_by(Group.id)
        .order_by(Group.created_at.desc(), Group.name)
        .all()
    )
    return [(group, count) for group, count in rows]


def create_group(
    db: Session,
    owner_id: str,
    name: str,
    description: Optional[str] = None,
    rows: Iterable[MemberRow] = (),
    lookup: Optional[Callable] = None,
) -> tuple[Group, ImportResult]:
    """Create a private group and seed it with the confirmed rows."""
    accepted, rejected, duplicates = _screen_rows(rows, set(), lookup or _lookup())

    group = Group(name=name, description=description, owner_id=owner_id, is_public=False)
    db.add(group)
    db.flush()

    added = [
        GroupMember(group_id=group.id, display_name=r.name, leetcode_username=r.username)
        for r in accepted
    ]
    db.add_all(added)
    db.commit()
    db.refresh(group)
    for member in added:
        db.refresh(member)

    logger.info("Created group %s with %d members", group.id, len(added))
    return group, ImportResult(added=added, rejected=rejected, duplicates=duplicates)


def get_owned_group(db: Session, group_id: str, user_id: str) -> Group:
    group = db.query(Group).filter(Group.id == group_id).first()
    if group is None:
        raise GroupNotFoundError(group_id)
    if group.owner_id != user_id:
        raise ForbiddenError(group_id)
    return group


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------

def list_members(db: Session, group: Group) -> list[GroupMember]:
    return (
        db.query(GroupMember)
        .filter(GroupMember.group_id == group.id)
        .order_by(GroupMember.created_at, GroupMember.id)
        .all()
    )


def add_member(
    db: Session,
    group: Group,
    name: str,
    username: str,
    lookup: Optional[Callable] = None,
) -> GroupMember:
    """Confirm the username upstream, then insert. Lookup errors propagate."""
    (lookup or _lookup())(username)
    member = GroupMember(group_id=group.id, display_name=name, leetcode_username=username)
    db.add(member)
    db.commit()
    db.refresh(member)
    return member


def update_member(
    db: Session,
    group: Group,
    member_id: str,
    name: str,
    username: str,
    lookup: Optional[Callable] = None,
) -> GroupMember:
    """Last write wins; the new username is confirmed upstream first."""
    member = _get_member(db, group, member_id)
    (lookup or _lookup())(username)
    member.display_name = name
    member.leetcode_username = username
    db.commit()
    db.refresh(member)
    return member


def delete_member(db: Session, group: Group, member_id: str) -> None:
    member = _get_member(db, group, member_id)
    db.delete(member)
    db.commit()


def import_members(
    db: Session,
    group: Group,
    rows: Iterable[MemberRow],
    lookup: Optional[Callable] = None,
) -> ImportResult:
    """
    Bulk-add parsed `{name, username}` rows.

    Each row is confirmed independently; an unconfirmed row is reported, not
    fatal. Usernames already in the roster (or repeated in the batch) are
    skipped by exact match. Survivors are inserted in one commit.
    """
    existing = {m.leetcode_username for m in list_members(db, group)}
    accepted, rejected, duplicates = _screen_rows(rows, existing, lookup or _lookup())

    added = [
        GroupMember(group_id=group.id, display_name=r.name, leetcode_username=r.username)
        for r in accepted
    ]
    if added:
        db.add_all(added)
        db.commit()
        for member in added:
            db.refresh(member)

    return ImportResult(added=added, rejected=rejected, duplicates=duplicates)


# ---------------------------------------------------------------------------
# Public link
# ---------------------------------------------------------------------------

def ensure_public_link(db: Session, group: Group) -> str:
    """
    Return the group's share token, issuing one on first use.

    The token is written with a conditional UPDATE (only while the column is
    still NULL), then re-read, so concurrent first requests agree on one token.
    """
    if group.public_link:
        return group.public_link

    token = uuid.uuid4().hex
    try:
        db.execute(
            update(Group)
            .where(Group.id == group.id, Group.public_link.is_(None))
            .values(public_link=token, is_public=True)
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Public link collision for group %s; keeping stored value", group.id)

    db.refresh(group)
    if not group.public_link:
        raise LeetBoardException("Failed to generate public link")
    return group.public_link


def clear_public_link(db: Session, group: Group) -> None:
    group.public_link = None
    group.is_public = False
    db.commit()


def get_group_by_public_link(db: Session, token: str) -> Group:
    group = db.query(Group).filter(Group.public_link == token).first()
    if group is None:
        raise PublicLinkNotFoundError()
    return group
