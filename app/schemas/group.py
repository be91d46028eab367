"""
Group and member schemas.

POST   /groups                              → GroupCreateRequest  → GroupCreateResponse
GET    /groups                              → list[GroupSummaryOut]
GET    /groups/{id}                         → GroupDetailOut
POST   /groups/{id}/members                 → MemberCreateRequest → MemberOut
PATCH  /groups/{id}/members/{member_id}     → MemberCreateRequest → MemberOut
POST   /groups/{id}/members/import          → MemberImportRequest → MemberImportResponse
POST   /groups/{id}/share                   → ShareLinkResponse
"""
from __future__ import annotations

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

IMPORT_MAX_ROWS = 500


def _strip_required(v):
    stripped = v.strip() if isinstance(v, str) else v
    if not stripped:
        raise ValueError("must not be empty after stripping whitespace")
    return stripped


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------

class MemberCreateRequest(BaseModel):
    """A display name plus the LeetCode username to track."""
    name: Annotated[str, Field(min_length=1, max_length=256, examples=["Ana"])]
    username: Annotated[str, Field(min_length=1, max_length=128, examples=["ana_codes"])]

    @field_validator("name", "username", mode="before")
    @classmethod
    def strip_and_check_empty(cls, v: str) -> str:
        return _strip_required(v)


class MemberRowIn(BaseModel):
    """One parsed spreadsheet row. Blank cells are allowed and skipped."""
    name: str = ""
    username: str = ""

    @field_validator("name", "username", mode="before")
    @classmethod
    def cell_to_str(cls, v) -> str:
        return "" if v is None else str(v)


class MemberOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    group_id: str
    display_name: str
    leetcode_username: str
    created_at: str


class MemberImportRequest(BaseModel):
    rows: Annotated[list[MemberRowIn], Field(
        max_length=IMPORT_MAX_ROWS,
        description=f"Parsed `name`/`username` rows (up to {IMPORT_MAX_ROWS}).",
    )]


class MemberImportResponse(BaseModel):
    added: list[MemberOut] = Field(description="Members inserted by this request.")
    rejected: list[str] = Field(description="Usernames LeetCode could not confirm.")
    duplicates: list[str] = Field(description="Usernames already in the group.")


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------

class GroupCreateRequest(BaseModel):
    name: Annotated[str, Field(min_length=1, max_length=256, examples=["Weekend grinders"])]
    description: Optional[str] = Field(default=None, max_length=2_000)
    members: list[MemberRowIn] = Field(
        default_factory=list,
        max_length=IMPORT_MAX_ROWS,
        description="Initial roster. Each username is confirmed against LeetCode.",
    )

    @field_validator("name", mode="before")
    @classmethod
    def strip_and_check_empty(cls, v: str) -> str:
        return _strip_required(v)


class GroupSummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    owner_id: str
    is_public: bool
    public_link: Optional[str] = None
    created_at: str
    member_count: int = 0


class GroupDetailOut(GroupSummaryOut):
    members: list[MemberOut] = Field(default_factory=list)


class GroupCreateResponse(BaseModel):
    group: GroupDetailOut
    rejected: list[str] = Field(default_factory=list)
    duplicates: list[str] = Field(default_factory=list)
    updated: int = Field(default=0, description="Members refreshed right after creation.")


class ShareLinkResponse(BaseModel):
    public_link: str = Field(description="Opaque token for GET /public/{public_link}.")
