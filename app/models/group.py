"""
Group: a named collection of tracked members owned by one user.

public_link is an opaque capability token: NULL until the owner first asks
for a share link, stable afterwards. The UNIQUE constraint guarantees that a
token resolves to exactly one group.
"""
import uuid
from datetime import datetime
from sqlalchemy import Boolean, String, Text, DateTime, func, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class Group(Base):
    __tablename__ = "groups"
    __table_args__ = (
        UniqueConstraint("public_link", name="uq_groups_public_link"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    owner_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    public_link: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
