from __future__ import annotations

import uuid
from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, PrimaryKeyConstraint, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.core.database import Base

if TYPE_CHECKING:
    from backend.app.models.filament_profile import FilamentProfile, ProfileLike


class UserRole(StrEnum):
    USER = "user"
    ADMIN = "admin"


def _new_uuid() -> str:
    return str(uuid.uuid4())


class User(Base):
    """User model for authentication and profile ownership.

    Email uniqueness is case-insensitive through a unique index on lower(email).
    Deleting a user nulls the owner of their profiles and removes their likes.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_uuid)
    name: Mapped[str | None] = mapped_column(String(255))
    email: Mapped[str | None] = mapped_column(String(255))
    email_verified: Mapped[datetime | None] = mapped_column(DateTime)
    image: Mapped[str | None] = mapped_column(Text)
    role: Mapped[str] = mapped_column(String(20), default=UserRole.USER)  # "user" or "admin"
    password_hash: Mapped[str | None] = mapped_column(String(255))  # Only set for credential signups
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    profiles: Mapped[list[FilamentProfile]] = relationship(back_populates="user", passive_deletes=True)
    likes: Mapped[list[ProfileLike]] = relationship(back_populates="user", passive_deletes=True)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self) -> str:
        return f"<User {self.email}>"


# Case-insensitive unique email
Index("ix_users_email_lower", func.lower(User.email), unique=True)


class Account(Base):
    """External identity provider link for a user."""

    __tablename__ = "accounts"

    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    type: Mapped[str] = mapped_column(String(50))
    provider: Mapped[str] = mapped_column(String(100))
    provider_account_id: Mapped[str] = mapped_column(String(255))
    refresh_token: Mapped[str | None] = mapped_column(Text)
    access_token: Mapped[str | None] = mapped_column(Text)
    expires_at: Mapped[int | None] = mapped_column(Integer)
    token_type: Mapped[str | None] = mapped_column(String(50))
    scope: Mapped[str | None] = mapped_column(Text)
    id_token: Mapped[str | None] = mapped_column(Text)
    session_state: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (PrimaryKeyConstraint("provider", "provider_account_id"),)


class AuthSession(Base):
    __tablename__ = "sessions"

    session_token: Mapped[str] = mapped_column(String(255), primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    expires: Mapped[datetime] = mapped_column(DateTime)


class VerificationToken(Base):
    __tablename__ = "verification_tokens"

    identifier: Mapped[str] = mapped_column(String(255))
    token: Mapped[str] = mapped_column(String(255))
    expires: Mapped[datetime] = mapped_column(DateTime)

    __table_args__ = (PrimaryKeyConstraint("identifier", "token"),)
