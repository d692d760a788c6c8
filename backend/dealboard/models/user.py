"""User model for authentication, profiles and roles."""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dealboard.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from dealboard.models.comment import Comment
    from dealboard.models.deal import Deal
    from dealboard.models.deal_vote import DealVote

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLE_ROOT_ADMIN = "root_admin"
ROLES = (ROLE_USER, ROLE_ADMIN, ROLE_ROOT_ADMIN)


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Application user and public profile.

    Supports email/password authentication with bcrypt hashing. The role
    gates the two admin surfaces: ``admin`` for tenant moderation and
    ``root_admin`` for the root dashboard.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(320), unique=True, nullable=False, index=True,
        comment="User email address (unique)"
    )
    username: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True,
        comment="Display name"
    )
    full_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    hashed_password: Mapped[str] = mapped_column(
        String(128), nullable=False,
        comment="bcrypt hashed password"
    )
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ROLE_USER,
        comment="'user', 'admin' or 'root_admin'"
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
        comment="Whether user account is active"
    )
    last_login_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True,
        comment="Last login timestamp"
    )

    # Relationships
    deals: Mapped[List["Deal"]] = relationship(back_populates="user")
    comments: Mapped[List["Comment"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    votes: Mapped[List["DealVote"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )

    @property
    def is_admin(self) -> bool:
        return self.role in (ROLE_ADMIN, ROLE_ROOT_ADMIN)

    @property
    def is_root_admin(self) -> bool:
        return self.role == ROLE_ROOT_ADMIN

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"
