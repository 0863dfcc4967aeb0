"""ORM model for shop users (auth and RBAC)."""

from enum import Enum

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, func

from app.models.base import Base


class Role(str, Enum):
    """Coarse permission grants attached to a user."""

    USER = "ROLE_USER"
    ADMIN = "ROLE_ADMIN"


class User(Base):
    """
    User account, optionally scoped to a shop.

    roles is stored as a JSON list of role names; use role_set for checks.
    shop_id is null for bootstrap admins created through self-registration.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(20), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    enabled = Column(Boolean, nullable=False, default=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
    token = Column(String(512), nullable=True)
    shop_id = Column(
        Integer,
        ForeignKey("shops.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    roles = Column(JSON, nullable=False, default=list)

    @property
    def role_set(self) -> frozenset[Role]:
        return frozenset(Role(name) for name in self.roles or ())

    @role_set.setter
    def role_set(self, value: set[Role] | frozenset[Role]) -> None:
        if not value:
            raise ValueError("a user must hold at least one role")
        # Reassign (never mutate in place) so the JSON column is marked dirty.
        self.roles = sorted(role.value for role in value)

    def is_admin(self) -> bool:
        return Role.ADMIN in self.role_set
