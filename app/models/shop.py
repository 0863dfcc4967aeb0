"""ORM model for shops (tenants that non-admin users belong to)."""

from sqlalchemy import Column, DateTime, Integer, String, func

from app.models.base import Base


class Shop(Base):
    """Tenant scope. Deleting a shop cascades to its users at the database level."""

    __tablename__ = "shops"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
