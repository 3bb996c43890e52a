"""SQLAlchemy model for the user table."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.sql import expression

from app.infrastructure.database import Base
from app.utils import now_utc_naive


class UserModel(Base):
    """Database representation of a tenant user as seen by the directory."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, nullable=True, index=True)
    email = Column(String(120), nullable=False, unique=True)
    name = Column(String(120), nullable=False, default="")
    role = Column(String(20), nullable=False, default="manager", index=True)
    is_active = Column(
        Boolean,
        nullable=False,
        default=True,
        server_default=expression.true(),
    )
    created_at = Column(DateTime, nullable=False, default=now_utc_naive)


__all__ = ["UserModel"]
