"""SQLAlchemy model for recorded item views."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.infrastructure.database import Base
from app.utils import now_utc_naive


class ViewModel(Base):
    """Database representation of a user having looked at an item."""

    __tablename__ = "view"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "target_type", "target_id", name="uq_view_user_target"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    target_type = Column(String(20), nullable=False)
    target_id = Column(String(64), nullable=False)
    viewed_at = Column(DateTime(), nullable=False, default=now_utc_naive)

    user = relationship("UserModel", lazy="joined")


__all__ = ["ViewModel"]
