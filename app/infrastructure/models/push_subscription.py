"""SQLAlchemy model for browser push subscriptions."""

from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint

from app.infrastructure.database import Base
from app.utils import now_utc_naive


def _new_subscription_id() -> str:
    return str(uuid4())


class PushSubscriptionModel(Base):
    """Database representation of one device registered for push."""

    __tablename__ = "push_subscription"
    __table_args__ = (
        UniqueConstraint("user_id", "endpoint", name="uq_push_subscription_user_endpoint"),
    )

    id = Column(String(36), primary_key=True, default=_new_subscription_id)
    user_id = Column(
        Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    endpoint = Column(String(500), nullable=False)
    p256dh = Column(Text, nullable=False)
    auth = Column(Text, nullable=False)
    expiration_time = Column(String(64), nullable=True)
    user_agent = Column(Text, nullable=True)
    platform = Column(String(50), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_utc_naive)
    updated_at = Column(
        DateTime(), nullable=False, default=now_utc_naive, onupdate=now_utc_naive
    )


__all__ = ["PushSubscriptionModel"]
