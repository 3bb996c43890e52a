"""Persistence helpers for browser push subscriptions."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.domain.entities import PushSubscription
from app.infrastructure.models import PushSubscriptionModel
from app.utils import ensure_utc, now_utc_naive

logger = logging.getLogger(__name__)


class PushSubscriptionRepository:
    """Keep one subscription row per user and endpoint."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_user(self, user_id: int) -> Sequence[PushSubscription]:
        query = (
            self.session.query(PushSubscriptionModel)
            .filter(PushSubscriptionModel.user_id == user_id)
            .order_by(PushSubscriptionModel.created_at.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def upsert(self, subscription: PushSubscription) -> PushSubscription:
        """Insert ``subscription`` or refresh the keys of the matching endpoint."""

        model = self._get_model(subscription.user_id, subscription.endpoint)
        if model is None:
            model = PushSubscriptionModel(
                user_id=subscription.user_id, endpoint=subscription.endpoint
            )
            self._apply(model, subscription)
            self.session.add(model)
            try:
                self.session.commit()
            except IntegrityError:
                self.session.rollback()
                logger.debug(
                    "Concurrent push subscription insert for user %s", subscription.user_id
                )
                model = self._get_model(subscription.user_id, subscription.endpoint)
                if model is None:
                    raise
                self._apply(model, subscription)
                self.session.commit()
        else:
            self._apply(model, subscription)
            model.updated_at = now_utc_naive()
            self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def delete_for_user(self, user_id: int) -> int:
        deleted = (
            self.session.query(PushSubscriptionModel)
            .filter(PushSubscriptionModel.user_id == user_id)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return int(deleted or 0)

    def delete_endpoint(self, *, user_id: int, endpoint: str) -> int:
        deleted = (
            self.session.query(PushSubscriptionModel)
            .filter(
                PushSubscriptionModel.user_id == user_id,
                PushSubscriptionModel.endpoint == endpoint,
            )
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return int(deleted or 0)

    def count_for_user(self, user_id: int) -> int:
        return (
            self.session.query(PushSubscriptionModel)
            .filter(PushSubscriptionModel.user_id == user_id)
            .count()
        )

    def _get_model(self, user_id: int, endpoint: str) -> PushSubscriptionModel | None:
        return (
            self.session.query(PushSubscriptionModel)
            .filter(
                PushSubscriptionModel.user_id == user_id,
                PushSubscriptionModel.endpoint == endpoint,
            )
            .first()
        )

    @staticmethod
    def _apply(model: PushSubscriptionModel, subscription: PushSubscription) -> None:
        model.p256dh = subscription.p256dh
        model.auth = subscription.auth
        model.expiration_time = subscription.expiration_time
        model.user_agent = subscription.user_agent
        model.platform = subscription.platform

    @staticmethod
    def _to_entity(model: PushSubscriptionModel) -> PushSubscription:
        return PushSubscription(
            id=model.id,
            user_id=model.user_id,
            endpoint=model.endpoint,
            p256dh=model.p256dh,
            auth=model.auth,
            expiration_time=model.expiration_time,
            user_agent=model.user_agent,
            platform=model.platform,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )


__all__ = ["PushSubscriptionRepository"]
