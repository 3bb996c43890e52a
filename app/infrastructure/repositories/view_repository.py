"""Persistence helpers for recorded item views."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.domain.entities import View, ViewerEntry, ViewTargetType
from app.infrastructure.models import UserModel, ViewModel
from app.utils import ensure_utc

from .user_repository import UserRepository

logger = logging.getLogger(__name__)


class ViewRepository:
    """Store at most one view per user and item."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_or_create(
        self, *, user_id: int, target_type: ViewTargetType, target_id: str
    ) -> View:
        """Return the existing view or insert it.

        The unique constraint on ``(user_id, target_type, target_id)`` decides
        concurrent inserts; the loser rolls back and reads the winner's row.
        """

        existing = self._get_model(user_id, target_type, target_id)
        if existing is not None:
            return self._to_entity(existing)

        model = ViewModel(
            user_id=user_id, target_type=target_type.value, target_id=target_id
        )
        self.session.add(model)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            logger.debug(
                "Concurrent view insert for user %s on %s %s",
                user_id,
                target_type.value,
                target_id,
            )
            winner = self._get_model(user_id, target_type, target_id)
            if winner is None:
                raise
            return self._to_entity(winner)
        self.session.refresh(model)
        return self._to_entity(model)

    def list_for_target(
        self,
        *,
        target_type: ViewTargetType,
        target_id: str,
        tenant_id: int | None = None,
        offset: int = 0,
        limit: int = 100,
    ) -> tuple[Sequence[ViewerEntry], int]:
        """Return one page of viewers and the total, optionally within one tenant."""

        query = self.session.query(ViewModel).filter(
            ViewModel.target_type == target_type.value,
            ViewModel.target_id == target_id,
        )
        if tenant_id is not None:
            query = query.join(ViewModel.user).filter(UserModel.tenant_id == tenant_id)
        total = query.count()
        models = (
            query.options(joinedload(ViewModel.user))
            .order_by(ViewModel.viewed_at.desc(), ViewModel.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        entries = [
            ViewerEntry(
                view=self._to_entity(model),
                user=UserRepository._to_entity(model.user) if model.user else None,
            )
            for model in models
        ]
        return entries, total

    def _get_model(
        self, user_id: int, target_type: ViewTargetType, target_id: str
    ) -> ViewModel | None:
        return (
            self.session.query(ViewModel)
            .filter(
                ViewModel.user_id == user_id,
                ViewModel.target_type == target_type.value,
                ViewModel.target_id == target_id,
            )
            .first()
        )

    @staticmethod
    def _to_entity(model: ViewModel) -> View:
        return View(
            id=model.id,
            user_id=model.user_id,
            target_type=ViewTargetType(model.target_type),
            target_id=model.target_id,
            viewed_at=ensure_utc(model.viewed_at),
        )


__all__ = ["ViewRepository"]
