"""Read access to the tenant user directory."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from app.domain.entities import Role, User
from app.infrastructure.models import UserModel


class UserRepository:
    """Query users by tenant and role for notification fan-out."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_by_tenant(
        self,
        tenant_id: int,
        *,
        role: Role | None = None,
        include_inactive: bool = False,
    ) -> Sequence[User]:
        query = self.session.query(UserModel).filter(UserModel.tenant_id == tenant_id)
        if role is not None:
            query = query.filter(UserModel.role == role.value)
        if not include_inactive:
            query = query.filter(UserModel.is_active.is_(True))
        query = query.order_by(UserModel.id.asc())
        return [self._to_entity(model) for model in query.all()]

    def list_ids_by_role(self, role: Role) -> list[int]:
        query = self.session.query(UserModel.id).filter(UserModel.role == role.value)
        return [user_id for (user_id,) in query.all()]

    def create(self, user: User) -> User:
        model = UserModel(
            id=user.id,
            tenant_id=user.tenant_id,
            email=user.email,
            name=user.name,
            role=user.role.value,
            is_active=user.is_active,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            tenant_id=model.tenant_id,
            email=model.email,
            name=model.name,
            role=Role.parse(model.role) or Role.VIEWER,
            is_active=model.is_active,
            created_at=model.created_at,
        )


__all__ = ["UserRepository"]
