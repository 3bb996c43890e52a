"""Shared fixtures: a throw-away SQLite database and directory helpers."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

TEST_DB_PATH = Path(tempfile.gettempdir()) / "notifications_test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ.pop("REDIS_URL", None)

from app.config import get_settings  # noqa: E402

get_settings.cache_clear()

from app.domain.entities import Role, User  # noqa: E402
from app.infrastructure.database import (  # noqa: E402
    Base,
    SessionLocal,
    engine,
    initialize_database,
)
from app.infrastructure.repositories import UserRepository  # noqa: E402
from app.infrastructure.security import create_access_token  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    """Ensure the test database starts from a clean state for each test."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session():
    with SessionLocal() as db:
        yield db


@pytest.fixture()
def make_user(session):
    """Insert a directory user and return it."""

    counter = {"next": 1}

    def factory(
        *,
        tenant_id: int | None = 1,
        role: Role = Role.VIEWER,
        is_active: bool = True,
        name: str | None = None,
    ) -> User:
        user_id = counter["next"]
        counter["next"] += 1
        return UserRepository(session).create(
            User(
                id=user_id,
                tenant_id=tenant_id,
                email=f"user{user_id}@example.com",
                name=name or f"User {user_id}",
                role=role,
                is_active=is_active,
            )
        )

    return factory


def _token_for(user: User) -> str:
    return create_access_token(
        {"sub": user.id, "tenant_id": user.tenant_id, "role": user.role.value}
    )


@pytest.fixture()
def token_for():
    return _token_for


@pytest.fixture()
def auth_headers():
    def build(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {_token_for(user)}"}

    return build


@pytest.fixture(params=["asyncio"])
def anyio_backend(request):
    return request.param
