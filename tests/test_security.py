"""Tests for access token verification and identity resolution."""

from __future__ import annotations

from datetime import timedelta

import pytest
from jose import jwt

from app.domain.entities import Identity, Role
from app.domain.exceptions import AuthenticationError
from app.infrastructure.security import (
    ALGORITHM,
    create_access_token,
    decode_access_token,
    extract_bearer_token,
    resolve_identity,
)


def test_resolve_identity_reads_standard_claims():
    token = create_access_token({"sub": 7, "tenant_id": 3, "role": "manager"})

    identity = resolve_identity(token)

    assert identity == Identity(user_id=7, tenant_id=3, role=Role.MANAGER)
    assert identity.room == "tenant_3"


def test_resolve_identity_accepts_alternate_claim_names():
    token = create_access_token({"userId": "12", "tenantId": 4, "role": "Viewer"})

    identity = resolve_identity(token)

    assert identity.user_id == 12
    assert identity.tenant_id == 4
    assert identity.role is Role.VIEWER


def test_identity_without_tenant_has_no_room():
    identity = resolve_identity(create_access_token({"id": 5}))

    assert identity.tenant_id is None
    assert identity.role is None
    assert identity.room is None


@pytest.mark.parametrize("token", [None, "", "   ", "not-a-jwt"])
def test_resolve_identity_rejects_missing_or_malformed_tokens(token):
    with pytest.raises(AuthenticationError):
        resolve_identity(token)


def test_resolve_identity_rejects_foreign_signature():
    token = jwt.encode({"sub": "1"}, "another-secret", algorithm=ALGORITHM)

    with pytest.raises(AuthenticationError):
        resolve_identity(token)


def test_resolve_identity_rejects_expired_token():
    token = create_access_token({"sub": 1}, expires_delta=timedelta(seconds=-5))

    with pytest.raises(AuthenticationError):
        decode_access_token(token)


def test_resolve_identity_requires_a_user_claim():
    token = create_access_token({"tenant_id": 1, "role": "admin"})

    with pytest.raises(AuthenticationError):
        resolve_identity(token)


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        ("Bearer abc", "abc"),
        ("bearer   abc  ", "abc"),
        ("Basic abc", None),
        ("Bearer", None),
        (None, None),
    ],
)
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(header) == expected
