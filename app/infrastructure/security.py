"""Helpers for issuing and verifying access tokens."""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from app.config import get_settings
from app.domain.entities import Identity, Role
from app.domain.exceptions import AuthenticationError

ALGORITHM = "HS256"

# Tokens issued by the login flow carry the user id under several names.
_USER_ID_CLAIMS = ("sub", "userId", "id")
_TENANT_ID_CLAIMS = ("tenant_id", "tenantId")


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    settings = get_settings()
    expire = datetime.now(tz=timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    claims = {**data, "exp": expire}
    if "sub" in claims and claims["sub"] is not None:
        claims["sub"] = str(claims["sub"])
    return jwt.encode(claims, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise AuthenticationError("Could not validate credentials") from exc


def resolve_identity(token: str | None) -> Identity:
    """Verify ``token`` and return the identity it asserts."""

    if not token or not token.strip():
        raise AuthenticationError("Missing credentials")

    payload = decode_access_token(token.strip())

    user_id = _int_claim(payload, _USER_ID_CLAIMS)
    if user_id is None:
        raise AuthenticationError("Token does not identify a user")

    return Identity(
        user_id=user_id,
        tenant_id=_int_claim(payload, _TENANT_ID_CLAIMS),
        role=Role.parse(payload.get("role")),
    )


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the credential from an ``Authorization: Bearer`` header value."""

    if not authorization:
        return None
    scheme, _, credential = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not credential.strip():
        return None
    return credential.strip()


def _int_claim(payload: dict[str, Any], names: tuple[str, ...]) -> int | None:
    for name in names:
        value = payload.get(name)
        if value is None or value == "":
            continue
        try:
            return int(value)
        except (TypeError, ValueError):
            continue
    return None
