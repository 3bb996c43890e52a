"""Endpoints and websocket handler for user notifications."""

from __future__ import annotations

import json
import logging

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.application.use_cases.notifications import (
    cleanup_manager_announcement_notifications,
    list_user_notifications,
    list_viewers,
    mark_all_read_by_type,
    mark_category_read,
    record_view_and_mark_read,
    send_test_push,
    subscribe,
    unread_counts,
    unsubscribe,
    unsubscribe_endpoint,
)
from app.config import get_settings
from app.domain.entities import Identity, Role, ViewTargetType
from app.domain.exceptions import (
    AuthenticationError,
    DependencyFailure,
    NotificationError,
)
from app.infrastructure.database import SessionLocal, get_db
from app.infrastructure.notifications import get_vapid_public_key, notification_gateway
from app.infrastructure.security import extract_bearer_token, resolve_identity
from app.interfaces.api.dependencies import (
    get_current_identity,
    require_admin,
    require_manager,
)
from app.interfaces.api.schemas import (
    CleanupResponse,
    MarkAllReadRequest,
    MarkCategoryReadRequest,
    MarkReadResponse,
    NotificationPage,
    NotificationRead,
    PushSubscribeRequest,
    PushSubscriptionRead,
    PushTestResponse,
    UnreadCountsRead,
    UnsubscribeResponse,
    VapidPublicKeyRead,
    ViewCreate,
    ViewerPage,
    ViewerRead,
    ViewRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)

POLICY_VIOLATION = 1008


def _to_http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, AuthenticationError):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        )
    if isinstance(exc, DependencyFailure):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get("", response_model=NotificationPage)
def list_notifications(
    page: int = 1,
    limit: int | None = None,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Return a page of the caller's notifications, newest first."""

    try:
        result = list_user_notifications(
            db,
            identity.user_id,
            page=page,
            page_size=limit or get_settings().notifications_page_size,
        )
    except NotificationError as exc:
        raise _to_http_error(exc) from exc
    return NotificationPage(
        notifications=[NotificationRead.from_entity(item) for item in result.items],
        total=result.total,
        total_pages=result.total_pages,
    )


@router.get("/unread-counts", response_model=UnreadCountsRead)
def read_unread_counts(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Return the caller's unread badge counts per category."""

    return UnreadCountsRead(**unread_counts(db, identity.user_id).as_dict())


@router.post("/views", response_model=ViewRead)
def record_view(
    view_in: ViewCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Record that the caller opened an item and clear its notifications."""

    try:
        view = record_view_and_mark_read(
            db,
            user_id=identity.user_id,
            target_type=view_in.target_type,
            target_id=view_in.target_id,
        )
    except NotificationError as exc:
        raise _to_http_error(exc) from exc
    return ViewRead.from_entity(view)


@router.post("/mark-all-read", response_model=MarkReadResponse)
def mark_all_read(
    request: MarkAllReadRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    updated = mark_all_read_by_type(db, identity.user_id, request.notification_type)
    return MarkReadResponse(updated=updated)


@router.post("/mark-category-read", response_model=MarkReadResponse)
def mark_category_as_read(
    request: MarkCategoryReadRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    updated = mark_category_read(db, identity.user_id, request.category)
    return MarkReadResponse(updated=updated)


@router.get("/views/{target_type}/{target_id}", response_model=ViewerPage)
def read_viewers(
    target_type: ViewTargetType,
    target_id: str,
    page: int = 1,
    limit: int | None = None,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_manager),
):
    """Return who opened an item; restricted to managers and administrators.

    Managers only see viewers of their own tenant.
    """

    is_admin = identity.has_role(Role.ADMIN)
    if not is_admin and identity.tenant_id is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Tenant required",
        )
    try:
        result = list_viewers(
            db,
            target_type=target_type,
            target_id=target_id,
            tenant_id=None if is_admin else identity.tenant_id,
            page=page,
            page_size=limit or get_settings().views_page_size,
        )
    except NotificationError as exc:
        raise _to_http_error(exc) from exc
    return ViewerPage(
        views=[ViewerRead.from_entry(entry) for entry in result.items],
        total=result.total,
        total_pages=result.total_pages,
    )


@router.post("/cleanup-manager-announcements", response_model=CleanupResponse)
def cleanup_manager_announcements(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    """Remove announcement notifications wrongly delivered to managers."""

    deleted = cleanup_manager_announcement_notifications(db)
    logger.info("Administrator %s removed %d manager notification(s)", identity.user_id, deleted)
    return CleanupResponse(deleted=deleted)


@router.get("/vapid-public-key", response_model=VapidPublicKeyRead)
def read_vapid_public_key(_: Identity = Depends(get_current_identity)):
    return VapidPublicKeyRead(public_key=get_vapid_public_key())


@router.post(
    "/subscribe",
    response_model=PushSubscriptionRead,
    status_code=status.HTTP_201_CREATED,
)
def subscribe_to_push(
    request: PushSubscribeRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Register the caller's device for push notifications."""

    browser = request.subscription
    expiration = browser.expiration_time
    try:
        subscription = subscribe(
            db,
            identity.user_id,
            endpoint=browser.endpoint,
            p256dh=browser.keys.p256dh,
            auth=browser.keys.auth,
            expiration_time=str(expiration) if expiration is not None else None,
            user_agent=request.user_agent,
            platform=request.platform,
        )
    except NotificationError as exc:
        raise _to_http_error(exc) from exc
    return PushSubscriptionRead.from_entity(subscription)


@router.delete("/unsubscribe", response_model=UnsubscribeResponse)
def unsubscribe_from_push(
    endpoint: str | None = Query(
        None,
        description="Remove only this device; every device of the caller otherwise.",
    ),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    if endpoint:
        removed = unsubscribe_endpoint(db, identity.user_id, endpoint)
    else:
        removed = unsubscribe(db, identity.user_id)
    return UnsubscribeResponse(removed=removed)


@router.post("/test-push", response_model=PushTestResponse)
def test_push(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Send a test push to every device of the caller."""

    return PushTestResponse.from_report(send_test_push(db, identity.user_id))


def _websocket_token(websocket: WebSocket) -> str | None:
    token = websocket.query_params.get("token")
    if token:
        return token
    return extract_bearer_token(websocket.headers.get("authorization"))


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket streaming realtime notification events to the caller."""

    try:
        identity = resolve_identity(_websocket_token(websocket))
    except AuthenticationError as exc:
        logger.warning("Rejected realtime connection: %s", exc)
        await websocket.close(code=POLICY_VIOLATION)
        return

    session = SessionLocal()
    try:
        counts = unread_counts(session, identity.user_id)
    except SQLAlchemyError:
        logger.exception("Could not load unread counts for user %s", identity.user_id)
        counts = None
    finally:
        session.close()

    connection = await notification_gateway.connect(websocket, identity)
    try:
        await websocket.send_json(
            {
                "event": "connected",
                "data": {
                    "user_id": identity.user_id,
                    "tenant_id": identity.tenant_id,
                    "unread": counts.as_dict() if counts else None,
                },
            }
        )
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                break
            raw = frame.get("text")
            if raw is None:
                continue
            try:
                message = json.loads(raw)
            except ValueError:
                continue
            if isinstance(message, dict) and message.get("type") == "ping":
                await websocket.send_json({"event": "pong", "data": {}})
    except WebSocketDisconnect:
        pass
    finally:
        notification_gateway.disconnect(connection)
