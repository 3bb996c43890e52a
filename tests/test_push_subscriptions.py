"""Tests for push registration and delivery through a sender."""

from __future__ import annotations

import pytest

from app.application.use_cases.notifications import (
    build_push_message,
    create_notification_with_push,
    send_push_to_tenant,
    send_push_to_user,
    send_test_push,
    subscribe,
    unsubscribe,
    unsubscribe_endpoint,
)
from app.domain.entities import NotificationType, PushMessage
from app.domain.exceptions import ValidationError
from app.infrastructure.database import SessionLocal
from app.infrastructure.models import NotificationModel, PushSubscriptionModel
from app.infrastructure.notifications import (
    VAPID_KEY_PLACEHOLDER,
    LoggingPushSender,
    get_vapid_public_key,
)
from app.infrastructure.repositories import PushSubscriptionRepository


class RecordingSender:
    """Collect delivered messages and fail for selected endpoints."""

    def __init__(self, failing: set[str] | None = None, refused: set[str] | None = None):
        self.failing = failing or set()
        self.refused = refused or set()
        self.sent: list[tuple[str, PushMessage]] = []

    def send(self, subscription, message):
        if subscription.endpoint in self.failing:
            raise ConnectionError("push service unreachable")
        if subscription.endpoint in self.refused:
            return False
        self.sent.append((subscription.endpoint, message))
        return True


def _subscribe(session, user, endpoint, **kwargs):
    return subscribe(
        session,
        user.id,
        endpoint=endpoint,
        p256dh=kwargs.pop("p256dh", "key"),
        auth=kwargs.pop("auth", "secret"),
        **kwargs,
    )


def test_subscribe_upserts_by_endpoint(session, make_user):
    user = make_user()

    first = _subscribe(session, user, "https://push.example/a", p256dh="old")
    second = _subscribe(
        session, user, "https://push.example/a", p256dh="new", platform="android"
    )

    assert first.id == second.id
    assert second.p256dh == "new"
    assert second.platform == "android"
    assert PushSubscriptionRepository(session).count_for_user(user.id) == 1


def test_subscribe_keeps_one_row_per_device(session, make_user):
    user = make_user()

    _subscribe(session, user, "https://push.example/a")
    _subscribe(session, user, "https://push.example/b")

    assert PushSubscriptionRepository(session).count_for_user(user.id) == 2


@pytest.mark.parametrize(
    "kwargs",
    [
        {"endpoint": "  ", "p256dh": "k", "auth": "a"},
        {"endpoint": "https://push.example/a", "p256dh": "", "auth": "a"},
        {"endpoint": "https://push.example/a", "p256dh": "k", "auth": ""},
    ],
)
def test_subscribe_rejects_incomplete_subscription(session, make_user, kwargs):
    user = make_user()

    with pytest.raises(ValidationError):
        subscribe(session, user.id, **kwargs)


def test_unsubscribe_variants(session, make_user):
    user = make_user()
    other = make_user()
    _subscribe(session, user, "https://push.example/a")
    _subscribe(session, user, "https://push.example/b")
    _subscribe(session, other, "https://push.example/c")

    assert unsubscribe_endpoint(session, user.id, "https://push.example/a") == 1
    assert unsubscribe(session, user.id) == 1
    assert unsubscribe(session, user.id) == 0
    assert PushSubscriptionRepository(session).count_for_user(other.id) == 1


def test_send_push_isolates_device_failures(session, make_user):
    user = make_user()
    for endpoint in ("ok", "broken", "refused"):
        _subscribe(session, user, endpoint)
    sender = RecordingSender(failing={"broken"}, refused={"refused"})

    report = send_push_to_user(
        session, user.id, PushMessage(title="t", body="b"), sender=sender
    )

    assert (report.attempted, report.delivered, report.failed) == (3, 1, 2)
    assert [endpoint for endpoint, _ in sender.sent] == ["ok"]


def test_send_push_without_subscription_is_a_no_op(session, make_user):
    user = make_user()

    report = send_push_to_user(
        session, user.id, PushMessage(title="t", body="b"), sender=RecordingSender()
    )

    assert report.attempted == 0


def test_send_push_to_tenant_skips_excluded_user(session, make_user):
    author = make_user()
    reader = make_user()
    outsider = make_user(tenant_id=2)
    for user in (author, reader, outsider):
        _subscribe(session, user, f"device-{user.id}")
    sender = RecordingSender()

    report = send_push_to_tenant(
        session, 1, PushMessage(title="t", body="b"), exclude_user_id=author.id, sender=sender
    )

    assert report.delivered == 1
    assert [endpoint for endpoint, _ in sender.sent] == [f"device-{reader.id}"]


def test_build_push_message_links_to_category_page():
    message = build_push_message(
        NotificationType.TICKET_COMMENTED, "42", "Nouveau commentaire sur: Four"
    )

    assert message.title == "FranchiseHUB"
    assert message.tag == "ticket_commented-42"
    assert message.data == {
        "type": "ticket_commented",
        "targetId": "42",
        "url": "/tickets",
    }


def test_create_notification_with_push_survives_sender_failure(session, make_user):
    user = make_user()
    _subscribe(session, user, "broken")

    notification = create_notification_with_push(
        session,
        user_id=user.id,
        tenant_id=1,
        type=NotificationType.DOCUMENT_UPLOADED,
        target_id=3,
        message="Nouveau document: Carte",
        sender=RecordingSender(failing={"broken"}),
    )

    assert notification.id is not None
    assert session.query(NotificationModel).count() == 1


def test_send_test_push_uses_logging_sender(session, make_user, caplog):
    user = make_user()
    _subscribe(session, user, "device", platform="ios")

    with caplog.at_level("INFO"):
        report = send_test_push(session, user.id, sender=LoggingPushSender())

    assert report.delivered == 1
    assert "Would send push notification" in caplog.text


def test_vapid_key_falls_back_to_placeholder(monkeypatch):
    from app.config import get_settings

    monkeypatch.setattr(get_settings(), "vapid_public_key", None)
    assert get_vapid_public_key() == VAPID_KEY_PLACEHOLDER

    monkeypatch.setattr(get_settings(), "vapid_public_key", "BPublicKey")
    assert get_vapid_public_key() == "BPublicKey"


def test_concurrent_subscribe_updates_the_stored_row(session, make_user, monkeypatch):
    user = make_user()
    original_get_model = PushSubscriptionRepository._get_model
    raced = []

    def get_model_after_competing_insert(self, user_id, endpoint):
        if not raced:
            raced.append(True)
            with SessionLocal() as other:
                other.add(
                    PushSubscriptionModel(
                        user_id=user_id, endpoint=endpoint, p256dh="old", auth="old"
                    )
                )
                other.commit()
            return None
        return original_get_model(self, user_id, endpoint)

    monkeypatch.setattr(
        PushSubscriptionRepository, "_get_model", get_model_after_competing_insert
    )

    subscription = subscribe(
        session, user.id, endpoint="https://push.example/race", p256dh="new", auth="a"
    )

    stored = session.query(PushSubscriptionModel).one()
    assert subscription.id == stored.id
    assert stored.p256dh == "new"
    assert PushSubscriptionRepository(session).count_for_user(user.id) == 1
