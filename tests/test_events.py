"""Tests for the post-commit notification hooks."""

from __future__ import annotations

import pytest

from app.application.use_cases.notifications import (
    notify_announcement_posted,
    notify_document_uploaded,
    notify_restaurant_joined,
    notify_ticket_commented,
    notify_ticket_created,
    notify_ticket_status_updated,
    subscribe,
)
from app.domain.entities import NotificationType, Role
from app.domain.exceptions import DirectoryUnavailableError
from app.infrastructure.models import NotificationModel
from app.infrastructure.repositories import UserRepository


class RecordingRealtime:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple] = []

    def _record(self, name, *args):
        if self.fail:
            raise RuntimeError("gateway unavailable")
        self.calls.append((name, *args))

    def document_uploaded(self, tenant_id, data):
        self._record("document_uploaded", tenant_id, data)

    def announcement_posted(self, tenant_id, data):
        self._record("announcement_posted", tenant_id, data)

    def ticket_created(self, manager_ids, data):
        self._record("ticket_created", list(manager_ids), data)

    def ticket_updated(self, user_id, data):
        self._record("ticket_updated", user_id, data)

    def restaurant_joined(self, tenant_id, data):
        self._record("restaurant_joined", tenant_id, data)


class RecordingSender:
    def __init__(self) -> None:
        self.sent: list[tuple[int, str]] = []

    def send(self, subscription, message):
        self.sent.append((subscription.user_id, message.body))
        return True


@pytest.fixture()
def realtime():
    return RecordingRealtime()


@pytest.fixture()
def sender():
    return RecordingSender()


@pytest.fixture()
def team(session, make_user):
    users = {
        "manager": make_user(role=Role.MANAGER),
        "viewer": make_user(role=Role.VIEWER),
        "admin": make_user(role=Role.ADMIN),
    }
    for user in users.values():
        subscribe(session, user.id, endpoint=f"device-{user.id}", p256dh="k", auth="a")
    return users


def _types_for(session, user_id):
    return [
        row.type
        for row in session.query(NotificationModel).filter(
            NotificationModel.user_id == user_id
        )
    ]


def test_document_uploaded_notifies_tenant_except_author(session, team, realtime, sender):
    outcome = notify_document_uploaded(
        session,
        tenant_id=1,
        document_id=10,
        document_name="Carte été",
        author_id=team["admin"].id,
        realtime=realtime,
        sender=sender,
    )

    assert outcome.succeeded
    assert sorted(outcome.recipient_ids) == sorted([team["manager"].id, team["viewer"].id])
    assert outcome.notifications[0].message == "Nouveau document: Carte été"
    assert realtime.calls[0][0:2] == ("document_uploaded", 1)
    assert sorted(user_id for user_id, _ in sender.sent) == sorted(outcome.recipient_ids)


def test_announcement_goes_to_viewers_only(session, team, realtime, sender):
    outcome = notify_announcement_posted(
        session,
        tenant_id=1,
        announcement_id=4,
        title="Promo",
        realtime=realtime,
        sender=sender,
    )

    assert outcome.recipient_ids == [team["viewer"].id]
    assert _types_for(session, team["manager"].id) == []
    assert [user_id for user_id, _ in sender.sent] == [team["viewer"].id]


def test_ticket_created_goes_to_managers_only(session, team, realtime, sender):
    outcome = notify_ticket_created(
        session, tenant_id=1, ticket_id=8, title="Four", realtime=realtime, sender=sender
    )

    assert outcome.recipient_ids == [team["manager"].id]
    assert _types_for(session, team["viewer"].id) == []
    assert realtime.calls == [
        (
            "ticket_created",
            [team["manager"].id],
            {"id": 8, "title": "Four", "message": "Nouveau ticket: Four"},
        )
    ]


def test_ticket_status_update_notifies_creator(session, team, realtime, sender):
    creator = team["viewer"]

    outcome = notify_ticket_status_updated(
        session,
        tenant_id=1,
        ticket_id=8,
        title="Four",
        status="resolved",
        creator_id=creator.id,
        realtime=realtime,
        sender=sender,
    )

    assert outcome.notifications[0].message == "Statut mis à jour: Four - resolved"
    assert _types_for(session, creator.id) == [NotificationType.TICKET_STATUS_UPDATED.value]
    assert realtime.calls[0][0:2] == ("ticket_updated", creator.id)


def test_comment_by_creator_does_not_notify(session, team, realtime, sender):
    creator = team["viewer"]

    outcome = notify_ticket_commented(
        session,
        tenant_id=1,
        ticket_id=8,
        title="Four",
        creator_id=creator.id,
        author_id=creator.id,
        realtime=realtime,
        sender=sender,
    )

    assert outcome.notifications == []
    assert realtime.calls == []
    assert sender.sent == []


def test_comment_by_someone_else_notifies_creator(session, team, realtime, sender):
    creator = team["viewer"]

    outcome = notify_ticket_commented(
        session,
        tenant_id=1,
        ticket_id=8,
        title="Four",
        creator_id=creator.id,
        author_id=team["manager"].id,
        realtime=realtime,
        sender=sender,
    )

    assert outcome.recipient_ids == [creator.id]
    assert sender.sent == [(creator.id, "Nouveau commentaire sur: Four")]
    assert realtime.calls[0][2]["type"] == "comment"


def test_restaurant_joined_welcomes_viewers(session, team, realtime, sender):
    outcome = notify_restaurant_joined(
        session,
        tenant_id=1,
        announcement_id=15,
        restaurant_name="Chez Paul",
        restaurant_city="Lyon",
        realtime=realtime,
        sender=sender,
    )

    assert outcome.recipient_ids == [team["viewer"].id]
    assert outcome.notifications[0].message == "Chez Paul a rejoint l'équipe !"
    assert realtime.calls[0][2]["restaurantCity"] == "Lyon"


def test_invalid_target_is_logged_and_not_raised(session, team, realtime, sender, caplog):
    outcome = notify_document_uploaded(
        session,
        tenant_id=1,
        document_id=None,
        document_name="Sans id",
        realtime=realtime,
        sender=sender,
    )

    assert outcome.failed_steps == ["persist"]
    assert session.query(NotificationModel).count() == 0
    assert realtime.calls == []
    assert sender.sent == []
    assert "Notification step 'persist' failed" in caplog.text


@pytest.mark.parametrize("announcement_id", ["", "   ", "x" * 65])
def test_rejected_target_skips_tenant_broadcast(
    session, team, realtime, sender, announcement_id
):
    for hook, kwargs in (
        (notify_announcement_posted, {"title": "Promo"}),
        (notify_restaurant_joined, {"restaurant_name": "Chez Paul"}),
    ):
        outcome = hook(
            session,
            tenant_id=1,
            announcement_id=announcement_id,
            realtime=realtime,
            sender=sender,
            **kwargs,
        )
        assert outcome.failed_steps == ["persist"]

    assert realtime.calls == []
    assert sender.sent == []
    assert session.query(NotificationModel).count() == 0


def test_directory_failure_does_not_block_realtime(session, team, realtime, sender, monkeypatch):
    def fail(*args, **kwargs):
        raise DirectoryUnavailableError("directory down")

    monkeypatch.setattr(UserRepository, "list_by_tenant", fail)

    outcome = notify_announcement_posted(
        session,
        tenant_id=1,
        announcement_id=4,
        title="Promo",
        realtime=realtime,
        sender=sender,
    )

    assert outcome.failed_steps == ["persist"]
    assert [call[0] for call in realtime.calls] == ["announcement_posted"]


def test_realtime_failure_does_not_block_push(session, team, sender):
    outcome = notify_ticket_status_updated(
        session,
        tenant_id=1,
        ticket_id=8,
        title="Four",
        status="closed",
        creator_id=team["viewer"].id,
        realtime=RecordingRealtime(fail=True),
        sender=sender,
    )

    assert outcome.failed_steps == ["realtime"]
    assert outcome.recipient_ids == [team["viewer"].id]
    assert sender.sent == [(team["viewer"].id, "Statut mis à jour: Four - closed")]


def test_push_can_be_disabled(session, team, realtime, sender, monkeypatch):
    from app.config import get_settings

    monkeypatch.setattr(get_settings(), "push_enabled", False)

    outcome = notify_ticket_created(
        session, tenant_id=1, ticket_id=8, title="Four", realtime=realtime, sender=sender
    )

    assert outcome.succeeded
    assert sender.sent == []
