"""Tests for storing, listing and marking notifications."""

from __future__ import annotations

import pytest

from app.application.use_cases.notifications import (
    create_notification,
    list_user_notifications,
    mark_all_read_by_type,
    mark_category_read,
    mark_read,
    normalize_target_id,
    unread_counts,
)
from app.domain.entities import NotificationCategory, NotificationType, UnreadCounts
from app.domain.exceptions import InvalidTargetError, ValidationError
from app.infrastructure.models import NotificationModel


def _notify(session, user, type=NotificationType.DOCUMENT_UPLOADED, target_id="1"):
    return create_notification(
        session,
        user_id=user.id,
        tenant_id=user.tenant_id,
        type=type,
        target_id=target_id,
        message=f"{type.value} {target_id}",
    )


def test_create_notification_stores_unread_row(session, make_user):
    user = make_user()

    notification = _notify(session, user, target_id=42)

    assert notification.id is not None
    assert notification.target_id == "42"
    assert notification.is_read is False
    assert notification.category is NotificationCategory.DOCUMENTS
    assert notification.created_at is not None
    assert notification.created_at.tzinfo is not None


@pytest.mark.parametrize("target_id", [None, "", "   "])
def test_create_notification_rejects_blank_target(session, make_user, target_id):
    user = make_user()

    with pytest.raises(InvalidTargetError):
        _notify(session, user, target_id=target_id)

    assert session.query(NotificationModel).count() == 0


def test_normalize_target_id_trims_and_stringifies():
    assert normalize_target_id(" abc ") == "abc"
    assert normalize_target_id(7) == "7"
    assert isinstance(InvalidTargetError(), ValidationError)


def test_normalize_target_id_caps_length():
    assert normalize_target_id(" " + "a" * 64 + " ") == "a" * 64

    with pytest.raises(InvalidTargetError, match="longer than 64"):
        normalize_target_id("a" * 65)


def test_list_user_notifications_pages_newest_first(session, make_user):
    user = make_user()
    other = make_user()
    for index in range(5):
        _notify(session, user, target_id=str(index))
    _notify(session, other, target_id="99")

    first = list_user_notifications(session, user.id, page=1, page_size=2)
    last = list_user_notifications(session, user.id, page=3, page_size=2)

    assert first.total == 5
    assert first.total_pages == 3
    assert [item.target_id for item in first.items] == ["4", "3"]
    assert [item.target_id for item in last.items] == ["0"]


def test_list_user_notifications_rejects_invalid_page(session, make_user):
    user = make_user()

    with pytest.raises(ValidationError):
        list_user_notifications(session, user.id, page=0)
    with pytest.raises(ValidationError):
        list_user_notifications(session, user.id, page_size=0)


def test_empty_history_has_no_pages(session, make_user):
    user = make_user()

    page = list_user_notifications(session, user.id)

    assert page.items == []
    assert page.total == 0
    assert page.total_pages == 0


def test_mark_read_only_touches_matching_target(session, make_user):
    user = make_user()
    _notify(session, user, target_id="1")
    _notify(session, user, target_id="2")

    assert mark_read(session, user.id, NotificationType.DOCUMENT_UPLOADED, "1") == 1
    assert mark_read(session, user.id, NotificationType.DOCUMENT_UPLOADED, "1") == 0

    assert unread_counts(session, user.id).documents == 1


def test_mark_all_read_by_type_leaves_other_types(session, make_user):
    user = make_user()
    _notify(session, user, NotificationType.TICKET_CREATED, "1")
    _notify(session, user, NotificationType.TICKET_COMMENTED, "1")

    updated = mark_all_read_by_type(session, user.id, NotificationType.TICKET_CREATED)

    assert updated == 1
    assert unread_counts(session, user.id).tickets == 1


def test_mark_category_read_covers_every_type_of_the_category(session, make_user):
    user = make_user()
    _notify(session, user, NotificationType.ANNOUNCEMENT_POSTED, "1")
    _notify(session, user, NotificationType.RESTAURANT_JOINED, "2")
    _notify(session, user, NotificationType.DOCUMENT_UPLOADED, "3")

    updated = mark_category_read(session, user.id, NotificationCategory.ANNOUNCEMENTS)

    assert updated == 2
    assert unread_counts(session, user.id) == UnreadCounts(documents=1)


def test_unread_counts_aggregate_per_category(session, make_user):
    user = make_user()
    other = make_user()
    _notify(session, user, NotificationType.DOCUMENT_UPLOADED, "1")
    _notify(session, user, NotificationType.DOCUMENT_UPLOADED, "2")
    _notify(session, user, NotificationType.RESTAURANT_JOINED, "3")
    _notify(session, user, NotificationType.TICKET_STATUS_UPDATED, "4")
    _notify(session, user, NotificationType.TICKET_COMMENTED, "5")
    _notify(session, user, NotificationType.TICKET_CREATED, "6")
    _notify(session, other, NotificationType.TICKET_CREATED, "7")
    mark_read(session, user.id, NotificationType.TICKET_CREATED, "6")

    counts = unread_counts(session, user.id)

    assert counts.as_dict() == {"documents": 2, "announcements": 1, "tickets": 2}


def test_unread_counts_are_zero_without_notifications(session, make_user):
    user = make_user()

    assert unread_counts(session, user.id) == UnreadCounts()
