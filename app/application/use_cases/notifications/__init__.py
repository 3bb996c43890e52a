"""Public helpers for storing, fanning out and delivering notifications."""

from .cleanup import (
    cleanup_manager_announcement_notifications,
    count_blank_target_notifications,
    count_manager_announcement_notifications,
    purge_blank_target_notifications,
    sample_blank_target_notifications,
)
from .events import (
    HookOutcome,
    notify_announcement_posted,
    notify_document_uploaded,
    notify_restaurant_joined,
    notify_ticket_commented,
    notify_ticket_created,
    notify_ticket_status_updated,
)
from .fanout import FanOutPolicy, FanOutReport, fan_out, fan_out_with_report, resolve_audience
from .push_subscriptions import (
    build_push_message,
    create_notification_with_push,
    send_push_to_tenant,
    send_push_to_user,
    send_push_to_users,
    send_test_push,
    subscribe,
    unsubscribe,
    unsubscribe_endpoint,
)
from .store import (
    create_notification,
    list_user_notifications,
    mark_all_read_by_type,
    mark_category_read,
    mark_read,
    mark_read_by_types,
    normalize_target_id,
    unread_counts,
)
from .views import list_viewers, record_view, record_view_and_mark_read

__all__ = [
    "FanOutPolicy",
    "FanOutReport",
    "HookOutcome",
    "build_push_message",
    "cleanup_manager_announcement_notifications",
    "count_blank_target_notifications",
    "count_manager_announcement_notifications",
    "create_notification",
    "create_notification_with_push",
    "fan_out",
    "fan_out_with_report",
    "list_user_notifications",
    "list_viewers",
    "mark_all_read_by_type",
    "mark_category_read",
    "mark_read",
    "mark_read_by_types",
    "normalize_target_id",
    "notify_announcement_posted",
    "notify_document_uploaded",
    "notify_restaurant_joined",
    "notify_ticket_commented",
    "notify_ticket_created",
    "notify_ticket_status_updated",
    "purge_blank_target_notifications",
    "record_view",
    "record_view_and_mark_read",
    "resolve_audience",
    "sample_blank_target_notifications",
    "send_push_to_tenant",
    "send_push_to_user",
    "send_push_to_users",
    "send_test_push",
    "subscribe",
    "unread_counts",
    "unsubscribe",
    "unsubscribe_endpoint",
]
