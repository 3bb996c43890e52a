from .notification import (
    CleanupResponse,
    MarkAllReadRequest,
    MarkCategoryReadRequest,
    MarkReadResponse,
    NotificationPage,
    NotificationRead,
    UnreadCountsRead,
    ViewCreate,
    ViewerPage,
    ViewerRead,
    ViewRead,
)
from .push import (
    BrowserSubscription,
    PushKeys,
    PushSubscribeRequest,
    PushSubscriptionRead,
    PushTestResponse,
    UnsubscribeResponse,
    VapidPublicKeyRead,
)

__all__ = [
    "BrowserSubscription",
    "CleanupResponse",
    "MarkAllReadRequest",
    "MarkCategoryReadRequest",
    "MarkReadResponse",
    "NotificationPage",
    "NotificationRead",
    "PushKeys",
    "PushSubscribeRequest",
    "PushSubscriptionRead",
    "PushTestResponse",
    "UnreadCountsRead",
    "UnsubscribeResponse",
    "VapidPublicKeyRead",
    "ViewCreate",
    "ViewRead",
    "ViewerPage",
    "ViewerRead",
]
