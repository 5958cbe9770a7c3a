import logging
from typing import List, Optional

from ..errors import NotFoundError
from ..models import NotificationItem, NotificationType
from ..store import MemoryStore

logger = logging.getLogger(__name__)


class NotificationsTracker:
    """Per-user notification feed. Other trackers call `notify` when something happens."""

    def __init__(self, store: MemoryStore):
        self.store = store

    def notify(self, user_oid: str, title: str, body: str, notification_type: NotificationType,
               related_oid: Optional[str] = None) -> NotificationItem:
        item = NotificationItem(title=title, body=body, type=notification_type, user_oid=user_oid,
                                related_oid=related_oid)
        self.store.notifications.insert(item)
        logger.info("Notification %s (%s) queued for user %s", item.notification_oid, notification_type.value,
                    user_oid)
        return item

    def fetch(self, user_oid: str) -> List[NotificationItem]:
        items = self.store.notifications.find(user_oid=user_oid)
        return sorted(items, key=lambda item: item.created_at, reverse=True)

    def unread_count(self, user_oid: str) -> int:
        return self.store.notifications.count(user_oid=user_oid, is_read=False)

    def _get(self, user_oid: str, notification_oid: str) -> NotificationItem:
        item = self.store.notifications.get(notification_oid)
        if not item or item.user_oid != user_oid:
            raise NotFoundError("Notification not found")
        return item

    def mark_as_read(self, user_oid: str, notification_oid: str) -> NotificationItem:
        item = self._get(user_oid, notification_oid)
        item.is_read = True
        return item

    def mark_all_as_read(self, user_oid: str) -> int:
        unread = self.store.notifications.find(user_oid=user_oid, is_read=False)
        for item in unread:
            item.is_read = True
        return len(unread)

    def delete(self, user_oid: str, notification_oid: str):
        self._get(user_oid, notification_oid)
        self.store.notifications.delete(notification_oid)

    def clear_all(self, user_oid: str) -> int:
        return self.store.notifications.delete_many(user_oid=user_oid)

    def take_undelivered(self, user_oid: str) -> List[NotificationItem]:
        pending = sorted(self.store.notifications.find(user_oid=user_oid, delivered=False),
                         key=lambda item: item.created_at)
        for item in pending:
            item.delivered = True
        return pending

    def build_daily_summary(self, user_oid: str, minutes_used: int, usage_percentage: float) -> NotificationItem:
        body = (f"You used {minutes_used} minutes of screen time today "
                f"({round(usage_percentage * 100)}% of your limit)")
        return self.notify(user_oid, "Daily Summary", body, NotificationType.DAILY_SUMMARY)
