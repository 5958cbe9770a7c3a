import pytest

from screentime_api.errors import NotFoundError
from screentime_api.models import NotificationType


def test_mock_feed(notifications):
    items = notifications.fetch("user-1")
    assert len(items) == 4
    assert items[0].type == NotificationType.EXTENSION_REQUEST
    assert items[-1].type == NotificationType.DAILY_SUMMARY
    assert notifications.unread_count("user-1") == 4


def test_mark_as_read(notifications):
    item = notifications.fetch("user-1")[0]
    notifications.mark_as_read("user-1", item.notification_oid)
    assert notifications.unread_count("user-1") == 3
    assert notifications.mark_all_as_read("user-1") == 3
    assert notifications.unread_count("user-1") == 0


def test_delete_and_clear(notifications):
    item = notifications.fetch("user-1")[0]
    notifications.delete("user-1", item.notification_oid)
    with pytest.raises(NotFoundError):
        notifications.delete("user-1", item.notification_oid)
    assert notifications.clear_all("user-1") == 3
    assert notifications.fetch("user-1") == []


def test_take_undelivered_once(notifications):
    first = notifications.notify("user-2", "One", "first", NotificationType.GROUP_INVITE)
    second = notifications.notify("user-2", "Two", "second", NotificationType.GROUP_JOINED)
    assert notifications.take_undelivered("user-2") == [first, second]
    assert notifications.take_undelivered("user-2") == []
    # mock items were delivered already
    assert notifications.take_undelivered("user-1") == []


def test_daily_summary(notifications):
    item = notifications.build_daily_summary("user-1", 80, 80 / 135)
    assert item.type == NotificationType.DAILY_SUMMARY
    assert item.body == "You used 80 minutes of screen time today (59% of your limit)"
    assert not item.delivered


def test_other_users_item_is_not_found(notifications):
    item = notifications.fetch("user-1")[0]
    with pytest.raises(NotFoundError):
        notifications.mark_as_read("user-2", item.notification_oid)
    with pytest.raises(NotFoundError):
        notifications.delete("user-2", item.notification_oid)
    assert not item.is_read
    assert len(notifications.fetch("user-1")) == 4
