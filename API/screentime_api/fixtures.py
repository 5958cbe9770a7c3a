from datetime import timedelta

from .models import (Group, GroupMember, MembershipStatus, NotificationItem, NotificationType, ScreenTimeLimit,
                     ScreenTimeUsage, User, utcnow)
from .store import MemoryStore

MOCK_USERS = [
    User(user_oid="user-1", email="test@example.com", username="testuser"),
    User(user_oid="user-2", email="jane@example.com", username="janedoe"),
    User(user_oid="user-3", email="bob@example.com", username="bobsmith"),
    User(user_oid="user-4", email="alex@example.com", username="alex123"),
    User(user_oid="user-5", email="sam@example.com", username="samsmith"),
    User(user_oid="user-6", email="taylor@example.com", username="taylor"),
    User(user_oid="user-7", email="john@example.com", username="johndoe"),
]

# (app_id, app_name, icon_name, daily limit, minutes used)
MOCK_APPS = [
    ("com.instagram.ios", "Instagram", "camera", 30, 15),
    ("com.tiktok.ios", "TikTok", "play.rectangle", 45, 25),
    ("com.google.ios.youtube", "YouTube", "play.tv", 60, 40),
]


def _mock_group() -> Group:
    now = utcnow()
    return Group(
        group_oid="group-1",
        name="Focus Friends",
        description="A group to help each other stay focused",
        admin_user_oid="user-1",
        members=[
            GroupMember(member_oid="member-1", user_oid="user-1", group_oid="group-1", username="testuser",
                        email="test@example.com", status=MembershipStatus.ACTIVE, joined_at=now),
            GroupMember(member_oid="member-2", user_oid="user-2", group_oid="group-1", username="janedoe",
                        email="jane@example.com", status=MembershipStatus.ACTIVE, joined_at=now),
            GroupMember(member_oid="member-3", user_oid="user-3", group_oid="group-1", username="bobsmith",
                        email="bob@example.com"),
        ],
    )


def _mock_notifications():
    now = utcnow()
    return [
        NotificationItem(title="Time Extension Request", body="Jane requested 30 more minutes for Instagram",
                         type=NotificationType.EXTENSION_REQUEST, related_oid="request-1",
                         created_at=now - timedelta(hours=1), user_oid="user-1", delivered=True),
        NotificationItem(title="Extension Approved", body="Your request for 15 more minutes on TikTok was approved",
                         type=NotificationType.EXTENSION_APPROVED, related_oid="request-2",
                         created_at=now - timedelta(hours=2), user_oid="user-1", delivered=True),
        NotificationItem(title="Group Invitation", body="Jane invited you to join 'Focus Friends'",
                         type=NotificationType.GROUP_INVITE, related_oid="group-1",
                         created_at=now - timedelta(days=1), user_oid="user-1", delivered=True),
        NotificationItem(title="Daily Summary",
                         body="You used 45 minutes of screen time today (75% of your limit)",
                         type=NotificationType.DAILY_SUMMARY, created_at=now - timedelta(days=2),
                         user_oid="user-1", delivered=True),
    ]


def load_mock_data(store: MemoryStore, user_oid: str = "user-1"):
    store.reset()
    for user in MOCK_USERS:
        store.users.insert(User(**vars(user)))
    store.groups.insert(_mock_group())
    for app_id, app_name, icon_name, limit_minutes, used_minutes in MOCK_APPS:
        store.limits.insert(ScreenTimeLimit(app_id=app_id, app_name=app_name, icon_name=icon_name,
                                            daily_limit_minutes=limit_minutes, user_oid=user_oid))
        store.usage.insert(ScreenTimeUsage(app_id=app_id, app_name=app_name, minutes_used=used_minutes,
                                           user_oid=user_oid))
    for item in _mock_notifications():
        store.notifications.insert(item)
