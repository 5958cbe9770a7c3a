from AccountabilityBot.handlers.extension import format_request_details, format_response_outcome, \
    request_conversation_handler, respond_conversation_handler
from AccountabilityBot.handlers.group import format_group_info, parse_list_choice, group_conversation_handler
from AccountabilityBot.handlers.limits import format_limits_summary
from AccountabilityBot.handlers.notification import format_notifications
from AccountabilityBot.keyboards.inline_kb import group_actions, limits_menu, minutes_keyboard
from AccountabilityBot.models import ExtensionRequest, Group, LimitsSummary, NotificationItem

SUMMARY = {
    "user_oid": "user-1",
    "date": "2026-10-19",
    "total_daily_limit": 135,
    "total_minutes_used": 80,
    "remaining_minutes": 55,
    "usage_percentage": 80 / 135,
    "is_over_limit": False,
    "apps": [
        {"app_id": "com.instagram.ios", "app_name": "Instagram", "icon_name": "camera",
         "daily_limit_minutes": 30, "minutes_used": 15, "is_blocked": False},
        {"app_id": "com.tiktok.ios", "app_name": "TikTok", "icon_name": "play.rectangle",
         "daily_limit_minutes": 45, "minutes_used": 25, "is_blocked": False},
    ],
}

GROUP = {
    "group_oid": "group-1",
    "name": "Focus Friends",
    "admin_user_oid": "user-1",
    "description": None,
    "created_at": "2026-10-19T10:00:00+00:00",
    "updated_at": "2026-10-19T10:00:00+00:00",
    "members": [
        {"member_oid": "member-1", "user_oid": "user-1", "group_oid": "group-1", "username": "testuser",
         "email": "test@example.com", "status": "active", "invited_at": "2026-10-19T10:00:00+00:00",
         "joined_at": "2026-10-19T10:00:00+00:00"},
        {"member_oid": "member-3", "user_oid": "user-3", "group_oid": "group-1", "username": "bobsmith",
         "email": "bob@example.com", "status": "pending", "invited_at": "2026-10-19T10:00:00+00:00",
         "joined_at": None},
    ],
}


def _request(status="pending", approvals=0, denials=0):
    return ExtensionRequest(request_oid="r-1", app_id="com.instagram.ios", app_name="Instagram",
                            requested_minutes=15, reason="Homework video", user_oid="user-2", group_oid="group-1",
                            status=status, created_at="", updated_at="", approvals=approvals, denials=denials)


def test_limits_summary_text():
    text = format_limits_summary(LimitsSummary.from_dict(SUMMARY))
    assert "Used: 80 of 135 min (59%)" in text
    assert "Remaining: 55 min" in text
    assert "Instagram: 15/30 min" in text
    assert "over your daily limit" not in text


def test_limits_menu_callbacks():
    markup = limits_menu(LimitsSummary.from_dict(SUMMARY).apps)
    assert markup.inline_keyboard[0][0].callback_data == 'limits_usage_0_5'
    assert markup.inline_keyboard[1][1].callback_data == 'limits_usage_1_15'
    assert markup.inline_keyboard[-1][0].callback_data == 'limits_reset'


def test_minutes_keyboard_labels():
    buttons = minutes_keyboard().inline_keyboard[0]
    assert [button.text for button in buttons] == ["1 Minute", "5 Minutes", "15 Minutes", "30 Minutes"]


def test_request_texts():
    request = _request()
    assert format_request_details(request).startswith("App: Instagram\nRequested Time: 15 minutes")
    assert "1 approved" in format_response_outcome(_request(approvals=1))
    assert format_response_outcome(_request(status="denied")).endswith("now denied.")


def test_group_info_and_actions():
    group = Group.from_dict(GROUP)
    admin_text = format_group_info(group, "user-1")
    assert "testuser (admin)" in admin_text
    assert "Pending invitations: bobsmith" in admin_text
    assert "Pending invitations" not in format_group_info(group, "user-2")

    admin_actions = [row[0].callback_data for row in group_actions(group, "user-1").inline_keyboard]
    assert 'group_action_invite' in admin_actions
    member_actions = [row[0].callback_data for row in group_actions(group, "user-2").inline_keyboard]
    assert member_actions == ['group_action_members', 'group_action_leave']


def test_parse_list_choice():
    items = ["a", "b"]
    assert parse_list_choice("2 - b", items) == "b"
    assert parse_list_choice("3 - c", items) is None
    assert parse_list_choice("Back", items) is None


def test_notifications_text():
    items = [NotificationItem(notification_oid="n-1", title="Daily Summary", body="You used 45 minutes",
                              type="daily_summary", user_oid="user-1", created_at="2026-10-19T21:00:00+00:00")]
    text = format_notifications(items, 1)
    assert text.startswith("Notifications (1 unread)")
    assert "* Daily Summary (19.10.2026 21:00)" in text
    assert format_notifications([], 0) == "No notifications."


def test_conversations_track_chat_and_user():
    for handler in (group_conversation_handler, request_conversation_handler, respond_conversation_handler):
        assert handler.per_message is False
        assert handler.per_chat and handler.per_user
