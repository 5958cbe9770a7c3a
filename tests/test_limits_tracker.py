import pytest

from screentime_api.errors import ConflictError, NotFoundError, PermissionDenied, ValidationError
from screentime_api.models import User
from screentime_api.services import LimitsTracker


@pytest.fixture
def fresh_user(store):
    store.users.insert(User(user_oid="user-x", email="x@example.com", username="xavier"))
    return LimitsTracker(store, "user-x")


def test_mock_totals(store):
    tracker = LimitsTracker(store, "user-1")
    assert tracker.total_daily_limit == 135
    assert tracker.total_minutes_used == 80
    assert tracker.remaining_minutes == 55
    assert tracker.usage_percentage == pytest.approx(80 / 135)
    assert not tracker.is_over_limit


def test_empty_user_has_zero_totals(fresh_user):
    assert fresh_user.total_daily_limit == 0
    assert fresh_user.total_minutes_used == 0
    assert fresh_user.remaining_minutes == 0
    assert fresh_user.usage_percentage == 0.0
    assert not fresh_user.is_over_limit


def test_usage_equal_to_limit_is_not_over(fresh_user):
    fresh_user.add_limit("app.a", "A", "app", 30)
    fresh_user.add_usage_time("app.a", 30)
    assert fresh_user.usage_percentage == 1.0
    assert not fresh_user.is_over_limit
    assert not fresh_user.is_app_blocked("app.a")


def test_app_blocked_only_when_over_total(fresh_user):
    fresh_user.add_limit("app.a", "A", "app", 10)
    fresh_user.add_limit("app.b", "B", "app", 50)
    fresh_user.add_usage_time("app.a", 20)
    # 20 of 60 in total, the app itself is past its own limit
    assert not fresh_user.is_app_blocked("app.a")

    fresh_user.add_usage_time("app.b", 45)
    assert fresh_user.is_over_limit
    assert fresh_user.is_app_blocked("app.a")
    assert not fresh_user.is_app_blocked("app.b")


def test_remaining_never_negative(fresh_user):
    fresh_user.add_limit("app.a", "A", "app", 10)
    fresh_user.add_usage_time("app.a", 25)
    assert fresh_user.remaining_minutes == 0
    assert fresh_user.usage_percentage == 2.5


def test_add_usage_accumulates(store):
    tracker = LimitsTracker(store, "user-1")
    tracker.add_usage_time("com.instagram.ios", 5)
    tracker.add_usage_time("com.instagram.ios", 5)
    assert tracker.find_usage("com.instagram.ios").minutes_used == 25
    assert len(tracker.usage) == 3


def test_add_usage_without_limit(fresh_user):
    with pytest.raises(NotFoundError):
        fresh_user.add_usage_time("app.unknown", 5)


def test_negative_minutes_rejected(fresh_user):
    with pytest.raises(ValidationError):
        fresh_user.add_limit("app.a", "A", "app", -1)


def test_duplicate_limit(store):
    tracker = LimitsTracker(store, "user-1")
    with pytest.raises(ConflictError):
        tracker.add_limit("com.tiktok.ios", "TikTok", "play.rectangle", 10)


def test_update_and_remove_limit(store):
    tracker = LimitsTracker(store, "user-1")
    tracker.update_limit("com.tiktok.ios", 90)
    assert tracker.total_daily_limit == 180
    tracker.remove_limit("com.tiktok.ios")
    assert tracker.total_daily_limit == 90
    with pytest.raises(NotFoundError):
        tracker.update_limit("com.tiktok.ios", 10)


def test_reset_usage(store):
    tracker = LimitsTracker(store, "user-1")
    tracker.reset_usage()
    assert tracker.total_minutes_used == 0
    assert tracker.remaining_minutes == 135


def test_summary_lists_apps(store):
    summary = LimitsTracker(store, "user-1").summary()
    assert [app["app_name"] for app in summary["apps"]] == ["Instagram", "TikTok", "YouTube"]
    assert summary["remaining_minutes"] == 55
    assert all(not app["is_blocked"] for app in summary["apps"])


def test_member_summary_needs_shared_group(store):
    tracker = LimitsTracker(store, "user-1")
    assert tracker.member_summary("user-2")["total_minutes_used"] == 80
    # bobsmith is only invited
    with pytest.raises(PermissionDenied):
        tracker.member_summary("user-3")
    with pytest.raises(PermissionDenied):
        tracker.member_summary("user-4")
