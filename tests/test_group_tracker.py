import pytest

from screentime_api.errors import ConflictError, NotFoundError, PermissionDenied, ValidationError
from screentime_api.models import MembershipStatus, NotificationType


def test_mock_group_members(groups):
    group = groups.get_group("group-1")
    assert [member.username for member in group.active_members()] == ["testuser", "janedoe"]
    assert [member.username for member in group.pending_members()] == ["bobsmith"]
    assert groups.fetch_user_group("user-1") is group
    assert groups.fetch_user_group("user-3") is None


def test_create_group(groups):
    group = groups.create_group("  Night Owls ", "", "user-4")
    assert group.name == "Night Owls"
    assert group.description is None
    assert group.admin_user_oid == "user-4"
    assert group.is_active_member("user-4")
    assert groups.is_user_admin(group.group_oid, "user-4")


def test_create_group_rejects_blank_name(groups):
    with pytest.raises(ValidationError):
        groups.create_group("   ", None, "user-4")


def test_one_active_group_per_user(groups):
    with pytest.raises(ConflictError):
        groups.create_group("Another", None, "user-2")


def test_invite_and_accept(groups, notifications):
    groups.invite_user("group-1", "user-1", "user-4")
    assert groups.has_pending_invitation("user-4")
    invite = notifications.fetch("user-4")[0]
    assert invite.type == NotificationType.GROUP_INVITE
    assert invite.related_oid == "group-1"

    group = groups.accept_invitation("group-1", "user-4")
    assert group.is_active_member("user-4")
    assert not groups.has_pending_invitation("user-4")
    assert notifications.fetch("user-1")[0].type == NotificationType.GROUP_JOINED


def test_only_admin_invites(groups):
    with pytest.raises(PermissionDenied):
        groups.invite_user("group-1", "user-2", "user-4")


def test_invite_existing_member(groups):
    with pytest.raises(ConflictError):
        groups.invite_user("group-1", "user-1", "user-2")
    with pytest.raises(ConflictError):
        groups.invite_user("group-1", "user-1", "user-3")


def test_decline_then_reinvite(groups):
    member = groups.decline_invitation("group-1", "user-3")
    assert member.status == MembershipStatus.DECLINED
    assert groups.group_pending_invitations("group-1") == []

    groups.invite_user("group-1", "user-1", "user-3")
    assert [m.user_oid for m in groups.group_pending_invitations("group-1")] == ["user-3"]


def test_accept_while_in_other_group(groups):
    other = groups.create_group("Other", None, "user-4")
    groups.invite_user(other.group_oid, "user-4", "user-2")
    with pytest.raises(ConflictError):
        groups.accept_invitation(other.group_oid, "user-2")


def test_remove_pending_member(groups):
    groups.remove_member("group-1", "user-1", "member-3")
    group = groups.get_group("group-1")
    assert group.pending_members() == []
    assert group.find_member("user-3") is None


def test_admin_cannot_be_removed(groups):
    with pytest.raises(ConflictError):
        groups.remove_member("group-1", "user-1", "member-1")
    with pytest.raises(PermissionDenied):
        groups.remove_member("group-1", "user-2", "member-3")
    with pytest.raises(NotFoundError):
        groups.remove_member("group-1", "user-1", "member-404")


def test_member_leaves(groups):
    group = groups.leave_group("group-1", "user-2")
    assert not group.is_active_member("user-2")
    assert groups.fetch_user_group("user-2") is None


def test_admin_leaves_last(groups, store):
    with pytest.raises(ConflictError):
        groups.leave_group("group-1", "user-1")

    groups.leave_group("group-1", "user-2")
    assert groups.leave_group("group-1", "user-1") is None
    assert store.groups.get("group-1") is None


def test_search_users(groups):
    assert {user.username for user in groups.search_users("smith")} == {"bobsmith", "samsmith"}
    assert groups.search_users("  ") == []


def test_update_and_delete_group(groups, store):
    group = groups.update_group("group-1", "user-1", " Deep Work ", "")
    assert group.name == "Deep Work"
    assert group.description is None
    with pytest.raises(PermissionDenied):
        groups.delete_group("group-1", "user-2")
    groups.delete_group("group-1", "user-1")
    with pytest.raises(NotFoundError):
        groups.get_group("group-1")
