import logging
from typing import List, Optional

from ..errors import ConflictError, NotFoundError, PermissionDenied, ValidationError
from ..models import Group, GroupMember, MembershipStatus, NotificationType, User, utcnow
from ..store import MemoryStore
from .notifications import NotificationsTracker

logger = logging.getLogger(__name__)


class GroupTracker:
    """Accountability groups. A user is active in at most one group at a time."""

    def __init__(self, store: MemoryStore, notifications: NotificationsTracker):
        self.store = store
        self.notifications = notifications
        self._membership_listeners = []

    def get_group(self, group_oid: str) -> Group:
        group = self.store.groups.get(group_oid)
        if not group:
            raise NotFoundError("Group not found")
        return group

    def _get_user(self, user_oid: str) -> User:
        user = self.store.users.get(user_oid)
        if not user:
            raise NotFoundError("User not found")
        return user

    def on_membership_change(self, callback):
        """Register `callback(group)`, called after a member leaves or is removed."""
        self._membership_listeners.append(callback)

    def _membership_changed(self, group: Group):
        for callback in self._membership_listeners:
            callback(group)

    def _drop_group(self, group_oid: str):
        self.store.groups.delete(group_oid)
        self.store.extension_requests.delete_many(group_oid=group_oid)

    def _require_admin(self, group: Group, user_oid: str):
        if group.admin_user_oid != user_oid:
            logger.warning("User %s tried an admin action on group %s", user_oid, group.group_oid)
            raise PermissionDenied("Only the group admin can do this")

    def fetch_user_group(self, user_oid: str) -> Optional[Group]:
        return self.store.groups.find_one(lambda group: group.is_active_member(user_oid))

    def has_active_group(self, user_oid: str) -> bool:
        return self.fetch_user_group(user_oid) is not None

    def is_user_admin(self, group_oid: str, user_oid: str) -> bool:
        return self.get_group(group_oid).admin_user_oid == user_oid

    def pending_invitations(self, user_oid: str) -> List[GroupMember]:
        invitations = []
        for group in self.store.groups:
            member = group.find_member(user_oid)
            if member and member.is_pending:
                invitations.append(member)
        return invitations

    def has_pending_invitation(self, user_oid: str) -> bool:
        return bool(self.pending_invitations(user_oid))

    def group_pending_invitations(self, group_oid: str) -> List[GroupMember]:
        return self.get_group(group_oid).pending_members()

    def create_group(self, name: str, description: Optional[str], user_oid: str) -> Group:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Group name must not be empty")
        user = self._get_user(user_oid)
        if self.has_active_group(user_oid):
            raise ConflictError("You are already a member of a group")

        group = Group(name=name, description=description or None, admin_user_oid=user_oid)
        group.members.append(GroupMember(
            user_oid=user_oid,
            group_oid=group.group_oid,
            username=user.username or user.display_name,
            email=user.email,
            status=MembershipStatus.ACTIVE,
            joined_at=utcnow(),
        ))
        self.store.groups.insert(group)
        logger.info("User %s created group %s", user_oid, group.group_oid)
        return group

    def search_users(self, query: str) -> List[User]:
        query = (query or "").strip().lower()
        if not query:
            return []
        return [user for user in self.store.users if query in (user.username or "").lower()]

    def invite_user(self, group_oid: str, inviter_oid: str, user_oid: str) -> GroupMember:
        group = self.get_group(group_oid)
        self._require_admin(group, inviter_oid)
        user = self._get_user(user_oid)

        member = group.find_member(user_oid)
        if member and member.status in (MembershipStatus.PENDING, MembershipStatus.ACTIVE):
            raise ConflictError("User is already a member of the group or has a pending invitation")
        if member:
            # declined or removed earlier, invite again
            member.status = MembershipStatus.PENDING
            member.invited_at = utcnow()
            member.joined_at = None
        else:
            member = GroupMember(user_oid=user.user_oid, group_oid=group.group_oid,
                                 username=user.username or "unknown", email=user.email or "unknown@example.com")
            group.members.append(member)
        group.updated_at = utcnow()

        inviter = self._get_user(inviter_oid)
        self.notifications.notify(user.user_oid, "Group Invitation",
                                  f"{inviter.display_name} invited you to join '{group.name}'",
                                  NotificationType.GROUP_INVITE, related_oid=group.group_oid)
        logger.info("User %s invited to group %s", user_oid, group_oid)
        return member

    def accept_invitation(self, group_oid: str, user_oid: str) -> Group:
        group = self.get_group(group_oid)
        member = group.find_member(user_oid)
        if not member or not member.is_pending:
            raise NotFoundError("Invitation not found")
        current = self.fetch_user_group(user_oid)
        if current and current.group_oid != group_oid:
            raise ConflictError("Leave your current group before joining another one")

        member.status = MembershipStatus.ACTIVE
        member.joined_at = utcnow()
        group.updated_at = utcnow()
        self.notifications.notify(group.admin_user_oid, "New Group Member",
                                  f"{member.username} joined '{group.name}'",
                                  NotificationType.GROUP_JOINED, related_oid=group.group_oid)
        logger.info("User %s joined group %s", user_oid, group_oid)
        return group

    def decline_invitation(self, group_oid: str, user_oid: str) -> GroupMember:
        group = self.get_group(group_oid)
        member = group.find_member(user_oid)
        if not member or not member.is_pending:
            raise NotFoundError("Invitation not found")
        member.status = MembershipStatus.DECLINED
        group.updated_at = utcnow()
        logger.info("User %s declined group %s", user_oid, group_oid)
        return member

    def remove_member(self, group_oid: str, admin_oid: str, member_oid: str) -> GroupMember:
        group = self.get_group(group_oid)
        self._require_admin(group, admin_oid)
        member = next((member for member in group.members if member.member_oid == member_oid), None)
        if not member:
            raise NotFoundError("Member not found")
        if member.user_oid == group.admin_user_oid:
            raise ConflictError("The group admin cannot be removed")

        group.members.remove(member)
        group.updated_at = utcnow()
        logger.info("Member %s removed from group %s", member_oid, group_oid)
        self._membership_changed(group)
        return member

    def leave_group(self, group_oid: str, user_oid: str) -> Optional[Group]:
        """Returns the group, or None when the last member (the admin) left and it was deleted."""
        group = self.get_group(group_oid)
        member = group.find_member(user_oid)
        if not member or not member.is_active:
            raise NotFoundError("You are not a member of this group")

        if user_oid == group.admin_user_oid:
            if len(group.active_members()) > 1:
                raise ConflictError("The admin cannot leave while other members remain, delete the group instead")
            self._drop_group(group_oid)
            logger.info("Admin %s left group %s, group deleted", user_oid, group_oid)
            return None

        member.status = MembershipStatus.REMOVED
        group.updated_at = utcnow()
        logger.info("User %s left group %s", user_oid, group_oid)
        self._membership_changed(group)
        return group

    def update_group(self, group_oid: str, user_oid: str, name: str, description: Optional[str]) -> Group:
        group = self.get_group(group_oid)
        self._require_admin(group, user_oid)
        name = (name or "").strip()
        if not name:
            raise ValidationError("Group name must not be empty")
        group.name = name
        group.description = description or None
        group.updated_at = utcnow()
        return group

    def delete_group(self, group_oid: str, user_oid: str):
        group = self.get_group(group_oid)
        self._require_admin(group, user_oid)
        self._drop_group(group_oid)
        logger.info("Group %s deleted by %s", group_oid, user_oid)
