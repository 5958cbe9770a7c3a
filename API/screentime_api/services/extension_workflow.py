import logging
import math
from typing import List, Optional

from ..errors import ConflictError, NotFoundError, PermissionDenied, ValidationError
from ..models import (ExtensionRequest, ExtensionResponse, ExtensionStatus, Group, NotificationType, utcnow)
from ..store import MemoryStore
from .group_tracker import GroupTracker
from .limits_tracker import LimitsTracker
from .notifications import NotificationsTracker

logger = logging.getLogger(__name__)


def required_approvals(eligible: int, threshold: float) -> int:
    """Approvals needed out of `eligible` voters. Zero voters can never approve anything."""
    if eligible <= 0:
        return 0
    return max(1, math.ceil(eligible * threshold))


class ExtensionWorkflow:
    """
    Extension requests go pending -> approved or pending -> denied, never back.

    Every active group member except the requester may vote once. The request is approved as soon as
    the approvals reach the threshold and denied as soon as the threshold is out of reach.
    """

    def __init__(self, store: MemoryStore, groups: GroupTracker, notifications: NotificationsTracker,
                 approval_threshold: float = 0.5):
        self.store = store
        self.groups = groups
        self.notifications = notifications
        self.approval_threshold = approval_threshold
        groups.on_membership_change(self.resolve_group)

    def get_request(self, request_oid: str) -> ExtensionRequest:
        request = self.store.extension_requests.get(request_oid)
        if not request:
            raise NotFoundError("Extension request not found")
        return request

    def eligible_voters(self, request: ExtensionRequest, group: Optional[Group] = None) -> List[str]:
        group = group or self.groups.get_group(request.group_oid)
        return [member.user_oid for member in group.active_members() if member.user_oid != request.user_oid]

    def create(self, app_id: str, minutes: int, reason: str, user_oid: str, group_oid: str) -> ExtensionRequest:
        if not app_id:
            raise ValidationError("Select an app")
        if not (reason or "").strip():
            raise ValidationError("A reason is required")
        if minutes <= 0:
            raise ValidationError("Requested minutes must be positive")

        limit = LimitsTracker(self.store, user_oid).find_limit(app_id)
        if not limit:
            raise NotFoundError("App limit not found")
        group = self.groups.get_group(group_oid)
        if not group.is_active_member(user_oid):
            raise PermissionDenied("You are not a member of this group")

        request = ExtensionRequest(app_id=limit.app_id, app_name=limit.app_name, requested_minutes=minutes,
                                   reason=reason.strip(), user_oid=user_oid, group_oid=group.group_oid)
        self.store.extension_requests.insert(request)

        requester = group.find_member(user_oid)
        for voter_oid in self.eligible_voters(request, group):
            self.notifications.notify(voter_oid, "Time Extension Request",
                                      f"{requester.username} requested {minutes} more minutes for {limit.app_name}",
                                      NotificationType.EXTENSION_REQUEST, related_oid=request.request_oid)
        logger.info("User %s requested %s minutes for %s in group %s", user_oid, minutes, app_id, group_oid)
        return request

    def record_response(self, request_oid: str, user_oid: str, approved: bool,
                        comment: Optional[str] = None) -> ExtensionRequest:
        request = self.get_request(request_oid)
        if request.status != ExtensionStatus.PENDING:
            raise ConflictError(f"Request is already {request.status.value}")
        if user_oid == request.user_oid:
            raise PermissionDenied("You cannot respond to your own request")
        group = self.groups.get_group(request.group_oid)
        if not group.is_active_member(user_oid):
            raise PermissionDenied("Only group members can respond")
        if request.has_response_from(user_oid):
            raise ConflictError("You have already responded to this request")
        comment = (comment or "").strip() or None
        if not approved and not comment:
            raise ValidationError("Please provide a reason for denying")

        request.responses.append(ExtensionResponse(request_oid=request.request_oid, user_oid=user_oid,
                                                   approved=approved, comment=comment))
        request.updated_at = utcnow()
        logger.info("User %s %s request %s", user_oid, "approved" if approved else "denied", request_oid)
        self.resolve(request, group)
        return request

    def resolve(self, request: ExtensionRequest, group: Optional[Group] = None) -> ExtensionStatus:
        if request.status != ExtensionStatus.PENDING:
            return request.status

        voters = self.eligible_voters(request, group)
        needed = required_approvals(len(voters), self.approval_threshold)
        if needed == 0:
            return request.status

        approvals = sum(1 for r in request.responses if r.approved and r.user_oid in voters)
        denials = sum(1 for r in request.responses if not r.approved and r.user_oid in voters)
        if approvals >= needed:
            self._transition(request, ExtensionStatus.APPROVED)
        elif len(voters) - denials < needed:
            self._transition(request, ExtensionStatus.DENIED)
        return request.status

    def resolve_group(self, group: Group) -> List[ExtensionRequest]:
        """Re-check the pending requests of a group whose voters changed. Returns the ones that got decided."""
        decided = []
        for request in self.store.extension_requests.find(group_oid=group.group_oid, status=ExtensionStatus.PENDING):
            if self.resolve(request, group) != ExtensionStatus.PENDING:
                decided.append(request)
        return decided

    def _transition(self, request: ExtensionRequest, status: ExtensionStatus):
        request.status = status
        request.updated_at = utcnow()
        if status == ExtensionStatus.APPROVED:
            title, notification_type = "Extension Approved", NotificationType.EXTENSION_APPROVED
            body = f"Your request for {request.requested_minutes} more minutes on {request.app_name} was approved"
        else:
            title, notification_type = "Extension Denied", NotificationType.EXTENSION_DENIED
            body = f"Your request for {request.requested_minutes} more minutes on {request.app_name} was denied"
            reasons = [r.comment for r in request.responses if not r.approved and r.comment]
            if reasons:
                body += ": " + "; ".join(reasons)
        self.notifications.notify(request.user_oid, title, body, notification_type, related_oid=request.request_oid)
        logger.info("Request %s is now %s", request.request_oid, status.value)

    def user_requests(self, user_oid: str) -> List[ExtensionRequest]:
        requests = self.store.extension_requests.find(user_oid=user_oid)
        return sorted(requests, key=lambda request: request.created_at, reverse=True)

    def requests_awaiting(self, user_oid: str) -> List[ExtensionRequest]:
        """Pending requests in the user's group that the user has not answered yet."""
        group = self.groups.fetch_user_group(user_oid)
        if not group:
            return []
        requests = self.store.extension_requests.find(
            lambda request: request.user_oid != user_oid and not request.has_response_from(user_oid),
            group_oid=group.group_oid, status=ExtensionStatus.PENDING)
        return sorted(requests, key=lambda request: request.created_at)
