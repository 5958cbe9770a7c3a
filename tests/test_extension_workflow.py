import pytest

from screentime_api.errors import ConflictError, NotFoundError, PermissionDenied, ValidationError
from screentime_api.models import ExtensionStatus, NotificationType
from screentime_api.services import LimitsTracker
from screentime_api.services.extension_workflow import required_approvals

INSTAGRAM = "com.instagram.ios"


def _latest(notifications, user_oid, notification_type):
    return next(item for item in notifications.fetch(user_oid) if item.type == notification_type)


@pytest.fixture
def bigger_group(groups):
    for user_oid in ("user-4", "user-5"):
        groups.invite_user("group-1", "user-1", user_oid)
        groups.accept_invitation("group-1", user_oid)
    return groups.get_group("group-1")


@pytest.mark.parametrize("eligible, threshold, expected", [
    (0, 0.5, 0),
    (1, 0.5, 1),
    (2, 0.5, 1),
    (3, 0.5, 2),
    (4, 0.5, 2),
    (3, 1.0, 3),
    (3, 0.0, 1),
])
def test_required_approvals(eligible, threshold, expected):
    assert required_approvals(eligible, threshold) == expected


def test_blank_reason_creates_nothing(workflow, store):
    with pytest.raises(ValidationError):
        workflow.create(INSTAGRAM, 15, "   ", "user-1", "group-1")
    assert len(store.extension_requests) == 0


def test_create_notifies_other_members(workflow, notifications):
    request = workflow.create(INSTAGRAM, 15, "Finishing a story", "user-1", "group-1")
    assert request.status == ExtensionStatus.PENDING
    assert request.app_name == "Instagram"

    item = notifications.fetch("user-2")[0]
    assert item.type == NotificationType.EXTENSION_REQUEST
    assert item.related_oid == request.request_oid
    assert notifications.fetch("user-3") == []


def test_create_validation(workflow):
    with pytest.raises(ValidationError):
        workflow.create(INSTAGRAM, 0, "reason", "user-1", "group-1")
    with pytest.raises(NotFoundError):
        workflow.create("com.unknown", 15, "reason", "user-1", "group-1")


def test_only_active_members_request(workflow, store):
    LimitsTracker(store, "user-4").add_limit(INSTAGRAM, "Instagram", "camera", 30)
    with pytest.raises(PermissionDenied):
        workflow.create(INSTAGRAM, 15, "reason", "user-4", "group-1")


def test_single_voter_approves(workflow, notifications):
    request = workflow.create(INSTAGRAM, 15, "Finishing a story", "user-1", "group-1")
    workflow.record_response(request.request_oid, "user-2", approved=True)
    assert request.status == ExtensionStatus.APPROVED
    assert request.approvals == 1
    assert _latest(notifications, "user-1", NotificationType.EXTENSION_APPROVED).related_oid == request.request_oid


def test_majority_of_three(workflow, bigger_group, notifications):
    request = workflow.create(INSTAGRAM, 30, "Movie night", "user-1", "group-1")
    assert len(workflow.eligible_voters(request)) == 3

    workflow.record_response(request.request_oid, "user-2", approved=True)
    assert request.status == ExtensionStatus.PENDING
    workflow.record_response(request.request_oid, "user-4", approved=True)
    assert request.status == ExtensionStatus.APPROVED

    with pytest.raises(ConflictError):
        workflow.record_response(request.request_oid, "user-5", approved=True)


def test_denied_once_out_of_reach(workflow, bigger_group, notifications):
    request = workflow.create(INSTAGRAM, 30, "Movie night", "user-1", "group-1")
    workflow.record_response(request.request_oid, "user-2", approved=False, comment="Go to sleep")
    assert request.status == ExtensionStatus.PENDING
    workflow.record_response(request.request_oid, "user-4", approved=False, comment="Not today")
    assert request.status == ExtensionStatus.DENIED

    item = _latest(notifications, "user-1", NotificationType.EXTENSION_DENIED)
    assert "Go to sleep" in item.body
    assert "Not today" in item.body


def test_denial_needs_comment(workflow):
    request = workflow.create(INSTAGRAM, 15, "Finishing a story", "user-1", "group-1")
    with pytest.raises(ValidationError):
        workflow.record_response(request.request_oid, "user-2", approved=False, comment="  ")
    assert request.responses == []


def test_one_response_per_member(workflow, bigger_group):
    request = workflow.create(INSTAGRAM, 15, "Finishing a story", "user-1", "group-1")
    workflow.record_response(request.request_oid, "user-2", approved=False, comment="No")
    with pytest.raises(ConflictError):
        workflow.record_response(request.request_oid, "user-2", approved=True)


def test_no_self_or_outsider_response(workflow):
    request = workflow.create(INSTAGRAM, 15, "Finishing a story", "user-1", "group-1")
    with pytest.raises(PermissionDenied):
        workflow.record_response(request.request_oid, "user-1", approved=True)
    with pytest.raises(PermissionDenied):
        workflow.record_response(request.request_oid, "user-3", approved=True)


def test_alone_in_group_stays_pending(workflow, groups):
    groups.leave_group("group-1", "user-2")
    request = workflow.create(INSTAGRAM, 15, "Nobody to ask", "user-1", "group-1")
    assert workflow.resolve(request) == ExtensionStatus.PENDING


def test_requests_awaiting(workflow, bigger_group):
    request = workflow.create(INSTAGRAM, 15, "Finishing a story", "user-1", "group-1")
    assert workflow.requests_awaiting("user-1") == []
    assert workflow.requests_awaiting("user-2") == [request]

    workflow.record_response(request.request_oid, "user-2", approved=False, comment="No")
    assert workflow.requests_awaiting("user-2") == []
    assert workflow.requests_awaiting("user-4") == [request]
    assert workflow.user_requests("user-1") == [request]


def test_denied_when_last_open_voter_leaves(workflow, groups):
    groups.invite_user("group-1", "user-1", "user-4")
    groups.accept_invitation("group-1", "user-4")
    request = workflow.create(INSTAGRAM, 15, "Finishing a story", "user-1", "group-1")
    workflow.record_response(request.request_oid, "user-2", approved=False, comment="Go outside")
    assert request.status == ExtensionStatus.PENDING

    groups.leave_group("group-1", "user-4")
    assert request.status == ExtensionStatus.DENIED


def test_approved_when_holdout_is_removed(workflow, groups, bigger_group):
    # three voters need two approvals
    request = workflow.create(INSTAGRAM, 15, "Finishing a story", "user-1", "group-1")
    workflow.record_response(request.request_oid, "user-2", approved=True)
    assert request.status == ExtensionStatus.PENDING

    holdout = bigger_group.find_member("user-5")
    groups.remove_member("group-1", "user-1", holdout.member_oid)
    assert request.status == ExtensionStatus.APPROVED


def test_no_voters_left_stays_pending(workflow, groups):
    request = workflow.create(INSTAGRAM, 15, "Finishing a story", "user-1", "group-1")
    groups.leave_group("group-1", "user-2")
    assert request.status == ExtensionStatus.PENDING
    assert workflow.resolve_group(groups.get_group("group-1")) == []


def test_group_deleted_by_last_member_drops_requests(workflow, groups, store):
    groups.leave_group("group-1", "user-2")
    request = workflow.create(INSTAGRAM, 15, "Nobody to ask", "user-1", "group-1")

    assert groups.leave_group("group-1", "user-1") is None
    assert store.extension_requests.get(request.request_oid) is None
    assert workflow.user_requests("user-1") == []
