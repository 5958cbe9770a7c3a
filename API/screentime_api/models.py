from dataclasses import dataclass, field, asdict
from datetime import datetime, date as Date, timezone
from enum import Enum
from typing import List, Optional

from bson.objectid import ObjectId


def new_oid() -> str:
    return str(ObjectId())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _serialize(value):
    if isinstance(value, (datetime, Date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return [_serialize(item) for item in value]
    if isinstance(value, dict):
        return {key: _serialize(item) for key, item in value.items()}
    return value


class MembershipStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    DECLINED = "declined"
    REMOVED = "removed"


class ExtensionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class NotificationType(str, Enum):
    EXTENSION_REQUEST = "extension_request"
    EXTENSION_APPROVED = "extension_approved"
    EXTENSION_DENIED = "extension_denied"
    GROUP_INVITE = "group_invite"
    GROUP_JOINED = "group_joined"
    DAILY_SUMMARY = "daily_summary"


@dataclass
class User:
    user_oid: str
    email: str
    username: Optional[str] = None
    profile_picture_url: Optional[str] = None
    user_tid: Optional[int] = None

    @property
    def display_name(self) -> str:
        return self.username or self.email or "User"

    @property
    def profile_initial(self) -> str:
        return self.display_name[:1].upper()

    def to_dict(self):
        data = asdict(self)
        data['display_name'] = self.display_name
        data['profile_initial'] = self.profile_initial
        return data


@dataclass
class GroupMember:
    user_oid: str
    group_oid: str
    username: str
    email: str
    status: MembershipStatus = MembershipStatus.PENDING
    joined_at: Optional[datetime] = None
    invited_at: datetime = field(default_factory=utcnow)
    member_oid: str = field(default_factory=new_oid)

    @property
    def is_active(self) -> bool:
        return self.status == MembershipStatus.ACTIVE

    @property
    def is_pending(self) -> bool:
        return self.status == MembershipStatus.PENDING

    def to_dict(self):
        return _serialize(asdict(self))


@dataclass
class Group:
    name: str
    admin_user_oid: str
    description: Optional[str] = None
    members: List[GroupMember] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    group_oid: str = field(default_factory=new_oid)

    def find_member(self, user_oid: str) -> Optional[GroupMember]:
        return next((member for member in self.members if member.user_oid == user_oid), None)

    def active_members(self) -> List[GroupMember]:
        return [member for member in self.members if member.is_active]

    def pending_members(self) -> List[GroupMember]:
        return [member for member in self.members if member.is_pending]

    def is_active_member(self, user_oid: str) -> bool:
        member = self.find_member(user_oid)
        return member is not None and member.is_active

    def to_dict(self):
        return _serialize(asdict(self))


@dataclass
class ScreenTimeLimit:
    app_id: str
    app_name: str
    icon_name: str
    daily_limit_minutes: int
    user_oid: str
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    limit_oid: str = field(default_factory=new_oid)

    def to_dict(self):
        return _serialize(asdict(self))


@dataclass
class ScreenTimeUsage:
    app_id: str
    app_name: str
    minutes_used: int
    user_oid: str
    date: Date = field(default_factory=lambda: utcnow().date())
    usage_oid: str = field(default_factory=new_oid)

    def to_dict(self):
        return _serialize(asdict(self))


@dataclass
class ExtensionResponse:
    request_oid: str
    user_oid: str
    approved: bool
    comment: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    response_oid: str = field(default_factory=new_oid)

    def to_dict(self):
        return _serialize(asdict(self))


@dataclass
class ExtensionRequest:
    app_id: str
    app_name: str
    requested_minutes: int
    reason: str
    user_oid: str
    group_oid: str
    status: ExtensionStatus = ExtensionStatus.PENDING
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    responses: List[ExtensionResponse] = field(default_factory=list)
    request_oid: str = field(default_factory=new_oid)

    @property
    def approvals(self) -> int:
        return sum(1 for response in self.responses if response.approved)

    @property
    def denials(self) -> int:
        return sum(1 for response in self.responses if not response.approved)

    def has_response_from(self, user_oid: str) -> bool:
        return any(response.user_oid == user_oid for response in self.responses)

    def to_dict(self):
        data = _serialize(asdict(self))
        data['approvals'] = self.approvals
        data['denials'] = self.denials
        return data


@dataclass
class NotificationItem:
    title: str
    body: str
    type: NotificationType
    user_oid: str
    related_oid: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    is_read: bool = False
    delivered: bool = False
    notification_oid: str = field(default_factory=new_oid)

    def to_dict(self):
        return _serialize(asdict(self))
