from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class User:
    user_oid: str
    email: str
    username: Optional[str] = None
    profile_picture_url: Optional[str] = None
    user_tid: Optional[int] = None
    display_name: str = "User"
    profile_initial: str = "U"


@dataclass
class GroupMember:
    member_oid: str
    user_oid: str
    group_oid: str
    username: str
    email: str
    status: str
    invited_at: str
    joined_at: Optional[str] = None

    def is_active(self):
        return self.status == "active"


@dataclass
class Group:
    group_oid: str
    name: str
    admin_user_oid: str
    created_at: str
    updated_at: str
    description: Optional[str] = None
    members: List[GroupMember] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict):
        data = dict(data)
        members = [GroupMember(**member) for member in data.pop('members', [])]
        return cls(members=members, **data)

    def is_admin(self, user_oid: str):
        return self.admin_user_oid == user_oid

    def active_members(self):
        return [member for member in self.members if member.is_active()]


@dataclass
class AppUsage:
    app_id: str
    app_name: str
    icon_name: str
    daily_limit_minutes: int
    minutes_used: int
    is_blocked: bool


@dataclass
class LimitsSummary:
    user_oid: str
    date: str
    total_daily_limit: int
    total_minutes_used: int
    remaining_minutes: int
    usage_percentage: float
    is_over_limit: bool
    apps: List[AppUsage] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict):
        data = dict(data)
        apps = [AppUsage(**app) for app in data.pop('apps', [])]
        return cls(apps=apps, **data)


@dataclass
class ExtensionResponse:
    response_oid: str
    request_oid: str
    user_oid: str
    approved: bool
    created_at: str
    comment: Optional[str] = None


@dataclass
class ExtensionRequest:
    request_oid: str
    app_id: str
    app_name: str
    requested_minutes: int
    reason: str
    user_oid: str
    group_oid: str
    status: str
    created_at: str
    updated_at: str
    responses: List[ExtensionResponse] = field(default_factory=list)
    approvals: int = 0
    denials: int = 0

    @classmethod
    def from_dict(cls, data: dict):
        data = dict(data)
        responses = [ExtensionResponse(**response) for response in data.pop('responses', [])]
        return cls(responses=responses, **data)

    def to_request_dict(self):
        return {
            "app_id": self.app_id,
            "requested_minutes": self.requested_minutes,
            "reason": self.reason,
            "user_oid": self.user_oid,
            "group_oid": self.group_oid or None,
        }


@dataclass
class NotificationItem:
    notification_oid: str
    title: str
    body: str
    type: str
    user_oid: str
    created_at: str
    related_oid: Optional[str] = None
    is_read: bool = False
    delivered: bool = False
