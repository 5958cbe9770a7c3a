from .auth_service import AuthService
from .notifications import NotificationsTracker
from .limits_tracker import LimitsTracker
from .group_tracker import GroupTracker
from .extension_workflow import ExtensionWorkflow

__all__ = ["AuthService", "NotificationsTracker", "LimitsTracker", "GroupTracker", "ExtensionWorkflow"]
