import logging
from datetime import date
from typing import List, Optional

from ..errors import ConflictError, NotFoundError, PermissionDenied, ValidationError
from ..models import ScreenTimeLimit, ScreenTimeUsage, utcnow
from ..store import MemoryStore

logger = logging.getLogger(__name__)


class LimitsTracker:
    """Daily limits and today's usage of one user, plus the aggregates the home screen shows."""

    def __init__(self, store: MemoryStore, user_oid: str, day: Optional[date] = None):
        self.store = store
        self.user_oid = user_oid
        self.day = day or utcnow().date()

    @property
    def limits(self) -> List[ScreenTimeLimit]:
        return self.store.limits.find(user_oid=self.user_oid)

    @property
    def usage(self) -> List[ScreenTimeUsage]:
        return self.store.usage.find(user_oid=self.user_oid, date=self.day)

    @property
    def total_daily_limit(self) -> int:
        return sum(limit.daily_limit_minutes for limit in self.limits)

    @property
    def total_minutes_used(self) -> int:
        return sum(usage.minutes_used for usage in self.usage)

    @property
    def remaining_minutes(self) -> int:
        return max(0, self.total_daily_limit - self.total_minutes_used)

    @property
    def usage_percentage(self) -> float:
        if self.total_daily_limit <= 0:
            return 0.0
        return self.total_minutes_used / self.total_daily_limit

    @property
    def is_over_limit(self) -> bool:
        return self.total_minutes_used > self.total_daily_limit

    def find_limit(self, app_id: str) -> Optional[ScreenTimeLimit]:
        return self.store.limits.find_one(user_oid=self.user_oid, app_id=app_id)

    def find_usage(self, app_id: str) -> Optional[ScreenTimeUsage]:
        return self.store.usage.find_one(user_oid=self.user_oid, app_id=app_id, date=self.day)

    def is_app_blocked(self, app_id: str) -> bool:
        if not self.is_over_limit:
            return False
        usage = self.find_usage(app_id)
        limit = self.find_limit(app_id)
        if usage and limit:
            return usage.minutes_used >= limit.daily_limit_minutes
        return False

    def add_limit(self, app_id: str, app_name: str, icon_name: str, minutes: int) -> ScreenTimeLimit:
        _check_minutes(minutes)
        if self.find_limit(app_id):
            raise ConflictError(f"A limit for {app_name} already exists")
        limit = ScreenTimeLimit(app_id=app_id, app_name=app_name, icon_name=icon_name,
                                daily_limit_minutes=minutes, user_oid=self.user_oid)
        self.store.limits.insert(limit)
        logger.info("User %s added a %s minute limit for %s", self.user_oid, minutes, app_id)
        return limit

    def update_limit(self, app_id: str, minutes: int) -> ScreenTimeLimit:
        _check_minutes(minutes)
        limit = self.find_limit(app_id)
        if not limit:
            raise NotFoundError("App limit not found")
        limit.daily_limit_minutes = minutes
        limit.updated_at = utcnow()
        logger.info("User %s set the %s limit to %s minutes", self.user_oid, app_id, minutes)
        return limit

    def remove_limit(self, app_id: str):
        limit = self.find_limit(app_id)
        if not limit:
            raise NotFoundError("App limit not found")
        self.store.limits.delete(limit.limit_oid)

    def add_usage_time(self, app_id: str, minutes: int) -> ScreenTimeUsage:
        _check_minutes(minutes)
        usage = self.find_usage(app_id)
        if usage:
            usage.minutes_used += minutes
            return usage

        limit = self.find_limit(app_id)
        if not limit:
            raise NotFoundError("App limit not found")
        usage = ScreenTimeUsage(app_id=limit.app_id, app_name=limit.app_name, minutes_used=minutes,
                                user_oid=limit.user_oid, date=self.day)
        self.store.usage.insert(usage)
        return usage

    def reset_usage(self):
        for usage in self.usage:
            usage.minutes_used = 0
        logger.info("Usage reset for user %s", self.user_oid)

    def summary(self) -> dict:
        apps = []
        for limit in self.limits:
            usage = self.find_usage(limit.app_id)
            apps.append({
                "app_id": limit.app_id,
                "app_name": limit.app_name,
                "icon_name": limit.icon_name,
                "daily_limit_minutes": limit.daily_limit_minutes,
                "minutes_used": usage.minutes_used if usage else 0,
                "is_blocked": self.is_app_blocked(limit.app_id),
            })
        return {
            "user_oid": self.user_oid,
            "date": self.day.isoformat(),
            "total_daily_limit": self.total_daily_limit,
            "total_minutes_used": self.total_minutes_used,
            "remaining_minutes": self.remaining_minutes,
            "usage_percentage": self.usage_percentage,
            "is_over_limit": self.is_over_limit,
            "apps": apps,
        }

    def member_summary(self, viewer_oid: str) -> dict:
        """Summary shown to another member of the viewer's group."""
        if viewer_oid != self.user_oid and not self._shares_active_group(viewer_oid):
            raise PermissionDenied("You can only view members of your own group")
        return self.summary()

    def _shares_active_group(self, viewer_oid: str) -> bool:
        return any(group.is_active_member(viewer_oid) and group.is_active_member(self.user_oid)
                   for group in self.store.groups)


def _check_minutes(minutes: int):
    if minutes < 0:
        raise ValidationError("Minutes must not be negative")
