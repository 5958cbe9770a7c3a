from typing import List, Optional, Tuple

import aiohttp
from ..config import API_BASE_URL, INTERNAL_API_TOKEN
from ..models import User, Group, GroupMember, LimitsSummary, ExtensionRequest, NotificationItem

HEADERS = {
    "Authorization": f"Bearer {INTERNAL_API_TOKEN}"
}

timeout = aiohttp.ClientTimeout(total=10)
_session: Optional[aiohttp.ClientSession] = None


def get_session() -> aiohttp.ClientSession:
    # сессия создаётся внутри запущенного event loop
    global _session
    if _session is None or _session.closed:
        _session = aiohttp.ClientSession(timeout=timeout, headers=HEADERS)
    return _session


async def _error_text(response) -> str:
    try:
        data = await response.json()
    except (aiohttp.ContentTypeError, ValueError):
        return "Service is unavailable, try again later"
    return data.get('error', "Something went wrong")


async def sign_up(email: str, username: str, password: str) -> Tuple[bool, str]:
    url = f"{API_BASE_URL}/auth/signup"
    data = {"email": email, "username": username, "password": password}
    async with get_session().post(url, json=data) as response:
        if response.status == 201:
            return True, ""
        return False, await _error_text(response)


async def sign_in(email: str, password: str, user_tid: int) -> Tuple[Optional[User], str, bool]:
    """Returns (user, error, requires_password_creation)."""
    url = f"{API_BASE_URL}/auth/signin"
    data = {"email": email, "password": password, "user_tid": user_tid}
    async with get_session().post(url, json=data) as response:
        payload = await response.json()
        if response.status == 200:
            return User(**payload), "", False
        return None, payload.get('error', ""), bool(payload.get('requires_password_creation'))


async def create_password(email: str, password: str, user_tid: int) -> Tuple[Optional[User], str]:
    url = f"{API_BASE_URL}/auth/password"
    data = {"email": email, "password": password, "user_tid": user_tid}
    async with get_session().post(url, json=data) as response:
        if response.status == 200:
            return User(**await response.json()), ""
        return None, await _error_text(response)


async def sign_out(user_oid: str) -> bool:
    url = f"{API_BASE_URL}/auth/signout/{user_oid}"
    async with get_session().post(url) as response:
        return response.status == 200


async def check_session(user_oid: str) -> bool:
    url = f"{API_BASE_URL}/auth/session/{user_oid}"
    async with get_session().get(url) as response:
        if response.status == 200:
            data = await response.json()
            return data.get('authenticated', False)
        return False


async def get_user(user_tid: int) -> User | None:
    url = f"{API_BASE_URL}/user/{user_tid}"
    async with get_session().get(url) as response:
        if response.status == 200:
            data = await response.json()
            return User(**data)
        return None


async def get_user_id_list() -> List[int]:
    url = f"{API_BASE_URL}/user/tid_list"
    async with get_session().get(url) as response:
        if response.status == 200:
            data = await response.json()
            return data.get('user_tids', list())
        return []


async def search_users(username: str) -> List[User]:
    url = f"{API_BASE_URL}/user/search"
    async with get_session().get(url, params={"username": username}) as response:
        if response.status == 200:
            return [User(**item) for item in await response.json()]
        return []


async def get_limits_summary(user_oid: str, viewer_oid: str = None) -> LimitsSummary | None:
    url = f"{API_BASE_URL}/limits/user/{user_oid}"
    params = {"viewer": viewer_oid} if viewer_oid else None
    async with get_session().get(url, params=params) as response:
        if response.status == 200:
            return LimitsSummary.from_dict(await response.json())
        return None


async def add_usage(user_oid: str, app_id: str, minutes: int) -> bool:
    url = f"{API_BASE_URL}/limits/user/{user_oid}/usage"
    async with get_session().post(url, json={"app_id": app_id, "minutes": minutes}) as response:
        return response.status == 200


async def reset_usage(user_oid: str) -> bool:
    url = f"{API_BASE_URL}/limits/user/{user_oid}/usage/reset"
    async with get_session().post(url) as response:
        return response.status == 200


async def get_user_group(user_oid: str) -> Group | None:
    url = f"{API_BASE_URL}/group/user/{user_oid}"
    async with get_session().get(url) as response:
        if response.status == 200:
            return Group.from_dict(await response.json())
        return None


async def get_user_invitations(user_oid: str) -> List[dict]:
    url = f"{API_BASE_URL}/group/user/{user_oid}/invitations"
    async with get_session().get(url) as response:
        if response.status == 200:
            invitations = await response.json()
            for invitation in invitations:
                invitation['member'] = GroupMember(**invitation['member'])
            return invitations
        return []


async def create_group(name: str, description: str, user_oid: str) -> Tuple[bool, str]:
    url = f"{API_BASE_URL}/group"
    data = {"name": name, "description": description or None, "user_oid": user_oid}
    async with get_session().post(url, json=data) as response:
        if response.status == 201:
            data = await response.json()
            return True, data.get('group_oid')
        return False, await _error_text(response)


async def invite_member(group_oid: str, inviter_oid: str, user_oid: str) -> Tuple[bool, str]:
    url = f"{API_BASE_URL}/group/{group_oid}/member"
    data = {"inviter_oid": inviter_oid, "user_oid": user_oid}
    async with get_session().post(url, json=data) as response:
        if response.status == 201:
            return True, ""
        return False, await _error_text(response)


async def answer_invitation(group_oid: str, user_oid: str, accept: bool) -> Tuple[bool, str]:
    url = f"{API_BASE_URL}/group/{group_oid}/{'accept' if accept else 'decline'}"
    async with get_session().post(url, json={"user_oid": user_oid}) as response:
        if response.status == 200:
            return True, ""
        return False, await _error_text(response)


async def remove_member(group_oid: str, admin_oid: str, member_oid: str) -> Tuple[bool, str]:
    url = f"{API_BASE_URL}/group/{group_oid}/member/{member_oid}"
    async with get_session().delete(url, params={"admin_oid": admin_oid}) as response:
        if response.status == 200:
            return True, ""
        return False, await _error_text(response)


async def leave_group(group_oid: str, user_oid: str) -> Tuple[bool, str]:
    url = f"{API_BASE_URL}/group/{group_oid}/leave"
    async with get_session().post(url, json={"user_oid": user_oid}) as response:
        if response.status == 200:
            return True, ""
        return False, await _error_text(response)


async def create_extension_request(extension_request: ExtensionRequest) -> Tuple[bool, str]:
    url = f"{API_BASE_URL}/extension"
    async with get_session().post(url, json=extension_request.to_request_dict()) as response:
        if response.status == 201:
            data = await response.json()
            return True, data.get('request_oid')
        return False, await _error_text(response)


async def get_awaiting_requests(user_oid: str) -> List[ExtensionRequest]:
    url = f"{API_BASE_URL}/extension/user/{user_oid}/awaiting"
    async with get_session().get(url) as response:
        if response.status == 200:
            return [ExtensionRequest.from_dict(item) for item in await response.json()]
        return []


async def respond_to_request(request_oid: str, user_oid: str, approved: bool,
                             comment: str = None) -> Tuple[Optional[ExtensionRequest], str]:
    url = f"{API_BASE_URL}/extension/{request_oid}/response"
    data = {"user_oid": user_oid, "approved": approved, "comment": comment}
    async with get_session().post(url, json=data) as response:
        if response.status == 201:
            return ExtensionRequest.from_dict(await response.json()), ""
        return None, await _error_text(response)


async def get_notifications(user_oid: str) -> Tuple[List[NotificationItem], int]:
    url = f"{API_BASE_URL}/notification/user/{user_oid}"
    async with get_session().get(url) as response:
        if response.status == 200:
            data = await response.json()
            return [NotificationItem(**item) for item in data['notifications']], data.get('unread_count', 0)
        return [], 0


async def mark_all_notifications_read(user_oid: str) -> bool:
    url = f"{API_BASE_URL}/notification/user/{user_oid}/read"
    async with get_session().put(url) as response:
        return response.status == 200


async def clear_notifications(user_oid: str) -> bool:
    url = f"{API_BASE_URL}/notification/user/{user_oid}"
    async with get_session().delete(url) as response:
        return response.status == 200


async def take_undelivered_notifications(user_oid: str) -> List[NotificationItem]:
    url = f"{API_BASE_URL}/notification/user/{user_oid}/undelivered"
    async with get_session().post(url) as response:
        if response.status == 200:
            return [NotificationItem(**item) for item in await response.json()]
        return []


async def create_daily_summary(user_oid: str) -> NotificationItem | None:
    url = f"{API_BASE_URL}/notification/user/{user_oid}/daily_summary"
    async with get_session().post(url) as response:
        if response.status == 201:
            return NotificationItem(**await response.json())
        return None


async def close_session():
    if _session is not None and not _session.closed:
        await _session.close()
