from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from ..models import AppUsage, ExtensionRequest, Group

MINUTES_OPTIONS = (1, 5, 15, 30)


def limits_menu(apps: list[AppUsage]):
    keyboard = []
    for index, app in enumerate(apps):
        keyboard.append([InlineKeyboardButton(f"{app.app_name}: +5 min", callback_data=f'limits_usage_{index}_5'),
                         InlineKeyboardButton("+15 min", callback_data=f'limits_usage_{index}_15')])
    keyboard.append([InlineKeyboardButton("Reset today's usage", callback_data='limits_reset')])
    return InlineKeyboardMarkup(keyboard)


def select_app_keyboard(apps: list[AppUsage]):
    keyboard = [[InlineKeyboardButton(app.app_name, callback_data=f'request_app_{index}')]
                for index, app in enumerate(apps)]
    return InlineKeyboardMarkup(keyboard)


def minutes_keyboard():
    keyboard = [[InlineKeyboardButton("1 Minute" if minutes == 1 else f"{minutes} Minutes",
                                      callback_data=f'request_minutes_{minutes}')
                 for minutes in MINUTES_OPTIONS]]
    return InlineKeyboardMarkup(keyboard)


def request_confirmation_keyboard():
    keyboard = [
        [InlineKeyboardButton("Submit Request", callback_data='request_confirm_yes')],
        [InlineKeyboardButton("Cancel", callback_data='request_confirm_no')],
    ]
    return InlineKeyboardMarkup(keyboard)


def awaiting_requests_keyboard(requests: list[ExtensionRequest]):
    keyboard = [[InlineKeyboardButton(f"{request.app_name} +{request.requested_minutes} min",
                                      callback_data=f'respond_select_{index}')]
                for index, request in enumerate(requests)]
    return InlineKeyboardMarkup(keyboard)


def response_keyboard():
    keyboard = [
        [InlineKeyboardButton("Approve", callback_data='respond_approve'),
         InlineKeyboardButton("Deny", callback_data='respond_deny')],
    ]
    return InlineKeyboardMarkup(keyboard)


def group_actions(group: Group, user_oid: str):
    keyboard = [[InlineKeyboardButton("Members' screen time", callback_data='group_action_members')]]
    if group.is_admin(user_oid):
        keyboard.append([InlineKeyboardButton("Invite member", callback_data='group_action_invite')])
        keyboard.append([InlineKeyboardButton("Remove member", callback_data='group_action_remove')])
    keyboard.append([InlineKeyboardButton("Leave group", callback_data='group_action_leave')])
    return InlineKeyboardMarkup(keyboard)


def no_group_keyboard(invitations: list[dict]):
    keyboard = []
    for index, invitation in enumerate(invitations):
        keyboard.append([InlineKeyboardButton(f"Join '{invitation['group_name']}'",
                                              callback_data=f'group_invite_accept_{index}'),
                         InlineKeyboardButton("Decline", callback_data=f'group_invite_decline_{index}')])
    keyboard.append([InlineKeyboardButton("Create a group", callback_data='group_action_create')])
    return InlineKeyboardMarkup(keyboard)


def notifications_keyboard():
    keyboard = [
        [InlineKeyboardButton("Mark all as read", callback_data='notifications_read_all')],
        [InlineKeyboardButton("Clear all", callback_data='notifications_clear')],
    ]
    return InlineKeyboardMarkup(keyboard)
