from dateutil.parser import isoparse
from telegram import Update
from telegram.ext import CallbackContext, ConversationHandler

from .basic_commands import get_signed_in_user
from ..keyboards.inline_kb import notifications_keyboard
from ..models import NotificationItem
from ..utils.api import get_notifications, mark_all_notifications_read, clear_notifications


def format_notification(item: NotificationItem) -> str:
    marker = "" if item.is_read else "* "
    created_at = isoparse(item.created_at).strftime('%d.%m.%Y %H:%M')
    return f"{marker}{item.title} ({created_at})\n{item.body}"


def format_notifications(items: list[NotificationItem], unread: int) -> str:
    if not items:
        return "No notifications."
    header = f"Notifications ({unread} unread)\n\n"
    return header + "\n\n".join(format_notification(item) for item in items)


async def notifications_command(update: Update, context: CallbackContext) -> int:
    user = await get_signed_in_user(update)
    if not user:
        return ConversationHandler.END
    items, unread = await get_notifications(user.user_oid)
    reply_markup = notifications_keyboard() if items else None
    await update.message.reply_text(format_notifications(items, unread), reply_markup=reply_markup)
    return ConversationHandler.END


async def handle_notifications_action(update: Update, context: CallbackContext) -> None:
    query = update.callback_query
    await query.answer()
    user = await get_signed_in_user(update)
    if not user:
        return

    if query.data == 'notifications_read_all':
        await mark_all_notifications_read(user.user_oid)
    elif query.data == 'notifications_clear':
        await clear_notifications(user.user_oid)

    items, unread = await get_notifications(user.user_oid)
    reply_markup = notifications_keyboard() if items else None
    await query.edit_message_text(format_notifications(items, unread), reply_markup=reply_markup)
