from telegram import Update
from telegram.ext import CallbackContext, ConversationHandler

from .basic_commands import get_signed_in_user
from ..keyboards.inline_kb import limits_menu
from ..models import LimitsSummary
from ..utils.api import get_limits_summary, add_usage, reset_usage


def format_limits_summary(summary: LimitsSummary, title: str = "TODAY") -> str:
    lines = [
        f"{title}\n",
        f"Used: {summary.total_minutes_used} of {summary.total_daily_limit} min "
        f"({round(summary.usage_percentage * 100)}%)",
        f"Remaining: {summary.remaining_minutes} min",
    ]
    if summary.is_over_limit:
        lines.append("You are over your daily limit!")
    lines.append("")
    for app in summary.apps:
        status = " - BLOCKED" if app.is_blocked else ""
        lines.append(f"{app.app_name}: {app.minutes_used}/{app.daily_limit_minutes} min{status}")
    if not summary.apps:
        lines.append("No app limits yet.")
    return "\n".join(lines)


async def limits_command(update: Update, context: CallbackContext) -> int:
    user = await get_signed_in_user(update)
    if not user:
        return ConversationHandler.END
    summary = await get_limits_summary(user.user_oid)
    if not summary:
        await update.message.reply_text("Could not load your screen time. Try again later.")
        return ConversationHandler.END
    context.user_data['limits'] = summary
    await update.message.reply_text(format_limits_summary(summary), reply_markup=limits_menu(summary.apps))
    return ConversationHandler.END


async def handle_limits_action(update: Update, context: CallbackContext) -> None:
    query = update.callback_query
    await query.answer()
    user = await get_signed_in_user(update)
    summary = context.user_data.get('limits')
    if not user or not summary:
        return

    if query.data == 'limits_reset':
        await reset_usage(user.user_oid)
    else:
        _, _, index, minutes = query.data.split('_')
        app = summary.apps[int(index)]
        await add_usage(user.user_oid, app.app_id, int(minutes))

    summary = await get_limits_summary(user.user_oid)
    if summary:
        context.user_data['limits'] = summary
        await query.edit_message_text(format_limits_summary(summary), reply_markup=limits_menu(summary.apps))
