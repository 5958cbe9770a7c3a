import logging

import telegram
from telegram import Update
from telegram.ext import CallbackContext, ConversationHandler

logger = logging.getLogger(__name__)


def reset_auth_context(context: CallbackContext):
    keys_to_remove = [
        'login_email',
        'signup_email',
        'signup_username',
    ]
    for key in keys_to_remove:
        context.user_data.pop(key, None)


def reset_extension_context(context: CallbackContext):
    keys_to_remove = [
        'limits',
        'new_request',
        'awaiting_requests',
        'current_request',
    ]
    for key in keys_to_remove:
        context.user_data.pop(key, None)


def reset_group_context(context: CallbackContext):
    keys_to_remove = [
        'current_group',
        'new_group_name',
        'invitations',
        'search_results',
        'member_list',
        'current_member',
    ]
    for key in keys_to_remove:
        context.user_data.pop(key, None)


async def error_handler(update: object, context: CallbackContext) -> int:
    logger.error("Update %s caused an error", update, exc_info=context.error)
    if context.user_data is not None:
        context.user_data.clear()
    if not isinstance(update, Update):
        return ConversationHandler.END

    if update.callback_query:
        query = update.callback_query
        await query.answer()
        try:
            await query.message.delete()
        except telegram.error.BadRequest:
            pass
        await update.effective_user.send_message("Something went wrong. You are back in the main menu.")
    elif update.message:
        await update.message.reply_text("Something went wrong. You are back in the main menu.")

    return ConversationHandler.END


def reset_all_context(context):
    reset_auth_context(context)
    reset_extension_context(context)
    reset_group_context(context)
