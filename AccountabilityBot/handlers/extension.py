from telegram import Update
from telegram.ext import CallbackContext, ConversationHandler, MessageHandler, CommandHandler, filters, \
    CallbackQueryHandler

from .basic_commands import cancel, get_signed_in_user
from ..keyboards.inline_kb import select_app_keyboard, minutes_keyboard, request_confirmation_keyboard, \
    awaiting_requests_keyboard, response_keyboard
from ..keyboards.reply_kb import main_menu
from ..models import ExtensionRequest
from ..utils.api import get_limits_summary, get_user_group, create_extension_request, get_awaiting_requests, \
    respond_to_request
from ..utils.states import reset_all_context, reset_extension_context

(SELECT_APP, SELECT_MINUTES, INPUT_REASON, CONFIRM_REQUEST, SELECT_REQUEST, SELECT_RESPONSE,
 INPUT_DENY_COMMENT) = range(7)


def format_request_details(request: ExtensionRequest) -> str:
    return (
        f"App: {request.app_name}\n"
        f"Requested Time: {request.requested_minutes} minutes\n"
        f"Reason:\n{request.reason}"
    )


def format_response_outcome(request: ExtensionRequest) -> str:
    if request.status == "pending":
        return ("Response Submitted! The requester will be notified when enough group members "
                f"have responded ({request.approvals} approved, {request.denials} denied so far).")
    return f"Response Submitted! The request is now {request.status}."


async def request_command(update: Update, context: CallbackContext) -> int:
    reset_all_context(context)
    user = await get_signed_in_user(update)
    if not user:
        return ConversationHandler.END
    group = await get_user_group(user.user_oid)
    if not group:
        await update.message.reply_text("You need an accountability group to request more time. See /group.")
        return ConversationHandler.END
    summary = await get_limits_summary(user.user_oid)
    if not summary or not summary.apps:
        await update.message.reply_text("You have no app limits to extend.")
        return ConversationHandler.END

    context.user_data['limits'] = summary
    context.user_data['new_request'] = ExtensionRequest(
        request_oid="", app_id="", app_name="", requested_minutes=15, reason="", user_oid=user.user_oid,
        group_oid=group.group_oid, status="pending", created_at="", updated_at="")
    await update.message.reply_text("Select App:", reply_markup=select_app_keyboard(summary.apps))
    return SELECT_APP


async def select_app(update: Update, context: CallbackContext) -> int:
    query = update.callback_query
    await query.answer()
    summary = context.user_data['limits']
    app = summary.apps[int(query.data.split('_')[-1])]
    new_request = context.user_data['new_request']
    new_request.app_id, new_request.app_name = app.app_id, app.app_name
    await query.edit_message_text(f"{app.app_name}: how much extra time do you need?",
                                  reply_markup=minutes_keyboard())
    return SELECT_MINUTES


async def select_minutes(update: Update, context: CallbackContext) -> int:
    query = update.callback_query
    await query.answer()
    context.user_data['new_request'].requested_minutes = int(query.data.split('_')[-1])
    await query.edit_message_text("Reason (Required):")
    return INPUT_REASON


async def input_reason(update: Update, context: CallbackContext) -> int:
    reason = update.message.text.strip()
    if not reason:
        await update.message.reply_text("A reason is required, please enter it:")
        return INPUT_REASON
    new_request = context.user_data['new_request']
    new_request.reason = reason
    await update.message.reply_text(
        f"{format_request_details(new_request)}\n\nYour request will be sent to all members of your "
        f"accountability group. You'll receive a notification when it's approved or denied.",
        reply_markup=request_confirmation_keyboard())
    return CONFIRM_REQUEST


async def confirm_request(update: Update, context: CallbackContext) -> int:
    query = update.callback_query
    await query.answer()
    if query.data == 'request_confirm_no':
        await query.edit_message_text("Request cancelled.")
        reset_extension_context(context)
        return ConversationHandler.END

    success, result = await create_extension_request(context.user_data['new_request'])
    if success:
        await query.edit_message_text("Request Submitted! Your time extension request has been sent to your "
                                      "accountability group. You'll be notified when they respond.")
    else:
        await query.edit_message_text(f"Could not submit the request: {result}")
    reset_extension_context(context)
    return ConversationHandler.END


async def requests_command(update: Update, context: CallbackContext) -> int:
    reset_all_context(context)
    user = await get_signed_in_user(update)
    if not user:
        return ConversationHandler.END
    requests = await get_awaiting_requests(user.user_oid)
    if not requests:
        await update.message.reply_text("No requests are waiting for your response.")
        return ConversationHandler.END
    context.user_data['awaiting_requests'] = requests
    await update.message.reply_text("Requests waiting for your response:",
                                    reply_markup=awaiting_requests_keyboard(requests))
    return SELECT_REQUEST


async def select_request(update: Update, context: CallbackContext) -> int:
    query = update.callback_query
    await query.answer()
    request = context.user_data['awaiting_requests'][int(query.data.split('_')[-1])]
    context.user_data['current_request'] = request
    await query.edit_message_text(f"Time Extension Request\n\n{format_request_details(request)}",
                                  reply_markup=response_keyboard())
    return SELECT_RESPONSE


async def select_response(update: Update, context: CallbackContext) -> int:
    query = update.callback_query
    await query.answer()
    if query.data == 'respond_deny':
        await query.edit_message_text("Please provide a reason for denying:")
        return INPUT_DENY_COMMENT
    return await _submit_response(update, context, approved=True)


async def input_deny_comment(update: Update, context: CallbackContext) -> int:
    comment = update.message.text.strip()
    if not comment:
        await update.message.reply_text("A reason is required when denying, please enter it:")
        return INPUT_DENY_COMMENT
    return await _submit_response(update, context, approved=False, comment=comment)


async def _submit_response(update: Update, context: CallbackContext, approved: bool, comment: str = None) -> int:
    user = await get_signed_in_user(update)
    request = context.user_data.get('current_request')
    if not user or not request:
        return ConversationHandler.END
    updated, error = await respond_to_request(request.request_oid, user.user_oid, approved, comment)
    text = format_response_outcome(updated) if updated else f"Could not submit the response: {error}"
    await update.effective_user.send_message(text, reply_markup=main_menu())
    reset_extension_context(context)
    return ConversationHandler.END


request_conversation_handler = ConversationHandler(
    entry_points=[CommandHandler('request', request_command)],
    states={
        SELECT_APP: [CallbackQueryHandler(select_app, pattern=r'^request_app_')],
        SELECT_MINUTES: [CallbackQueryHandler(select_minutes, pattern=r'^request_minutes_')],
        INPUT_REASON: [MessageHandler(filters.TEXT & ~filters.COMMAND, input_reason)],
        CONFIRM_REQUEST: [CallbackQueryHandler(confirm_request, pattern=r'^request_confirm')],
    },
    fallbacks=[CommandHandler('cancel', cancel)],
    # one conversation per chat and user, inline buttons included
    per_message=False,
)

respond_conversation_handler = ConversationHandler(
    entry_points=[CommandHandler('requests', requests_command)],
    states={
        SELECT_REQUEST: [CallbackQueryHandler(select_request, pattern=r'^respond_select_')],
        SELECT_RESPONSE: [CallbackQueryHandler(select_response, pattern=r'^respond_(approve|deny)$')],
        INPUT_DENY_COMMENT: [MessageHandler(filters.TEXT & ~filters.COMMAND, input_deny_comment)],
    },
    fallbacks=[CommandHandler('cancel', cancel)],
    # one conversation per chat and user, inline buttons included
    per_message=False,
)
