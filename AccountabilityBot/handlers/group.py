from telegram import Update, ReplyKeyboardRemove
from telegram.ext import CallbackContext, ConversationHandler, MessageHandler, CommandHandler, filters, \
    CallbackQueryHandler

from .basic_commands import cancel, get_signed_in_user
from .limits import format_limits_summary
from ..keyboards.inline_kb import group_actions, no_group_keyboard
from ..keyboards.reply_kb import main_menu, member_list_keyboard, search_results_keyboard
from ..models import Group
from ..utils.api import get_user_group, get_user_invitations, answer_invitation, leave_group, create_group, \
    search_users, invite_member, remove_member, get_limits_summary
from ..utils.states import reset_all_context, reset_group_context

(SELECT_GROUP_OPTION, CREATE_GROUP_NAME, CREATE_GROUP_DESCRIPTION, SELECT_MEMBER, INPUT_INVITE_USERNAME,
 SELECT_INVITEE, SELECT_MEMBER_TO_REMOVE) = range(7)


def format_group_info(group: Group, user_oid: str) -> str:
    active = group.active_members()
    pending = [member for member in group.members if member.status == "pending"]
    group_info = (
        f"Group {group.name}\n"
        f"Description: {group.description or '-'}\n"
        f"Members: {len(active)}\n"
    )
    for member in active:
        marker = " (admin)" if group.is_admin(member.user_oid) else ""
        group_info += f"  {member.username}{marker}\n"
    if pending and group.is_admin(user_oid):
        group_info += "Pending invitations: " + ", ".join(member.username for member in pending) + "\n"
    return group_info


def parse_list_choice(text: str, items: list):
    try:
        index = int(text.split(" - ")[0]) - 1
    except ValueError:
        return None
    if 0 <= index < len(items):
        return items[index]
    return None


async def group_command(update: Update, context: CallbackContext) -> int:
    reset_all_context(context)
    user = await get_signed_in_user(update)
    if not user:
        return ConversationHandler.END

    group = await get_user_group(user.user_oid)
    if group:
        context.user_data['current_group'] = group
        await update.message.reply_text(format_group_info(group, user.user_oid),
                                        reply_markup=group_actions(group, user.user_oid))
        return SELECT_GROUP_OPTION

    invitations = await get_user_invitations(user.user_oid)
    context.user_data['invitations'] = invitations
    text = "You are not in an accountability group yet."
    if invitations:
        text += "\n\nYou have pending invitations:"
    await update.message.reply_text(text, reply_markup=no_group_keyboard(invitations))
    return SELECT_GROUP_OPTION


async def handle_group_action(update: Update, context: CallbackContext) -> int:
    query = update.callback_query
    await query.answer()
    user = await get_signed_in_user(update)
    if not user:
        return ConversationHandler.END
    group = context.user_data.get('current_group')
    action = query.data
    await query.message.delete()

    if action.startswith('group_invite_'):
        _, _, answer, index = action.split('_')
        invitation = context.user_data['invitations'][int(index)]
        success, error = await answer_invitation(invitation['group_oid'], user.user_oid, answer == 'accept')
        if success and answer == 'accept':
            text = f"You joined '{invitation['group_name']}'."
        elif success:
            text = "Invitation declined."
        else:
            text = f"Could not answer the invitation: {error}"
        await update.effective_user.send_message(text, reply_markup=main_menu())
        reset_group_context(context)
        return ConversationHandler.END

    if action == 'group_action_create':
        await update.effective_user.send_message("Enter a name for your group:", reply_markup=ReplyKeyboardRemove())
        return CREATE_GROUP_NAME

    if action == 'group_action_members':
        members = [member for member in group.active_members() if member.user_oid != user.user_oid]
        if not members:
            await update.effective_user.send_message("There are no other members yet.", reply_markup=main_menu())
            return ConversationHandler.END
        context.user_data['member_list'] = members
        await update.effective_user.send_message("Select a member:", reply_markup=member_list_keyboard(members))
        return SELECT_MEMBER

    if action == 'group_action_invite':
        await update.effective_user.send_message("Enter the username to search for:",
                                                 reply_markup=ReplyKeyboardRemove())
        return INPUT_INVITE_USERNAME

    if action == 'group_action_remove':
        members = [member for member in group.members
                   if member.user_oid != group.admin_user_oid and member.status in ("active", "pending")]
        if not members:
            await update.effective_user.send_message("There is nobody to remove.", reply_markup=main_menu())
            return ConversationHandler.END
        context.user_data['member_list'] = members
        await update.effective_user.send_message("Select the member to remove:",
                                                 reply_markup=member_list_keyboard(members))
        return SELECT_MEMBER_TO_REMOVE

    if action == 'group_action_leave':
        success, error = await leave_group(group.group_oid, user.user_oid)
        text = f"You left '{group.name}'." if success else f"Could not leave the group: {error}"
        await update.effective_user.send_message(text, reply_markup=main_menu())
        reset_group_context(context)
        return ConversationHandler.END

    return ConversationHandler.END


async def input_group_name(update: Update, context: CallbackContext) -> int:
    name = update.message.text.strip()
    if not name:
        await update.message.reply_text("The name must not be empty, try again:")
        return CREATE_GROUP_NAME
    context.user_data['new_group_name'] = name
    await update.message.reply_text('Enter a description (or "-" to skip):')
    return CREATE_GROUP_DESCRIPTION


async def input_group_description(update: Update, context: CallbackContext) -> int:
    user = await get_signed_in_user(update)
    if not user:
        return ConversationHandler.END
    description = update.message.text.strip()
    description = None if description == "-" else description
    success, result = await create_group(context.user_data['new_group_name'], description, user.user_oid)
    if success:
        await update.message.reply_text("Group created! Invite members from /group.", reply_markup=main_menu())
    else:
        await update.message.reply_text(f"Could not create the group: {result}", reply_markup=main_menu())
    reset_group_context(context)
    return ConversationHandler.END


async def select_member(update: Update, context: CallbackContext) -> int:
    if update.message.text == "Back":
        return await cancel(update, context)
    user = await get_signed_in_user(update)
    member = parse_list_choice(update.message.text, context.user_data.get('member_list', []))
    if not user or not member:
        await update.message.reply_text("Invalid choice, try again.")
        return SELECT_MEMBER

    summary = await get_limits_summary(member.user_oid, viewer_oid=user.user_oid)
    if not summary:
        await update.message.reply_text("Could not load the member's screen time.")
        return SELECT_MEMBER
    await update.message.reply_text(format_limits_summary(summary, title=member.username),
                                    reply_markup=member_list_keyboard(context.user_data['member_list']))
    return SELECT_MEMBER


async def input_invite_username(update: Update, context: CallbackContext) -> int:
    users = await search_users(update.message.text.strip())
    if not users:
        await update.message.reply_text("Nobody found, try another username:")
        return INPUT_INVITE_USERNAME
    context.user_data['search_results'] = users
    await update.message.reply_text("Select the user to invite:", reply_markup=search_results_keyboard(users))
    return SELECT_INVITEE


async def select_invitee(update: Update, context: CallbackContext) -> int:
    if update.message.text == "Back":
        return await cancel(update, context)
    user = await get_signed_in_user(update)
    invitee = parse_list_choice(update.message.text, context.user_data.get('search_results', []))
    group = context.user_data.get('current_group')
    if not user or not invitee or not group:
        await update.message.reply_text("Invalid choice, try again.")
        return SELECT_INVITEE

    success, error = await invite_member(group.group_oid, user.user_oid, invitee.user_oid)
    text = f"Invitation sent to {invitee.display_name}." if success else f"Could not invite: {error}"
    await update.message.reply_text(text, reply_markup=main_menu())
    reset_group_context(context)
    return ConversationHandler.END


async def select_member_to_remove(update: Update, context: CallbackContext) -> int:
    if update.message.text == "Back":
        return await cancel(update, context)
    user = await get_signed_in_user(update)
    member = parse_list_choice(update.message.text, context.user_data.get('member_list', []))
    group = context.user_data.get('current_group')
    if not user or not member or not group:
        await update.message.reply_text("Invalid choice, try again.")
        return SELECT_MEMBER_TO_REMOVE

    success, error = await remove_member(group.group_oid, user.user_oid, member.member_oid)
    text = f"{member.username} was removed." if success else f"Could not remove the member: {error}"
    await update.message.reply_text(text, reply_markup=main_menu())
    reset_group_context(context)
    return ConversationHandler.END


group_conversation_handler = ConversationHandler(
    entry_points=[CommandHandler('group', group_command)],
    states={
        SELECT_GROUP_OPTION: [CallbackQueryHandler(handle_group_action, pattern=r'^group_')],
        CREATE_GROUP_NAME: [MessageHandler(filters.TEXT & ~filters.COMMAND, input_group_name)],
        CREATE_GROUP_DESCRIPTION: [MessageHandler(filters.TEXT & ~filters.COMMAND, input_group_description)],
        SELECT_MEMBER: [MessageHandler(filters.TEXT & ~filters.COMMAND, select_member)],
        INPUT_INVITE_USERNAME: [MessageHandler(filters.TEXT & ~filters.COMMAND, input_invite_username)],
        SELECT_INVITEE: [MessageHandler(filters.TEXT & ~filters.COMMAND, select_invitee)],
        SELECT_MEMBER_TO_REMOVE: [MessageHandler(filters.TEXT & ~filters.COMMAND, select_member_to_remove)],
    },
    fallbacks=[CommandHandler('cancel', cancel)],
    # one conversation per chat and user, inline buttons included
    per_message=False,
)
