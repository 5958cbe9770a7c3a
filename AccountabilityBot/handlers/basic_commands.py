from telegram import Update
from telegram.ext import CallbackContext, ConversationHandler

from ..keyboards.reply_kb import main_menu
from ..models import User
from ..utils.api import get_user, check_session, sign_out
from ..utils.states import reset_all_context


async def get_signed_in_user(update: Update) -> User | None:
    user = await get_user(update.effective_user.id)
    if user and await check_session(user.user_oid):
        return user
    await update.effective_user.send_message("Please sign in first with /login (or create an account with /signup).")
    return None


async def start_command(update: Update, context: CallbackContext) -> None:
    reset_all_context(context)
    user = await get_user(update.effective_user.id)
    if user:
        await update.message.reply_text(f"Welcome back, {user.display_name}!", reply_markup=main_menu())
    else:
        await update.message.reply_text("Welcome to Screen Time accountability!\n\n"
                                        "Sign in with /login or create an account with /signup. "
                                        "The full list of commands is available with /help.")


async def help_command(update: Update, context: CallbackContext) -> None:
    reset_all_context(context)

    help_text = (
        "Available commands:\n"
        "/start - Start\n"
        "/login - Sign in\n"
        "/signup - Create an account\n"
        "/logout - Sign out\n"
        "/limits - Today's screen time and limits\n"
        "/request - Ask your group for more time\n"
        "/requests - Answer your group's requests\n"
        "/group - Your accountability group\n"
        "/notifications - Notifications\n\n"
        "To cancel an action use /cancel."
    )
    await update.message.reply_text(help_text, reply_markup=main_menu())


async def logout_command(update: Update, context: CallbackContext) -> None:
    reset_all_context(context)
    user = await get_user(update.effective_user.id)
    if user and await sign_out(user.user_oid):
        await update.message.reply_text("You have been signed out.")
    else:
        await update.message.reply_text("You are not signed in.")


async def cancel(update: Update, context: CallbackContext) -> int:
    reset_all_context(context)
    await update.effective_user.send_message("Operation cancelled.", reply_markup=main_menu())
    return ConversationHandler.END
