import telegram
from telegram import Update, ReplyKeyboardRemove
from telegram.ext import CallbackContext, ConversationHandler, MessageHandler, CommandHandler, filters

from .basic_commands import cancel
from ..keyboards.reply_kb import main_menu
from ..utils.api import sign_in, sign_up, create_password
from ..utils.states import reset_all_context, reset_auth_context

(LOGIN_EMAIL, LOGIN_PASSWORD, CREATE_PASSWORD, SIGNUP_EMAIL, SIGNUP_USERNAME, SIGNUP_PASSWORD) = range(6)


async def _delete_secret(update: Update):
    # пароль не должен оставаться в истории чата
    try:
        await update.message.delete()
    except telegram.error.TelegramError:
        pass


async def login_command(update: Update, context: CallbackContext) -> int:
    reset_all_context(context)
    await update.message.reply_text("Enter your email:", reply_markup=ReplyKeyboardRemove())
    return LOGIN_EMAIL


async def input_login_email(update: Update, context: CallbackContext) -> int:
    context.user_data['login_email'] = update.message.text.strip()
    await update.message.reply_text("Enter your password:")
    return LOGIN_PASSWORD


async def input_login_password(update: Update, context: CallbackContext) -> int:
    password = update.message.text
    await _delete_secret(update)
    email = context.user_data.get('login_email', '')
    user, error, requires_password = await sign_in(email, password, update.effective_user.id)
    if user:
        reset_auth_context(context)
        await update.effective_user.send_message(f"Welcome, {user.display_name}!", reply_markup=main_menu())
        return ConversationHandler.END
    if requires_password:
        await update.effective_user.send_message("Please create a password for your account:")
        return CREATE_PASSWORD

    await update.effective_user.send_message(f"{error}. Try /login again.")
    reset_auth_context(context)
    return ConversationHandler.END


async def input_new_password(update: Update, context: CallbackContext) -> int:
    password = update.message.text
    await _delete_secret(update)
    if not password.strip():
        await update.effective_user.send_message("Password must not be empty, enter it again:")
        return CREATE_PASSWORD

    email = context.user_data.get('login_email', '')
    user, error = await create_password(email, password, update.effective_user.id)
    reset_auth_context(context)
    if user:
        await update.effective_user.send_message(f"Password saved. Welcome, {user.display_name}!",
                                                 reply_markup=main_menu())
    else:
        await update.effective_user.send_message(f"Could not save the password: {error}")
    return ConversationHandler.END


async def signup_command(update: Update, context: CallbackContext) -> int:
    reset_all_context(context)
    await update.message.reply_text("Enter your email:", reply_markup=ReplyKeyboardRemove())
    return SIGNUP_EMAIL


async def input_signup_email(update: Update, context: CallbackContext) -> int:
    context.user_data['signup_email'] = update.message.text.strip()
    await update.message.reply_text("Choose a username:")
    return SIGNUP_USERNAME


async def input_signup_username(update: Update, context: CallbackContext) -> int:
    username = update.message.text.strip()
    if not username:
        await update.message.reply_text("Username must not be empty, try again:")
        return SIGNUP_USERNAME
    context.user_data['signup_username'] = username
    await update.message.reply_text("Choose a password:")
    return SIGNUP_PASSWORD


async def input_signup_password(update: Update, context: CallbackContext) -> int:
    password = update.message.text
    await _delete_secret(update)
    success, error = await sign_up(context.user_data.get('signup_email', ''),
                                   context.user_data.get('signup_username', ''), password)
    reset_auth_context(context)
    if success:
        await update.effective_user.send_message("Account created! Sign in with /login.")
    else:
        await update.effective_user.send_message(f"Could not create the account: {error}")
    return ConversationHandler.END


login_conversation_handler = ConversationHandler(
    entry_points=[CommandHandler('login', login_command)],
    states={
        LOGIN_EMAIL: [MessageHandler(filters.TEXT & ~filters.COMMAND, input_login_email)],
        LOGIN_PASSWORD: [MessageHandler(filters.TEXT & ~filters.COMMAND, input_login_password)],
        CREATE_PASSWORD: [MessageHandler(filters.TEXT & ~filters.COMMAND, input_new_password)],
    },
    fallbacks=[CommandHandler('cancel', cancel)]
)

signup_conversation_handler = ConversationHandler(
    entry_points=[CommandHandler('signup', signup_command)],
    states={
        SIGNUP_EMAIL: [MessageHandler(filters.TEXT & ~filters.COMMAND, input_signup_email)],
        SIGNUP_USERNAME: [MessageHandler(filters.TEXT & ~filters.COMMAND, input_signup_username)],
        SIGNUP_PASSWORD: [MessageHandler(filters.TEXT & ~filters.COMMAND, input_signup_password)],
    },
    fallbacks=[CommandHandler('cancel', cancel)]
)
