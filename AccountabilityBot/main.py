import logging

import telegram
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from telegram.ext import Application, ApplicationBuilder, CommandHandler, CallbackQueryHandler

from AccountabilityBot.config import BOT_TOKEN, NOTIFICATION_POLL_MINUTES, DAILY_SUMMARY_HOUR
from AccountabilityBot.handlers.auth import login_conversation_handler, signup_conversation_handler
from AccountabilityBot.handlers.basic_commands import start_command, help_command, logout_command
from AccountabilityBot.handlers.extension import request_conversation_handler, respond_conversation_handler
from AccountabilityBot.handlers.group import group_conversation_handler
from AccountabilityBot.handlers.limits import limits_command, handle_limits_action
from AccountabilityBot.handlers.notification import notifications_command, handle_notifications_action
from AccountabilityBot.utils.api import get_user_id_list, get_user, take_undelivered_notifications, \
    create_daily_summary, close_session
from AccountabilityBot.utils.states import error_handler

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)
scheduler = AsyncIOScheduler()


async def push_notifications(application: Application):
    for user_tid in await get_user_id_list():
        user = await get_user(user_tid)
        if not user:
            continue
        for item in await take_undelivered_notifications(user.user_oid):
            try:
                await application.bot.send_message(chat_id=user_tid, text=f"{item.title}\n\n{item.body}")
            except telegram.error.TelegramError as error:
                logger.warning("Notification %s not delivered to %s: %s", item.notification_oid, user_tid, error)
                continue
            logger.info("Notification %s delivered to %s", item.notification_oid, user_tid)


async def send_daily_summaries():
    for user_tid in await get_user_id_list():
        user = await get_user(user_tid)
        if user:
            await create_daily_summary(user.user_oid)


async def post_init(application: Application):
    scheduler.add_job(push_notifications, 'interval', minutes=NOTIFICATION_POLL_MINUTES, args=[application])
    scheduler.add_job(send_daily_summaries, 'cron', hour=DAILY_SUMMARY_HOUR)
    scheduler.start()


async def post_shutdown(application: Application):
    scheduler.shutdown(wait=False)
    await close_session()


def main():
    application = (ApplicationBuilder().token(BOT_TOKEN)
                   .post_init(post_init).post_shutdown(post_shutdown).build())
    application.add_handler(CommandHandler("start", start_command))
    application.add_handler(CommandHandler("help", help_command))
    application.add_handler(CommandHandler("logout", logout_command))
    application.add_handler(CommandHandler("limits", limits_command))
    application.add_handler(CommandHandler("notifications", notifications_command))
    application.add_handler(login_conversation_handler)
    application.add_handler(signup_conversation_handler)
    application.add_handler(request_conversation_handler)
    application.add_handler(respond_conversation_handler)
    application.add_handler(group_conversation_handler)
    application.add_handler(CallbackQueryHandler(handle_limits_action, pattern=r'^limits_'))
    application.add_handler(CallbackQueryHandler(handle_notifications_action, pattern=r'^notifications_'))
    application.add_error_handler(error_handler)
    application.run_polling()


if __name__ == "__main__":
    main()
