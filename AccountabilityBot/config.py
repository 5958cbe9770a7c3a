import os

BOT_TOKEN = os.environ.get("BOT_TOKEN", "")
API_BASE_URL = os.environ.get("API_BASE_URL", "http://127.0.0.1:5000")
INTERNAL_API_TOKEN = os.environ.get("INTERNAL_API_TOKEN", "")
NOTIFICATION_POLL_MINUTES = int(os.environ.get("NOTIFICATION_POLL_MINUTES", "5"))
DAILY_SUMMARY_HOUR = int(os.environ.get("DAILY_SUMMARY_HOUR", "21"))
