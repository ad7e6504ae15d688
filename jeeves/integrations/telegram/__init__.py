"""Telegram transport: command handlers, application wiring and daily reminder"""

from .bot import CalendarBot, build_application, command_argument, run_polling
from .reminders import DailyReminder, parse_reminder_time

__all__ = [
    "CalendarBot",
    "DailyReminder",
    "build_application",
    "command_argument",
    "parse_reminder_time",
    "run_polling",
]
