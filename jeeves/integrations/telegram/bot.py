"""
Telegram bot for JeevesBot

Commands:
  /start          Welcome message
  /help           Command overview with supported formats
  /addcal TEXT    Add an appointment ("DATE. TIME. Contact Name. Category")
  /viewcal        All appointments, numbered
  /7days          Appointments for today and the next 6 days
  /today          Today's appointments
  /delcal N       Delete appointment N as numbered by /viewcal

Plain text messages go to the ChatAgent.

Development runs long polling (run_polling). In production the REST API
receives updates on /telegram/webhook and feeds them to the same
Application.
"""

import logging
from datetime import datetime
from typing import Optional

from telegram import Update
from telegram.constants import ParseMode
from telegram.ext import (
    Application,
    ApplicationBuilder,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)
from telegram.helpers import escape_markdown

from ...agents import AgentResponse, CalendarAgent, ChatAgent
from ...core.config import Config
from ...core.datetime_formats import SUPPORTED_DATE_FORMATS, SUPPORTED_TIME_FORMATS
from .reminders import DailyReminder


logger = logging.getLogger(__name__)

EXAMPLE_INPUT = "21-11-2025. 14:30. Peter van der Meer. Ghostin 06"


def _short_formats(formats) -> str:
    # "DD-MM-YYYY (24-12-2025)" -> "24-12-2025"
    return ", ".join(f.split("(")[1].rstrip(")") for f in formats)


def command_argument(text: Optional[str]) -> str:
    """Everything after the command word, e.g. '/delcal 3' -> '3'."""
    if not text:
        return ""
    parts = text.split(maxsplit=1)
    return parts[1].strip() if len(parts) > 1 else ""


class CalendarBot:
    """Telegram command handlers wired to the calendar and chat agents"""

    def __init__(self, calendar_agent: CalendarAgent, chat_agent: ChatAgent, config: Config):
        self.calendar_agent = calendar_agent
        self.chat_agent = chat_agent
        self.config = config

    def current_date(self) -> str:
        return datetime.now(self.config.get_timezone()).strftime("%d-%m-%Y")

    async def _reply(self, update: Update, text: str) -> None:
        # user-derived text must be passed through escape_markdown first
        await update.message.reply_text(text, parse_mode=ParseMode.MARKDOWN)

    # =========================================================================
    # Commands
    # =========================================================================

    async def start(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._reply(
            update,
            f"👋 *Welcome to JeevesBot Calendar!* 👋\n\n"
            f"*Current Date: {self.current_date()}*\n\n"
            f"I'm your personal calendar assistant. Use /help to see all available commands.",
        )

    async def help(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        help_text = (
            f"📅 *JeevesBot Calendar Commands* 📅\n"
            f"*Current Date: {self.current_date()}*\n\n"
            f"Available commands:\n"
            f"• /help - Display this help message\n"
            f"• /addcal - Add an appointment to the calendar\n"
            f"  Format: /addcal DATE. TIME. Contact Name. Category\n"
            f"  Example: /addcal {EXAMPLE_INPUT}\n"
            f"  *Date formats:* {_short_formats(SUPPORTED_DATE_FORMATS)}\n"
            f"  *Time formats:* {_short_formats(SUPPORTED_TIME_FORMATS)}\n"
            f"• /viewcal - Display all appointments\n"
            f"• /7days - Display appointments for today and next 6 days\n"
            f"• /today - Display today's appointments\n"
            f"• /delcal - Delete an appointment\n"
            f"  Format: /delcal NUMBER\n"
            f"  Example: /delcal 3 (to delete the 3rd appointment shown in /viewcal)\n\n"
            f"*Note:* Use dots (.) as separators between date, time, contact name, and category."
        )
        await self._reply(update, help_text)

    async def add_appointment(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        current_date = self.current_date()
        raw = command_argument(update.message.text)

        if not raw:
            await self._reply(
                update,
                f"❌ *Usage:* /addcal DD-MM-YYYY. HH:MM. Contact Name. Category\n\n"
                f"*Current Date: {current_date}*\n\n"
                f"Example: /addcal {EXAMPLE_INPUT}",
            )
            return

        response = self.calendar_agent.process("add_appointment", {"text": raw})

        if not response.success:
            if response.error_code == "store_error":
                await self._reply(update, self._failure_text("adding appointment", current_date))
                return
            await self._reply(
                update,
                f"❌ *Invalid format!*\n\n"
                f"*Current Date: {current_date}*\n\n"
                f"{escape_markdown(response.message)}\n\n"
                f"Example: /addcal {EXAMPLE_INPUT}\n\n"
                f'Your input: "{escape_markdown(raw)}"',
            )
            return

        appointment = response.data["appointment"]
        await self._reply(
            update,
            f"✅ *Appointment added successfully!*\n\n"
            f"*Current Date: {current_date}*\n\n"
            f"📅 {appointment['date']} {appointment['time']}\n"
            f"👤 {escape_markdown(appointment['contactName'])}\n"
            f"🏷️ {escape_markdown(appointment['category'])}",
        )

    async def view_appointments(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        current_date = self.current_date()
        response = self.calendar_agent.process("list_appointments", {})

        if not response.success:
            await self._reply(update, self._failure_text("retrieving appointments", current_date))
            return

        if response.data["count"] == 0:
            await self._reply(
                update,
                f"📅 *No appointments found*\n\n"
                f"*Current Date: {current_date}*\n\n"
                f"Use /addcal to add your first appointment.",
            )
            return

        await self._reply(
            update,
            f"📅 *All Appointments*\n\n"
            f"*Current Date: {current_date}*\n\n"
            f"{escape_markdown(response.data['formatted'])}",
        )

    async def upcoming_appointments(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        current_date = self.current_date()
        response = self.calendar_agent.process("list_upcoming", {"days": 7})

        if not response.success:
            await self._reply(update, self._failure_text("retrieving appointments", current_date))
            return

        date_range = response.data["date_range"]
        range_text = f"{date_range['start']} - {date_range['end']}"

        if response.data["count"] == 0:
            await self._reply(
                update,
                f"📅 *No appointments for the next 7 days*\n\n"
                f"*Current Date: {current_date}*\n"
                f"*Date Range: {range_text}*\n\n"
                f"Use /addcal to add appointments.",
            )
            return

        await self._reply(
            update,
            f"📅 *Appointments for Next 7 Days*\n\n"
            f"*Current Date: {current_date}*\n"
            f"*Date Range: {range_text}*\n\n"
            f"{escape_markdown(response.data['formatted'])}",
        )

    async def today_appointments(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        current_date = self.current_date()
        response = self.calendar_agent.process("list_today", {})

        if not response.success:
            await self._reply(update, self._failure_text("retrieving appointments", current_date))
            return

        if response.data["count"] == 0:
            await self._reply(
                update,
                f"📅 *No appointments for today*\n\n*Current Date: {current_date}*",
            )
            return

        await self._reply(
            update,
            f"📅 *Today's Appointments*\n\n"
            f"*Current Date: {current_date}*\n\n"
            f"{escape_markdown(response.data['formatted'])}",
        )

    async def delete_appointment(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        current_date = self.current_date()
        argument = command_argument(update.message.text)

        if not argument:
            await self._reply(
                update,
                f"❌ *Usage:* /delcal NUMBER\n\n"
                f"*Current Date: {current_date}*\n\n"
                f"Example: /delcal 3 (to delete the 3rd appointment shown in /viewcal)\n\n"
                f"Use /viewcal first to see the appointment numbers.",
            )
            return

        try:
            position = int(argument)
        except ValueError:
            await self._reply(
                update,
                f"❌ *Invalid number!*\n\n"
                f"*Current Date: {current_date}*\n\n"
                f"Please provide a valid number. Example: /delcal 3",
            )
            return

        response = self.calendar_agent.process("delete_appointment", {"position": position})

        if not response.success:
            await self._reply(
                update,
                f"❌ *Error deleting appointment*\n\n"
                f"*Current Date: {current_date}*\n\n"
                f"{escape_markdown(response.message)}",
            )
            return

        deleted = response.data["deleted_appointment"]
        await self._reply(
            update,
            f"🗑️ *Appointment deleted successfully!*\n\n"
            f"*Current Date: {current_date}*\n\n"
            f"📅 {deleted['date']} {deleted['time']}\n"
            f"👤 {escape_markdown(deleted['contactName'])}\n"
            f"🏷️ {escape_markdown(deleted['category'])}\n\n"
            f"Appointment #{position} has been removed from your calendar.",
        )

    # =========================================================================
    # Plain text and errors
    # =========================================================================

    async def handle_text(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        user = update.effective_user
        if user is None:
            logger.warning("Received text message without user ID")
            return

        response: AgentResponse = self.chat_agent.process(
            "chat", {"user_id": user.id, "message": update.message.text}
        )
        reply = response.data.get("reply") if response.data else None
        if not reply:
            return

        await self._reply(
            update,
            f"📅 *JeevesBot Calendar*\n\n*Current Date: {self.current_date()}*\n\n"
            f"{escape_markdown(reply)}",
        )

    async def error_handler(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        logger.error(f"Error while handling update {update}: {context.error}", exc_info=context.error)

    @staticmethod
    def _failure_text(action: str, current_date: str) -> str:
        return (
            f"❌ *Error {action}*\n\n"
            f"*Current Date: {current_date}*\n\n"
            f"Please try again."
        )

    # =========================================================================
    # Wiring
    # =========================================================================

    def register(self, application: Application) -> None:
        """Attach all handlers to a telegram Application."""
        application.add_handler(CommandHandler("start", self.start))
        application.add_handler(CommandHandler("help", self.help))
        application.add_handler(CommandHandler("addcal", self.add_appointment))
        application.add_handler(CommandHandler("viewcal", self.view_appointments))
        application.add_handler(CommandHandler("7days", self.upcoming_appointments))
        application.add_handler(CommandHandler("today", self.today_appointments))
        application.add_handler(CommandHandler("delcal", self.delete_appointment))
        application.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, self.handle_text))
        application.add_error_handler(self.error_handler)


def build_application(config: Config, calendar_agent: CalendarAgent,
                      chat_agent: ChatAgent) -> Application:
    """
    Build the telegram Application with all handlers and the daily reminder.

    Raises:
        ValueError: TELEGRAM_BOT_TOKEN is not configured
    """
    token = config.telegram_bot_token
    if not token:
        raise ValueError("TELEGRAM_BOT_TOKEN is not set")

    reminder_holder = {}

    async def post_init(application: Application) -> None:
        reminder = DailyReminder(calendar_agent, config, application.bot)
        reminder_holder["reminder"] = reminder
        reminder.start()

    async def post_shutdown(application: Application) -> None:
        reminder = reminder_holder.get("reminder")
        if reminder:
            reminder.stop()

    application = (
        ApplicationBuilder()
        .token(token)
        .post_init(post_init)
        .post_shutdown(post_shutdown)
        .build()
    )
    CalendarBot(calendar_agent, chat_agent, config).register(application)
    return application


def run_polling(config: Config, calendar_agent: CalendarAgent, chat_agent: ChatAgent) -> None:
    """Run the bot in long-polling mode until interrupted."""
    logger.info("Starting Telegram bot in polling mode...")
    logger.info(f"Environment: {config.environment}")
    application = build_application(config, calendar_agent, chat_agent)
    application.run_polling(allowed_updates=Update.ALL_TYPES)
