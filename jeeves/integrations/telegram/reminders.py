"""
Daily reminder for JeevesBot
Sends today's appointments to the configured chat once a day at
daily_reminder_time (preferences, HH:MM, configured timezone).
"""

import logging
from datetime import datetime
from typing import Optional, Tuple

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from telegram.constants import ParseMode
from telegram.helpers import escape_markdown

from ...agents import CalendarAgent
from ...core.config import Config


logger = logging.getLogger(__name__)

REMINDER_JOB_ID = "daily_reminder"
DEFAULT_REMINDER_TIME = "08:00"


def parse_reminder_time(value: Optional[str]) -> Tuple[int, int]:
    """'HH:MM' -> (hour, minute); invalid values fall back to 08:00."""
    try:
        hour_text, minute_text = str(value).split(":")
        hour, minute = int(hour_text), int(minute_text)
        if 0 <= hour <= 23 and 0 <= minute <= 59:
            return hour, minute
    except ValueError:
        pass
    logger.warning(f"Invalid daily_reminder_time {value!r}, using {DEFAULT_REMINDER_TIME}")
    return 8, 0


class DailyReminder:
    """Cron job that posts today's appointments to TELEGRAM_CHAT_ID"""

    def __init__(self, calendar_agent: CalendarAgent, config: Config, bot,
                 scheduler: Optional[AsyncIOScheduler] = None):
        self.calendar_agent = calendar_agent
        self.config = config
        self.bot = bot
        self.scheduler = scheduler or AsyncIOScheduler(timezone=config.get_timezone())

    def start(self) -> bool:
        """
        Register the cron job and start the scheduler.

        Returns:
            False when reminders are disabled or no chat id is configured
        """
        if not self.config.get("daily_reminder_enabled", section="preferences", default=True):
            logger.info("Daily reminder disabled in preferences")
            return False

        if not self.config.telegram_chat_id:
            logger.warning("TELEGRAM_CHAT_ID is not set, daily reminder not scheduled")
            return False

        hour, minute = parse_reminder_time(
            self.config.get("daily_reminder_time", section="preferences",
                            default=DEFAULT_REMINDER_TIME)
        )
        self.scheduler.add_job(
            self.send,
            CronTrigger(hour=hour, minute=minute, timezone=self.config.get_timezone()),
            id=REMINDER_JOB_ID,
            replace_existing=True,
        )
        if not self.scheduler.running:
            self.scheduler.start()
        logger.info(f"Daily reminder scheduled for {hour:02d}:{minute:02d} "
                    f"({self.config.get('timezone')})")
        return True

    def stop(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Daily reminder scheduler stopped")

    async def send(self) -> bool:
        """
        Send today's appointments to the configured chat.

        Returns:
            True when a message was sent, False when there was nothing to
            send or sending failed
        """
        chat_id = self.config.telegram_chat_id
        if not chat_id:
            logger.warning("TELEGRAM_CHAT_ID is not set, skipping daily reminder")
            return False

        response = self.calendar_agent.process("list_today", {})
        if not response.success:
            logger.error(f"Daily reminder could not load appointments: {response.message}")
            return False

        if response.data["count"] == 0:
            logger.info("No appointments today, daily reminder skipped")
            return False

        current_date = datetime.now(self.config.get_timezone()).strftime("%d-%m-%Y")
        text = (
            f"📅 *Daily Reminder - Today's Appointments*\n\n"
            f"*Current Date: {current_date}*\n\n"
            f"{escape_markdown(response.data['formatted'])}"
        )

        try:
            await self.bot.send_message(chat_id=chat_id, text=text, parse_mode=ParseMode.MARKDOWN)
        except Exception as e:
            logger.error(f"Failed to send daily reminder: {e}")
            return False

        logger.info(f"Daily reminder sent ({response.data['count']} appointment(s))")
        return True
