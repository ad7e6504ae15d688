"""
API routers for the JeevesBot backend.

- appointments: Appointment list, range view, create, delete and parse
- telegram: Webhook receiver for the bot in production
"""

from .appointments import router as appointments_router
from .telegram import router as telegram_router

__all__ = [
    'appointments_router',
    'telegram_router',
]
