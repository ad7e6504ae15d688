"""
Telegram webhook endpoint.

In production the bot runs inside the API process: Telegram POSTs updates
here and they are handed to the Application stored on app.state.
"""

import logging

from fastapi import APIRouter, HTTPException, Request
from telegram import Update

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/telegram", tags=["telegram"])


@router.post("/webhook")
async def telegram_webhook(request: Request):
    """Receive a Telegram update and process it."""
    application = getattr(request.app.state, "telegram_app", None)
    if application is None:
        raise HTTPException(status_code=503, detail="Telegram bot is not running")

    payload = await request.json()
    update = Update.de_json(payload, application.bot)
    await application.process_update(update)
    return {"ok": True}
