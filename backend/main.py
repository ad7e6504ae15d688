"""
JeevesBot FastAPI Backend

Entry point for the API server that exposes the calendar agent over HTTP
and, in production, receives Telegram updates by webhook.

Architecture:
- FastAPI handles HTTP routing and request/response validation
- Pydantic schemas ensure type safety
- Agents handle all business logic
- A JSON file store provides persistence

Run with:
    uvicorn backend.main:app --reload --port 8000

Or:
    python -m backend.main
"""

import logging
import os
import sys
from pathlib import Path
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from dotenv import load_dotenv
from fastapi.middleware.cors import CORSMiddleware

# Add project root to path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from backend.routers import appointments_router, telegram_router
from backend.dependencies import (
    get_calendar_agent,
    get_calendar_store,
    get_chat_agent,
    get_config,
)
from jeeves import __version__
from jeeves.core.config import Config

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def start_telegram_webhook(app: FastAPI) -> None:
    """Build the bot Application and register the webhook with Telegram."""
    from jeeves.integrations.telegram import build_application

    config = get_config()
    if not config.webhook_base_url:
        logger.error("WEBHOOK_BASE_URL is not set, Telegram webhook not registered")
        return

    application = build_application(config, get_calendar_agent(), get_chat_agent())
    await application.initialize()
    if application.post_init:
        await application.post_init(application)
    await application.start()

    webhook_url = f"{config.webhook_base_url.rstrip('/')}/telegram/webhook"
    await application.bot.set_webhook(url=webhook_url)
    logger.info(f"Telegram webhook set to {webhook_url}")

    app.state.telegram_app = application


async def stop_telegram_webhook(app: FastAPI) -> None:
    application = getattr(app.state, "telegram_app", None)
    if application is None:
        return
    await application.stop()
    if application.post_shutdown:
        await application.post_shutdown(application)
    await application.shutdown()
    app.state.telegram_app = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    - Startup: load config, create the data file, start the webhook bot
      in production
    - Shutdown: stop the bot
    """
    config = get_config()
    store = get_calendar_store()
    logger.info(f"Config loaded from: {config.config_dir}")
    logger.info(f"Calendar data file: {store.file_path}")
    logger.info(f"Environment: {config.environment}")

    if config.is_production and config.telegram_bot_token:
        await start_telegram_webhook(app)

    yield

    await stop_telegram_webhook(app)
    logger.info("Shutting down...")


# Create FastAPI app
app = FastAPI(
    title="JeevesBot API",
    description="""
    Personal calendar assistant API.

    ## Features

    - **Appointments**: List, view the next days, add, delete and parse
      appointments in the "DATE. TIME. Contact Name. Category" format
    - **Telegram**: Webhook receiver for the bot in production
    """,
    version=__version__,
    lifespan=lifespan,
)

app.state.telegram_app = None

# Configure CORS for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        os.getenv("FRONTEND_URL", "http://localhost:3000"),
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(appointments_router)
app.include_router(telegram_router)


@app.get("/")
async def root():
    """API root - returns basic info and available endpoints."""
    return {
        "name": "JeevesBot API",
        "version": __version__,
        "docs": "/docs",
        "endpoints": {
            "appointments": "/api/appointments",
            "upcoming": "/api/appointments/upcoming",
            "parse": "/api/appointments/parse",
            "health": "/health",
        }
    }


@app.get("/health")
async def health_check(config: Config = Depends(get_config)):
    """Health check endpoint for monitoring."""
    return {
        "status": "healthy",
        "environment": config.environment,
        "telegram": "webhook" if app.state.telegram_app else "disabled",
    }


# Allow running directly with: python -m backend.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
