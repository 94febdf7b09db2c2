"""Command line entry point: run the bot with long polling or behind the webhook server."""

import sys

import structlog
import uvicorn
from telegram import Update

from eteon.application.api.webhook_server import create_app
from eteon.application.bot.bot_server import build_application
from eteon.domain.errors import ConfigurationError
from eteon.infrastructure.config.settings import get_settings
from eteon.infrastructure.observability.logging import setup_logging

logger = structlog.get_logger(__name__)


def main() -> int:
    settings = get_settings()
    setup_logging(log_level=settings.log_level, log_format=settings.log_format)

    try:
        settings.validate_secrets()
    except ConfigurationError as e:
        logger.error("Failed to initialise application", error=str(e))
        return 1

    application = build_application(settings)

    if settings.webhook_url:
        app = create_app(application, settings.webhook_url, settings.webhook_secret)
        logger.info("Eteon bot is running", mode="webhook", port=settings.port)
        uvicorn.run(app, host=settings.host, port=settings.port)
    else:
        logger.info("Eteon bot is running", mode="polling")
        # Handles SIGINT/SIGTERM and stops the poller cleanly
        application.run_polling(allowed_updates=Update.ALL_TYPES)

    return 0


if __name__ == "__main__":
    sys.exit(main())
