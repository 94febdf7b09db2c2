from typing import Optional
import structlog

from telegram import Update
from telegram.ext import (
    Application, CallbackQueryHandler, CommandHandler, ContextTypes, MessageHandler, filters
)

from eteon.domain.models.events import CallbackAction, CallbackPayload
from eteon.domain.orchestration.core.relay import Relay
from eteon.infrastructure.config.settings import Settings
from eteon.infrastructure.genai.gemini_client import GeminiCompletionService
from eteon.infrastructure.telegram.telegram_channel import TelegramChannel, to_incoming_message

logger = structlog.get_logger(__name__)

MEDIA_MESSAGES = filters.UpdateType.MESSAGE & (
    (filters.TEXT & ~filters.COMMAND)
    | filters.PHOTO
    | filters.Document.ALL
    | filters.VIDEO
    | filters.AUDIO
    | filters.VOICE
    | filters.VIDEO_NOTE
)


class BotHandlers:
    """Telegram update handlers that delegate to the relay"""
    
    def __init__(self, relay: Relay):
        self.relay = relay
        
    async def on_start(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle /start"""
        
        with structlog.contextvars.bound_contextvars(chat_id=update.effective_chat.id):
            await self.relay.handle_start(update.effective_chat.id)
            
    async def on_settings(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle /settings"""
        
        with structlog.contextvars.bound_contextvars(chat_id=update.effective_chat.id):
            await self.relay.handle_settings(update.effective_chat.id)
            
    async def on_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle text and media messages"""
        
        if update.effective_message is None:
            return
            
        message = to_incoming_message(update.effective_message)
        with structlog.contextvars.bound_contextvars(chat_id=message.chat_id):
            await self.relay.handle_message(message)
            
    async def on_callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle inline button presses"""
        
        query = update.callback_query
        if query is None:
            return
            
        # Acknowledge before any work so the client stops its spinner
        try:
            await query.answer()
        except Exception as e:
            logger.warning("Callback acknowledge failed", error=str(e))
            
        payload = CallbackPayload.decode(query.data)
        if payload is None or update.effective_chat is None:
            logger.warning("Unknown callback payload", data=query.data)
            return
            
        chat_id = update.effective_chat.id
        with structlog.contextvars.bound_contextvars(chat_id=chat_id):
            if payload.action == CallbackAction.SET_THINKING_MODE:
                await self.relay.handle_thinking_selection(chat_id, payload.value)
            elif payload.action == CallbackAction.SHOW_THOUGHTS:
                await self.relay.handle_show_thoughts(chat_id, payload.value)
            elif payload.action == CallbackAction.SHOW_SOURCES:
                await self.relay.handle_show_sources(chat_id, payload.value)
            elif payload.action == CallbackAction.SHOW_CODE:
                await self.relay.handle_show_code(chat_id, payload.value)
                
    async def on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE):
        """Log errors raised by handlers; users were already notified"""
        
        chat_id = None
        if isinstance(update, Update) and update.effective_chat is not None:
            chat_id = update.effective_chat.id
        logger.error(
            "Update handling failed",
            chat_id=chat_id,
            error=str(context.error),
            error_type=type(context.error).__name__
        )
        
    def register(self, application: Application):
        """Attach all handlers to a Telegram application"""
        
        application.add_handler(CommandHandler("start", self.on_start))
        application.add_handler(CommandHandler("settings", self.on_settings))
        application.add_handler(MessageHandler(MEDIA_MESSAGES, self.on_message))
        application.add_handler(CallbackQueryHandler(self.on_callback))
        application.add_error_handler(self.on_error)


def build_application(settings: Settings, relay: Optional[Relay] = None) -> Application:
    """Create the Telegram application with a relay wired to Gemini"""
    
    builder = Application.builder().token(settings.telegram_bot_token).concurrent_updates(True)
    if settings.webhook_url:
        # The FastAPI server feeds updates in webhook mode
        builder = builder.updater(None)
    application = builder.build()
    
    if relay is None:
        relay = Relay(
            channel=TelegramChannel(application.bot),
            completion=GeminiCompletionService(
                api_key=settings.gemini_api_key,
                model=settings.gemini_model,
                timeout_seconds=settings.request_timeout_seconds
            )
        )
        
    BotHandlers(relay).register(application)
    logger.info("Telegram application built", model=settings.gemini_model, webhook=bool(settings.webhook_url))
    return application
