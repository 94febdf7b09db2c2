from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import structlog

from fastapi import FastAPI, Header, HTTPException, Request
from telegram import Update
from telegram.ext import Application

logger = structlog.get_logger(__name__)

WEBHOOK_PATH = "/telegram/webhook"


def create_app(
    application: Application,
    webhook_url: Optional[str] = None,
    secret_token: Optional[str] = None
) -> FastAPI:
    """Create the HTTP server that receives Telegram webhook updates"""
    
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await application.initialize()
        if webhook_url:
            await application.bot.set_webhook(
                url=webhook_url.rstrip("/") + WEBHOOK_PATH,
                secret_token=secret_token,
                allowed_updates=Update.ALL_TYPES
            )
        await application.start()
        logger.info("Webhook server started", webhook_url=webhook_url)
        
        yield
        
        await application.stop()
        await application.shutdown()
        logger.info("Webhook server shutdown")
    
    app = FastAPI(title="Eteon Telegram Relay", lifespan=lifespan)
    
    @app.post(WEBHOOK_PATH)
    async def telegram_webhook(
        request: Request,
        x_telegram_bot_api_secret_token: Optional[str] = Header(None)
    ) -> Dict[str, Any]:
        """Queue one Telegram update for processing"""
        
        if secret_token and x_telegram_bot_api_secret_token != secret_token:
            raise HTTPException(status_code=403, detail="Invalid secret token")
            
        data = await request.json()
        update = Update.de_json(data, application.bot)
        await application.update_queue.put(update)
        return {"ok": True}
    
    @app.get("/health")
    async def health_check() -> Dict[str, Any]:
        """Health check endpoint"""
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat()
        }
    
    return app
