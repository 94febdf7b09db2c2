import structlog
import logging
import sys
from typing import Dict, Any
import os


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "console",
    service_name: str = "eteon"
) -> None:
    """Setup structured logging configuration"""
    
    # Configure Python logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO)
    )
    
    # Transport chatter from the Telegram and Gemini SDKs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        add_service_context,
    ]
    
    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    
    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    
    structlog.contextvars.bind_contextvars(
        service=service_name,
        environment=os.getenv("ENVIRONMENT", "development"),
    )


def add_service_context(logger: logging.Logger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add service context to all log entries"""
    
    # Chat being served by the current update, if any
    chat_id = structlog.contextvars.get_contextvars().get("chat_id")
    if chat_id is not None and "chat_id" not in event_dict:
        event_dict["chat_id"] = chat_id
    
    return event_dict
