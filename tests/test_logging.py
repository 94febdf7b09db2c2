from __future__ import annotations

import structlog

from eteon.infrastructure.observability.logging import add_service_context, setup_logging


def test_service_context_adds_bound_chat_id():
    structlog.contextvars.clear_contextvars()
    with structlog.contextvars.bound_contextvars(chat_id=42):
        event = add_service_context(None, "info", {"event": "hello"})

    assert event["chat_id"] == 42


def test_service_context_leaves_unbound_events_alone():
    structlog.contextvars.clear_contextvars()
    event = add_service_context(None, "info", {"event": "hello", "timestamp": "t"})

    assert event == {"event": "hello", "timestamp": "t"}


def test_explicit_chat_id_is_kept():
    with structlog.contextvars.bound_contextvars(chat_id=42):
        event = add_service_context(None, "info", {"event": "hello", "chat_id": 7})

    assert event["chat_id"] == 7


def test_setup_logging_binds_service():
    setup_logging(log_level="DEBUG", log_format="json", service_name="eteon-test")
    try:
        assert structlog.contextvars.get_contextvars()["service"] == "eteon-test"
    finally:
        structlog.contextvars.clear_contextvars()
        structlog.reset_defaults()
