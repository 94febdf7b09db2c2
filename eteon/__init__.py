"""Eteon - a Telegram relay for Gemini with short-term conversation memory."""

__version__ = "0.1.0"
