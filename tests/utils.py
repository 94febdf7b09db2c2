"""In-memory fakes for the relay collaborators."""

from __future__ import annotations

import asyncio
from typing import Dict, List, Optional

from google.genai import types

from eteon.domain.errors import MarkupRejectedError
from eteon.domain.models.events import InlineKeyboard, RemoteFile
from eteon.domain.orchestration.channel.base_channel import ChatChannel, CompletionService, SentMessage


class FakeChannel(ChatChannel):
    """In-memory chat channel recording every send and edit"""

    def __init__(self, files: Optional[Dict[str, RemoteFile]] = None, reject_markup: int = 0):
        self.files = files or {}
        self.reject_markup = reject_markup
        self.sent: List[dict] = []
        self.edits: List[dict] = []
        self._next_id = 100

    def _maybe_reject(self, text: str):
        if self.reject_markup > 0:
            self.reject_markup -= 1
            raise MarkupRejectedError(f"Can't parse entities in {text!r}")

    async def send_text(self, chat_id, text, *, keyboard=None, disable_preview=True):
        self._maybe_reject(text)
        self._next_id += 1
        self.sent.append({
            "chat_id": chat_id,
            "text": text,
            "keyboard": keyboard,
            "disable_preview": disable_preview,
            "message_id": self._next_id,
        })
        return SentMessage(chat_id=chat_id, message_id=self._next_id)

    async def edit_text(self, message, text, *, disable_preview=True):
        self._maybe_reject(text)
        self.edits.append({"message": message, "text": text, "disable_preview": disable_preview})
        return message

    async def fetch_file(self, file_id):
        return self.files[file_id]

    @property
    def texts(self) -> List[str]:
        return [item["text"] for item in self.sent]

    @property
    def last_keyboard(self) -> Optional[InlineKeyboard]:
        return self.sent[-1]["keyboard"]

class FakeCompletion(CompletionService):
    """Completion service returning queued responses or raising queued errors"""

    def __init__(self, *results):
        self.results = list(results)
        self.calls: List[dict] = []
        self.gate: Optional[asyncio.Event] = None

    async def generate(self, contents, thinking_level):
        self.calls.append({"contents": list(contents), "thinking_level": thinking_level})
        if self.gate is not None:
            await self.gate.wait()
        result = self.results.pop(0) if self.results else text_response("ok")
        if isinstance(result, Exception):
            raise result
        return result

def text_response(*texts: str) -> types.GenerateContentResponse:
    return response_with_parts([types.Part(text=text) for text in texts])

def response_with_parts(parts, **candidate_fields) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(candidates=[
        types.Candidate(content=types.Content(role="model", parts=parts), **candidate_fields)
    ])

