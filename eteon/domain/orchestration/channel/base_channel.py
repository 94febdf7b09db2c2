from abc import ABC, abstractmethod
from typing import List, Optional

from google.genai import types
from pydantic import BaseModel

from eteon.domain.models.events import InlineKeyboard, RemoteFile
from eteon.domain.models.session_state import ThinkingLevel


class SentMessage(BaseModel):
    """Handle to a delivered message, used for later edits"""
    chat_id: int
    message_id: int


class ChatChannel(ABC):
    """Chat platform the relay talks to"""

    @abstractmethod
    async def send_text(
        self,
        chat_id: int,
        text: str,
        *,
        keyboard: Optional[InlineKeyboard] = None,
        disable_preview: bool = True
    ) -> SentMessage:
        """Send MarkdownV2 text; raise MarkupRejectedError if it does not parse"""
        pass

    @abstractmethod
    async def edit_text(
        self,
        message: SentMessage,
        text: str,
        *,
        disable_preview: bool = True
    ) -> SentMessage:
        """Replace a message's MarkdownV2 text; raise MarkupRejectedError if it does not parse"""
        pass

    @abstractmethod
    async def fetch_file(self, file_id: str) -> RemoteFile:
        """Resolve file metadata and download its bytes"""
        pass


class CompletionService(ABC):
    """Generative model the relay forwards conversations to"""

    @abstractmethod
    async def generate(
        self,
        contents: List[types.Content],
        thinking_level: ThinkingLevel
    ) -> types.GenerateContentResponse:
        """Run one completion; raise UpstreamServiceError on failure"""
        pass
