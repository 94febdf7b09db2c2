from typing import List, Optional, Tuple
from pydantic import BaseModel, Field
from enum import Enum

from eteon.domain.errors import MediaRetrievalError
from eteon.domain.media.mime import detect_mime_type


class CallbackAction(str, Enum):
    """Inline button actions"""
    SHOW_THOUGHTS = "show_thoughts"
    SHOW_SOURCES = "show_sources"
    SHOW_CODE = "show_code"
    SET_THINKING_MODE = "set_thinking_mode"


class CallbackPayload(BaseModel):
    """Action plus value carried by an inline button"""
    action: CallbackAction
    value: str = ""

    def encode(self) -> str:
        """Encode as Telegram callback data"""
        return f"{self.action.value}:{self.value}"

    @classmethod
    def decode(cls, data: Optional[str]) -> Optional["CallbackPayload"]:
        """Decode callback data, returning None for unknown actions"""

        if not data:
            return None
        action, _, value = data.partition(":")
        try:
            return cls(action=CallbackAction(action), value=value)
        except ValueError:
            return None


class InlineButton(BaseModel):
    """A single inline keyboard button"""
    label: str
    payload: CallbackPayload


class InlineKeyboard(BaseModel):
    """Rows of inline buttons attached to an outbound message"""
    rows: List[List[InlineButton]] = Field(default_factory=list)

    def add_row(self, *buttons: InlineButton) -> "InlineKeyboard":
        """Append a row of buttons"""
        self.rows.append(list(buttons))
        return self

    def actions(self) -> List[CallbackAction]:
        """All button actions in display order"""
        return [button.payload.action for row in self.rows for button in row]


class MediaKind(str, Enum):
    """Attachment kinds accepted from the chat channel, in processing order"""
    PHOTO = "photo"
    DOCUMENT = "document"
    VIDEO = "video"
    AUDIO = "audio"
    VOICE = "voice"
    VIDEO_NOTE = "video_note"


class RemoteFile(BaseModel):
    """Bytes and channel-side path of a downloaded attachment"""
    data: bytes
    file_path: str = ""


class MediaAttachment(BaseModel):
    """An attachment reference that can be resolved through a chat channel"""
    kind: MediaKind
    file_id: str
    mime_type: Optional[str] = Field(None, description="MIME type supplied by the channel")

    async def resolve(self, channel) -> Tuple[bytes, str]:
        """Download the attachment and detect its MIME type"""

        try:
            remote = await channel.fetch_file(self.file_id)
        except MediaRetrievalError:
            raise
        except Exception as e:
            raise MediaRetrievalError(f"fetch {self.kind.value}: {e}", file_id=self.file_id) from e

        if not remote.data:
            raise MediaRetrievalError("empty media payload", file_id=self.file_id)

        return remote.data, detect_mime_type(self.mime_type, remote.file_path, remote.data)


class IncomingMessage(BaseModel):
    """A user message received from the chat channel"""
    chat_id: int
    text: str = ""
    caption: str = ""
    attachments: List[MediaAttachment] = Field(default_factory=list)
