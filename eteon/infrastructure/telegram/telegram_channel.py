from typing import List, Optional
import structlog

from telegram import Bot, InlineKeyboardButton, InlineKeyboardMarkup, LinkPreviewOptions, Message
from telegram.constants import ParseMode
from telegram.error import BadRequest

from eteon.domain.errors import MarkupRejectedError, MediaRetrievalError
from eteon.domain.models.events import IncomingMessage, InlineKeyboard, MediaAttachment, MediaKind, RemoteFile
from eteon.domain.orchestration.channel.base_channel import ChatChannel, SentMessage

logger = structlog.get_logger(__name__)

# Telegram reports markup problems only through the error text
_PARSE_ERROR_MARKERS = ("can't parse entities", "can't parse message")


def is_parse_error(error: Exception) -> bool:
    """Check whether a Telegram error is a MarkdownV2 parse failure"""
    
    text = str(error).lower()
    return any(marker in text for marker in _PARSE_ERROR_MARKERS)


def to_reply_markup(keyboard: Optional[InlineKeyboard]) -> Optional[InlineKeyboardMarkup]:
    """Convert an inline keyboard into Telegram markup"""
    
    if keyboard is None or not keyboard.rows:
        return None
    return InlineKeyboardMarkup([
        [
            InlineKeyboardButton(button.label, callback_data=button.payload.encode())
            for button in row
        ]
        for row in keyboard.rows
    ])


def to_incoming_message(message: Message) -> IncomingMessage:
    """Convert a Telegram message into the relay's inbound model"""
    
    attachments: List[MediaAttachment] = []
    
    if message.photo:
        # Sizes are ordered smallest first
        largest = message.photo[-1]
        attachments.append(MediaAttachment(kind=MediaKind.PHOTO, file_id=largest.file_id))
    if message.document:
        attachments.append(MediaAttachment(
            kind=MediaKind.DOCUMENT,
            file_id=message.document.file_id,
            mime_type=message.document.mime_type
        ))
    if message.video:
        attachments.append(MediaAttachment(
            kind=MediaKind.VIDEO,
            file_id=message.video.file_id,
            mime_type=message.video.mime_type
        ))
    if message.audio:
        attachments.append(MediaAttachment(
            kind=MediaKind.AUDIO,
            file_id=message.audio.file_id,
            mime_type=message.audio.mime_type
        ))
    if message.voice:
        attachments.append(MediaAttachment(
            kind=MediaKind.VOICE,
            file_id=message.voice.file_id,
            mime_type=message.voice.mime_type
        ))
    if message.video_note:
        attachments.append(MediaAttachment(kind=MediaKind.VIDEO_NOTE, file_id=message.video_note.file_id))
    
    return IncomingMessage(
        chat_id=message.chat_id,
        text=message.text or "",
        caption=message.caption or "",
        attachments=attachments
    )


class TelegramChannel(ChatChannel):
    """ChatChannel backed by the python-telegram-bot Bot API client"""
    
    def __init__(self, bot: Bot):
        self.bot = bot
        
    async def send_text(
        self,
        chat_id: int,
        text: str,
        *,
        keyboard: Optional[InlineKeyboard] = None,
        disable_preview: bool = True
    ) -> SentMessage:
        """Send a MarkdownV2 message"""
        
        try:
            sent = await self.bot.send_message(
                chat_id=chat_id,
                text=text,
                parse_mode=ParseMode.MARKDOWN_V2,
                reply_markup=to_reply_markup(keyboard),
                link_preview_options=LinkPreviewOptions(is_disabled=disable_preview)
            )
        except BadRequest as e:
            if is_parse_error(e):
                raise MarkupRejectedError(str(e)) from e
            raise
            
        return SentMessage(chat_id=chat_id, message_id=sent.message_id)
        
    async def edit_text(
        self,
        message: SentMessage,
        text: str,
        *,
        disable_preview: bool = True
    ) -> SentMessage:
        """Replace the text of a sent message"""
        
        try:
            await self.bot.edit_message_text(
                text=text,
                chat_id=message.chat_id,
                message_id=message.message_id,
                parse_mode=ParseMode.MARKDOWN_V2,
                link_preview_options=LinkPreviewOptions(is_disabled=disable_preview)
            )
        except BadRequest as e:
            if is_parse_error(e):
                raise MarkupRejectedError(str(e)) from e
            raise
            
        return message
        
    async def fetch_file(self, file_id: str) -> RemoteFile:
        """Resolve file metadata and download the bytes"""
        
        try:
            remote = await self.bot.get_file(file_id)
        except Exception as e:
            raise MediaRetrievalError(f"get file: {e}", file_id=file_id) from e
            
        try:
            data = await remote.download_as_bytearray()
        except Exception as e:
            raise MediaRetrievalError(f"download file: {e}", file_id=file_id) from e
            
        logger.debug("File downloaded", file_id=file_id, size=len(data))
        return RemoteFile(data=bytes(data), file_path=remote.file_path or "")
