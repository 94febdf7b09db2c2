from typing import Optional
import structlog

from eteon.domain.errors import MarkupRejectedError
from eteon.domain.formatting.markdown import escape_markdown_v2
from eteon.domain.models.events import InlineKeyboard
from eteon.domain.orchestration.channel.base_channel import ChatChannel, SentMessage

logger = structlog.get_logger(__name__)


class DeliveryHandler:
    """Sends and edits messages, re-escaping text the channel cannot parse"""

    def __init__(self, channel: ChatChannel):
        self.channel = channel

    async def send(
        self,
        chat_id: int,
        text: str,
        keyboard: Optional[InlineKeyboard] = None,
        disable_preview: bool = True
    ) -> SentMessage:
        """Send rich text, falling back to fully escaped text once"""

        try:
            return await self.channel.send_text(
                chat_id, text, keyboard=keyboard, disable_preview=disable_preview
            )
        except MarkupRejectedError as e:
            logger.info("Markup rejected, resending escaped", chat_id=chat_id, error=str(e))

        return await self.channel.send_text(
            chat_id, escape_markdown_v2(text), keyboard=keyboard, disable_preview=disable_preview
        )

    async def edit(
        self,
        message: SentMessage,
        text: str,
        disable_preview: bool = True
    ) -> SentMessage:
        """Edit rich text, falling back to fully escaped text once"""

        try:
            return await self.channel.edit_text(message, text, disable_preview=disable_preview)
        except MarkupRejectedError as e:
            logger.info("Markup rejected, editing escaped", chat_id=message.chat_id, error=str(e))

        return await self.channel.edit_text(
            message, escape_markdown_v2(text), disable_preview=disable_preview
        )

    async def notify(self, chat_id: int, text: str):
        """Send a failure notice; delivery errors are logged, not raised"""

        try:
            await self.send(chat_id, text)
        except Exception as e:
            logger.error("Failed to notify user", chat_id=chat_id, error=str(e))
