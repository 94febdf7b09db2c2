from typing import List, Optional
import structlog

from google.genai import types

from eteon.domain.context.memory.artifact_store import ArtifactStore
from eteon.domain.context.memory.session_store import SessionStore
from eteon.domain.errors import MediaRetrievalError, UpstreamServiceError
from eteon.domain.formatting.markdown import (
    format_code_snippet, format_sources, format_thoughts_summary, summarize_thoughts
)
from eteon.domain.models.artifacts import ArtifactBundle
from eteon.domain.models.events import (
    CallbackAction, CallbackPayload, IncomingMessage, InlineButton, InlineKeyboard
)
from eteon.domain.models.session_state import ThinkingLevel
from eteon.domain.orchestration.channel.base_channel import ChatChannel, CompletionService
from eteon.domain.orchestration.core.response_renderer import (
    block_reason, first_candidate, render_response, strip_thoughts
)
from eteon.domain.streaming.delivery import DeliveryHandler

logger = structlog.get_logger(__name__)

WELCOME_TEXT = "Hi, I am Eteon. Share a prompt, a link, or media and I will respond concisely."
INPUT_FAILED_TEXT = "I could not process that input."
NOTHING_TO_PROCESS_TEXT = "Please send text or supported media."
REQUEST_FAILED_TEXT = "Eteon could not complete that request."
SAFETY_BLOCKED_TEXT = "The request was blocked by safety filters."
EMPTY_REPLY_TEXT = "No content received."
THOUGHTS_PLACEHOLDER_TEXT = "Summarising thoughts..."
THOUGHTS_UNAVAILABLE_TEXT = "Reasoning summary is unavailable."
NO_SOURCES_TEXT = "No sources available for this reply."
NO_CODE_TEXT = "No executable code was used for this reply."

THOUGHT_SUMMARY_LIMIT = 5


class Relay:
    """Relays chat messages to the completion service and renders the replies"""

    def __init__(
        self,
        channel: ChatChannel,
        completion: CompletionService,
        sessions: Optional[SessionStore] = None,
        artifacts: Optional[ArtifactStore] = None
    ):
        self.channel = channel
        self.completion = completion
        self.sessions = sessions if sessions is not None else SessionStore()
        self.artifacts = artifacts if artifacts is not None else ArtifactStore()
        self.delivery = DeliveryHandler(channel)

    async def handle_start(self, chat_id: int):
        """Greet the user"""
        await self.delivery.send(chat_id, WELCOME_TEXT)

    async def handle_settings(self, chat_id: int):
        """Show the current thinking level with one button per level"""

        # Read without the lock so the menu stays available during a round trip
        session = await self.sessions.get_or_create(chat_id)
        current = session.thinking_level or ThinkingLevel.default()

        menu = InlineKeyboard()
        for level in ThinkingLevel:
            menu.add_row(InlineButton(
                label=level.label,
                payload=CallbackPayload(action=CallbackAction.SET_THINKING_MODE, value=level.value),
            ))

        await self.delivery.send(chat_id, f"Current thinking budget: {current.label}", keyboard=menu)

    async def handle_thinking_selection(self, chat_id: int, value: str):
        """Apply a thinking level chosen from the settings menu"""

        level = ThinkingLevel.parse(value)
        session = await self.sessions.get_or_create(chat_id)
        async with session.lock:
            session.set_thinking_level(level)

        logger.info("Thinking level changed", chat_id=chat_id, level=level.value)
        await self.delivery.send(chat_id, f"Thinking budget switched to {level.label}")

    async def handle_message(self, message: IncomingMessage):
        """Run one full round trip for an inbound user message"""

        chat_id = message.chat_id
        session = await self.sessions.get_or_create(chat_id)

        # Queues later messages from the same chat behind this one
        async with session.lock:
            try:
                parts = await self.collect_parts(message)
            except MediaRetrievalError as e:
                logger.error("Failed to collect message parts", chat_id=chat_id, error=str(e))
                await self.delivery.notify(chat_id, INPUT_FAILED_TEXT)
                raise

            if not parts:
                await self.delivery.send(chat_id, NOTHING_TO_PROCESS_TEXT)
                return

            user_turn = types.Content(role="user", parts=parts)
            conversation = session.snapshot_with_new_turn(user_turn)
            level = session.current_thinking_level()

            logger.info(
                "Forwarding message",
                chat_id=chat_id,
                parts=len(parts),
                history=len(conversation) - 1,
                thinking_level=level.value
            )

            try:
                response = await self.completion.generate(conversation, level)
            except UpstreamServiceError as e:
                logger.error("Completion request failed", chat_id=chat_id, error=str(e))
                await self.delivery.notify(chat_id, REQUEST_FAILED_TEXT)
                raise

            reason = block_reason(response)
            if reason:
                logger.warning("Request blocked by safety filters", chat_id=chat_id, reason=reason)
                await self.delivery.send(chat_id, SAFETY_BLOCKED_TEXT)
                return

            rendered = render_response(response)

            candidate = first_candidate(response)
            model_turn = strip_thoughts(candidate.content) if candidate is not None else None
            session.record_turn(user_turn, model_turn)

            key = await self.artifacts.store(rendered.artifacts)
            keyboard = self.build_response_keyboard(key, rendered.artifacts)

            await self.delivery.send(chat_id, rendered.reply or EMPTY_REPLY_TEXT, keyboard=keyboard)

    async def collect_parts(self, message: IncomingMessage) -> List[types.Part]:
        """Build the multimodal parts of a user turn"""

        parts: List[types.Part] = []

        text = message.text.strip()
        if text:
            parts.append(types.Part(text=text))

        caption = message.caption.strip()
        if caption and caption != text:
            parts.append(types.Part(text=caption))

        for attachment in message.attachments:
            data, mime_type = await attachment.resolve(self.channel)
            logger.debug(
                "Attachment resolved",
                chat_id=message.chat_id,
                kind=attachment.kind.value,
                mime_type=mime_type,
                size=len(data)
            )
            parts.append(types.Part(inline_data=types.Blob(data=data, mime_type=mime_type)))

        return parts

    def build_response_keyboard(self, key: str, bundle: Optional[ArtifactBundle]) -> Optional[InlineKeyboard]:
        """Offer artifact buttons for a stored bundle"""

        if not key or bundle is None:
            return None

        keyboard = InlineKeyboard()
        keyboard.add_row(_artifact_button("Show thoughts", CallbackAction.SHOW_THOUGHTS, key))
        if bundle.sources:
            keyboard.add_row(_artifact_button("Show sources", CallbackAction.SHOW_SOURCES, key))
        if bundle.code_snippets:
            keyboard.add_row(_artifact_button("Show code", CallbackAction.SHOW_CODE, key))
        return keyboard

    async def handle_show_thoughts(self, chat_id: int, key: str):
        """Send a short reasoning summary, placeholder first"""

        bundle, found = await self.artifacts.lookup(key)
        body = THOUGHTS_UNAVAILABLE_TEXT
        if found and bundle.thoughts:
            steps = summarize_thoughts(bundle.thoughts, THOUGHT_SUMMARY_LIMIT)
            if steps:
                body = format_thoughts_summary(steps)

        placeholder = await self.delivery.send(chat_id, THOUGHTS_PLACEHOLDER_TEXT)
        await self.delivery.edit(placeholder, body)

    async def handle_show_sources(self, chat_id: int, key: str):
        """List the sources cited by a reply"""

        bundle, found = await self.artifacts.lookup(key)
        if not found or not bundle.sources:
            await self.delivery.send(chat_id, NO_SOURCES_TEXT)
            return

        await self.delivery.send(chat_id, format_sources(bundle.sources), disable_preview=False)

    async def handle_show_code(self, chat_id: int, key: str):
        """Show the code executed for a reply"""

        bundle, found = await self.artifacts.lookup(key)
        if not found or not bundle.code_snippets:
            await self.delivery.send(chat_id, NO_CODE_TEXT)
            return

        sections = [
            format_code_snippet(index, snippet)
            for index, snippet in enumerate(bundle.code_snippets, start=1)
        ]
        await self.delivery.send(chat_id, "\n\n".join(sections))


def _artifact_button(label: str, action: CallbackAction, key: str) -> InlineButton:
    return InlineButton(label=label, payload=CallbackPayload(action=action, value=key))
