from typing import Dict, List, Optional
import asyncio

from google.genai import types

from eteon.domain.models.session_state import ThinkingLevel

MAX_HISTORY_ENTRIES = 20


class Session:
    """Conversation state for a single chat"""

    def __init__(self, chat_id: int, thinking_level: Optional[ThinkingLevel] = None):
        self.chat_id = chat_id
        self.history: List[types.Content] = []
        self.thinking_level = thinking_level
        # Held for a whole message round trip; writers must own it before
        # touching history or the thinking level.
        self.lock = asyncio.Lock()

    def snapshot_with_new_turn(self, user_turn: types.Content) -> List[types.Content]:
        """Return the stored history followed by a new user turn"""

        conversation = list(self.history)
        conversation.append(user_turn)
        return conversation

    def record_turn(self, user_turn: Optional[types.Content], model_turn: Optional[types.Content]):
        """Append a completed exchange, keeping only the most recent entries"""

        if user_turn is not None:
            self.history.append(user_turn)
        if model_turn is not None:
            self.history.append(model_turn)

        if len(self.history) > MAX_HISTORY_ENTRIES:
            self.history = self.history[-MAX_HISTORY_ENTRIES:]

    def current_thinking_level(self) -> ThinkingLevel:
        """Get the thinking level, repairing an unset value"""

        if not self.thinking_level:
            self.thinking_level = ThinkingLevel.default()
        return self.thinking_level

    def set_thinking_level(self, level: ThinkingLevel):
        self.thinking_level = level


class SessionStore:
    """Process-wide table of chat sessions"""

    def __init__(self, default_level: ThinkingLevel = ThinkingLevel.default()):
        self.sessions: Dict[int, Session] = {}
        self.default_level = default_level
        self._lock = asyncio.Lock()

    async def get_or_create(self, chat_id: int) -> Session:
        """Get the session for a chat, creating it on first use"""

        session = self.sessions.get(chat_id)
        if session is not None:
            return session

        async with self._lock:
            # Another task may have created it while we waited
            session = self.sessions.get(chat_id)
            if session is None:
                session = Session(chat_id, self.default_level)
                self.sessions[chat_id] = session
            return session

    def __len__(self) -> int:
        return len(self.sessions)
