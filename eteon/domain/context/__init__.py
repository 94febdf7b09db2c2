# This module holds the conversation context kept between messages

# +---------------------+
# |      Sessions       |   (Per chat, bounded, in memory)
# |---------------------|
# | Last 20 turns       |
# | Thinking level      |
# | Round-trip lock     |
# +---------------------+

# +---------------------+
# |      Artifacts      |   (Per reply, append-only, in memory)
# |---------------------|
# | Reasoning fragments |
# | Cited sources       |
# | Executed code       |
# +---------------------+

#    \    /
#     \  /
#      \/
# +------------------------------+
# |           Request            |   (Assembled for each message)
# |------------------------------|
# | History + new user turn      |
# | Thinking budget              |
# | System prompt, tools         |
# +------------------------------+
#         |
#         v
#   [Gemini] -> reply + artifact key -> inline buttons

from .memory.artifact_store import ArtifactStore
from .memory.session_store import MAX_HISTORY_ENTRIES, Session, SessionStore

__all__ = ["ArtifactStore", "MAX_HISTORY_ENTRIES", "Session", "SessionStore"]
