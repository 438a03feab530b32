"""Chat Service: demo assistant chat and emergency review queue.

Components:
- chat_manager.py: send-message flow (classify, store, reply, publish)
- chat_store.py: in-memory chats with the emergency chats queue
- responder.py: canned assistant replies
- config.py: welcome, supportive and crisis-escalation text; demo chats
- handler.py: Flask HTTP endpoints
"""

from .chat_manager import ChatManager, ChatTurn
from .chat_store import ChatStore
from .config import ChatConfig, CRISIS_ESCALATION_REPLY, SUPPORTIVE_RESPONSES, WELCOME_MESSAGE
from .errors import (
    ChatServiceError,
    EmptyMessageError,
    ChatStoreError,
    ChatNotFoundError,
    DuplicateChatError,
)
from .responder import AssistantResponder

__all__ = [
    "ChatManager",
    "ChatTurn",
    "ChatStore",
    "ChatConfig",
    "CRISIS_ESCALATION_REPLY",
    "SUPPORTIVE_RESPONSES",
    "WELCOME_MESSAGE",
    "ChatServiceError",
    "EmptyMessageError",
    "ChatStoreError",
    "ChatNotFoundError",
    "DuplicateChatError",
    "AssistantResponder",
]
