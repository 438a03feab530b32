"""In-memory chat store.

Stands in for the hosted chats/messages tables during development and
demos. Nothing is persisted across restarts.
"""
import logging
import threading
from typing import Dict, List, Optional, Sequence

from carelink.shared.models import Chat, Message
from .errors import ChatNotFoundError, DuplicateChatError

logger = logging.getLogger(__name__)


class ChatStore:
    """Keeps chats in creation order keyed by chat id."""

    def __init__(self):
        self._chats: Dict[str, Chat] = {}
        self._lock = threading.Lock()

    def create_chat(
        self,
        user_id: str,
        counselor_id: Optional[str] = None,
        chat_id: Optional[str] = None,
    ) -> Chat:
        """Create and store an empty chat.

        Raises:
            DuplicateChatError: If chat_id is already taken
        """
        if chat_id is None:
            chat = Chat(user_id=user_id, counselor_id=counselor_id)
        else:
            chat = Chat(user_id=user_id, counselor_id=counselor_id, id=chat_id)

        with self._lock:
            if chat.id in self._chats:
                raise DuplicateChatError(f"Chat {chat.id} already exists")
            self._chats[chat.id] = chat

        logger.info(
            "CHAT_STORED",
            extra={"chat_id": chat.id, "has_counselor": counselor_id is not None}
        )
        return chat

    def get_chat(self, chat_id: str) -> Chat:
        """Fetch a chat by id.

        Raises:
            ChatNotFoundError: If no chat has this id
        """
        chat = self._chats.get(chat_id)
        if chat is None:
            raise ChatNotFoundError(f"Chat {chat_id} not found")
        return chat

    def append_message(self, chat_id: str, message: Message) -> Chat:
        """Append a message to a chat and bump its updated_at.

        Raises:
            ChatNotFoundError: If no chat has this id
        """
        return self.append_messages(chat_id, [message])

    def append_messages(self, chat_id: str, messages: Sequence[Message]) -> Chat:
        """Append messages as one unit; concurrent appends cannot land between them.

        Raises:
            ChatNotFoundError: If no chat has this id
        """
        with self._lock:
            chat = self.get_chat(chat_id)
            for message in messages:
                chat.append(message)
        return chat

    def assign_counselor(self, chat_id: str, counselor_id: str) -> Chat:
        """Set the chat's counselor if it has none yet.

        Raises:
            ChatNotFoundError: If no chat has this id
        """
        with self._lock:
            chat = self.get_chat(chat_id)
            if chat.counselor_id is None:
                chat.counselor_id = counselor_id
        return chat

    def list_chats(self) -> List[Chat]:
        return list(self._chats.values())

    def emergency_chats(self) -> List[Chat]:
        """Chats with at least one flagged message, in creation order."""
        return [chat for chat in self.list_chats() if chat.is_emergency]

    def __len__(self) -> int:
        return len(self._chats)
