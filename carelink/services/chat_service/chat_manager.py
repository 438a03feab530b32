"""Chat flow orchestration.

Every user message is classified by the emergency detector before the
assistant replies. The detector's answer is frozen onto the message,
selects the assistant reply, and for flagged messages is published so the
chat surfaces in the emergency review queue.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from carelink.shared.models import Chat, Message, Sender
from carelink.shared.utils import hash_pii, hash_text_for_audit
from carelink.services.safety_service.config import DetectorConfig
from carelink.services.safety_service.detector import EmergencyDetector
from carelink.services.safety_service.emergency_publisher import EmergencyEventPublisher
from .chat_store import ChatStore
from .config import ChatConfig, DEMO_CHATS, WELCOME_MESSAGE
from .errors import EmptyMessageError
from .responder import AssistantResponder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatTurn:
    """A user message and the assistant reply it produced."""
    message: Message
    reply: Message
    chat: Chat

    def to_dict(self) -> dict:
        return {
            "message": self.message.to_dict(),
            "reply": self.reply.to_dict(),
            "chat_is_emergency": self.chat.is_emergency,
        }


class ChatManager:
    """Runs the send-message flow over a chat store."""

    def __init__(
        self,
        store: Optional[ChatStore] = None,
        detector: Optional[EmergencyDetector] = None,
        responder: Optional[AssistantResponder] = None,
        publisher: Optional[EmergencyEventPublisher] = None,
        config: Optional[ChatConfig] = None,
        detector_config: Optional[DetectorConfig] = None,
    ):
        """Initialize manager with dependencies.

        Args:
            store: Chat storage (new in-memory store by default)
            detector: Emergency detector (default taxonomy by default)
            responder: Assistant reply picker
            publisher: Emergency event publisher; None disables publishing
            config: Chat flow configuration
            detector_config: Detector version reported with published events
        """
        self.store = store or ChatStore()
        self.detector = detector or EmergencyDetector()
        self.responder = responder or AssistantResponder()
        self.publisher = publisher
        self.config = config or ChatConfig()
        self.detector_config = detector_config or DetectorConfig()

    def start_chat(self, user_id: str, counselor_id: Optional[str] = None) -> Chat:
        """Create a chat opened by the assistant's welcome message."""
        # Hash before storing anything so a failure leaves no partial chat
        user_id_hash = hash_pii(user_id)

        chat = self.store.create_chat(user_id=user_id, counselor_id=counselor_id)
        self.store.append_message(chat.id, Message(content=WELCOME_MESSAGE, sender=Sender.AI))

        logger.info(
            "CHAT_CREATED",
            extra={
                "chat_id": chat.id,
                "user_id_hash": user_id_hash,
            }
        )
        return chat

    def send_user_message(
        self,
        chat_id: str,
        content: str,
        user_id: Optional[str] = None,
    ) -> ChatTurn:
        """Classify a user message, store it and store the assistant reply.

        Args:
            chat_id: Target chat
            content: Text exactly as the user typed it
            user_id: Sender; defaults to the chat's user

        Returns:
            ChatTurn with the stored user message and reply

        Raises:
            EmptyMessageError: If content is blank
            ChatNotFoundError: If the chat does not exist
        """
        if not content.strip():
            raise EmptyMessageError("Message content must not be empty")

        chat = self.store.get_chat(chat_id)
        user_id = user_id or chat.user_id

        # Classified verbatim; only the blank check above strips
        match = self.detector.find_match(content)
        is_emergency = match is not None

        # Everything that can raise runs before the chat is touched
        user_id_hash = hash_pii(user_id)
        text_hash = hash_text_for_audit(content)

        message = Message(content=content, sender=Sender.USER, is_emergency=is_emergency)
        reply = Message(
            content=self.responder.reply(is_emergency),
            sender=Sender.AI,
            id=f"ai_{message.id}",
        )
        chat = self.store.append_messages(chat_id, [message, reply])

        if is_emergency:
            logger.critical(
                "EMERGENCY_MESSAGE_FLAGGED",
                extra={
                    "chat_id": chat_id,
                    "message_id": message.id,
                    "user_id_hash": user_id_hash,
                    "text_hash": text_hash,
                    "category": match.category,
                    "detector_version": self.detector_config.detector_version,
                    "action": "CRISIS_REPLY_SENT",
                }
            )
            self._publish(chat_id, message, user_id_hash, match)
        else:
            logger.info(
                "CHAT_MESSAGE_PROCESSED",
                extra={
                    "chat_id": chat_id,
                    "message_id": message.id,
                    "user_id_hash": user_id_hash,
                    "message_length": len(content),
                }
            )

        return ChatTurn(message=message, reply=reply, chat=chat)

    def add_counselor_message(
        self,
        chat_id: str,
        content: str,
        counselor_id: Optional[str] = None,
    ) -> Message:
        """Append a counselor message. Counselor text is never classified.

        Raises:
            EmptyMessageError: If content is blank
            ChatNotFoundError: If the chat does not exist
        """
        if not content.strip():
            raise EmptyMessageError("Message content must not be empty")

        message = Message(content=content, sender=Sender.COUNSELOR)
        self.store.append_message(chat_id, message)
        if counselor_id:
            self.store.assign_counselor(chat_id, counselor_id)

        logger.info(
            "COUNSELOR_MESSAGE_ADDED",
            extra={"chat_id": chat_id, "message_id": message.id}
        )
        return message

    def seed_demo_chats(self) -> List[Chat]:
        """Load the sample conversations, classifying their user lines."""
        seeded = []
        for demo in DEMO_CHATS:
            chat = self.store.create_chat(
                user_id=demo["user_id"],
                counselor_id=demo["counselor_id"],
                chat_id=demo["id"],
            )
            for sender, content in demo["lines"]:
                if Sender(sender) is Sender.USER:
                    message = Message(
                        content=content,
                        sender=Sender.USER,
                        is_emergency=self.detector.classify(content),
                    )
                else:
                    message = Message(content=content, sender=Sender(sender))
                self.store.append_message(chat.id, message)
            seeded.append(chat)

        logger.info(
            "DEMO_CHATS_SEEDED",
            extra={
                "chat_count": len(seeded),
                "emergency_count": sum(1 for chat in seeded if chat.is_emergency),
            }
        )
        return seeded

    def _publish(self, chat_id, message, user_id_hash, match) -> None:
        if self.publisher is None or not self.config.publish_emergencies:
            return

        published = self.publisher.publish_flagged(
            chat_id=chat_id,
            message_id=message.id,
            user_id_hash=user_id_hash,
            match=match,
            detector_version=self.detector_config.detector_version,
        )
        if not published:
            logger.error(
                "EMERGENCY_PUBLISH_NOT_CONFIRMED",
                extra={
                    "chat_id": chat_id,
                    "message_id": message.id,
                    "action": "MANUAL_REVIEW_REQUIRED",
                }
            )
