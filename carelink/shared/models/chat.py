"""Chat and message domain models.

A Message carries an emergency flag decided once, when the message is
created. A Chat never stores its own flag: it is the OR over its messages,
so a chat that has been flagged stays flagged as messages are appended.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
import uuid


class Sender(Enum):
    """Author of a chat message."""
    USER = "user"
    COUNSELOR = "counselor"
    AI = "ai"


def new_message_id(prefix: str = "msg") -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class Message:
    """A single chat message.

    Immutable - the emergency flag cannot change after creation.
    """
    content: str
    sender: Sender
    id: str = field(default_factory=new_message_id)
    timestamp: datetime = field(default_factory=datetime.utcnow)
    is_emergency: bool = False

    def __post_init__(self):
        if not isinstance(self.sender, Sender):
            raise ValueError(f"sender must be a Sender, got {self.sender!r}")
        if self.is_emergency and self.sender is not Sender.USER:
            raise ValueError("Only user messages can be flagged as emergency")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "id": self.id,
            "content": self.content,
            "sender": self.sender.value,
            "timestamp": self.timestamp.isoformat() + "Z",
            "is_emergency": self.is_emergency,
        }


@dataclass
class Chat:
    """Ordered conversation between a user and the assistant or a counselor."""
    user_id: str
    id: str = field(default_factory=lambda: f"chat_{uuid.uuid4().hex[:12]}")
    counselor_id: Optional[str] = None
    messages: List[Message] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_emergency(self) -> bool:
        return any(message.is_emergency for message in self.messages)

    def append(self, message: Message) -> None:
        self.messages.append(message)
        self.updated_at = message.timestamp

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "counselor_id": self.counselor_id,
            "messages": [message.to_dict() for message in self.messages],
            "created_at": self.created_at.isoformat() + "Z",
            "updated_at": self.updated_at.isoformat() + "Z",
            "is_emergency": self.is_emergency,
        }
