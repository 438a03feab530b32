"""Shared domain models for CareLink."""
from .chat import (
    Sender,
    Message,
    Chat,
    new_message_id,
)

__all__ = [
    "Sender",
    "Message",
    "Chat",
    "new_message_id",
]
