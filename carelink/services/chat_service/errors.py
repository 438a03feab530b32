"""Chat Service exceptions."""


class ChatServiceError(Exception):
    """Base exception for chat service errors."""
    pass


class EmptyMessageError(ChatServiceError):
    """Message content is empty or whitespace only."""
    pass


class ChatStoreError(ChatServiceError):
    """Base exception for chat store errors."""
    pass


class ChatNotFoundError(ChatStoreError):
    """Chat does not exist."""
    pass


class DuplicateChatError(ChatStoreError):
    """A chat with the same id already exists."""
    pass
