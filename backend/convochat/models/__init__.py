"""
Models package - exports all database models.
"""
from convochat.models.user import User
from convochat.models.conversation import Conversation, DEFAULT_TITLE
from convochat.models.message import ChatMessage, MessageRole, MAX_CONTENT_LENGTH

__all__ = [
    "User",
    "Conversation",
    "DEFAULT_TITLE",
    "ChatMessage",
    "MessageRole",
    "MAX_CONTENT_LENGTH",
]
