"""
ChatMessage model for storing individual chat messages.
"""
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Index
import enum
from convochat.db.database import Base


MAX_CONTENT_LENGTH = 5000


class MessageRole(str, enum.Enum):
    """Enum for message roles, matching the chat-completions wire format"""
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ChatMessage(Base):
    """
    Message table to store individual messages within conversations.

    Fields:
        id: Primary key
        conversation_id: Foreign key to parent conversation
        role: user, assistant or system
        content: The actual message content
        created_at: Write timestamp, assigned by the store and never changed
    """
    __tablename__ = "chat_messages"
    __table_args__ = (
        Index("ix_chat_messages_conversation_created", "conversation_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    conversation_id = Column(
        Integer, ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False
    )
    role = Column(String(20), nullable=False)
    content = Column(String(MAX_CONTENT_LENGTH), nullable=False)
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        content_preview = self.content[:50] + "..." if len(self.content) > 50 else self.content
        return f"<ChatMessage(id={self.id}, role={self.role}, content='{content_preview}')>"
