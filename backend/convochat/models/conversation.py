"""
Conversation model for storing chat threads.
"""
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from convochat.db.database import Base


DEFAULT_TITLE = "New Conversation"


class Conversation(Base):
    """
    Conversation table to store individual chat threads.

    Messages reference their conversation through a foreign key only; they are
    loaded with a separate query, never through the conversation object.

    Fields:
        id: Primary key
        user_id: Foreign key to user who owns this conversation
        title: Conversation title (placeholder until derived or renamed)
        created_at: When conversation was created
        updated_at: When conversation was last updated
    """
    __tablename__ = "conversations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False, default=DEFAULT_TITLE)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<Conversation(id={self.id}, user_id={self.user_id}, title='{self.title}')>"
