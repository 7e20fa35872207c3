"""
Persistence for conversations and their messages.

Every conversation lookup is scoped by owner: a conversation that exists but
belongs to someone else is reported exactly like a missing one (``None``).
Writes are flushed, not committed; the caller owns the transaction and ends it
with ``commit()`` or ``rollback()``.
"""
from datetime import timedelta
from typing import List, Optional
import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from convochat.db.database import utcnow
from convochat.models.conversation import Conversation, DEFAULT_TITLE
from convochat.models.message import ChatMessage, MessageRole
from convochat.models.user import User

logger = logging.getLogger(__name__)


class ConversationStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_conversation(self, conversation_id: int, owner: User) -> Optional[Conversation]:
        """Get a conversation by ID, only if it is owned by ``owner``"""
        result = await self.db.execute(
            select(Conversation)
            .where(Conversation.id == conversation_id)
            .where(Conversation.user_id == owner.id)
        )
        return result.scalar_one_or_none()

    async def create_conversation(self, owner: User, title: Optional[str] = None) -> Conversation:
        """Create a new conversation; a blank title becomes the placeholder"""
        now = utcnow()
        conversation = Conversation(
            user_id=owner.id,
            title=title.strip() if title and title.strip() else DEFAULT_TITLE,
            created_at=now,
            updated_at=now,
        )
        self.db.add(conversation)
        await self.db.flush()  # Get conversation.id
        logger.info(f"Created conversation {conversation.id} for user {owner.username}")
        return conversation

    async def messages_ordered(self, conversation: Conversation) -> List[ChatMessage]:
        """List the transcript of a conversation, oldest first"""
        result = await self.db.execute(
            select(ChatMessage)
            .where(ChatMessage.conversation_id == conversation.id)
            .order_by(ChatMessage.created_at, ChatMessage.id)
        )
        return list(result.scalars().all())

    async def append_message(self, conversation: Conversation, role: MessageRole, content: str) -> ChatMessage:
        """
        Append a message to a conversation.

        The timestamp is assigned here and is always strictly later than the
        conversation's latest message, so the transcript order never ties.
        """
        result = await self.db.execute(
            select(func.max(ChatMessage.created_at))
            .where(ChatMessage.conversation_id == conversation.id)
        )
        latest = result.scalar_one_or_none()
        created_at = utcnow()
        if latest is not None and created_at <= latest:
            created_at = latest + timedelta(microseconds=1)

        message = ChatMessage(
            conversation_id=conversation.id,
            role=MessageRole(role).value,
            content=content,
            created_at=created_at,
        )
        self.db.add(message)
        conversation.updated_at = created_at
        await self.db.flush()
        return message

    async def message_count(self, conversation: Conversation) -> int:
        result = await self.db.execute(
            select(func.count(ChatMessage.id))
            .where(ChatMessage.conversation_id == conversation.id)
        )
        return result.scalar_one()

    async def update_title(self, conversation: Conversation, title: str) -> Conversation:
        conversation.title = title
        conversation.updated_at = utcnow()
        await self.db.flush()
        return conversation

    async def delete_conversation_cascade(self, conversation: Conversation) -> None:
        """Delete a conversation and all its messages in the current transaction"""
        logger.debug(f"Deleting messages for conversation {conversation.id}")
        await self.db.execute(
            delete(ChatMessage).where(ChatMessage.conversation_id == conversation.id)
        )
        await self.db.delete(conversation)
        await self.db.flush()

    async def list_conversations(self, owner: User) -> List[Conversation]:
        """List all conversations for a user, newest first"""
        result = await self.db.execute(
            select(Conversation)
            .where(Conversation.user_id == owner.id)
            .order_by(Conversation.created_at.desc(), Conversation.id.desc())
        )
        return list(result.scalars().all())

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
