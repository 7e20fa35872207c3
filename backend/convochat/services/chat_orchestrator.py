"""
Chat orchestration: one user turn in, one recorded exchange out.

``process_message`` resolves (or creates) the conversation, loads its history,
records the user message, asks the AI gateway for a reply, records the reply
(or the gateway's fallback text), retitles the conversation once it has two
full turns, and commits all of it as a single transaction.
"""
import logging
from typing import List, Optional

from convochat.models.conversation import Conversation, DEFAULT_TITLE
from convochat.models.message import ChatMessage, MessageRole, MAX_CONTENT_LENGTH
from convochat.models.user import User
from convochat.repositories.conversation_store import ConversationStore
from convochat.services.ai_gateway import AIGateway
from convochat.services.results import ChatResult, ChatStatus, ErrorKind

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 50
TITLE_MIN_MESSAGES = 4


def derive_title(first_user_message: str) -> str:
    """First user message, cut to 50 characters with a trailing ellipsis"""
    if len(first_user_message) > TITLE_MAX_LENGTH:
        return first_user_message[:TITLE_MAX_LENGTH] + "..."
    return first_user_message


class ChatOrchestrator:
    def __init__(self, store: ConversationStore, gateway: AIGateway):
        self.store = store
        self.gateway = gateway

    async def process_message(
        self,
        user_text: Optional[str],
        conversation_id: Optional[int],
        acting_user: User
    ) -> ChatResult:
        """
        Process one chat turn.

        Args:
            user_text: The message typed by the user
            conversation_id: Existing conversation to continue, or None for a new one
            acting_user: Owner of the conversation

        Returns:
            ChatResult. Gateway failures still produce status "success" because
            the exchange (with a fallback reply) is recorded.
        """
        if user_text is None or not user_text.strip():
            return ChatResult.failure(ErrorKind.VALIDATION, "Message cannot be empty", conversation_id)
        if len(user_text) > MAX_CONTENT_LENGTH:
            return ChatResult.failure(
                ErrorKind.VALIDATION,
                f"Message cannot be longer than {MAX_CONTENT_LENGTH} characters",
                conversation_id,
            )

        known_id = conversation_id
        try:
            if conversation_id is not None:
                conversation = await self.store.find_conversation(conversation_id, acting_user)
                if conversation is None:
                    logger.warning(f"Conversation {conversation_id} not found for user {acting_user.username}")
                    return ChatResult.failure(ErrorKind.NOT_FOUND, "Conversation not found", conversation_id)
            else:
                conversation = await self.store.create_conversation(acting_user)
                known_id = conversation.id

            history = await self.store.messages_ordered(conversation)

            # Recorded before the model call so the transcript holds the turn either way
            user_message = await self.store.append_message(conversation, MessageRole.USER, user_text)

            reply = await self.gateway.generate_reply(user_text, history)
            if not reply.ok:
                logger.warning(
                    f"AI gateway failed for conversation {conversation.id}: "
                    f"{reply.error.kind.value} ({reply.error.detail[:200]})"
                )
            reply_text = reply.display_text[:MAX_CONTENT_LENGTH]

            await self.store.append_message(conversation, MessageRole.ASSISTANT, reply_text)

            await self._maybe_update_title(conversation, history, user_message)

            await self.store.commit()
        except Exception as e:
            await self.store.rollback()
            logger.error(f"Error processing message for conversation {known_id}: {e}", exc_info=True)
            # A conversation created in this call was rolled back with everything else
            return ChatResult.failure(ErrorKind.PERSISTENCE, f"An error occurred: {e}", conversation_id)

        logger.info(f"Processed message for conversation {known_id} ({len(user_text)} chars)")
        return ChatResult(
            response=reply_text,
            conversation_id=known_id,
            status=ChatStatus.SUCCESS,
            gateway_error=reply.error,
        )

    async def _maybe_update_title(
        self,
        conversation: Conversation,
        history: List[ChatMessage],
        current_user_message: ChatMessage
    ) -> None:
        """Replace the placeholder title once the conversation has two full turns"""
        if conversation.title != DEFAULT_TITLE:
            return
        if await self.store.message_count(conversation) < TITLE_MIN_MESSAGES:
            return

        first_user_message = next(
            (m for m in history if m.role == MessageRole.USER.value),
            current_user_message,
        )
        title = derive_title(first_user_message.content)
        await self.store.update_title(conversation, title)
        logger.info(f"Conversation {conversation.id} retitled")
        logger.debug(f"New title for conversation {conversation.id}: {title}")

    async def get_history(self, conversation_id: int, user: User) -> Optional[List[ChatMessage]]:
        """Ordered transcript, or None when the conversation is not visible to ``user``"""
        conversation = await self.store.find_conversation(conversation_id, user)
        if conversation is None:
            return None
        return await self.store.messages_ordered(conversation)

    async def list_conversations(self, user: User) -> List[Conversation]:
        return await self.store.list_conversations(user)

    async def create_conversation(self, user: User, title: Optional[str] = None) -> Conversation:
        try:
            conversation = await self.store.create_conversation(user, title)
            await self.store.commit()
        except Exception:
            await self.store.rollback()
            raise
        return conversation

    async def rename_conversation(self, conversation_id: int, user: User, title: str) -> Optional[Conversation]:
        conversation = await self.store.find_conversation(conversation_id, user)
        if conversation is None:
            return None
        try:
            await self.store.update_title(conversation, title)
            await self.store.commit()
        except Exception:
            await self.store.rollback()
            raise
        return conversation

    async def delete_conversation(self, conversation_id: int, user: User) -> bool:
        """Delete a conversation with all its messages; False when not visible"""
        conversation = await self.store.find_conversation(conversation_id, user)
        if conversation is None:
            return False
        try:
            await self.store.delete_conversation_cascade(conversation)
            await self.store.commit()
        except Exception:
            await self.store.rollback()
            raise
        logger.info(f"Deleted conversation {conversation_id} for user {user.username}")
        return True
