"""
API dependencies for identity, database access and the chat services.
These functions are used with FastAPI's Depends() for dependency injection.
"""
from functools import lru_cache
from typing import Optional
import logging

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from convochat.db.database import get_db
from convochat.core.security import decode_access_token
from convochat.models.user import User
from convochat.repositories.conversation_store import ConversationStore
from convochat.repositories.user_repository import UserRepository
from convochat.services.ai_gateway import AIGateway
from convochat.services.chat_orchestrator import ChatOrchestrator
from convochat.services.identity_resolver import IdentityResolver
from convochat.services.user_service import UserService

logger = logging.getLogger(__name__)

# Optional bearer scheme: requests without a token fall back to the guest
security = HTTPBearer(auto_error=False)


def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_user_service(repository: UserRepository = Depends(get_user_repository)) -> UserService:
    return UserService(repository)


def get_identity_resolver(user_service: UserService = Depends(get_user_service)) -> IdentityResolver:
    return IdentityResolver(user_service)


@lru_cache
def get_ai_gateway() -> AIGateway:
    """Process-wide gateway; the underlying chat model client is built once"""
    return AIGateway()


def get_conversation_store(db: AsyncSession = Depends(get_db)) -> ConversationStore:
    return ConversationStore(db)


def get_chat_orchestrator(
    store: ConversationStore = Depends(get_conversation_store),
    gateway: AIGateway = Depends(get_ai_gateway)
) -> ChatOrchestrator:
    return ChatOrchestrator(store, gateway)


async def get_acting_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    user_service: UserService = Depends(get_user_service),
    identity_resolver: IdentityResolver = Depends(get_identity_resolver)
) -> User:
    """
    Dependency to get the user a request acts on behalf of.

    Args:
        credentials: HTTP Bearer credentials from Authorization header, if any
        user_service: User lookups
        identity_resolver: Guest account provider

    Returns:
        User: The token's user when the token is valid, otherwise the guest
    """
    if credentials is not None:
        user = await _user_from_token(credentials.credentials, user_service)
        if user is not None:
            return user
        logger.warning("Bearer token rejected; continuing as guest")

    return await identity_resolver.resolve_or_create_guest()


async def _user_from_token(token: str, user_service: UserService) -> Optional[User]:
    payload = decode_access_token(token)
    if payload is None:
        return None

    user_id_str = payload.get("sub")
    if user_id_str is None:
        return None

    try:
        user_id = int(user_id_str)
    except (ValueError, TypeError):
        return None

    return await user_service.get_user(user_id)
