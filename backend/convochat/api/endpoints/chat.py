"""
Chat endpoints for sending messages and managing conversations.
"""
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from convochat.models.user import User
from convochat.schemas.chat import (
    ChatRequest,
    ChatResponse,
    ConversationCreate,
    ConversationResponse,
    ConversationUpdate,
    MessageResponse,
    StatusResponse,
)
from convochat.api.deps import get_acting_user, get_ai_gateway, get_chat_orchestrator
from convochat.services.ai_gateway import AIGateway
from convochat.services.chat_orchestrator import ChatOrchestrator
from convochat.services.results import ChatStatus, ErrorKind

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Chat"])

ERROR_STATUS_CODES = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.PERSISTENCE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def parse_conversation_id(raw: Optional[str]) -> Optional[int]:
    """Numeric id, or None (start a new conversation) for blank or unparseable input"""
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid conversation ID format: {raw}; starting a new conversation")
        return None


@router.post("/chat", response_model=ChatResponse)
async def send_message(
    request: ChatRequest,
    current_user: User = Depends(get_acting_user),
    orchestrator: ChatOrchestrator = Depends(get_chat_orchestrator)
):
    """
    Send a chat message and get the AI response.

    Args:
        request: Message text and optional conversation to continue
        current_user: Acting user (bearer token or guest)
        orchestrator: Chat turn coordinator

    Returns:
        ChatResponse. Model failures still answer 200 with the recorded
        fallback reply; rejected input, unknown conversations and storage
        faults answer 400, 404 and 500.
    """
    conversation_id = parse_conversation_id(request.conversationId)
    result = await orchestrator.process_message(request.message, conversation_id, current_user)

    body = ChatResponse(
        response=result.response,
        conversationId=str(result.conversation_id) if result.conversation_id is not None else "",
        status=result.status.value,
        error=result.error,
    )
    if result.status == ChatStatus.SUCCESS:
        return body

    return JSONResponse(
        status_code=ERROR_STATUS_CODES.get(result.error_kind, status.HTTP_500_INTERNAL_SERVER_ERROR),
        content=body.model_dump(),
    )


@router.get("/history/{conversation_id}", response_model=List[MessageResponse])
async def get_conversation_history(
    conversation_id: int,
    current_user: User = Depends(get_acting_user),
    orchestrator: ChatOrchestrator = Depends(get_chat_orchestrator)
):
    """
    Get the ordered message history of a conversation.

    Raises:
        HTTPException: If the conversation is not visible to the current user
    """
    messages = await orchestrator.get_history(conversation_id, current_user)
    if messages is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Conversation not found"
        )
    return [MessageResponse.model_validate(m) for m in messages]


@router.get("/conversations", response_model=List[ConversationResponse])
async def list_conversations(
    current_user: User = Depends(get_acting_user),
    orchestrator: ChatOrchestrator = Depends(get_chat_orchestrator)
):
    """List the current user's conversations, newest first"""
    conversations = await orchestrator.list_conversations(current_user)
    return [ConversationResponse.model_validate(c) for c in conversations]


@router.post("/conversations", response_model=ConversationResponse, status_code=status.HTTP_201_CREATED)
async def create_conversation(
    conversation_data: ConversationCreate,
    current_user: User = Depends(get_acting_user),
    orchestrator: ChatOrchestrator = Depends(get_chat_orchestrator)
):
    """Create an empty conversation; without a title it gets the placeholder"""
    conversation = await orchestrator.create_conversation(current_user, conversation_data.title)
    return ConversationResponse.model_validate(conversation)


@router.put("/conversations/{conversation_id}", response_model=ConversationResponse)
async def rename_conversation(
    conversation_id: int,
    conversation_data: ConversationUpdate,
    current_user: User = Depends(get_acting_user),
    orchestrator: ChatOrchestrator = Depends(get_chat_orchestrator)
):
    """
    Rename a conversation.

    Raises:
        HTTPException: If the title is blank or the conversation is not
            visible to the current user
    """
    title = conversation_data.title.strip()
    if not title:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Title cannot be blank"
        )

    conversation = await orchestrator.rename_conversation(conversation_id, current_user, title)
    if conversation is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Conversation not found"
        )
    return ConversationResponse.model_validate(conversation)


@router.delete("/conversations/{conversation_id}", response_model=StatusResponse)
async def delete_conversation(
    conversation_id: int,
    current_user: User = Depends(get_acting_user),
    orchestrator: ChatOrchestrator = Depends(get_chat_orchestrator)
):
    """
    Delete a conversation and all its messages.

    Raises:
        HTTPException: If the conversation is not visible to the current user
    """
    deleted = await orchestrator.delete_conversation(conversation_id, current_user)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Conversation not found"
        )
    return StatusResponse(status="success", message="Conversation deleted")


@router.get("/health")
async def health_check(gateway: AIGateway = Depends(get_ai_gateway)):
    """Health check endpoint"""
    return {
        "status": "UP",
        "message": "Backend is running!",
        "aiConfigured": gateway.is_configured(),
    }
