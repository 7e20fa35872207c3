"""
Pydantic schemas for chat requests and responses.
"""
from pydantic import AliasChoices, BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional

from convochat.models.message import MAX_CONTENT_LENGTH


class ChatRequest(BaseModel):
    """Request schema for sending a chat message"""
    message: Optional[str] = Field(None, max_length=MAX_CONTENT_LENGTH)
    conversationId: Optional[str] = None

    @field_validator("conversationId", mode="before")
    @classmethod
    def normalize_conversation_id(cls, value):
        # Accept numbers as well as strings; blank means "start a new conversation"
        if value is None:
            return None
        value = str(value).strip()
        return value or None


class ChatResponse(BaseModel):
    """Response schema for chat message"""
    response: Optional[str] = None
    conversationId: str = ""
    status: str
    error: Optional[str] = None


class MessageResponse(BaseModel):
    """One transcript entry; the parent conversation is never embedded"""
    id: int
    role: str
    content: str
    timestamp: datetime = Field(..., validation_alias=AliasChoices("created_at", "timestamp"))

    model_config = {"from_attributes": True}


class ConversationCreate(BaseModel):
    """Request schema for creating a conversation"""
    title: Optional[str] = Field(None, max_length=255)


class ConversationUpdate(BaseModel):
    """Request schema for renaming a conversation"""
    title: str = Field(..., min_length=1, max_length=255)


class ConversationResponse(BaseModel):
    """Response schema for a conversation"""
    id: int
    title: str
    createdAt: datetime = Field(..., validation_alias=AliasChoices("created_at", "createdAt"))
    updatedAt: Optional[datetime] = Field(None, validation_alias=AliasChoices("updated_at", "updatedAt"))

    model_config = {"from_attributes": True}


class StatusResponse(BaseModel):
    """Generic status/message envelope"""
    status: str
    message: str
