"""
Outcome types returned across the gateway and orchestrator boundaries.

Expected failures (bad input, unknown conversation, provider trouble) are
values here, not exceptions; callers branch on ``kind``/``status``.
"""
import enum
from typing import Optional

from pydantic import BaseModel


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation_error"
    NOT_FOUND = "not_found"
    AUTHENTICATION = "authentication_failure"
    PROVIDER = "provider_error"
    TRANSPORT = "transport_failure"
    MALFORMED_RESPONSE = "malformed_response"
    PERSISTENCE = "persistence_error"


GATEWAY_ERROR_KINDS = frozenset({
    ErrorKind.AUTHENTICATION,
    ErrorKind.PROVIDER,
    ErrorKind.TRANSPORT,
    ErrorKind.MALFORMED_RESPONSE,
})


class AIError(BaseModel):
    """A classified model-call failure"""
    kind: ErrorKind
    message: str  # fallback text that can be shown to the user as-is
    detail: str = ""  # raw diagnostic for logs/operators
    status_code: Optional[int] = None
    body: Optional[str] = None


class AIResult(BaseModel):
    text: Optional[str] = None
    error: Optional[AIError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def display_text(self) -> str:
        """Reply text on success, the fallback message otherwise"""
        return self.text if self.error is None else self.error.message


class ChatStatus(str, enum.Enum):
    SUCCESS = "success"
    ERROR = "error"


class ChatResult(BaseModel):
    response: Optional[str] = None
    conversation_id: Optional[int] = None
    status: ChatStatus
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    # Set when the reply recorded for this turn is a gateway fallback
    gateway_error: Optional[AIError] = None

    @classmethod
    def failure(cls, kind: ErrorKind, message: str, conversation_id: Optional[int] = None) -> "ChatResult":
        return cls(
            status=ChatStatus.ERROR,
            error=message,
            error_kind=kind,
            conversation_id=conversation_id,
        )
