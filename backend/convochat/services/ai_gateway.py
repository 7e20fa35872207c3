"""
AI Gateway - turns a conversation turn into one chat-model request using LangChain.
Builds the message list, performs a single bounded call, classifies failures and
parses the reply. Provider exceptions never escape: every outcome is an AIResult.
"""
import asyncio
import logging
from typing import Any, Iterable, List, Optional, Tuple

import anthropic
import httpx
import openai
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from convochat.core.config import settings
from convochat.models.message import MessageRole
from convochat.services.llm_models import LLMModelFactory
from convochat.services.results import AIError, AIResult, ErrorKind

logger = logging.getLogger(__name__)

PLACEHOLDER_API_KEY = "your-api-key-here"

AUTH_FAILURE_MESSAGE = (
    "**API Key Error**: The AI provider rejected the configured API key.\n\n"
    "Please:\n"
    "1. Get a new API key from your AI provider\n"
    "2. Set it as the `AI_API_KEY` environment variable (or in `.env`)\n"
    "3. Restart the backend server"
)
CONNECTION_FAILURE_MESSAGE = (
    "I apologize, but I'm having trouble connecting to the AI service. "
    "Please check your API key and try again later.\n\n"
    "Error details: {detail}"
)
MALFORMED_RESPONSE_MESSAGE = "Sorry, I received an unexpected response format."

_AUTH_ERRORS = (openai.AuthenticationError, anthropic.AuthenticationError)
_STATUS_ERRORS = (openai.APIStatusError, anthropic.APIStatusError)
_TRANSPORT_ERRORS = (
    openai.APIConnectionError,
    anthropic.APIConnectionError,
    httpx.TransportError,
    asyncio.TimeoutError,
)
_MALFORMED_ERRORS = (
    openai.APIResponseValidationError,
    anthropic.APIResponseValidationError,
    KeyError,
    IndexError,
    TypeError,
    ValueError,
    AttributeError,
)


class AIGateway:
    """
    Gateway to the configured chat model.
    Supports OpenAI-compatible endpoints (OpenAI, OpenRouter) and Anthropic.
    """

    def __init__(
        self,
        model_name: Optional[str] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout_ms: Optional[int] = None,
        history_limit: Optional[int] = None,
        system_prompt: Optional[str] = None,
        llm: Optional[BaseChatModel] = None
    ):
        """
        Initialize the gateway; unset arguments fall back to settings.

        Args:
            model_name: Provider model identifier
            api_key: Bearer credential for the provider
            base_url: OpenAI-compatible endpoint root
            temperature: Model temperature
            max_tokens: Maximum tokens in response
            timeout_ms: Upper bound on the wait for one reply
            history_limit: Most recent history messages to forward (0 = all)
            system_prompt: Instruction sent ahead of the history
            llm: Pre-built chat model, used instead of the provider factory
        """
        self.model_name = model_name or settings.AI_MODEL_NAME
        self.api_key = settings.AI_API_KEY if api_key is None else api_key
        self.base_url = base_url or settings.AI_API_BASE_URL
        self.temperature = settings.AI_TEMPERATURE if temperature is None else temperature
        self.max_tokens = max_tokens or settings.AI_MAX_TOKENS
        self.timeout_ms = timeout_ms or settings.AI_TIMEOUT_MS
        self.history_limit = settings.AI_HISTORY_MAX_MESSAGES if history_limit is None else history_limit
        self.system_prompt = system_prompt or settings.AI_SYSTEM_PROMPT

        self.model_factory = LLMModelFactory()
        self._llm = llm

    @property
    def timeout_s(self) -> float:
        return self.timeout_ms / 1000

    @property
    def llm(self) -> BaseChatModel:
        if self._llm is None:
            self._llm = self.model_factory.create_llm(
                model_name=self.model_name,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout_s,
                default_headers={
                    "HTTP-Referer": settings.APP_URL,
                    "X-Title": settings.APP_NAME,
                },
            )
        return self._llm

    def is_configured(self) -> bool:
        """True only when a real (non-placeholder) API key is present"""
        return bool(self.api_key) and self.api_key.strip() not in ("", PLACEHOLDER_API_KEY)

    def _extract_text_content(self, content: Any) -> str:
        """
        Extract text content from response.content which might be a string or list.

        Args:
            content: Response content (str or list of content blocks)

        Returns:
            Extracted text as string ("" when there is no text at all)
        """
        if isinstance(content, str):
            return content
        elif isinstance(content, list):
            text_parts = []
            for block in content:
                if isinstance(block, dict) and block.get('type') == 'text':
                    text_parts.append(block.get('text', ''))
                elif isinstance(block, str):
                    text_parts.append(block)
            return ''.join(text_parts)
        return ""

    @staticmethod
    def _role_and_content(item: Any) -> Tuple[str, str]:
        if isinstance(item, dict):
            return item.get("role", MessageRole.USER.value), item.get("content", "")
        return item.role, item.content

    def _convert_history_to_langchain(self, history: Iterable[Any]) -> List[BaseMessage]:
        """
        Convert stored messages (or {role, content} dicts) to LangChain messages,
        keeping only the most recent ``history_limit`` of them.
        """
        items = list(history or [])
        if self.history_limit and len(items) > self.history_limit:
            items = items[-self.history_limit:]

        langchain_messages = []
        for item in items:
            role, content = self._role_and_content(item)
            if role == MessageRole.ASSISTANT.value:
                langchain_messages.append(AIMessage(content=content))
            elif role == MessageRole.SYSTEM.value:
                langchain_messages.append(SystemMessage(content=content))
            else:
                langchain_messages.append(HumanMessage(content=content))
        return langchain_messages

    def build_messages(self, new_message: str, history: Optional[Iterable[Any]] = None) -> List[BaseMessage]:
        """[system prompt] + history + [new user message]"""
        messages: List[BaseMessage] = [SystemMessage(content=self.system_prompt)]
        messages.extend(self._convert_history_to_langchain(history))
        messages.append(HumanMessage(content=new_message))
        return messages

    async def generate_reply(self, new_message: str, history: Optional[Iterable[Any]] = None) -> AIResult:
        """
        Send one turn to the model.

        Args:
            new_message: The user's current message
            history: Ordered earlier messages (role/content), oldest first

        Returns:
            AIResult with the reply text, or a classified AIError carrying a
            fallback message. Exactly one request is attempted.
        """
        logger.info(f"Sending message to AI ({self.model_name}): {len(new_message)} chars")
        logger.debug(f"Message preview: {new_message[:80]}")
        try:
            messages = self.build_messages(new_message, history)
            response = await asyncio.wait_for(self.llm.ainvoke(messages), timeout=self.timeout_s)
        except Exception as e:
            return AIResult(error=self._classify(e))

        raw_content = getattr(response, "content", None)
        if not isinstance(raw_content, (str, list)):
            logger.warning(f"Unexpected response format from AI provider: {type(response).__name__} without message content")
            return AIResult(error=AIError(
                kind=ErrorKind.MALFORMED_RESPONSE,
                message=MALFORMED_RESPONSE_MESSAGE,
                detail="Reply carried no message content",
            ))
        # Kept as sent, including an empty completion
        return AIResult(text=self._extract_text_content(raw_content))

    def _classify(self, error: Exception) -> AIError:
        """Map a provider/transport exception onto the gateway failure kinds"""
        if isinstance(error, _AUTH_ERRORS):
            body = self._response_body(error)
            logger.error(f"AI API error: HTTP 401 - Response: {body}")
            return AIError(
                kind=ErrorKind.AUTHENTICATION,
                message=AUTH_FAILURE_MESSAGE,
                detail=f"API_KEY_INVALID: {body}",
                status_code=401,
                body=body,
            )

        if isinstance(error, _STATUS_ERRORS):
            body = self._response_body(error)
            logger.error(f"AI API error: HTTP {error.status_code} - Response: {body}")
            detail = f"AI_API_ERROR_{error.status_code}: {body}"
            return AIError(
                kind=ErrorKind.PROVIDER,
                message=self._connection_message(detail),
                detail=detail,
                status_code=error.status_code,
                body=body,
            )

        if isinstance(error, _TRANSPORT_ERRORS):
            if isinstance(error, (asyncio.TimeoutError, openai.APITimeoutError, anthropic.APITimeoutError, httpx.TimeoutException)):
                detail = f"Request timed out after {self.timeout_ms} ms"
            else:
                detail = str(error) or error.__class__.__name__
            logger.error(f"Error calling AI API: {detail}")
            return AIError(
                kind=ErrorKind.TRANSPORT,
                message=self._connection_message(detail),
                detail=detail,
            )

        if isinstance(error, _MALFORMED_ERRORS):
            logger.warning(f"Error parsing AI response: {error}")
            return AIError(
                kind=ErrorKind.MALFORMED_RESPONSE,
                message=MALFORMED_RESPONSE_MESSAGE,
                detail=str(error),
            )

        logger.error(f"Error calling AI API: {error}", exc_info=True)
        detail = str(error) or error.__class__.__name__
        return AIError(
            kind=ErrorKind.PROVIDER,
            message=self._connection_message(detail),
            detail=detail,
        )

    @staticmethod
    def _response_body(error: Exception) -> str:
        response = getattr(error, "response", None)
        try:
            return response.text if response is not None else str(error)
        except httpx.ResponseNotRead:
            return str(error)

    @staticmethod
    def _connection_message(detail: str) -> str:
        return CONNECTION_FAILURE_MESSAGE.format(detail=detail[:200])
