from typing import Optional
from langchain_anthropic import ChatAnthropic
from langchain_core.language_models.chat_models import BaseChatModel
from .base import LLMBaseModel

class AnthropicModel(LLMBaseModel):
    """
    Strategy for creating Anthropic Claude Models (direct API, not via a router).
    """

    provider = "anthropic"

    def is_provider_for(self, model_name: str) -> bool:
        # "anthropic/claude-..." ids belong to OpenAI-compatible routers
        return model_name.lower().startswith('claude')

    def create_model(
        self,
        model_name: str,
        temperature: float,
        max_tokens: int,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        **kwargs
    ) -> BaseChatModel:
        return ChatAnthropic(
            model=model_name,
            temperature=temperature,
            max_tokens=max_tokens,
            api_key=api_key,
            timeout=timeout,
            max_retries=0
        )
