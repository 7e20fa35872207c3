from typing import Dict, Optional
from langchain_openai import ChatOpenAI
from langchain_core.language_models.chat_models import BaseChatModel
from .base import LLMBaseModel

class OpenAIModel(LLMBaseModel):
    """
    Strategy for OpenAI-compatible chat completion endpoints (OpenAI, OpenRouter).
    Also the fallback for model names no other strategy claims.
    """

    provider = "openai-compatible"

    def is_provider_for(self, model_name: str) -> bool:
        model_lower = model_name.lower()
        return any(x in model_lower for x in ['gpt', 'o1-', 'openai/'])

    def create_model(
        self,
        model_name: str,
        temperature: float,
        max_tokens: int,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        base_url: Optional[str] = None,
        default_headers: Optional[Dict[str, str]] = None,
        **kwargs
    ) -> BaseChatModel:
        return ChatOpenAI(
            model=model_name,
            temperature=temperature,
            max_tokens=max_tokens,
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
            default_headers=default_headers
        )
