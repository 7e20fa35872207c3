from abc import ABC, abstractmethod
from typing import Optional
from langchain_core.language_models.chat_models import BaseChatModel

class LLMBaseModel(ABC):
    """
    Provider strategy: decides whether it serves a model identifier and builds
    the langchain chat model for it.
    """

    # Short provider label used in logs
    provider: str = ""

    @abstractmethod
    def create_model(
        self,
        model_name: str,
        temperature: float,
        max_tokens: int,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        **kwargs
    ) -> BaseChatModel:
        """
        Build the chat model. The client must make exactly one request per
        call (no built-in retries) and give up after ``timeout`` seconds.
        """

    @abstractmethod
    def is_provider_for(self, model_name: str) -> bool:
        """True when this strategy serves ``model_name``"""
