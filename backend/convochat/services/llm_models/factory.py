import logging
from typing import List, Optional
from langchain_core.language_models.chat_models import BaseChatModel
from .base import LLMBaseModel
from .openai import OpenAIModel
from .anthropic import AnthropicModel

logger = logging.getLogger(__name__)


class LLMModelFactory:
    """
    Builds chat models by delegating to the first provider strategy that
    claims the model name. Unclaimed names go to the OpenAI-compatible
    strategy, since routers such as OpenRouter accept arbitrary ids.
    """

    def __init__(self, strategies: Optional[List[LLMBaseModel]] = None):
        self.strategies: List[LLMBaseModel] = strategies or [
            AnthropicModel(),
            OpenAIModel()
        ]
        self.fallback: LLMBaseModel = OpenAIModel()

    def strategy_for(self, model_name: str) -> LLMBaseModel:
        for strategy in self.strategies:
            if strategy.is_provider_for(model_name):
                return strategy
        return self.fallback

    def create_llm(
        self,
        model_name: str,
        temperature: float,
        max_tokens: int,
        api_key: Optional[str] = None,
        **kwargs
    ) -> BaseChatModel:
        strategy = self.strategy_for(model_name)
        logger.info(f"Building chat model '{model_name}' via {strategy.provider} provider")
        return strategy.create_model(
            model_name=model_name,
            temperature=temperature,
            max_tokens=max_tokens,
            api_key=api_key,
            **kwargs
        )
