"""Base classes and models for LLM providers."""

from abc import ABC, abstractmethod
from typing import Optional

from langchain_core.language_models.chat_models import BaseChatModel
from pydantic import BaseModel


class ModelConfig(BaseModel):
    """Configuration for a model, parsed from an analysis_models entry.

    Attributes:
        model_name: Friendly alias (e.g., "openai/o4-mini")
        provider_type: Extracted from model prefix (e.g., "openai")
        model_id: Model identifier (e.g., "o4-mini")
        api_base: Base URL for the API endpoint
        api_key: API key (empty string for local servers)
        reasoning_effort: Reasoning effort for OpenAI reasoning models
        thinking_budget: Extended thinking token budget (Anthropic), 0 disables
    """

    model_config = {"frozen": True}

    model_name: str
    provider_type: str
    model_id: str
    api_base: str = ""
    api_key: str = ""
    reasoning_effort: Optional[str] = None
    thinking_budget: int = 0


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    Every provider returns a LangChain chat model that accepts multimodal
    HumanMessage content (text plus image_url blocks).
    """

    @abstractmethod
    def get_llm(self, config: ModelConfig) -> BaseChatModel:
        """Return a configured LLM client for the given model.

        Args:
            config: Model configuration with provider details

        Returns:
            A configured LangChain chat model
        """
        pass
