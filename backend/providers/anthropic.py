"""Anthropic Claude LLM provider implementation.

Handles Anthropic's Claude models via the langchain-anthropic package.
Unlike local providers (Ollama, vLLM, LM Studio), Anthropic requires
a valid API key for authentication.
"""

from langchain_anthropic import ChatAnthropic

from .base import LLMProvider, ModelConfig

# Extended thinking needs room for the answer on top of the thinking budget
THINKING_MAX_TOKENS = 16000


class AnthropicProvider(LLMProvider):
    """Provider for Anthropic Claude models.

    Anthropic models use a different API than OpenAI-compatible providers,
    so we use ChatAnthropic from langchain-anthropic instead of ChatOpenAI.

    Available vision-capable models:
        - claude-sonnet-4-20250514 (balanced speed and capability)
        - claude-opus-4-20250514 (most capable)
        - claude-3-5-haiku-20241022 (fastest, most economical)
    """

    def get_llm(self, config: ModelConfig) -> ChatAnthropic:
        """Return a ChatAnthropic client configured for Claude.

        When ``config.thinking_budget`` is positive, extended thinking is
        enabled and the response carries a thinking block alongside the text.

        Args:
            config: Model configuration with Anthropic API details

        Returns:
            A configured ChatAnthropic client

        Raises:
            ValueError: If api_key is not provided
        """
        if not config.api_key:
            raise ValueError(
                "Anthropic API key is required. "
                "Set it via the ANTHROPIC_API_KEY environment variable."
            )

        kwargs: dict = {
            "model": config.model_id,
            "api_key": config.api_key,
        }
        if config.thinking_budget > 0:
            kwargs["max_tokens"] = max(THINKING_MAX_TOKENS, config.thinking_budget + 1024)
            kwargs["thinking"] = {"type": "enabled", "budget_tokens": config.thinking_budget}

        return ChatAnthropic(**kwargs)
