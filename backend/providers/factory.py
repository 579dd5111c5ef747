"""Factory functions for creating LLM providers and model configs."""

from shared.config import Settings

from .anthropic import AnthropicProvider
from .base import LLMProvider, ModelConfig
from .gemini import GeminiProvider
from .openai_compatible import PROVIDER_CONFIGS, OpenAICompatibleProvider

# Default call options applied per model
DEFAULT_REASONING_EFFORT: dict[str, str] = {
    "o4-mini": "high",
    "o3": "high",
    "o3-mini": "high",
}
DEFAULT_THINKING_BUDGET = 10000

# Gemini models that accept a thinking budget
GEMINI_THINKING_PREFIX = "gemini-2.5"


def get_providers() -> dict[str, LLMProvider]:
    """Get singleton instances of each provider type.

    Returns:
        Dictionary mapping provider type names to provider instances.
        Keys are: "anthropic", "gemini" and every OpenAI-compatible type.
    """
    providers: dict[str, LLMProvider] = {
        "anthropic": AnthropicProvider(),
        "gemini": GeminiProvider(),
    }
    for provider_type in PROVIDER_CONFIGS:
        providers[provider_type] = OpenAICompatibleProvider(provider_type)
    return providers


def parse_model_string(model: str) -> tuple[str, str]:
    """Parse 'provider/model_id' into (provider_type, model_id).

    Args:
        model: Model string in format "provider/model_id"
               e.g., "openai/o4-mini", "anthropic/claude-sonnet-4-20250514"

    Returns:
        Tuple of (provider_type, model_id)

    Raises:
        ValueError: If model string doesn't contain a '/'
    """
    if "/" not in model:
        raise ValueError(
            f"Invalid model string '{model}'. "
            "Expected format: 'provider/model_id' (e.g., 'openai/o4-mini')"
        )
    provider_type, model_id = model.split("/", 1)
    return provider_type, model_id


def get_api_key_for_provider(provider: str, settings: Settings) -> str:
    """Get the API key for a provider from settings."""
    api_key_map = {
        "anthropic": settings.anthropic_api_key,
        "openai": settings.openai_api_key,
        "gemini": settings.google_api_key,
        "grok": settings.xai_api_key,
        "openrouter": settings.openrouter_api_key,
        # Local providers don't need API keys
        "ollama": "",
        "vllm": "",
        "lm_studio": "",
    }
    return api_key_map.get(provider, "")


def default_thinking_budget(provider_type: str, model_id: str) -> int:
    """Thinking budget for models that support extended thinking, else 0."""
    if provider_type == "anthropic":
        return DEFAULT_THINKING_BUDGET
    if provider_type == "gemini" and model_id.startswith(GEMINI_THINKING_PREFIX):
        return DEFAULT_THINKING_BUDGET
    return 0


def build_model_config(model: str, settings: Settings) -> ModelConfig:
    """Build a ModelConfig for a 'provider/model_id' string.

    Args:
        model: Model string, e.g. "anthropic/claude-sonnet-4-20250514"
        settings: Application settings holding the API keys

    Returns:
        ModelConfig with the provider's API key and default call options

    Raises:
        ValueError: If the model string is malformed or the provider is unknown
    """
    provider_type, model_id = parse_model_string(model)
    if provider_type not in get_providers():
        raise ValueError(f"Unknown provider type '{provider_type}' in model '{model}'")

    return ModelConfig(
        model_name=model,
        provider_type=provider_type,
        model_id=model_id,
        api_key=get_api_key_for_provider(provider_type, settings),
        reasoning_effort=DEFAULT_REASONING_EFFORT.get(model_id) if provider_type == "openai" else None,
        thinking_budget=default_thinking_budget(provider_type, model_id),
    )
