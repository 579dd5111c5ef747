"""Google Gemini LLM provider implementation.

Handles Google's Gemini vision models via the langchain-google-genai package.
Gemini 2.5 models can think before answering; when a thinking budget is set
the thoughts are returned as thinking blocks next to the answer text.
"""

from langchain_google_genai import ChatGoogleGenerativeAI

from .base import LLMProvider, ModelConfig


class GeminiProvider(LLMProvider):
    """Provider for Google Gemini models.

    All listed models accept inline base64 images.

    Available models:
        - gemini-2.5-pro (thinking, most capable)
        - gemini-2.5-flash (thinking, fast)
        - gemini-2.0-flash (no thinking, fastest)
    """

    def get_llm(self, config: ModelConfig) -> ChatGoogleGenerativeAI:
        """Return a ChatGoogleGenerativeAI client configured for Gemini.

        A positive ``config.thinking_budget`` caps the thinking tokens and
        asks for the thoughts to be included in the response.

        Args:
            config: Model configuration with Google AI API details

        Returns:
            A configured ChatGoogleGenerativeAI client

        Raises:
            ValueError: If api_key is not provided
        """
        if not config.api_key:
            raise ValueError(
                "Google AI API key is required. "
                "Set it via the GOOGLE_API_KEY environment variable."
            )

        kwargs: dict = {
            "model": config.model_id,
            "google_api_key": config.api_key,
        }
        if config.thinking_budget > 0:
            kwargs["thinking_budget"] = config.thinking_budget
            kwargs["include_thoughts"] = True

        return ChatGoogleGenerativeAI(**kwargs)
