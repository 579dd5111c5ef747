"""
Model call adapter built on the LangChain providers.

Turns one logical request (one or several images plus a prompt) into one
chat call against one configured model, and reports the outcome as a
ModelCallResult. Every failure is captured; nothing is retried.
"""

import asyncio
import logging
from typing import Any, Optional, Sequence

from langchain_core.messages import BaseMessage, HumanMessage

from providers.base import LLMProvider, ModelConfig
from providers.factory import build_model_config, get_providers
from shared.config import Settings

from .models import ImageInput, ModelCallResult

logger = logging.getLogger(__name__)


def build_message(prompt: str, images: Sequence[ImageInput]) -> HumanMessage:
    """Build a multimodal message: the prompt followed by each image in order."""
    content: list[dict[str, Any]] = [{"type": "text", "text": prompt}]
    for image in images:
        content.append({
            "type": "image_url",
            "image_url": {"url": image.to_data_url()},
        })
    return HumanMessage(content=content)


def split_response_content(message: BaseMessage) -> tuple[str, Optional[str]]:
    """Extract (answer text, thinking) from a chat model response.

    Handles plain string content and content-block lists, where text blocks
    are concatenated and thinking blocks (Anthropic extended thinking) are
    returned separately.
    """
    content = message.content
    if isinstance(content, str):
        return content, None

    texts: list[str] = []
    thinking: list[str] = []
    for block in content:
        if isinstance(block, str):
            texts.append(block)
        elif isinstance(block, dict):
            if block.get("type") == "text":
                texts.append(block.get("text", ""))
            elif block.get("type") == "thinking":
                thinking.append(block.get("thinking", ""))

    return "".join(texts), ("\n".join(thinking) or None)


class LangChainModelCaller:
    """
    IModelCaller implementation that talks to models through LangChain.

    Attributes:
        model_configs: Ordered mapping of model name to its configuration
        timeout: Seconds to wait for a single call before reporting failure
    """

    def __init__(
        self,
        model_configs: dict[str, ModelConfig],
        providers: Optional[dict[str, LLMProvider]] = None,
        timeout: float = 120.0,
    ):
        self.model_configs = model_configs
        self.providers = providers if providers is not None else get_providers()
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "LangChainModelCaller":
        """Create a caller for every model listed in ``settings.analysis_models``."""
        configs = {
            model: build_model_config(model, settings)
            for model in settings.analysis_models
        }
        return cls(configs, timeout=settings.model_timeout_seconds)

    @property
    def models(self) -> list[str]:
        return list(self.model_configs)

    async def call(self, model: str, image: ImageInput, prompt: str) -> ModelCallResult:
        """Ask one model about one image."""
        return await self._invoke(model, [image], prompt)

    async def call_batch(
        self,
        model: str,
        images: Sequence[ImageInput],
        prompt: str,
    ) -> ModelCallResult:
        """Ask one model about several images in one request."""
        return await self._invoke(model, images, prompt)

    async def _invoke(
        self,
        model: str,
        images: Sequence[ImageInput],
        prompt: str,
    ) -> ModelCallResult:
        config = self.model_configs.get(model)
        if config is None:
            return self._failed(model, "Model is not configured")

        logger.info("Calling %s with %d image(s)", model, len(images))
        try:
            provider = self.providers[config.provider_type]
            llm = provider.get_llm(config)
            message = build_message(prompt, images)
            response = await asyncio.wait_for(llm.ainvoke([message]), timeout=self.timeout)
        except asyncio.TimeoutError:
            return self._failed(model, f"Request timed out after {self.timeout:g}s")
        except Exception as e:
            return self._failed(model, str(e) or type(e).__name__)

        text, thinking = split_response_content(response)
        if not text.strip():
            return self._failed(model, "Empty response")

        logger.info("%s responded (%d chars)", model, len(text))
        logger.debug("%s response: %r", model, text)
        return ModelCallResult(model=model, success=True, text=text, thinking=thinking)

    @staticmethod
    def _failed(model: str, error: str) -> ModelCallResult:
        logger.warning("%s failed: %s", model, error)
        return ModelCallResult(model=model, success=False, error=error)
