"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

from typing import Sequence

import pytest

from api.dependencies import reset_container
from modules.analysis.models import Answer, ImageInput, ModelCallResult
from shared.config import get_settings


class FakeModelCaller:
    """
    In-memory IModelCaller.

    ``replies`` maps a model name to either a string (success), an Exception
    instance (the call raises it) or a ModelCallResult (returned as-is).
    Every call is recorded in ``calls`` as (kind, model, filenames, prompt).
    """

    def __init__(self, replies: dict[str, object]):
        self.replies = replies
        self.calls: list[tuple[str, str, list[str], str]] = []

    @property
    def models(self) -> list[str]:
        return list(self.replies)

    async def call(self, model: str, image: ImageInput, prompt: str) -> ModelCallResult:
        self.calls.append(("single", model, [image.filename], prompt))
        return self._reply(model, image.filename)

    async def call_batch(
        self,
        model: str,
        images: Sequence[ImageInput],
        prompt: str,
    ) -> ModelCallResult:
        self.calls.append(("batch", model, [i.filename for i in images], prompt))
        return self._reply(model, None)

    def _reply(self, model: str, filename: str | None) -> ModelCallResult:
        reply = self.replies[model]
        if isinstance(reply, dict):
            reply = reply[filename]
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, ModelCallResult):
            return reply
        return ModelCallResult(model=model, success=True, text=reply)


def ok(text: str, model: str = "model") -> Answer:
    """Build a successful, unanalyzed answer."""
    return Answer(model=model, success=True, text=text)


def failed(error: str = "boom", model: str = "model") -> Answer:
    """Build a failed answer."""
    return Answer.failed(model, error)


def make_image(filename: str = "q1.png", content: bytes = b"\x89PNG fake") -> ImageInput:
    """Build an in-memory image."""
    return ImageInput(filename=filename, content=content, media_type="image/png")


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached settings and the service container around each test."""
    get_settings.cache_clear()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_container()
