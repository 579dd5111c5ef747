"""
Analysis module interfaces.

The API layer depends on IAnalysisService; the service depends on
IModelCaller, so tests and alternative vendors can swap the adapter.
"""

from typing import Protocol, Sequence, runtime_checkable

from .models import AnalysisRequest, AnalysisResponse, ImageInput, ModelCallResult


@runtime_checkable
class IModelCaller(Protocol):
    """
    Interface for calling one vision model.

    Implementations must never raise for vendor or network failures;
    they return a ModelCallResult with success=False instead.
    """

    @property
    def models(self) -> list[str]:
        """Identifiers of the models this caller can reach, in call order."""
        ...

    async def call(self, model: str, image: ImageInput, prompt: str) -> ModelCallResult:
        """
        Ask one model about one image.

        Args:
            model: Model identifier from ``models``
            image: The image to attach
            prompt: Instruction text

        Returns:
            The model's text, or the failure reason
        """
        ...

    async def call_batch(
        self,
        model: str,
        images: Sequence[ImageInput],
        prompt: str,
    ) -> ModelCallResult:
        """
        Ask one model about several images in a single request.

        Images are attached in the given order.
        """
        ...


@runtime_checkable
class IAnalysisService(Protocol):
    """
    Interface for analysis operations.

    This protocol defines the contract the analysis module exposes to the
    API layer and the CLI.
    """

    @property
    def models(self) -> list[str]:
        """Identifiers of the participating models."""
        ...

    async def analyze(self, request: AnalysisRequest) -> AnalysisResponse:
        """
        Send every image to every model and judge agreement per image.

        A failure on one image never aborts the others; it is reported in
        that image's ``processing_error``.

        Args:
            request: Images, optional prompt override and mode

        Returns:
            One ImageResult per input image, in input order
        """
        ...
