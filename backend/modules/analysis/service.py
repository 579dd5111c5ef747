"""
Analysis service implementation.

Orchestrates the model fan-out for a request, routes batch answers through
the demultiplexer, and runs every image's answers through the consensus
analyzer.
"""

import asyncio
import logging
from typing import Optional, Sequence

from .consensus import ConsensusAnalyzer
from .demux import BatchDemultiplexer
from .exceptions import ImageProcessingError, NoModelsConfiguredError
from .interfaces import IAnalysisService, IModelCaller
from .models import (
    AnalysisMode,
    AnalysisRequest,
    AnalysisResponse,
    Answer,
    BatchCombinedAnswer,
    ImageInput,
    ImageResult,
    ModelCallResult,
)
from .prompts import DEFAULT_PROMPT, build_batch_prompt

logger = logging.getLogger(__name__)

PROCESSING_ERROR_MESSAGE = "Failed to process image"


def calls_saved(image_count: int, model_count: int) -> int:
    """Model calls saved by batch mode: each model is called once instead of once per image.

    No calls are made, and none saved, when no image reached the models.
    """
    if image_count == 0:
        return 0
    return image_count * model_count - model_count


class AnalysisService(IAnalysisService):
    """
    Analysis orchestrator.

    Implements IAnalysisService. Holds no per-request state: everything a
    request needs travels in its AnalysisRequest.
    """

    def __init__(
        self,
        caller: IModelCaller,
        analyzer: Optional[ConsensusAnalyzer] = None,
        demultiplexer: Optional[BatchDemultiplexer] = None,
    ):
        self._caller = caller
        self._analyzer = analyzer or ConsensusAnalyzer()
        self._demultiplexer = demultiplexer or BatchDemultiplexer()

    @property
    def models(self) -> list[str]:
        return self._caller.models

    async def analyze(self, request: AnalysisRequest) -> AnalysisResponse:
        """Analyze every image in the request with every configured model."""
        models = self.models
        if not models:
            raise NoModelsConfiguredError()

        logger.info(
            "Analyzing %d image(s) in %s mode with %s",
            len(request.images),
            request.mode.value,
            ", ".join(models),
        )

        if request.mode == AnalysisMode.BATCH:
            results, sent = await self._analyze_batch(request, models)
            saved = calls_saved(sent, len(models))
        else:
            results = await self._analyze_individual(request, models)
            saved = None

        return AnalysisResponse(
            mode=request.mode,
            models=models,
            results=results,
            api_calls_saved=saved,
        )

    async def _analyze_individual(
        self,
        request: AnalysisRequest,
        models: list[str],
    ) -> list[ImageResult]:
        prompt = request.custom_prompt or DEFAULT_PROMPT
        results: list[ImageResult] = []

        # Images run one after another; the models for one image run concurrently
        for image in request.images:
            try:
                self._prepare(image)
                outcomes = await asyncio.gather(
                    *(self._caller.call(model, image, prompt) for model in models),
                    return_exceptions=True,
                )
                answers = [
                    self._to_answer(model, outcome)
                    for model, outcome in zip(models, outcomes)
                ]
                results.append(ImageResult(
                    filename=image.filename,
                    answers=self._analyzer.analyze(answers),
                ))
            except Exception:
                logger.exception("Error processing image %s", image.filename)
                results.append(ImageResult(
                    filename=image.filename,
                    processing_error=PROCESSING_ERROR_MESSAGE,
                ))

        return results

    async def _analyze_batch(
        self,
        request: AnalysisRequest,
        models: list[str],
    ) -> tuple[list[ImageResult], int]:
        """Returns the per-image results and how many images were sent to the models."""
        ready: list[ImageInput] = []
        failed: dict[int, ImageResult] = {}
        for position, image in enumerate(request.images):
            try:
                self._prepare(image)
                ready.append(image)
            except Exception:
                logger.exception("Error processing image %s", image.filename)
                failed[position] = ImageResult(
                    filename=image.filename,
                    processing_error=PROCESSING_ERROR_MESSAGE,
                )

        per_image: list[list[Answer]] = [[] for _ in ready]
        if ready:
            filenames = [image.filename for image in ready]
            prompt = request.custom_prompt or build_batch_prompt(filenames)
            outcomes = await asyncio.gather(
                *(self._caller.call_batch(model, ready, prompt) for model in models),
                return_exceptions=True,
            )
            for model, outcome in zip(models, outcomes):
                batch = BatchCombinedAnswer.from_call(self._to_result(model, outcome), filenames)
                try:
                    split = [answer for _, answer in self._demultiplexer.demultiplex(batch)]
                except Exception:
                    logger.exception("Error splitting batch response from %s", model)
                    split = [
                        Answer.failed(batch.model, "Failed to split batch response")
                        for _ in filenames
                    ]
                for slot, answer in enumerate(split):
                    per_image[slot].append(answer)

        analyzed = iter(zip(ready, per_image))
        results: list[ImageResult] = []
        for position in range(len(request.images)):
            if position in failed:
                results.append(failed[position])
                continue
            image, answers = next(analyzed)
            try:
                results.append(ImageResult(
                    filename=image.filename,
                    answers=self._analyzer.analyze(answers),
                ))
            except Exception:
                logger.exception("Error analyzing answers for %s", image.filename)
                results.append(ImageResult(
                    filename=image.filename,
                    processing_error=PROCESSING_ERROR_MESSAGE,
                ))

        return results, len(ready)

    @staticmethod
    def _prepare(image: ImageInput) -> None:
        """Check the image can be sent to a model."""
        if not image.content:
            raise ImageProcessingError(image.filename, "Image file is empty")

    @staticmethod
    def _to_result(model: str, outcome: ModelCallResult | BaseException) -> ModelCallResult:
        """Normalize a gathered outcome; an adapter that raised counts as a failed call."""
        if isinstance(outcome, BaseException):
            logger.warning("Model caller raised for %s: %s", model, outcome)
            return ModelCallResult(
                model=model,
                success=False,
                error=str(outcome) or type(outcome).__name__,
            )
        return outcome

    def _to_answer(self, model: str, outcome: ModelCallResult | BaseException) -> Answer:
        return self._to_result(model, outcome).to_answer()


def create_analysis_service(models: Optional[Sequence[str]] = None) -> AnalysisService:
    """Build an AnalysisService wired to the configured LangChain models.

    Args:
        models: Optional override of ``analysis_models`` from settings
    """
    from shared.config import get_settings
    from .model_caller import LangChainModelCaller

    settings = get_settings()
    if models:
        settings = settings.model_copy(update={"analysis_models": list(models)})
    return AnalysisService(LangChainModelCaller.from_settings(settings))
