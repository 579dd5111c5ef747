"""
Analysis module.

Sends question images to several vision models and judges whether their
answers agree.

Public API:
- IAnalysisService: Interface for analysis operations
- IModelCaller: Interface for calling one model
- ConsensusAnalyzer: Tags answers as consensus / partial / different / error
- BatchDemultiplexer: Splits a combined batch answer into per-image answers
"""

from .interfaces import IAnalysisService, IModelCaller
from .models import (
    AnalysisMode,
    AnalysisRequest,
    AnalysisResponse,
    Answer,
    AnswerStatus,
    BatchCombinedAnswer,
    ImageInput,
    ImageResult,
    ModelCallResult,
)
from .consensus import ConsensusAnalyzer
from .demux import BatchDemultiplexer, DEFAULT_STRATEGIES
from .prompts import DEFAULT_PROMPT, build_batch_prompt
from .exceptions import (
    AnalysisError,
    NoImagesError,
    TooManyImagesError,
    UnsupportedImageTypeError,
    ImageTooLargeError,
    ImageProcessingError,
    NoModelsConfiguredError,
)

__all__ = [
    # Interfaces
    "IAnalysisService",
    "IModelCaller",
    # Models
    "AnalysisMode",
    "AnalysisRequest",
    "AnalysisResponse",
    "Answer",
    "AnswerStatus",
    "BatchCombinedAnswer",
    "ImageInput",
    "ImageResult",
    "ModelCallResult",
    # Core
    "ConsensusAnalyzer",
    "BatchDemultiplexer",
    "DEFAULT_STRATEGIES",
    "DEFAULT_PROMPT",
    "build_batch_prompt",
    # Exceptions
    "AnalysisError",
    "NoImagesError",
    "TooManyImagesError",
    "UnsupportedImageTypeError",
    "ImageTooLargeError",
    "ImageProcessingError",
    "NoModelsConfiguredError",
]
