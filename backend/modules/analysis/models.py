"""
Analysis module data models.

These models define the data structures that flow between the model call
adapter, the batch demultiplexer, the consensus analyzer and the API.
"""

import base64
import mimetypes
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class AnswerStatus(str, Enum):
    """Agreement status assigned by the consensus analyzer."""

    CONSENSUS = "consensus"  # Agrees with every successful answer
    PARTIAL = "partial"      # Agrees with some but not all
    DIFFERENT = "different"  # Agrees with no other answer
    ERROR = "error"          # The model call failed


class AnalysisMode(str, Enum):
    """How images are sent to the models."""

    INDIVIDUAL = "individual"  # One call per image per model
    BATCH = "batch"            # One call per model covering every image


class Answer(BaseModel):
    """The result of one model evaluating one image."""

    model: str = Field(..., description="Model identifier")
    success: bool = Field(..., description="False when the call itself failed")
    text: Optional[str] = Field(None, description="Answer content (success only)")
    error_message: Optional[str] = Field(None, description="Failure reason (failure only)")
    thinking: Optional[str] = Field(None, description="Reasoning summary, if the model returned one")
    status: Optional[AnswerStatus] = Field(None, description="Assigned by the consensus analyzer")
    match_count: Optional[int] = Field(
        None,
        description="How many answers (including this one) were judged equivalent",
    )
    extraction: Optional[str] = Field(
        None,
        description="Demultiplexing strategy that produced the text (batch mode)",
    )
    ambiguous: bool = Field(
        default=False,
        description="True when batch demultiplexing fell back to the whole response",
    )

    @classmethod
    def failed(cls, model: str, error_message: str) -> "Answer":
        """Build a failed answer."""
        return cls(model=model, success=False, error_message=error_message)


class ImageInput(BaseModel):
    """An uploaded image held in memory for the lifetime of one request."""

    filename: str = Field(..., description="Original filename, used only as a display key")
    content: bytes = Field(..., repr=False)
    media_type: Optional[str] = Field(None, description="MIME type, guessed from the filename if absent")

    def resolved_media_type(self) -> str:
        """Return the MIME type, defaulting to image/jpeg."""
        if self.media_type and self.media_type.startswith("image/"):
            return self.media_type
        guessed, _ = mimetypes.guess_type(self.filename)
        if guessed and guessed.startswith("image/"):
            return guessed
        return "image/jpeg"

    def to_data_url(self) -> str:
        """Encode the image as a base64 data URL."""
        encoded = base64.b64encode(self.content).decode("ascii")
        return f"data:{self.resolved_media_type()};base64,{encoded}"


class ModelCallResult(BaseModel):
    """Outcome of one call to one model: text on success, error otherwise."""

    model: str
    success: bool
    text: Optional[str] = None
    thinking: Optional[str] = None
    error: Optional[str] = None

    def to_answer(self) -> Answer:
        """Convert to an (unanalyzed) Answer."""
        if not self.success:
            return Answer.failed(self.model, self.error or "Unknown error")
        return Answer(
            model=self.model,
            success=True,
            text=self.text or "",
            thinking=self.thinking,
        )


class BatchCombinedAnswer(BaseModel):
    """Raw output of one model given several images in a single call."""

    model: str
    filenames: list[str] = Field(..., description="Filenames in the order the images were attached")
    success: bool
    raw_text: Optional[str] = None
    thinking: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def from_call(cls, result: ModelCallResult, filenames: list[str]) -> "BatchCombinedAnswer":
        """Wrap a batch model call result."""
        return cls(
            model=result.model,
            filenames=filenames,
            success=result.success,
            raw_text=result.text,
            thinking=result.thinking,
            error_message=result.error,
        )


class ImageResult(BaseModel):
    """All analyzed answers for one uploaded image."""

    filename: str
    answers: list[Answer] = Field(default_factory=list)
    processing_error: Optional[str] = Field(
        None,
        description="Set instead of answers when the image could not be processed",
    )

    @property
    def consensus_reached(self) -> bool:
        """True when every answer agrees and none failed."""
        return bool(self.answers) and all(
            a.status == AnswerStatus.CONSENSUS for a in self.answers
        )


class AnalysisRequest(BaseModel):
    """Request-scoped context passed through the analysis pipeline."""

    images: list[ImageInput] = Field(..., min_length=1)
    prompt: Optional[str] = Field(None, description="Custom prompt; defaults apply when empty")
    mode: AnalysisMode = AnalysisMode.INDIVIDUAL

    @property
    def custom_prompt(self) -> Optional[str]:
        """The prompt override, or None when blank."""
        if self.prompt and self.prompt.strip():
            return self.prompt
        return None


class AnalysisResponse(BaseModel):
    """Terminal output of one analysis request."""

    mode: AnalysisMode
    models: list[str] = Field(default_factory=list)
    results: list[ImageResult] = Field(default_factory=list)
    api_calls_saved: Optional[int] = Field(
        None,
        description="Calls saved versus individual mode (batch mode only)",
    )
