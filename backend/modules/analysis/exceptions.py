"""
Analysis module exceptions.

Model call failures are expected and never raised past the model caller;
these cover request validation and faults inside the pipeline.
"""

from typing import Optional

from shared.exceptions import TallyError, ValidationError


class AnalysisError(TallyError):
    """Base exception for analysis errors."""

    pass


class NoImagesError(ValidationError):
    """Raised when a request carries no images."""

    def __init__(self):
        super().__init__("No images uploaded", code="NO_IMAGES")


class TooManyImagesError(ValidationError):
    """Raised when a request carries more images than allowed."""

    def __init__(self, count: int, limit: int):
        super().__init__(
            f"Too many images: {count} (maximum {limit})",
            code="TOO_MANY_IMAGES",
            details={"count": count, "limit": limit},
        )


class UnsupportedImageTypeError(ValidationError):
    """Raised when an upload is not an accepted image type."""

    def __init__(self, filename: str, content_type: Optional[str] = None):
        super().__init__(
            f"Only image files are allowed: {filename}",
            code="UNSUPPORTED_IMAGE_TYPE",
            details={"filename": filename, "content_type": content_type},
        )


class ImageTooLargeError(ValidationError):
    """Raised when an upload exceeds the size limit."""

    status_code = 413

    def __init__(self, filename: str, size: int, limit: int):
        super().__init__(
            f"File too large: {filename}",
            code="IMAGE_TOO_LARGE",
            details={"filename": filename, "size": size, "limit": limit},
        )


class ImageProcessingError(AnalysisError):
    """Raised when an image cannot be prepared for the models."""

    def __init__(self, filename: str, reason: str = "Failed to process image"):
        super().__init__(
            reason,
            code="IMAGE_PROCESSING_FAILED",
            details={"filename": filename},
        )
        self.filename = filename


class NoModelsConfiguredError(AnalysisError):
    """Raised when no models are configured for analysis."""

    def __init__(self):
        super().__init__(
            "No analysis models configured. Set TALLY_ANALYSIS_MODELS.",
            code="NO_MODELS_CONFIGURED",
        )
