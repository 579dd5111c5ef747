"""
Analysis API endpoints.

Accepts uploaded question images and returns per-image model answers with
their agreement status.
"""

import logging
import re
from pathlib import PurePath
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from api.dependencies import get_analysis_service
from api.models.errors import ErrorResponse
from shared.config import Settings, get_settings

from .exceptions import (
    ImageTooLargeError,
    NoImagesError,
    TooManyImagesError,
    UnsupportedImageTypeError,
)
from .interfaces import IAnalysisService
from .models import AnalysisMode, AnalysisRequest, AnalysisResponse, ImageInput

logger = logging.getLogger(__name__)

router = APIRouter()

ALLOWED_IMAGE_TYPES = re.compile(r"jpeg|jpg|png|gif|webp")


def is_allowed_image(filename: str, content_type: Optional[str]) -> bool:
    """Both the extension and the declared MIME type must name an accepted image format."""
    extension = PurePath(filename).suffix.lower()
    return bool(
        extension
        and ALLOWED_IMAGE_TYPES.search(extension)
        and content_type
        and ALLOWED_IMAGE_TYPES.search(content_type.lower())
    )


async def read_upload(upload: UploadFile, settings: Settings) -> ImageInput:
    """
    Validate one uploaded file and load it into memory.

    Raises:
        UnsupportedImageTypeError: If the file is not an accepted image type
        ImageTooLargeError: If the file exceeds the configured size limit
    """
    filename = upload.filename or "image"
    if not is_allowed_image(filename, upload.content_type):
        raise UnsupportedImageTypeError(filename, upload.content_type)

    content = await upload.read(settings.max_file_size_bytes + 1)
    if len(content) > settings.max_file_size_bytes:
        raise ImageTooLargeError(filename, len(content), settings.max_file_size_bytes)

    return ImageInput(filename=filename, content=content, media_type=upload.content_type)


@router.post(
    "/analyze",
    response_model=AnalysisResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}},
)
async def analyze_images(
    images: list[UploadFile] = File(..., description="Question images"),
    prompt: Optional[str] = Form(default=None, description="Custom prompt override"),
    mode: AnalysisMode = Form(default=AnalysisMode.INDIVIDUAL, description="individual or batch"),
    service: IAnalysisService = Depends(get_analysis_service),
    settings: Settings = Depends(get_settings),
) -> AnalysisResponse:
    """
    Analyze uploaded images with every configured model.

    In individual mode each image is sent to each model separately. In batch
    mode each model receives all images in one call and the combined answer
    is split back per image; the response reports how many calls that saved.
    """
    if not images:
        raise NoImagesError()
    if len(images) > settings.max_images:
        raise TooManyImagesError(len(images), settings.max_images)

    inputs = [await read_upload(upload, settings) for upload in images]
    logger.info("Received %d image(s), mode=%s, custom prompt=%s", len(inputs), mode.value, bool(prompt))

    return await service.analyze(AnalysisRequest(images=inputs, prompt=prompt, mode=mode))
