"""
Tally - multi-model answer checking for question images.

Sends each image to several vision models, then reports for every image
whether the models agree. Images can be sent one at a time (individual
mode) or all together in one call per model (batch mode).

Supports multiple LLM providers: OpenAI, Anthropic, Gemini and any
OpenAI-compatible server.
"""

import argparse
import asyncio
import mimetypes
import sys
from pathlib import Path

from modules.analysis.display import console, print_response
from modules.analysis.models import AnalysisMode, AnalysisRequest, AnalysisResponse, ImageInput
from modules.analysis.service import create_analysis_service
from shared.config import get_settings
from shared.exceptions import TallyError
from shared.logging_config import configure_logging


def load_images(paths: list[Path]) -> list[ImageInput]:
    """Read image files into memory.

    Raises:
        FileNotFoundError: If any path does not exist
    """
    images = []
    for path in paths:
        if not path.is_file():
            raise FileNotFoundError(path)
        media_type, _ = mimetypes.guess_type(path.name)
        images.append(ImageInput(filename=path.name, content=path.read_bytes(), media_type=media_type))
    return images


async def run_analysis(
    images: list[ImageInput],
    prompt: str | None,
    mode: AnalysisMode,
    models: list[str] | None = None,
) -> AnalysisResponse:
    """Run one analysis request through the service."""
    service = create_analysis_service(models)
    request = AnalysisRequest(images=images, prompt=prompt, mode=mode)
    return await service.analyze(request)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Ask several vision models about question images and check whether they agree"
    )
    parser.add_argument("images", nargs="+", type=Path, help="Image files to analyze")
    parser.add_argument("-p", "--prompt", help="Custom prompt (defaults to the answer-only prompt)")
    parser.add_argument(
        "-b", "--batch",
        action="store_true",
        help="Send all images to each model in a single call",
    )
    parser.add_argument(
        "-m", "--models",
        nargs="+",
        help="Models as provider/model_id (default: TALLY_ANALYSIS_MODELS)",
    )
    parser.add_argument("--log-level", help="Log level (default: TALLY_LOG_LEVEL)")
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)

    if len(args.images) > settings.max_images:
        console.print(f"[red]Error:[/red] At most {settings.max_images} images per run")
        return 1

    try:
        images = load_images(args.images)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] File not found: {e}")
        return 1

    mode = AnalysisMode.BATCH if args.batch else AnalysisMode.INDIVIDUAL
    console.print(f"[dim]Images: {', '.join(i.filename for i in images)}[/dim]")
    console.print(f"[dim]Mode: {mode.value}[/dim]\n")

    try:
        response = asyncio.run(run_analysis(images, args.prompt, mode, args.models))
    except (ValueError, TallyError) as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1

    print_response(response)
    return 0


if __name__ == "__main__":
    sys.exit(main())
