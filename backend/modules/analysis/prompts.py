"""Default prompts sent to the models when the caller supplies none."""

from typing import Sequence

DEFAULT_PROMPT = (
    "Analyze this image and answer any questions you see. "
    "For multiple choice questions, respond with ONLY the correct option letter (A, B, C, or D). "
    "For math questions, respond with ONLY the correct numerical answer. "
    "Do not provide any explanations, reasoning, or additional text."
)

BATCH_PROMPT_TEMPLATE = (
    "Analyze each of the {count} attached images and answer any questions you see. "
    "For multiple choice questions, respond with ONLY the correct option letter (A, B, C, or D). "
    "For math questions, respond with ONLY the correct numerical answer. "
    "Do not provide any explanations, reasoning, or additional text.\n\n"
    "The images are attached in this order. You MUST respond in exactly this format, "
    "one line per image:\n"
    "{format_lines}"
)


def build_batch_prompt(filenames: Sequence[str]) -> str:
    """Build the default batch prompt listing the required output line for every image."""
    format_lines = "\n".join(f"Image {name}: [answer]" for name in filenames)
    return BATCH_PROMPT_TEMPLATE.format(count=len(filenames), format_lines=format_lines)
