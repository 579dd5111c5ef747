"""
Splits one model's combined answer for several images into per-image answers.

The model is only asked (by prompt) to label each answer with its image's
filename, so nothing about the layout is guaranteed. Extraction runs an
ordered cascade of strategies per filename; the first one that returns a
non-empty string wins. The last resort hands the whole response to the
image and flags the answer as ambiguous.

A strategy is any callable ``(raw_text, filename, index, filenames) -> str | None``.
"""

import logging
import re
from typing import Callable, Optional, Sequence

from .models import Answer, BatchCombinedAnswer

logger = logging.getLogger(__name__)

ExtractionStrategy = Callable[[str, str, int, Sequence[str]], Optional[str]]

CHOICE_LETTER_PATTERN = re.compile(r"\b([A-D])\b")

# Characters that may sit directly before a filename without being part of it
_NAME_BOUNDARY = r"(?<![\w.\-])"


def _clean_segment(segment: str) -> str:
    """Trim whitespace, markdown emphasis, trailing separators and one pair of square brackets."""
    cleaned = segment.strip().strip("*").strip().rstrip(",;").strip()
    if len(cleaned) >= 2 and cleaned.startswith("[") and cleaned.endswith("]"):
        cleaned = cleaned[1:-1].strip()
    return cleaned


def _label_pattern(filename: str) -> str:
    return rf"{_NAME_BOUNDARY}(?:image\s+)?{re.escape(filename)}\s*:"


def extract_labeled_segment(
    raw_text: str, filename: str, index: int, filenames: Sequence[str]
) -> Optional[str]:
    """Capture the text after ``Image <filename>:`` (or ``<filename>:``).

    The segment runs until the next label of any filename in the batch or the
    end of the text. When a filename appears more than once in the batch, its
    k-th occurrence in the batch is matched to the k-th label.
    """
    next_label = "|".join(_label_pattern(name) for name in dict.fromkeys(filenames))
    pattern = re.compile(
        rf"{_label_pattern(filename)}(.*?)(?=(?:{next_label})|\Z)",
        re.IGNORECASE | re.DOTALL,
    )
    occurrence = list(filenames[:index]).count(filename)
    matches = list(pattern.finditer(raw_text))
    if occurrence >= len(matches):
        return None
    return _clean_segment(matches[occurrence].group(1)) or None


def extract_ordinal_line(
    raw_text: str, filename: str, index: int, filenames: Sequence[str]
) -> Optional[str]:
    """Capture the token on a line numbered with the image's position (``2. B``, ``2) 14``)."""
    pattern = re.compile(rf"^\s*{index + 1}[.)]\s+(\S+)", re.MULTILINE)
    match = pattern.search(raw_text)
    if not match:
        return None
    return _clean_segment(match.group(1).rstrip(".")) or None


def extract_positional_letter(
    raw_text: str, filename: str, index: int, filenames: Sequence[str]
) -> Optional[str]:
    """Take the index-th standalone choice letter (A-D) in the text."""
    letters = CHOICE_LETTER_PATTERN.findall(raw_text)
    if index < len(letters):
        return letters[index]
    return None


def extract_line_by_position(
    raw_text: str, filename: str, index: int, filenames: Sequence[str]
) -> Optional[str]:
    """Take the index-th non-blank line, reduced to a choice letter when it has one."""
    lines = [line.strip() for line in raw_text.splitlines() if line.strip()]
    if index >= len(lines):
        return None
    line = lines[index]
    letter = CHOICE_LETTER_PATTERN.search(line)
    return letter.group(1) if letter else line


DEFAULT_STRATEGIES: list[tuple[str, ExtractionStrategy]] = [
    ("labeled", extract_labeled_segment),
    ("ordinal", extract_ordinal_line),
    ("positional_letter", extract_positional_letter),
    ("line", extract_line_by_position),
]

FALLBACK_STRATEGY = "full_text"


class BatchDemultiplexer:
    """
    Recovers one answer per filename from a combined batch answer.

    Strategies are tried in order for each filename. If none yields text,
    the entire raw response is used and the answer is flagged ``ambiguous``.
    """

    def __init__(self, strategies: Optional[list[tuple[str, ExtractionStrategy]]] = None):
        self.strategies = list(strategies) if strategies is not None else list(DEFAULT_STRATEGIES)

    def demultiplex(self, batch: BatchCombinedAnswer) -> list[tuple[str, Answer]]:
        """
        Split a batch answer into ``(filename, Answer)`` pairs.

        Args:
            batch: Combined answer and the filenames it should cover

        Returns:
            One pair per filename, in the batch's filename order
        """
        if not batch.success:
            message = batch.error_message or "Unknown error"
            return [(name, Answer.failed(batch.model, message)) for name in batch.filenames]

        raw_text = batch.raw_text or ""
        return [
            (name, self._extract(batch, raw_text, name, index))
            for index, name in enumerate(batch.filenames)
        ]

    def _extract(
        self,
        batch: BatchCombinedAnswer,
        raw_text: str,
        filename: str,
        index: int,
    ) -> Answer:
        for strategy_name, strategy in self.strategies:
            text = strategy(raw_text, filename, index, batch.filenames)
            if text:
                logger.debug("%s: %s answered via %s", batch.model, filename, strategy_name)
                return Answer(
                    model=batch.model,
                    success=True,
                    text=text,
                    thinking=batch.thinking,
                    extraction=strategy_name,
                )

        logger.warning(
            "%s: could not isolate an answer for %s (image %d of %d); using the full response",
            batch.model,
            filename,
            index + 1,
            len(batch.filenames),
        )
        return Answer(
            model=batch.model,
            success=True,
            text=raw_text.strip(),
            thinking=batch.thinking,
            extraction=FALLBACK_STRATEGY,
            ambiguous=True,
        )
