"""
Consensus analysis over the answers several models gave for one image.

Answers are compared with a two-regime lexical rule keyed on length:
short answers (a letter, a small number) must match exactly, longer ones
are compared by word overlap. Output preserves input order.
"""

import logging
from typing import Sequence

from .models import Answer, AnswerStatus

logger = logging.getLogger(__name__)

SHORT_ANSWER_MAX_LENGTH = 5
OVERLAP_THRESHOLD = 0.8


def normalize_answer(text: str | None) -> str:
    """Lowercase and strip an answer for comparison."""
    return (text or "").strip().lower()


def word_overlap(a: str, b: str) -> float:
    """Fraction of distinct words shared by two texts.

    Both the shared count and the denominator use distinct words, so a word
    repeated in one answer does not inflate the score.

    Returns:
        |words(a) & words(b)| / max(|words(a)|, |words(b)|), or 0.0 if both are empty
    """
    words_a = set(a.split())
    words_b = set(b.split())
    longest = max(len(words_a), len(words_b))
    if longest == 0:
        return 0.0
    return len(words_a & words_b) / longest


def answers_equivalent(
    a: str,
    b: str,
    short_max_length: int = SHORT_ANSWER_MAX_LENGTH,
    overlap_threshold: float = OVERLAP_THRESHOLD,
) -> bool:
    """Decide whether two normalized answers agree."""
    if a == b:
        return True
    if len(a) <= short_max_length and len(b) <= short_max_length:
        return False
    return word_overlap(a, b) > overlap_threshold


class ConsensusAnalyzer:
    """
    Assigns each answer a status and match count relative to its siblings.

    The result is a pure function of each answer's (text, success) pair:
    any status or match count already present on the input is ignored.
    """

    def __init__(
        self,
        short_max_length: int = SHORT_ANSWER_MAX_LENGTH,
        overlap_threshold: float = OVERLAP_THRESHOLD,
    ):
        self.short_max_length = short_max_length
        self.overlap_threshold = overlap_threshold

    def equivalent(self, a: str, b: str) -> bool:
        return answers_equivalent(a, b, self.short_max_length, self.overlap_threshold)

    def analyze(self, answers: Sequence[Answer]) -> list[Answer]:
        """
        Tag every answer with a status and, for successful ones, a match count.

        Args:
            answers: All answers for one image, one per model

        Returns:
            New Answer objects in the same order as the input
        """
        ok_indices = [i for i, a in enumerate(answers) if a.success]

        if not ok_indices:
            logger.debug("No successful answers among %d; all tagged as error", len(answers))
            return [self._as_error(a) for a in answers]

        texts = {i: normalize_answer(answers[i].text) for i in ok_indices}
        total_ok = len(ok_indices)

        analyzed: list[Answer] = []
        for i, answer in enumerate(answers):
            if not answer.success:
                analyzed.append(self._as_error(answer))
                continue

            match_count = sum(1 for j in ok_indices if self.equivalent(texts[i], texts[j]))
            if match_count == total_ok:
                status = AnswerStatus.CONSENSUS
            elif match_count > 1:
                status = AnswerStatus.PARTIAL
            else:
                status = AnswerStatus.DIFFERENT

            logger.debug("%s: %d/%d matches -> %s", answer.model, match_count, total_ok, status.value)
            analyzed.append(answer.model_copy(update={"status": status, "match_count": match_count}))

        return analyzed

    @staticmethod
    def _as_error(answer: Answer) -> Answer:
        return answer.model_copy(update={"status": AnswerStatus.ERROR, "match_count": None})
