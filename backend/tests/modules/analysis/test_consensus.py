"""Tests for the consensus analyzer."""

import pytest

from modules.analysis.consensus import (
    ConsensusAnalyzer,
    answers_equivalent,
    normalize_answer,
    word_overlap,
)
from modules.analysis.models import AnswerStatus
from tests.conftest import failed, ok


@pytest.fixture
def analyzer() -> ConsensusAnalyzer:
    return ConsensusAnalyzer()


class TestNormalizeAnswer:
    def test_lowercases_and_strips(self):
        assert normalize_answer("  B \n") == "b"

    def test_none_becomes_empty(self):
        assert normalize_answer(None) == ""


class TestWordOverlap:
    def test_identical(self):
        assert word_overlap("the cat sat", "the cat sat") == 1.0

    def test_partial(self):
        assert word_overlap("the cat sat down", "the cat stood up") == 0.5

    def test_repeated_words_count_once(self):
        # {"yes"} vs {"yes", "no"}: one shared distinct word over two
        assert word_overlap("yes yes yes", "yes no") == 0.5

    def test_empty(self):
        assert word_overlap("", "") == 0.0


class TestAnswersEquivalent:
    def test_short_answers_need_exact_match(self):
        assert answers_equivalent("a", "a")
        assert not answers_equivalent("a", "b")
        assert not answers_equivalent("12", "12.0")

    def test_short_regime_ignores_word_overlap(self):
        # "x y" and "x z" share half their words but are both short
        assert not answers_equivalent("x y", "x z")

    def test_long_answers_need_more_than_80_percent_overlap(self):
        a = "the answer is forty two units"
        b = "the answer is forty two meters"
        # 5 of 6 distinct words shared
        assert answers_equivalent(a, b)

    def test_exactly_80_percent_is_not_enough(self):
        a = "one two three four five"
        b = "one two three four six"
        assert word_overlap(a, b) == 0.8
        assert not answers_equivalent(a, b)

    def test_short_against_long_uses_overlap(self):
        assert not answers_equivalent("a", "a is the correct option")

    def test_self_match(self):
        assert answers_equivalent("a rather long answer", "a rather long answer")


class TestConsensusAnalyzer:
    def test_all_failed(self, analyzer):
        answers = [failed("timeout", "m1"), failed("rate limited", "m2")]

        result = analyzer.analyze(answers)

        assert [a.status for a in result] == [AnswerStatus.ERROR, AnswerStatus.ERROR]
        assert all(a.match_count is None for a in result)
        assert [a.error_message for a in result] == ["timeout", "rate limited"]

    def test_single_success_is_consensus(self, analyzer):
        result = analyzer.analyze([ok("C")])

        assert result[0].status == AnswerStatus.CONSENSUS
        assert result[0].match_count == 1

    def test_normalized_short_answers_agree(self, analyzer):
        result = analyzer.analyze([ok("A", "m1"), ok("a ", "m2")])

        assert [a.status for a in result] == [AnswerStatus.CONSENSUS, AnswerStatus.CONSENSUS]
        assert [a.match_count for a in result] == [2, 2]

    def test_two_of_three(self, analyzer):
        result = analyzer.analyze([ok("A", "m1"), ok("A", "m2"), ok("B", "m3")])

        assert [a.status for a in result] == [
            AnswerStatus.PARTIAL,
            AnswerStatus.PARTIAL,
            AnswerStatus.DIFFERENT,
        ]
        assert [a.match_count for a in result] == [2, 2, 1]

    def test_two_disagreeing_answers(self, analyzer):
        result = analyzer.analyze([ok("42"), ok("24")])

        assert [a.status for a in result] == [AnswerStatus.DIFFERENT, AnswerStatus.DIFFERENT]

    def test_failure_does_not_block_consensus(self, analyzer):
        result = analyzer.analyze([ok("D", "m1"), failed("boom", "m2"), ok("d", "m3")])

        assert result[0].status == AnswerStatus.CONSENSUS
        assert result[0].match_count == 2
        assert result[1].status == AnswerStatus.ERROR
        assert result[2].status == AnswerStatus.CONSENSUS

    def test_preserves_input_order(self, analyzer):
        answers = [failed("boom", "m1"), ok("A", "m2"), ok("B", "m3")]

        result = analyzer.analyze(answers)

        assert [a.model for a in result] == ["m1", "m2", "m3"]

    def test_does_not_mutate_input(self, analyzer):
        answers = [ok("A"), ok("A")]

        analyzer.analyze(answers)

        assert all(a.status is None and a.match_count is None for a in answers)

    def test_idempotent(self, analyzer):
        answers = [ok("A", "m1"), ok("A", "m2"), ok("B", "m3"), failed("x", "m4")]

        first = analyzer.analyze(answers)
        second = analyzer.analyze(first)

        assert second == first

    def test_stale_tags_are_ignored(self, analyzer):
        stale = ok("B").model_copy(update={"status": AnswerStatus.CONSENSUS, "match_count": 9})

        result = analyzer.analyze([ok("A"), stale])

        assert result[1].status == AnswerStatus.DIFFERENT
        assert result[1].match_count == 1

    def test_long_answers_with_minor_phrasing_difference(self, analyzer):
        result = analyzer.analyze([
            ok("the mitochondria is the powerhouse of the cell"),
            ok("The mitochondria is the powerhouse of a cell"),
        ])

        assert all(a.status == AnswerStatus.CONSENSUS for a in result)

    def test_empty_input(self, analyzer):
        assert analyzer.analyze([]) == []

    def test_custom_thresholds(self):
        lenient = ConsensusAnalyzer(overlap_threshold=0.4)

        result = lenient.analyze([ok("the cat sat down"), ok("the cat stood up")])

        assert all(a.status == AnswerStatus.CONSENSUS for a in result)
