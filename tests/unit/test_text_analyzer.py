"""Unit tests for the TextAnalyzer -- keywords, readability, statistics, structure."""

from __future__ import annotations

import pytest

from cultural_chunker.models.chunk import ContentType
from cultural_chunker.services.text_analyzer import (
    TextAnalyzer,
    detect_structure,
    flesch_reading_ease,
)
from cultural_chunker.utils.errors import AnalysisError


class TestKeywords:
    def test_ranked_by_frequency_then_first_occurrence(self) -> None:
        analyzer = TextAnalyzer(keyword_count=3)
        keywords = analyzer.extract_keywords("river river river land land water sky")
        assert keywords == ["river", "land", "water"]

    def test_stopwords_and_short_terms_removed(self) -> None:
        assert TextAnalyzer().extract_keywords("The and of it is to be at on") == []

    def test_digits_are_not_keywords(self) -> None:
        assert TextAnalyzer().extract_keywords("2024 2024 year") == ["year"]

    def test_default_keeps_five(self, sample_document: str) -> None:
        keywords = TextAnalyzer().extract_keywords(sample_document)
        assert len(keywords) == 5
        assert keywords[0] == "clinic"


class TestReadability:
    def test_empty_text_scores_zero(self) -> None:
        assert TextAnalyzer().analyze("").readability_score == 0.0

    def test_simple_text_clamped_to_100(self) -> None:
        assert TextAnalyzer().analyze("The cat sat.").readability_score == 100.0

    def test_score_in_range(self, sample_document: str) -> None:
        score = TextAnalyzer().analyze(sample_document).readability_score
        assert 0.0 <= score <= 100.0

    def test_formula(self) -> None:
        # 206.835 - 1.015 * 10 - 84.6 * 1.5
        assert flesch_reading_ease(20, 2, 30) == pytest.approx(69.785)

    def test_formula_without_words(self) -> None:
        assert flesch_reading_ease(0, 0, 0) == 0.0


class TestStatistics:
    def test_counts(self) -> None:
        text = "One sentence here. Another one!\n\nNew paragraph."
        stats = TextAnalyzer().analyze(text).statistics

        assert stats.word_count == 7
        assert stats.sentence_count == 3
        assert stats.paragraph_count == 2
        assert stats.char_count == len(text)
        assert stats.avg_words_per_sentence == pytest.approx(2.33)


class TestStructure:
    def test_plain_text_is_narrative(self) -> None:
        structure = detect_structure("Just an ordinary paragraph of prose.")
        assert structure.content_type == ContentType.NARRATIVE
        assert not structure.has_headers
        assert not structure.has_bullet_points

    def test_bullets_are_a_list(self) -> None:
        structure = detect_structure("Items:\n1. first\n2. second")
        assert structure.has_bullet_points
        assert structure.content_type == ContentType.LIST

    def test_headers_and_bullets_are_mixed(self) -> None:
        structure = detect_structure("# Title\n- item one\n- item two")
        assert structure.has_headers
        assert structure.content_type == ContentType.MIXED

    def test_underlined_header(self) -> None:
        assert detect_structure("Heading\n=======\nBody text here.").has_headers

    def test_pipe_table(self) -> None:
        structure = detect_structure("| a | b |\n| 1 | 2 |")
        assert structure.content_type == ContentType.TABLE

    def test_quotes(self) -> None:
        assert detect_structure('She said "this is a long quoted passage" to us.').has_quotes
        assert not detect_structure('A "short" word.').has_quotes


class TestAnalyze:
    def test_analysis_is_deterministic(self, sample_document: str) -> None:
        analyzer = TextAnalyzer()
        assert analyzer.analyze(sample_document) == analyzer.analyze(sample_document)

    def test_non_string_raises(self) -> None:
        with pytest.raises(AnalysisError):
            TextAnalyzer().analyze(42)  # type: ignore[arg-type]
