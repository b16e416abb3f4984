"""Unit tests for tokenization, lexical counts and entity-name helpers."""

from __future__ import annotations

import pytest

from cultural_chunker.utils.text_normalizer import (
    count_paragraphs,
    count_sentences,
    count_syllables,
    count_words,
    extract_terms,
    fuzzy_match,
    normalize_entity_name,
    word_spans,
)


class TestWordSpans:
    def test_spans_index_the_source(self) -> None:
        text = "  two  words "
        spans = word_spans(text)
        assert [text[s.start:s.end] for s in spans] == ["two", "words"]

    def test_offset(self) -> None:
        assert word_spans("a b", offset=10)[1].start == 12

    def test_count_words(self) -> None:
        assert count_words("one\ttwo\nthree  four") == 4


class TestLexicalCounts:
    def test_extract_terms(self) -> None:
        assert extract_terms("Don't stop 2 Believe!") == ["don", "t", "stop", "believe"]

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("", 0),
            ("No punctuation at all", 1),
            ("One. Two! Three?", 3),
            ("Really?! Yes.", 2),
            ("Pi is 3.14 roughly.", 1),
        ],
    )
    def test_count_sentences(self, text: str, expected: int) -> None:
        assert count_sentences(text) == expected

    def test_count_paragraphs(self) -> None:
        assert count_paragraphs("a\n\nb\n \nc") == 3
        assert count_paragraphs("   ") == 0

    @pytest.mark.parametrize(
        ("word", "expected"),
        [
            ("the", 1),
            ("make", 1),
            ("table", 2),
            ("rhythm", 1),
            ("beautiful", 3),
            ("Ceremony,", 4),
            ("200", 0),
        ],
    )
    def test_count_syllables(self, word: str, expected: int) -> None:
        assert count_syllables(word) == expected


class TestEntityNames:
    def test_normalize(self) -> None:
        assert normalize_entity_name("  ULURU's ") == "uluru"
        assert normalize_entity_name("Kata   Tjuta.") == "kata tjuta"
        assert normalize_entity_name(" ... ") == ""

    def test_fuzzy_match_token_order(self) -> None:
        match = fuzzy_match("mary aunty", ["aunty mary", "uncle jim"])
        assert match is not None
        assert match[0] == "aunty mary"
        assert match[1] == pytest.approx(1.0)

    def test_fuzzy_match_below_threshold(self) -> None:
        assert fuzzy_match("uluru", ["kata tjuta"]) is None
        assert fuzzy_match("uluru", []) is None
