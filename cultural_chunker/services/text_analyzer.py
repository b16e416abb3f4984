"""Keyword extraction, readability scoring and structure detection.

Everything here is frequency- and regex-based: no models, no network, no
external corpora.  The same text always yields the same analysis, which is
what lets the relationship builder compare keyword sets across runs.
"""

from __future__ import annotations

import re
from collections import Counter

import structlog

from cultural_chunker.models.chunk import (
    ChunkStructure,
    ContentType,
    TextAnalysis,
    TextStatistics,
)
from cultural_chunker.utils.errors import AnalysisError
from cultural_chunker.utils.logging import get_logger
from cultural_chunker.utils.text_normalizer import (
    count_paragraphs,
    count_sentences,
    count_syllables,
    count_words,
    extract_terms,
)

logger: structlog.BoundLogger = get_logger(__name__)

# English function words plus a handful of generic document words that
# would otherwise dominate every chunk's keyword list.
STOPWORDS: frozenset[str] = frozenset(
    {
        "a", "about", "above", "after", "again", "against", "all", "also", "am",
        "an", "and", "any", "are", "as", "at", "be", "because", "been", "before",
        "being", "below", "between", "both", "but", "by", "can", "could", "did",
        "do", "does", "doing", "down", "during", "each", "even", "every", "few",
        "for", "from", "further", "had", "has", "have", "having", "he", "her",
        "here", "hers", "herself", "him", "himself", "his", "how", "however",
        "i", "if", "in", "into", "is", "it", "its", "itself", "just", "like",
        "many", "may", "me", "might", "more", "most", "much", "must", "my",
        "myself", "no", "nor", "not", "now", "of", "off", "on", "once", "one",
        "only", "or", "other", "our", "ours", "ourselves", "out", "over", "own",
        "same", "shall", "she", "should", "since", "so", "some", "such", "than",
        "that", "the", "their", "theirs", "them", "themselves", "then", "there",
        "these", "they", "this", "those", "through", "thus", "to", "too",
        "under", "until", "up", "upon", "us", "very", "was", "we", "were",
        "what", "when", "where", "whether", "which", "while", "who", "whom",
        "whose", "why", "will", "with", "within", "without", "would", "yet",
        "you", "your", "yours", "yourself", "yourselves",
    }
)

_MIN_KEYWORD_LENGTH = 3

_MARKDOWN_HEADER = re.compile(r"^#{1,6}\s+\S.*$", re.MULTILINE)
_UNDERLINED_HEADER = re.compile(r"^[^\n]*\S[^\n]*\n[=\-]{3,}[ \t]*$", re.MULTILINE)
_BULLET = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+\S", re.MULTILINE)
_QUOTE = re.compile(r"[\"“][^\"“”]{10,}[\"”]")
_TABLE_ROW = re.compile(r"^\s*\|.*\|\s*$", re.MULTILINE)


def is_keyword_candidate(term: str) -> bool:
    """True when *term* is long enough and not a stopword."""
    return len(term) >= _MIN_KEYWORD_LENGTH and term not in STOPWORDS


def content_terms(text: str) -> list[str]:
    """Lowercase, stopword-filtered alphabetic terms of *text* in order."""
    return [t for t in extract_terms(text) if is_keyword_candidate(t)]


def flesch_reading_ease(words: int, sentences: int, syllables: int) -> float:
    """Flesch reading ease clamped to ``[0, 100]``; ``0.0`` without words."""
    if words == 0 or sentences == 0:
        return 0.0
    score = 206.835 - 1.015 * (words / sentences) - 84.6 * (syllables / words)
    return max(0.0, min(100.0, score))


def detect_structure(text: str) -> ChunkStructure:
    """Detect headers, lists, quotes and tables in *text*.

    The content type is ``table`` when two or more pipe-delimited rows are
    present, ``mixed`` when headers and lists both appear, ``list`` for
    lists alone and ``narrative`` otherwise.
    """
    has_headers = bool(_MARKDOWN_HEADER.search(text) or _UNDERLINED_HEADER.search(text))
    has_bullets = bool(_BULLET.search(text))
    has_quotes = bool(_QUOTE.search(text))

    if len(_TABLE_ROW.findall(text)) >= 2:
        content_type = ContentType.TABLE
    elif has_headers and has_bullets:
        content_type = ContentType.MIXED
    elif has_bullets:
        content_type = ContentType.LIST
    else:
        content_type = ContentType.NARRATIVE

    return ChunkStructure(
        has_headers=has_headers,
        has_bullet_points=has_bullets,
        has_quotes=has_quotes,
        content_type=content_type,
    )


class TextAnalyzer:
    """Computes keywords, readability, statistics and structure for a chunk.

    Parameters
    ----------
    keyword_count:
        Number of keywords kept per chunk (default 5).
    """

    def __init__(self, keyword_count: int = 5) -> None:
        self._keyword_count = keyword_count

    def extract_keywords(self, text: str) -> list[str]:
        """Top keywords of *text* by frequency, ties broken by first occurrence."""
        counts = Counter(content_terms(text))
        # Counter preserves insertion order and most_common() is a stable
        # sort, so equal counts keep first-occurrence order.
        return [term for term, _ in counts.most_common(self._keyword_count)]

    def analyze(self, text: str) -> TextAnalysis:
        """Analyze *text*.

        Parameters
        ----------
        text:
            Chunk text.

        Returns
        -------
        TextAnalysis
            Keywords, Flesch readability score, statistics and structure.

        Raises
        ------
        AnalysisError
            If *text* is not a string.
        """
        if not isinstance(text, str):
            raise AnalysisError(f"Expected str, got {type(text).__name__}", stage="analysis")

        raw_words = text.split()
        words = count_words(text)
        sentences = count_sentences(text)
        syllables = sum(count_syllables(w) for w in raw_words)
        lettered_words = sum(1 for w in raw_words if any(c.isalpha() for c in w))

        statistics = TextStatistics(
            word_count=words,
            char_count=len(text),
            sentence_count=sentences,
            paragraph_count=count_paragraphs(text),
            avg_words_per_sentence=round(words / sentences, 2) if sentences else 0.0,
            avg_syllables_per_word=round(syllables / lettered_words, 2) if lettered_words else 0.0,
        )

        return TextAnalysis(
            keywords=self.extract_keywords(text),
            readability_score=round(flesch_reading_ease(words, sentences, syllables), 2),
            statistics=statistics,
            structure=detect_structure(text),
        )
