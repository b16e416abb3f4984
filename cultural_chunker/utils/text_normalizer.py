"""Text tokenization and normalization helpers shared by the pipeline stages.

This module handles three distinct concerns:

1. **Offset-preserving word tokenization** -- The chunk builder counts
   words and places overlap boundaries by word, so every word keeps its
   exact ``(start, end)`` span in the source text.  Text is never rewritten
   before chunking; offsets must stay valid against the caller's original.

2. **Lexical statistics** -- Alphabetic term extraction, sentence counting
   and a vowel-group syllable heuristic used by the keyword / readability
   analyzer.

3. **Entity name normalization** -- Upstream entity extractors are noisy
   ("Uluru", "uluru ", "ULURU"), so names are normalized and fuzzily
   matched via rapidfuzz before the relationship builder compares chunks.
"""

import re
from typing import NamedTuple

from rapidfuzz import fuzz, process

# Any run of non-whitespace counts as one word.
_WORD = re.compile(r"\S+")

# Keyword candidates: plain alphabetic terms only (digits and punctuation
# are dropped, apostrophes split the word).
_TERM = re.compile(r"[a-z]+")

# Sentence terminators: a run of . ! ? followed by whitespace, a closing
# quote or bracket, or end of text ("?!" counts once, "3.5" not at all).
_SENTENCE_END = re.compile(r"[.!?]+(?=[\s\"')\]]|$)")

_VOWEL_GROUP = re.compile(r"[aeiouy]+")

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


class WordSpan(NamedTuple):
    """A single whitespace-delimited word and its span in the source text."""

    start: int
    end: int


def word_spans(text: str, offset: int = 0) -> list[WordSpan]:
    """Return the spans of every whitespace-delimited word in *text*.

    Args:
        text: Text to tokenize.
        offset: Added to every span, so segment-local text can report
            positions in the enclosing document.

    Returns:
        Word spans in document order.
    """
    return [WordSpan(m.start() + offset, m.end() + offset) for m in _WORD.finditer(text)]


def count_words(text: str) -> int:
    """Count whitespace-delimited words in *text*."""
    return sum(1 for _ in _WORD.finditer(text))


def extract_terms(text: str) -> list[str]:
    """Lowercase alphabetic terms of *text* in order of appearance."""
    return _TERM.findall(text.lower())


def count_sentences(text: str) -> int:
    """Count sentences as runs of terminal punctuation.

    Text with words but no terminal punctuation counts as one sentence.
    """
    if not text.strip():
        return 0
    found = len(_SENTENCE_END.findall(text))
    return max(1, found)


def count_paragraphs(text: str) -> int:
    """Count blank-line separated paragraphs that contain any text."""
    return sum(1 for part in _PARAGRAPH_BREAK.split(text) if part.strip())


def count_syllables(word: str) -> int:
    """Approximate the syllable count of an English *word*.

    Counts vowel groups (``y`` included), drops a silent trailing ``e``
    (but not ``-le`` as in "table"), and never returns less than 1 for a
    word containing letters.

    Args:
        word: A single word; case and non-letters are ignored.

    Returns:
        Estimated syllable count (0 for words without letters).
    """
    letters = re.sub(r"[^a-z]", "", word.lower())
    if not letters:
        return 0

    syllables = len(_VOWEL_GROUP.findall(letters))
    if (
        letters.endswith("e")
        and not letters.endswith(("le", "ee", "ye"))
        and syllables > 1
    ):
        syllables -= 1
    return max(1, syllables)


# ---------------------------------------------------------------------------
# Entity names
# ---------------------------------------------------------------------------

def normalize_entity_name(name: str) -> str:
    """Normalize an extracted entity name for comparison.

    Lowercases, strips possessive ``'s``, removes surrounding punctuation
    and collapses internal whitespace, so "Uluru's" and " ULURU " compare
    equal.

    Args:
        name: Raw entity name from an upstream extractor.

    Returns:
        Normalized name; empty string when nothing meaningful remains.
    """
    normalized = name.strip().lower()
    normalized = re.sub(r"['’]s\b", "", normalized)
    normalized = re.sub(r"\s+", " ", normalized)
    return normalized.strip(" \t\n.,;:!?\"'()[]{}")


def fuzzy_match(
    query: str,
    candidates: list[str],
    threshold: float = 0.9,
) -> tuple[str, float] | None:
    """Find the best fuzzy match for a query among candidates.

    Uses rapidfuzz ``token_sort_ratio`` which sorts tokens alphabetically
    before comparing, so "Mary Aunty" matches "Aunty Mary".

    Args:
        query: The name to look up.
        candidates: Names to match against.
        threshold: Minimum similarity in [0.0, 1.0].

    Returns:
        ``(best_candidate, score)`` with score in [0.0, 1.0], or ``None`` when
        no candidate reaches *threshold*.
    """
    if not candidates or not query:
        return None

    result = process.extractOne(
        query,
        candidates,
        scorer=fuzz.token_sort_ratio,
        score_cutoff=threshold * 100,
    )
    if result is None:
        return None

    match, score, _index = result
    return match, score / 100.0
