"""Paragraph- and sentence-aware text segmentation with exact offsets.

Splits raw document text into :class:`~cultural_chunker.models.chunk.Segment`
objects, the units the chunk builder accumulates into chunks.

The segmentation strategy has two key design goals:

1. **Paragraph-preserving** -- Paragraph breaks (blank-line runs) are the
   primary boundaries, so a segment never starts or ends mid-thought.

2. **Offset-exact** -- Every segment records ``start_offset``/``end_offset``
   into the caller's original text and nothing is rewritten.  Only the
   whitespace *between* segments is discarded, so the source can always be
   rebuilt from the segments plus that whitespace.

When a paragraph is too long to keep whole it is split at sentence
boundaries using an abbreviation-aware splitter that avoids breaking on
"Dr.", "vs.", initials, etc.  Segments shorter than the configured minimum
are merged into a neighbour rather than emitted alone.
"""

from __future__ import annotations

import re

import structlog

from cultural_chunker.models.chunk import Segment
from cultural_chunker.utils.errors import ConfigurationError
from cultural_chunker.utils.logging import get_logger
from cultural_chunker.utils.text_normalizer import count_words

logger: structlog.BoundLogger = get_logger(__name__)

# Common abbreviations that should NOT trigger a sentence split.
_ABBREVIATIONS = frozenset(
    {
        "Dr",
        "Mr",
        "Mrs",
        "Ms",
        "Prof",
        "Jr",
        "Sr",
        "St",
        "Mt",
        "Ave",
        "Vol",
        "No",
        "vs",
        "etc",
        "approx",
        "dept",
        "est",
        "govt",
        "Inc",
        "Ltd",
        "Co",
        "e.g",
        "i.e",
    }
)

_ABBREVIATION_PATTERN = re.compile(
    r"(?<![\w.])(?:"
    + "|".join(re.escape(a) for a in sorted(_ABBREVIATIONS, key=len, reverse=True))
    + r"|[A-Z])\."
)

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")

# Terminal punctuation (plus any closing quotes / brackets), followed by
# whitespace and a capital letter, optionally behind an opening quote.
_SENTENCE_BOUNDARY = re.compile(r"[.!?]+[\"'”’)\]]*(?=\s+[\"'“‘(\[]?[A-Z])")


class TextSegmenter:
    """Splits text into paragraph / sentence segments with exact offsets.

    Parameters
    ----------
    min_segment_chars:
        Segments shorter than this (in characters) are merged into the
        previous segment, or the next one when there is no previous.
    max_segment_chars:
        Paragraphs longer than this are split at sentence boundaries.
    """

    def __init__(self, min_segment_chars: int = 20, max_segment_chars: int = 1000) -> None:
        if min_segment_chars < 0:
            raise ConfigurationError("min_segment_chars must be >= 0", stage="segmentation")
        if max_segment_chars < 1:
            raise ConfigurationError("max_segment_chars must be >= 1", stage="segmentation")
        self._min_chars = min_segment_chars
        self._max_chars = max_segment_chars

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def segment(self, text: str) -> list[Segment]:
        """Split *text* into ordered, non-empty, offset-tracked segments.

        Parameters
        ----------
        text:
            The full document text.

        Returns
        -------
        list[Segment]
            Segments in document order with contiguous ``index`` values.
            Whitespace-only input returns an empty list.
        """
        if not text or not text.strip():
            return []

        pieces: list[tuple[int, int, int]] = []  # (start, end, paragraph_index)
        for para_index, (start, end) in enumerate(self._paragraph_spans(text)):
            if end - start > self._max_chars:
                pieces.extend(
                    (s, e, para_index) for s, e in self._sentence_spans(text, start, end)
                )
            else:
                pieces.append((start, end, para_index))

        merged = self._merge_short(pieces)
        segments = [
            Segment(
                index=i,
                text=text[start:end],
                start_offset=start,
                end_offset=end,
                paragraph_index=para_index,
                word_count=count_words(text[start:end]),
            )
            for i, (start, end, para_index) in enumerate(merged)
        ]

        logger.debug(
            "segmentation_complete",
            num_segments=len(segments),
            num_paragraphs=pieces[-1][2] + 1 if pieces else 0,
        )
        return segments

    # ------------------------------------------------------------------
    # Paragraph / sentence splitting
    # ------------------------------------------------------------------

    @staticmethod
    def _paragraph_spans(text: str) -> list[tuple[int, int]]:
        """Return trimmed, non-empty paragraph spans split on blank-line runs."""
        spans: list[tuple[int, int]] = []
        last = 0
        for match in _PARAGRAPH_BREAK.finditer(text):
            span = _trim(text, last, match.start())
            if span is not None:
                spans.append(span)
            last = match.end()
        span = _trim(text, last, len(text))
        if span is not None:
            spans.append(span)
        return spans

    @staticmethod
    def _sentence_spans(text: str, start: int, end: int) -> list[tuple[int, int]]:
        """Split ``text[start:end]`` at sentence boundaries.

        Periods after known abbreviations and single-letter initials are
        masked first (replaced by ``\\x00``, same length, so indices stay
        aligned with the original text).
        """
        paragraph = text[start:end]
        masked = _ABBREVIATION_PATTERN.sub(lambda m: m.group(0)[:-1] + "\x00", paragraph)

        spans: list[tuple[int, int]] = []
        last = 0
        for match in _SENTENCE_BOUNDARY.finditer(masked):
            span = _trim(text, start + last, start + match.end())
            if span is not None:
                spans.append(span)
            last = match.end()

        # Trailing text (ends at end-of-paragraph, with or without punctuation).
        span = _trim(text, start + last, end)
        if span is not None:
            spans.append(span)

        return spans if spans else [(start, end)]

    # ------------------------------------------------------------------
    # Short-segment merging
    # ------------------------------------------------------------------

    def _merge_short(self, pieces: list[tuple[int, int, int]]) -> list[tuple[int, int, int]]:
        """Merge pieces shorter than the minimum into a neighbour.

        A short piece extends the previous segment; a short *leading* piece
        is carried forward and merged into the next one.  When every piece
        is short, the whole run becomes a single segment.
        """
        merged: list[tuple[int, int, int]] = []
        carry: tuple[int, int] | None = None  # (start, paragraph_index)
        last_end = 0

        for start, end, para_index in pieces:
            if carry is not None:
                start, para_index = carry
                carry = None
            last_end = end

            if end - start < self._min_chars:
                if merged:
                    prev_start, _prev_end, prev_para = merged[-1]
                    merged[-1] = (prev_start, end, prev_para)
                else:
                    carry = (start, para_index)
                continue

            merged.append((start, end, para_index))

        if carry is not None:
            merged.append((carry[0], last_end, carry[1]))

        return merged


def _trim(text: str, start: int, end: int) -> tuple[int, int] | None:
    """Shrink ``[start, end)`` to exclude surrounding whitespace."""
    while start < end and text[start].isspace():
        start += 1
    while end > start and text[end - 1].isspace():
        end -= 1
    if start >= end:
        return None
    return start, end
