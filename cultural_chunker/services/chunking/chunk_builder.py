"""Sliding-window chunk construction with fixed word overlap.

Groups :class:`~cultural_chunker.models.chunk.Segment` objects into
overlapping :class:`~cultural_chunker.models.chunk.Chunk` windows sized in
words (default 500 words with a 150-word overlap, ~30%).

The window slides with a fixed *overlap*, not a fixed stride:

1. Accumulate segments until the running word count reaches the target,
   then close the chunk at the end of the segment that reached it.
2. Start the next chunk by re-including the trailing ``overlap_size``
   words of the chunk just closed, so consecutive chunks always share
   exactly that many words.

When a single segment is longer than the whole budget (a run-on paragraph
with no sentence punctuation) the chunk is cut at the word budget inside
that segment instead, so no chunk grows beyond twice the target.

Offsets come from the words themselves, so a chunk's text is always
``source[start_offset:end_offset]`` and every non-whitespace character of
the source lands in at least one chunk.
"""

from __future__ import annotations

import bisect
import uuid
from collections.abc import Sequence

import structlog

from cultural_chunker.models.chunk import Chunk, Segment
from cultural_chunker.utils.errors import ConfigurationError, ValidationError
from cultural_chunker.utils.logging import get_logger
from cultural_chunker.utils.text_normalizer import WordSpan, word_spans

logger: structlog.BoundLogger = get_logger(__name__)


class ChunkBuilder:
    """Builds overlapping, position-tracked chunks from segments.

    Parameters
    ----------
    target_size:
        Target word count per chunk (default 500).
    overlap_size:
        Words re-included from the previous chunk (default 150).  Must be
        smaller than *target_size*.
    """

    def __init__(self, target_size: int = 500, overlap_size: int = 150) -> None:
        if target_size < 1:
            raise ConfigurationError("target_size must be >= 1", stage="chunking")
        if overlap_size < 0:
            raise ConfigurationError("overlap_size must be >= 0", stage="chunking")
        if overlap_size >= target_size:
            raise ConfigurationError(
                f"overlap_size ({overlap_size}) must be smaller than target_size ({target_size})",
                stage="chunking",
            )
        self._target = target_size
        self._overlap = overlap_size

    @property
    def target_size(self) -> int:
        return self._target

    @property
    def overlap_size(self) -> int:
        return self._overlap

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build_chunks(
        self,
        segments: Sequence[Segment],
        text: str,
        document_id: str,
        page_breaks: Sequence[int] | None = None,
    ) -> list[Chunk]:
        """Group *segments* of *text* into overlapping chunks.

        Parameters
        ----------
        segments:
            Output of :meth:`TextSegmenter.segment` for *text*.
        text:
            The source text the segment offsets point into.
        document_id:
            Identifier copied onto every chunk.
        page_breaks:
            Optional sorted character offsets at which a new page starts;
            used to fill ``start_page`` / ``end_page`` (1-based).

        Returns
        -------
        list[Chunk]
            Pre-classification chunks with contiguous ``index`` from 0.
            No segments returns an empty list.

        Raises
        ------
        ValidationError
            If a segment's offsets fall outside *text*.
        """
        if not segments:
            return []
        if segments[-1].end_offset > len(text):
            raise ValidationError(
                "Segment offsets exceed the length of the source text", stage="chunking"
            )

        words: list[WordSpan] = []
        word_segment: list[int] = []  # segment position of each word
        segment_end: list[int] = []   # exclusive word index where each segment ends
        for position, seg in enumerate(segments):
            spans = word_spans(seg.text, offset=seg.start_offset)
            words.extend(spans)
            word_segment.extend([position] * len(spans))
            segment_end.append(len(words))

        if not words:
            return []

        breaks = sorted(page_breaks) if page_breaks else None
        chunks: list[Chunk] = []
        start = 0
        total = len(words)

        while True:
            end = self._window_end(start, total, word_segment, segment_end)
            chunks.append(
                self._make_chunk(
                    index=len(chunks),
                    text=text,
                    document_id=document_id,
                    first_word=words[start],
                    last_word=words[end - 1],
                    word_count=end - start,
                    first_segment=segments[word_segment[start]].index,
                    last_segment=segments[word_segment[end - 1]].index,
                    page_breaks=breaks,
                )
            )
            if end >= total:
                break
            # Slide: re-include the trailing overlap words of the closed chunk.
            start = end - self._overlap

        logger.debug(
            "chunking_complete",
            document_id=document_id,
            num_chunks=len(chunks),
            total_words=total,
            target_size=self._target,
            overlap_size=self._overlap,
        )
        return chunks

    # ------------------------------------------------------------------
    # Window placement
    # ------------------------------------------------------------------

    def _window_end(
        self,
        start: int,
        total: int,
        word_segment: list[int],
        segment_end: list[int],
    ) -> int:
        """Return the exclusive end word index of the window starting at *start*."""
        budget_end = start + self._target
        if budget_end >= total:
            return total

        # The segment holding the word that reaches the target closes the chunk.
        position = word_segment[budget_end - 1]
        seg_start = segment_end[position - 1] if position > 0 else 0
        if segment_end[position] - seg_start > self._target:
            return budget_end
        return segment_end[position]

    def _make_chunk(
        self,
        *,
        index: int,
        text: str,
        document_id: str,
        first_word: WordSpan,
        last_word: WordSpan,
        word_count: int,
        first_segment: int,
        last_segment: int,
        page_breaks: list[int] | None,
    ) -> Chunk:
        start_offset = first_word.start
        end_offset = last_word.end
        start_page = end_page = None
        if page_breaks is not None:
            start_page = bisect.bisect_right(page_breaks, start_offset) + 1
            end_page = bisect.bisect_right(page_breaks, end_offset - 1) + 1

        return Chunk(
            chunk_id=str(uuid.uuid4()),
            document_id=document_id,
            index=index,
            start_offset=start_offset,
            end_offset=end_offset,
            text=text[start_offset:end_offset],
            word_count=word_count,
            first_segment=first_segment,
            last_segment=last_segment,
            start_page=start_page,
            end_page=end_page,
        )
