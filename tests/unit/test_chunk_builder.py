"""Unit tests for the ChunkBuilder -- word-window chunking with fixed overlap."""

from __future__ import annotations

import pytest

from cultural_chunker.models.chunk import Chunk
from cultural_chunker.services.chunking.chunk_builder import ChunkBuilder
from cultural_chunker.services.chunking.segmenter import TextSegmenter
from cultural_chunker.utils.errors import ConfigurationError, ValidationError
from cultural_chunker.utils.text_normalizer import word_spans

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_FOUR_PARAGRAPHS = (
    "Alpha bravo charlie delta echo.\n\n"
    "Foxtrot golf hotel india juliet.\n\n"
    "Kilo lima mike november oscar.\n\n"
    "Papa quebec romeo sierra tango."
)


def _chunk(text: str, target: int = 500, overlap: int = 150, **kwargs) -> list[Chunk]:
    """Segment *text* and build chunks with a predictable configuration."""
    segments = TextSegmenter().segment(text)
    return ChunkBuilder(target_size=target, overlap_size=overlap).build_chunks(
        segments, text, "doc-1", **kwargs
    )


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestWindowing:
    def test_example_text_produces_two_chunks(self, example_text: str) -> None:
        chunks = _chunk(example_text, target=10, overlap=3)

        assert len(chunks) == 2
        assert chunks[0].text == (
            "Ceremony details are sacred. The clinic opens Monday. The clinic"
        )
        assert chunks[1].text == "Monday. The clinic serves 200 patients weekly."
        assert chunks[0].word_count == 10
        assert chunks[1].word_count == 7

    def test_short_text_is_one_chunk(self) -> None:
        text = "  A single short paragraph about the river.  "
        chunks = _chunk(text)

        assert len(chunks) == 1
        assert chunks[0].text == text.strip()
        assert chunks[0].document_id == "doc-1"

    def test_chunk_closes_at_segment_end(self) -> None:
        chunks = _chunk(_FOUR_PARAGRAPHS, target=12, overlap=2)
        segments = TextSegmenter().segment(_FOUR_PARAGRAPHS)

        assert len(chunks) == 2
        # Word 12 falls inside the third paragraph, which is kept whole.
        assert chunks[0].end_offset == segments[2].end_offset
        assert chunks[0].last_segment == 2
        assert chunks[0].word_count == 15
        assert chunks[1].first_segment == 2
        assert chunks[1].text.startswith("november oscar.")

    def test_oversized_segment_is_cut_at_word_budget(self) -> None:
        text = " ".join(f"word{i}" for i in range(30))
        chunks = _chunk(text, target=10, overlap=2)

        assert [c.word_count for c in chunks] == [10, 10, 10, 6]
        assert chunks[1].text.split()[0] == "word8"
        assert chunks[-1].text.split()[-1] == "word29"


class TestInvariants:
    def test_indices_are_contiguous(self, sample_document: str) -> None:
        chunks = _chunk(sample_document, target=30, overlap=8)
        assert [c.index for c in chunks] == list(range(len(chunks)))

    def test_consecutive_chunks_share_exactly_overlap_words(self, sample_document: str) -> None:
        overlap = 8
        chunks = _chunk(sample_document, target=30, overlap=overlap)

        assert len(chunks) > 2
        for prev, nxt in zip(chunks, chunks[1:]):
            assert prev.text.split()[-overlap:] == nxt.text.split()[:overlap]
            assert nxt.start_offset < prev.end_offset

    def test_every_word_is_covered(self, sample_document: str) -> None:
        chunks = _chunk(sample_document, target=30, overlap=8)

        for span in word_spans(sample_document):
            assert any(
                c.start_offset <= span.start and span.end <= c.end_offset for c in chunks
            ), f"word at {span.start} not covered"

    def test_text_matches_source_offsets(self, sample_document: str) -> None:
        chunks = _chunk(sample_document, target=30, overlap=8)

        for chunk in chunks:
            assert sample_document[chunk.start_offset:chunk.end_offset] == chunk.text

    def test_first_and_last_offsets(self, sample_document: str) -> None:
        chunks = _chunk(sample_document, target=30, overlap=8)
        words = word_spans(sample_document)

        assert chunks[0].start_offset == words[0].start
        assert chunks[-1].end_offset == words[-1].end

    def test_deterministic(self, sample_document: str) -> None:
        first = _chunk(sample_document, target=30, overlap=8)
        second = _chunk(sample_document, target=30, overlap=8)

        assert [(c.start_offset, c.end_offset, c.text) for c in first] == [
            (c.start_offset, c.end_offset, c.text) for c in second
        ]
        assert {c.chunk_id for c in first}.isdisjoint({c.chunk_id for c in second})


class TestPageRanges:
    def test_pages_follow_page_breaks(self) -> None:
        segments = TextSegmenter().segment(_FOUR_PARAGRAPHS)
        page_two = segments[2].start_offset

        chunks = _chunk(_FOUR_PARAGRAPHS, target=12, overlap=2, page_breaks=[page_two])

        assert (chunks[0].start_page, chunks[0].end_page) == (1, 2)
        assert (chunks[1].start_page, chunks[1].end_page) == (2, 2)

    def test_no_page_breaks_leaves_pages_unset(self) -> None:
        chunks = _chunk(_FOUR_PARAGRAPHS, target=12, overlap=2)
        assert all(c.start_page is None and c.end_page is None for c in chunks)


class TestErrors:
    @pytest.mark.parametrize(("target", "overlap"), [(10, 10), (10, 15), (0, 0)])
    def test_invalid_sizes(self, target: int, overlap: int) -> None:
        with pytest.raises(ConfigurationError):
            ChunkBuilder(target_size=target, overlap_size=overlap)

    def test_no_segments(self) -> None:
        assert ChunkBuilder().build_chunks([], "", "doc-1") == []

    def test_segments_beyond_text(self, sample_document: str) -> None:
        segments = TextSegmenter().segment(sample_document)
        with pytest.raises(ValidationError):
            ChunkBuilder().build_chunks(segments, sample_document[:50], "doc-1")
