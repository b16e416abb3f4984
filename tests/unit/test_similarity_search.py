"""Unit tests for similar-chunk lookup."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from cultural_chunker.models.chunk import Chunk, SensitivityTier
from cultural_chunker.services.similarity_search import (
    content_preview,
    find_similar_chunks,
    similarity_score,
)

MakeChunk = Callable[..., Chunk]


class TestScoring:
    def test_bonuses(self, make_chunk: MakeChunk) -> None:
        ref = make_chunk(0, keywords=["river", "land"])
        twin = make_chunk(1, keywords=["river", "land"])

        assert similarity_score(ref, twin) == pytest.approx(1.3)

    def test_no_overlap_different_tier_and_length(self, make_chunk: MakeChunk) -> None:
        ref = make_chunk(0, keywords=["river"])
        other = make_chunk(
            1, text="x" * 300, keywords=["clinic"], tier=SensitivityTier.SACRED
        )
        assert similarity_score(ref, other) == 0.0


class TestFindSimilarChunks:
    def test_ranking_and_filtering(self, make_chunk: MakeChunk) -> None:
        ref = make_chunk(0, keywords=["river", "land"])
        twin = make_chunk(1, keywords=["river", "land"])
        unrelated = make_chunk(
            2, text="y" * 300, keywords=["clinic"], tier=SensitivityTier.RESTRICTED
        )
        same_tier = make_chunk(3, keywords=["clinic"])

        results = find_similar_chunks(ref, [ref, twin, unrelated, same_tier])

        assert [r.chunk_id for r in results] == ["chunk-1", "chunk-3"]
        assert results[0].similarity_score == pytest.approx(1.3)
        assert results[1].similarity_score == pytest.approx(0.3)

    def test_limit_and_tie_order(self, make_chunk: MakeChunk) -> None:
        ref = make_chunk(0)
        candidates = [make_chunk(i) for i in range(5, 0, -1)]

        results = find_similar_chunks(ref, candidates, limit=2)

        assert [r.chunk_index for r in results] == [1, 2]

    def test_preview(self, make_chunk: MakeChunk) -> None:
        long_text = "word " * 60
        ref = make_chunk(0)
        results = find_similar_chunks(ref, [make_chunk(1, text=long_text)], min_score=0.0)

        assert results[0].content_preview == long_text[:100] + "..."
        assert content_preview("short") == "short..."
