"""Similar-chunk lookup by keyword overlap, tier and length.

A lightweight ranking used when a reviewer opens one chunk and wants to see
its neighbours in the same document (or across a caller-assembled set of
chunks).  No embeddings: the score is keyword Jaccard plus small bonuses
for matching sensitivity tier and comparable length.
"""

from __future__ import annotations

from collections.abc import Iterable

from cultural_chunker.models.chunk import Chunk
from cultural_chunker.models.relationship import SimilarChunk
from cultural_chunker.services.relationship_builder import jaccard

_SAME_TIER_BONUS = 0.2
_SIMILAR_LENGTH_BONUS = 0.1
_SIMILAR_LENGTH_CHARS = 100
_PREVIEW_CHARS = 100


def similarity_score(chunk: Chunk, other: Chunk) -> float:
    """Score how similar *other* is to *chunk*.

    Keyword Jaccard, +0.2 when both share a sensitivity tier, +0.1 when
    their character lengths differ by fewer than 100.
    """
    score = jaccard(set(chunk.keywords), set(other.keywords))
    if chunk.sensitivity_level == other.sensitivity_level:
        score += _SAME_TIER_BONUS
    if abs(chunk.char_count - other.char_count) < _SIMILAR_LENGTH_CHARS:
        score += _SIMILAR_LENGTH_BONUS
    return score


def content_preview(text: str) -> str:
    """First 100 characters of *text* followed by ``...``."""
    return text[:_PREVIEW_CHARS] + "..."


def find_similar_chunks(
    chunk: Chunk,
    candidates: Iterable[Chunk],
    limit: int = 10,
    min_score: float = 0.1,
) -> list[SimilarChunk]:
    """Rank *candidates* by similarity to *chunk*.

    Args:
        chunk: The reference chunk.
        candidates: Chunks to rank; *chunk* itself is skipped.
        limit: Maximum number of results.
        min_score: Candidates scoring below this are dropped.

    Returns:
        Up to *limit* matches, highest score first, ties by chunk index.
    """
    scored: list[SimilarChunk] = []
    for other in candidates:
        if other.chunk_id == chunk.chunk_id:
            continue
        score = similarity_score(chunk, other)
        if score < min_score:
            continue
        scored.append(
            SimilarChunk(
                chunk_id=other.chunk_id,
                chunk_index=other.index,
                similarity_score=round(score, 4),
                content_preview=content_preview(other.text),
            )
        )

    scored.sort(key=lambda s: (-s.similarity_score, s.chunk_index))
    return scored[:max(0, limit)]
