"""Pairwise relationship detection between the chunks of one document.

Runs once per document, after every chunk has been classified and
analyzed.  Each unordered chunk pair ``(i, j)`` with ``i < j`` is compared
exactly once; the lower-index chunk becomes the source.  Three signals are
checked per pair:

    shared_entity        Jaccard overlap of the chunks' entity sets
    co_occurrence        shared keywords / size of the smaller keyword set
    semantic_similarity  cosine similarity of term-frequency vectors

A relationship whose strength falls below the threshold is not emitted at
all.  Sparse data (no keywords, no entities) simply produces no links;
nothing in here raises on degenerate input.
"""

from __future__ import annotations

import math
import uuid
from collections import Counter
from collections.abc import Sequence

import structlog

from cultural_chunker.models.chunk import Chunk
from cultural_chunker.models.relationship import ChunkRelationship, RelationshipType
from cultural_chunker.services.text_analyzer import content_terms
from cultural_chunker.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)

_SEMANTIC_EVIDENCE_TERMS = 5


def jaccard(a: set[str] | frozenset[str], b: set[str] | frozenset[str]) -> float:
    """Jaccard similarity of two sets; ``0.0`` when both are empty."""
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def cosine_similarity(a: Counter[str], b: Counter[str]) -> float:
    """Cosine similarity of two term-frequency vectors."""
    if not a or not b:
        return 0.0
    dot = sum(count * b[term] for term, count in a.items() if term in b)
    if dot == 0:
        return 0.0
    norm_a = math.sqrt(sum(c * c for c in a.values()))
    norm_b = math.sqrt(sum(c * c for c in b.values()))
    return dot / (norm_a * norm_b)


class RelationshipBuilder:
    """Derives typed, weighted links between chunks.

    Parameters
    ----------
    threshold:
        Minimum strength for any emitted relationship (default 0.15).
    min_shared_keywords:
        Shared keywords required before a co-occurrence link is considered.
    semantic_threshold:
        Minimum cosine similarity for a semantic-similarity link; ``None``
        turns that link type off.
    """

    def __init__(
        self,
        threshold: float = 0.15,
        min_shared_keywords: int = 2,
        semantic_threshold: float | None = 0.5,
    ) -> None:
        self._threshold = threshold
        self._min_shared = min_shared_keywords
        # A semantic link must clear both its own threshold and the global one.
        self._semantic_floor = (
            max(threshold, semantic_threshold) if semantic_threshold is not None else None
        )

    def build_relationships(self, chunks: Sequence[Chunk]) -> list[ChunkRelationship]:
        """Compare every chunk pair and return the links that clear the threshold.

        Parameters
        ----------
        chunks:
            Classified chunks of a single document, in index order.

        Returns
        -------
        list[ChunkRelationship]
            Ordered by pair (source index, then target index), then by
            relationship type.  Fewer than two chunks yields an empty list.
        """
        if len(chunks) < 2:
            return []

        entity_sets = [frozenset(c.entities) for c in chunks]
        keyword_sets = [frozenset(c.keywords) for c in chunks]
        term_vectors: list[Counter[str]] = (
            [Counter(content_terms(c.text)) for c in chunks]
            if self._semantic_floor is not None
            else []
        )

        relationships: list[ChunkRelationship] = []
        for i in range(len(chunks)):
            for j in range(i + 1, len(chunks)):
                source, target = chunks[i], chunks[j]

                shared_entities = entity_sets[i] & entity_sets[j]
                if shared_entities:
                    strength = jaccard(entity_sets[i], entity_sets[j])
                    if strength >= self._threshold:
                        relationships.append(
                            _relationship(
                                source, target, RelationshipType.SHARED_ENTITY,
                                strength, sorted(shared_entities),
                            )
                        )

                shared_keywords = keyword_sets[i] & keyword_sets[j]
                if len(shared_keywords) >= self._min_shared:
                    strength = len(shared_keywords) / min(len(keyword_sets[i]), len(keyword_sets[j]))
                    if strength >= self._threshold:
                        relationships.append(
                            _relationship(
                                source, target, RelationshipType.CO_OCCURRENCE,
                                strength, [k for k in source.keywords if k in shared_keywords],
                            )
                        )

                if term_vectors:
                    strength = cosine_similarity(term_vectors[i], term_vectors[j])
                    if strength >= self._semantic_floor:
                        relationships.append(
                            _relationship(
                                source, target, RelationshipType.SEMANTIC_SIMILARITY,
                                strength, _top_shared_terms(term_vectors[i], term_vectors[j]),
                            )
                        )

        logger.debug(
            "relationships_built",
            num_chunks=len(chunks),
            num_relationships=len(relationships),
        )
        return relationships


def _top_shared_terms(a: Counter[str], b: Counter[str]) -> list[str]:
    shared = [(a[t] + b[t], t) for t in a if t in b]
    shared.sort(key=lambda item: (-item[0], item[1]))
    return [t for _, t in shared[:_SEMANTIC_EVIDENCE_TERMS]]


def _relationship(
    source: Chunk,
    target: Chunk,
    relationship_type: RelationshipType,
    strength: float,
    evidence: list[str],
) -> ChunkRelationship:
    return ChunkRelationship(
        relationship_id=str(uuid.uuid4()),
        source_chunk_id=source.chunk_id,
        target_chunk_id=target.chunk_id,
        relationship_type=relationship_type,
        strength=round(min(1.0, strength), 4),
        evidence=evidence,
    )
