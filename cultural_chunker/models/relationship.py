"""Relationship models linking chunks of the same document.

Relationships are derived after *all* chunks of a document have been
classified and analyzed.  They form an undirected graph stored as directed
records: the lower-index chunk is always the source, and at most one
relationship of a given type exists per unordered chunk pair.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RelationshipType(str, Enum):  # noqa: UP042 — StrEnum requires Python 3.11+
    """Kinds of links the relationship builder can emit.

    CO_OCCURRENCE:       keyword sets overlap by at least two terms
    SEMANTIC_SIMILARITY: term-frequency vectors are close (cosine)
    SHARED_ENTITY:       upstream-extracted entity sets intersect
    """

    CO_OCCURRENCE = "co_occurrence"
    SEMANTIC_SIMILARITY = "semantic_similarity"
    SHARED_ENTITY = "shared_entity"


class ChunkRelationship(BaseModel):
    """A typed, weighted link between two chunks of one document."""

    model_config = ConfigDict(frozen=True)

    relationship_id: str = Field(description="Unique identifier (UUID) for this relationship.")
    source_chunk_id: str
    target_chunk_id: str
    relationship_type: RelationshipType
    strength: float = Field(ge=0.0, le=1.0)
    # Shared keywords / entities / terms that justify the link.
    evidence: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_distinct_endpoints(self) -> ChunkRelationship:
        if self.source_chunk_id == self.target_chunk_id:
            raise ValueError("a relationship cannot link a chunk to itself")
        return self

    @property
    def pair(self) -> frozenset[str]:
        """The unordered chunk pair this relationship connects."""
        return frozenset((self.source_chunk_id, self.target_chunk_id))


class SimilarChunk(BaseModel):
    """A chunk returned by a similar-chunk lookup with its score."""

    model_config = ConfigDict(frozen=True)

    chunk_id: str
    chunk_index: int = Field(ge=0)
    similarity_score: float = Field(ge=0.0)
    content_preview: str = ""
