"""Pipeline stage, warning, review and result models.

Architecture note:
    :class:`ProcessingResult` is the single bundle returned by
    :meth:`~cultural_chunker.pipeline.orchestrator.DocumentPipeline.process`.
    The caller persists it wholesale (e.g. into ``document_chunks`` and
    ``chunk_relationships`` tables), replacing whatever an earlier run of the
    same document produced.  Per-chunk failures are recorded as
    :class:`ChunkWarning` entries instead of aborting the run.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from cultural_chunker.models.chunk import Chunk, SensitivityTier
from cultural_chunker.models.relationship import ChunkRelationship, RelationshipType


# ---------------------------------------------------------------------------
# PipelineStage -- the fixed sequence a document moves through.
# ---------------------------------------------------------------------------
class PipelineStage(str, Enum):  # noqa: UP042 — StrEnum requires Python 3.11+
    """Stages of one ``process()`` run, in order.

        VALIDATION → SEGMENTATION → CHUNKING → CLASSIFICATION →
        RELATIONSHIPS → COMPLETE

    CLASSIFICATION covers both sensitivity classification and keyword /
    readability analysis; they run together per chunk.
    """

    VALIDATION = "VALIDATION"
    SEGMENTATION = "SEGMENTATION"
    CHUNKING = "CHUNKING"
    CLASSIFICATION = "CLASSIFICATION"
    RELATIONSHIPS = "RELATIONSHIPS"
    COMPLETE = "COMPLETE"


class ReviewPriority(str, Enum):  # noqa: UP042 — StrEnum requires Python 3.11+
    """Moderation queue priority derived from a chunk's sensitivity tier."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


# ---------------------------------------------------------------------------
# ChunkWarning -- records a per-chunk failure without failing the document.
# ---------------------------------------------------------------------------
class ChunkWarning(BaseModel):
    """A per-chunk processing failure.

    The affected chunk is still emitted with conservative defaults
    (``community`` tier, no keywords) so a human reviewer can inspect it.
    """

    model_config = ConfigDict(frozen=True)

    chunk_index: int = Field(ge=0)
    stage: PipelineStage = PipelineStage.CLASSIFICATION
    message: str


# ---------------------------------------------------------------------------
# ReviewRequest -- a moderation queue entry for one chunk.
# ---------------------------------------------------------------------------
class ReviewRequest(BaseModel):
    """A request for cultural review of one chunk.

    Built by :func:`~cultural_chunker.services.review_policy.build_review_request`
    for every chunk above ``public`` (and for any chunk carrying warnings).
    """

    model_config = ConfigDict(frozen=True)

    chunk_id: str
    chunk_index: int = Field(ge=0)
    sensitivity_level: SensitivityTier
    priority: ReviewPriority
    estimated_review_hours: int = Field(ge=0)
    requires_elder_review: bool = False
    escalation_required: bool = False
    recommendations: list[str] = Field(default_factory=list)
    flags: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# ProcessingResult -- everything derived from one document.
# ---------------------------------------------------------------------------
class ProcessingResult(BaseModel):
    """Chunks, relationships, warnings and review requests for one document."""

    model_config = ConfigDict(frozen=True)

    document_id: str
    chunks: list[Chunk] = Field(default_factory=list)
    relationships: list[ChunkRelationship] = Field(default_factory=list)
    warnings: list[ChunkWarning] = Field(default_factory=list)
    review_requests: list[ReviewRequest] = Field(default_factory=list)

    @property
    def highest_sensitivity(self) -> SensitivityTier:
        return SensitivityTier.highest(c.sensitivity_level for c in self.chunks)

    def chunks_requiring_elder_review(self) -> list[Chunk]:
        """Return the chunks gated behind elder approval, in index order."""
        return [c for c in self.chunks if c.requires_elder_review]

    def relationships_of_type(self, relationship_type: RelationshipType) -> list[ChunkRelationship]:
        """Return the relationships of *relationship_type*, in emission order."""
        return [r for r in self.relationships if r.relationship_type == relationship_type]
