"""cultural-chunker data models -- re-exports all public model classes.

Other modules import from ``cultural_chunker.models`` rather than from the
individual files.  The models are organized by pipeline concern:
    - chunk.py        -- sensitivity tiers, segments, chunks, per-chunk analysis
    - relationship.py -- typed links between chunks and similar-chunk results
    - pipeline.py     -- stages, warnings, review requests, the result bundle
"""

from __future__ import annotations

from cultural_chunker.models.chunk import (
    Chunk,
    ChunkStructure,
    ContentType,
    Segment,
    SensitivityClassification,
    SensitivityTier,
    TextAnalysis,
    TextStatistics,
)
from cultural_chunker.models.pipeline import (
    ChunkWarning,
    PipelineStage,
    ProcessingResult,
    ReviewPriority,
    ReviewRequest,
)
from cultural_chunker.models.relationship import (
    ChunkRelationship,
    RelationshipType,
    SimilarChunk,
)

__all__ = [
    "Chunk",
    "ChunkRelationship",
    "ChunkStructure",
    "ChunkWarning",
    "ContentType",
    "PipelineStage",
    "ProcessingResult",
    "RelationshipType",
    "ReviewPriority",
    "ReviewRequest",
    "Segment",
    "SensitivityClassification",
    "SensitivityTier",
    "SimilarChunk",
    "TextAnalysis",
    "TextStatistics",
]
