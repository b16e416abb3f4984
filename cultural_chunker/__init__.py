"""cultural-chunker: culturally aware document chunking.

Splits document text into overlapping, position-tracked chunks, classifies
each chunk's cultural sensitivity (public, community, restricted, sacred),
flags content that needs elder review, extracts keywords and readability,
and links related chunks.

Typical use::

    from cultural_chunker import process

    result = process(text, document_id="doc-42")
    for chunk in result.chunks_requiring_elder_review():
        ...
"""

from __future__ import annotations

from typing import Any

from cultural_chunker.config import PipelineConfig, Settings, load_config
from cultural_chunker.models import (
    Chunk,
    ChunkRelationship,
    ChunkWarning,
    ProcessingResult,
    RelationshipType,
    ReviewRequest,
    SensitivityTier,
)
from cultural_chunker.pipeline import DocumentPipeline, ProgressTracker, process_documents_async
from cultural_chunker.utils.errors import (
    ConfigurationError,
    CulturalChunkerError,
    ValidationError,
)

__version__ = "0.1.0"


def process(text: str, config: PipelineConfig | None = None, **kwargs: Any) -> ProcessingResult:
    """Process *text* with a one-off :class:`DocumentPipeline`.

    Keyword arguments are passed to :meth:`DocumentPipeline.process`
    (``document_id``, ``entity_map``, ``page_breaks``).
    """
    return DocumentPipeline(config).process(text, **kwargs)


__all__ = [
    "Chunk",
    "ChunkRelationship",
    "ChunkWarning",
    "ConfigurationError",
    "CulturalChunkerError",
    "DocumentPipeline",
    "PipelineConfig",
    "ProcessingResult",
    "ProgressTracker",
    "RelationshipType",
    "ReviewRequest",
    "SensitivityTier",
    "Settings",
    "ValidationError",
    "load_config",
    "process",
    "process_documents_async",
]
