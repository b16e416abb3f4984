"""Utility modules for cultural-chunker.

Available utility modules (all re-exported here for convenience):

- **errors** -- Domain-specific exception hierarchy rooted at
  CulturalChunkerError; input and configuration errors raise before any
  output, per-chunk errors are turned into warnings by the orchestrator.
- **concurrency** -- Bounded thread-pool fan-out / join for per-chunk work
  and semaphore-throttled gathering for multi-document batches.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **text_normalizer** -- Offset-preserving word spans, lexical counts for
  readability scoring, and entity-name normalization with fuzzy matching.
"""

# -- Domain exception hierarchy --------------------------------------------
from cultural_chunker.utils.errors import (
    AnalysisError,
    ClassificationError,
    ConfigurationError,
    CulturalChunkerError,
    ValidationError,
)

# -- Worker pool and async throttling --------------------------------------
from cultural_chunker.utils.concurrency import bounded_map, throttled_gather

# -- Structured logging setup ----------------------------------------------
from cultural_chunker.utils.logging import configure_logging, document_context, get_logger

# -- Text tokenization and entity names ------------------------------------
from cultural_chunker.utils.text_normalizer import fuzzy_match, normalize_entity_name, word_spans

__all__ = [
    "AnalysisError",
    "ClassificationError",
    "ConfigurationError",
    "CulturalChunkerError",
    "ValidationError",
    "bounded_map",
    "configure_logging",
    "document_context",
    "fuzzy_match",
    "get_logger",
    "normalize_entity_name",
    "throttled_gather",
    "word_spans",
]
