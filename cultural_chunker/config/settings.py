"""Pipeline configuration and environment-backed settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# PipelineConfig is the explicit, validated configuration struct passed
# to the pipeline.  Every field has a documented default; range checks run
# once, at construction, and raise ConfigurationError.
#
# Settings uses pydantic-settings to read the same knobs from TWO sources
# (in priority order):
#
#   1. **Environment variables** -- e.g. CULTURAL_CHUNKER_TARGET_CHUNK_SIZE=400
#      (highest priority -- always wins)
#   2. **.env file** -- key=value lines in the working directory's .env
#
# The mapping is automatic: field ``target_chunk_size`` maps to env var
# ``CULTURAL_CHUNKER_TARGET_CHUNK_SIZE``.  ``log_level`` and ``app_env``
# are read without the prefix so they line up with the logging setup.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from cultural_chunker.utils.errors import ConfigurationError


class PipelineConfig(BaseModel):
    """Validated configuration for one pipeline instance.

    Attributes:
        target_chunk_size: Words per chunk before it is closed.
        overlap_size: Trailing words re-included at the start of the next
            chunk.  Must be smaller than ``target_chunk_size``.
        min_chunk_size: Minimum segment length in characters; shorter
            segments are merged into a neighbour.
        max_segment_chars: Paragraphs longer than this are split into
            sentences.
        keyword_count: Keywords kept per chunk.
        relationship_threshold: Minimum strength for an emitted relationship.
        min_shared_keywords: Shared keywords needed for a co-occurrence link.
        semantic_similarity_threshold: Minimum cosine similarity for a
            semantic-similarity link; ``None`` disables that link type.
        entity_match_threshold: Fuzzy-match score at which two entity names
            are treated as the same entity.
        min_document_length: Minimum stripped document length in characters.
        max_workers: Worker pool bound for the per-chunk stage; ``None``
            sizes the pool from the available cores.
    """

    model_config = ConfigDict(frozen=True)

    target_chunk_size: int = 500
    overlap_size: int = 150
    min_chunk_size: int = 20
    max_segment_chars: int = 1000
    keyword_count: int = 5
    relationship_threshold: float = 0.15
    min_shared_keywords: int = 2
    semantic_similarity_threshold: float | None = 0.5
    entity_match_threshold: float = 0.9
    min_document_length: int = 50
    max_workers: int | None = None

    @model_validator(mode="wrap")
    @classmethod
    def _wrap_type_errors(
        cls, data: Any, handler: Callable[[Any], PipelineConfig]
    ) -> PipelineConfig:
        # Wrong-typed values (e.g. target_chunk_size="abc") surface as the
        # library's own error type, like the range checks below.
        try:
            return handler(data)
        except PydanticValidationError as exc:
            raise ConfigurationError(f"Invalid pipeline configuration: {exc}") from exc

    @model_validator(mode="after")
    def _check_ranges(self) -> PipelineConfig:
        # ConfigurationError is not a ValueError, so pydantic lets it through
        # unwrapped and callers can catch it directly.
        if self.target_chunk_size < 1:
            raise ConfigurationError("target_chunk_size must be >= 1")
        if self.overlap_size < 0:
            raise ConfigurationError("overlap_size must be >= 0")
        if self.overlap_size >= self.target_chunk_size:
            raise ConfigurationError(
                f"overlap_size ({self.overlap_size}) must be smaller than "
                f"target_chunk_size ({self.target_chunk_size})"
            )
        if self.min_chunk_size < 0:
            raise ConfigurationError("min_chunk_size must be >= 0")
        if self.max_segment_chars < 1:
            raise ConfigurationError("max_segment_chars must be >= 1")
        if self.keyword_count < 1:
            raise ConfigurationError("keyword_count must be >= 1")
        if not 0.0 <= self.relationship_threshold <= 1.0:
            raise ConfigurationError("relationship_threshold must be in [0.0, 1.0]")
        if self.min_shared_keywords < 1:
            raise ConfigurationError("min_shared_keywords must be >= 1")
        if self.semantic_similarity_threshold is not None and not (
            0.0 <= self.semantic_similarity_threshold <= 1.0
        ):
            raise ConfigurationError("semantic_similarity_threshold must be in [0.0, 1.0]")
        if not 0.0 < self.entity_match_threshold <= 1.0:
            raise ConfigurationError("entity_match_threshold must be in (0.0, 1.0]")
        if self.min_document_length < 1:
            raise ConfigurationError("min_document_length must be >= 1")
        if self.max_workers is not None and self.max_workers < 1:
            raise ConfigurationError("max_workers must be >= 1")
        return self


class Settings(BaseSettings):
    """cultural-chunker settings.

    Environment variables override defaults.  Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(
        env_prefix="CULTURAL_CHUNKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Chunking ===
    target_chunk_size: int = 500
    overlap_size: int = 150
    min_chunk_size: int = 20
    max_segment_chars: int = 1000

    # === Analysis / relationships ===
    keyword_count: int = 5
    relationship_threshold: float = 0.15
    min_shared_keywords: int = 2
    semantic_similarity_threshold: float | None = 0.5
    entity_match_threshold: float = 0.9

    # === Validation / workers ===
    min_document_length: int = 50
    max_workers: int | None = None

    # === App Config ===
    app_env: str = Field(
        default="development",
        validation_alias=AliasChoices("CULTURAL_CHUNKER_APP_ENV", "APP_ENV"),
    )
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("CULTURAL_CHUNKER_LOG_LEVEL", "LOG_LEVEL"),
    )

    def pipeline_overrides(self) -> dict[str, object]:
        """Return only the pipeline fields explicitly set by env / .env."""
        pipeline_fields = set(PipelineConfig.model_fields)
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if name in pipeline_fields
        }

    def pipeline_config(self) -> PipelineConfig:
        """Build a validated :class:`PipelineConfig` from these settings."""
        pipeline_fields = set(PipelineConfig.model_fields)
        return PipelineConfig(
            **{name: getattr(self, name) for name in pipeline_fields}
        )
