"""Chunk-level data models for the chunking and classification pipeline.

Defines the sensitivity tier enum, the segment and chunk models, and the
value objects produced by the per-chunk classification and analysis steps.
All models use frozen config to enforce immutability: a classified chunk is
a *new* instance built with ``model_copy(update={...})``.

Lifecycle:
    Segment   -- produced by the segmenter, one per paragraph / sentence run.
    Chunk     -- produced by the chunk builder (pre-classification), then
                 replaced by a classified copy once the per-chunk stage runs.
    Both are derived artifacts of one processing run and are recomputed
    wholesale whenever the owning document is reprocessed.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# SensitivityTier -- ordered cultural-sensitivity classification.
# ---------------------------------------------------------------------------
class SensitivityTier(str, Enum):  # noqa: UP042 — StrEnum requires Python 3.11+
    """Cultural-sensitivity tier of a chunk, ordered from least to most sensitive.

    ``public < community < restricted < sacred``.  Comparison uses an
    explicit rank; plain string comparison would put "community" before
    "public".
    """

    PUBLIC = "public"           # No cultural restrictions
    COMMUNITY = "community"     # Community members, with cultural context
    RESTRICTED = "restricted"   # Cultural authority approval needed
    SACRED = "sacred"           # Elder approval, protocol specific

    @property
    def rank(self) -> int:
        return _TIER_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SensitivityTier):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, SensitivityTier):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, SensitivityTier):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, SensitivityTier):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def highest(cls, tiers: Iterable[SensitivityTier]) -> SensitivityTier:
        """Return the most sensitive tier in *tiers* (``PUBLIC`` when empty)."""
        return max(tiers, key=lambda tier: tier.rank, default=cls.PUBLIC)


_TIER_RANK: dict[SensitivityTier, int] = {
    SensitivityTier.PUBLIC: 0,
    SensitivityTier.COMMUNITY: 1,
    SensitivityTier.RESTRICTED: 2,
    SensitivityTier.SACRED: 3,
}


class ContentType(str, Enum):  # noqa: UP042 — StrEnum requires Python 3.11+
    """Coarse layout of a chunk's text, detected from markup patterns."""

    NARRATIVE = "narrative"
    LIST = "list"
    TABLE = "table"
    MIXED = "mixed"


# ---------------------------------------------------------------------------
# Segment -- output of the segmenter.
# ---------------------------------------------------------------------------
class Segment(BaseModel):
    """A paragraph or sentence run with exact offsets into the source text.

    ``text`` is always ``source[start_offset:end_offset]``; the characters
    between consecutive segments are whitespace only.
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0, description="Ordinal of the segment within the document.")
    text: str = Field(min_length=1)
    start_offset: int = Field(ge=0)
    end_offset: int = Field(gt=0)
    paragraph_index: int = Field(
        default=0, ge=0, description="Paragraph the segment starts in."
    )
    word_count: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_span(self) -> Segment:
        if self.start_offset >= self.end_offset:
            raise ValueError("start_offset must be smaller than end_offset")
        return self


# ---------------------------------------------------------------------------
# Per-chunk analysis value objects.
# ---------------------------------------------------------------------------
class SensitivityClassification(BaseModel):
    """Result of classifying one chunk's text against the cultural lexicon."""

    model_config = ConfigDict(frozen=True)

    sensitivity_level: SensitivityTier = SensitivityTier.PUBLIC
    requires_elder_review: bool = False
    # Sorted so the classification serializes identically across runs.
    indicators: tuple[str, ...] = ()
    flags: list[str] = Field(default_factory=list)
    confidence: float = Field(default=0.7, ge=0.0, le=1.0)
    # More than two distinct indicators suggests traditional knowledge.
    contains_traditional_knowledge: bool = False


class TextStatistics(BaseModel):
    """Lexical statistics backing the readability score."""

    model_config = ConfigDict(frozen=True)

    word_count: int = Field(default=0, ge=0)
    char_count: int = Field(default=0, ge=0)
    sentence_count: int = Field(default=0, ge=0)
    paragraph_count: int = Field(default=0, ge=0)
    avg_words_per_sentence: float = Field(default=0.0, ge=0.0)
    avg_syllables_per_word: float = Field(default=0.0, ge=0.0)


class ChunkStructure(BaseModel):
    """Layout hints detected in a chunk (headers, lists, quotes, tables)."""

    model_config = ConfigDict(frozen=True)

    has_headers: bool = False
    has_bullet_points: bool = False
    has_quotes: bool = False
    content_type: ContentType = ContentType.NARRATIVE


class TextAnalysis(BaseModel):
    """Result of keyword and readability analysis of one chunk."""

    model_config = ConfigDict(frozen=True)

    keywords: list[str] = Field(default_factory=list)
    readability_score: float = Field(default=0.0, ge=0.0, le=100.0)
    statistics: TextStatistics = Field(default_factory=TextStatistics)
    structure: ChunkStructure = Field(default_factory=ChunkStructure)


# ---------------------------------------------------------------------------
# Chunk -- the unit of classification and search.
# ---------------------------------------------------------------------------
class Chunk(BaseModel):
    """A bounded, overlapping window of a document's text.

    Created by :class:`~cultural_chunker.services.chunking.chunk_builder.ChunkBuilder`
    with default classification fields, then replaced by a classified copy
    in the orchestrator's per-chunk stage.  Overlapping neighbours share
    offset ranges on purpose.
    """

    model_config = ConfigDict(frozen=True)

    chunk_id: str = Field(description="Unique identifier (UUID) for this chunk.")
    document_id: str = Field(description="Identifier of the owning document.")
    index: int = Field(ge=0, description="Ordinal within the document, contiguous from 0.")
    start_offset: int = Field(ge=0)
    end_offset: int = Field(gt=0)
    text: str = Field(min_length=1)
    word_count: int = Field(default=0, ge=0)
    # Segment ordinals covered by this chunk (inclusive).
    first_segment: int = Field(default=0, ge=0)
    last_segment: int = Field(default=0, ge=0)
    start_page: int | None = Field(default=None, ge=1)
    end_page: int | None = Field(default=None, ge=1)

    # --- Sensitivity classification ---
    sensitivity_level: SensitivityTier = SensitivityTier.PUBLIC
    requires_elder_review: bool = False
    traditional_knowledge_indicators: tuple[str, ...] = ()
    sensitivity_flags: list[str] = Field(default_factory=list)
    contains_traditional_knowledge: bool = False

    # --- Keyword / readability analysis ---
    keywords: list[str] = Field(default_factory=list)
    readability_score: float = Field(default=0.0, ge=0.0, le=100.0)
    statistics: TextStatistics = Field(default_factory=TextStatistics)
    structure: ChunkStructure = Field(default_factory=ChunkStructure)

    # Entities supplied by an upstream extractor, normalized and sorted.
    entities: tuple[str, ...] = ()
    # Caller-visible markers for per-chunk processing failures.
    warnings: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_span(self) -> Chunk:
        if self.start_offset >= self.end_offset:
            raise ValueError("start_offset must be smaller than end_offset")
        if self.first_segment > self.last_segment:
            raise ValueError("first_segment must not exceed last_segment")
        return self

    @property
    def char_count(self) -> int:
        return len(self.text)

    def with_classification(self, classification: SensitivityClassification) -> Chunk:
        """Return a copy carrying *classification*'s tier, flags and indicators."""
        return self.model_copy(
            update={
                "sensitivity_level": classification.sensitivity_level,
                "requires_elder_review": classification.requires_elder_review,
                "traditional_knowledge_indicators": classification.indicators,
                "sensitivity_flags": list(classification.flags),
                "contains_traditional_knowledge": classification.contains_traditional_knowledge,
            }
        )

    def with_analysis(self, analysis: TextAnalysis) -> Chunk:
        """Return a copy carrying *analysis*'s keywords, score and statistics."""
        return self.model_copy(
            update={
                "keywords": list(analysis.keywords),
                "readability_score": analysis.readability_score,
                "statistics": analysis.statistics,
                "structure": analysis.structure,
            }
        )
