"""Central orchestrator for the document chunking and classification pipeline.

Coordinates validation, segmentation, chunk building, per-chunk sensitivity
classification and text analysis, and relationship building into one
synchronous ``process()`` call that returns a :class:`ProcessingResult`.

ARCHITECTURE NOTE:
    This orchestrator follows the "Pipeline" pattern: it runs its services
    in a fixed sequence and hands each stage's output to the next.

        VALIDATION → SEGMENTATION → CHUNKING → CLASSIFICATION →
        RELATIONSHIPS → COMPLETE

    Segmentation and chunking run once over the whole document.  The
    CLASSIFICATION stage fans out: every chunk is classified and analyzed
    independently on a bounded worker pool.  All workers are joined before
    RELATIONSHIPS starts, because relationships compare every pair of
    finished chunks.

    Failure handling has two tiers:
        - Invalid input or configuration raises before anything is produced.
        - A failure inside one chunk's work never fails the document.  If
          classification itself fails, the chunk is emitted with a
          conservative ``community`` tier, no keywords, and a warning.  If
          only analysis or entity extraction fails, the chunk keeps its
          computed tier and elder-review flag and carries a warning.
          Either way the chunk is queued for manual review.

    Every chunk is a frozen model: the per-chunk stage returns a NEW chunk
    via ``model_copy(update={...})`` rather than mutating the builder's
    output, so workers share nothing mutable.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, NamedTuple

import structlog

from cultural_chunker.config.settings import PipelineConfig
from cultural_chunker.interfaces.entity_extractor import IEntityExtractor
from cultural_chunker.models.chunk import Chunk, SensitivityTier
from cultural_chunker.models.pipeline import (
    ChunkWarning,
    PipelineStage,
    ProcessingResult,
    ReviewRequest,
)
from cultural_chunker.pipeline.progress_tracker import ProgressTracker
from cultural_chunker.services.chunking.chunk_builder import ChunkBuilder
from cultural_chunker.services.chunking.segmenter import TextSegmenter
from cultural_chunker.services.relationship_builder import RelationshipBuilder
from cultural_chunker.services.review_policy import build_review_request
from cultural_chunker.services.sensitivity_classifier import SensitivityClassifier
from cultural_chunker.services.text_analyzer import TextAnalyzer
from cultural_chunker.utils.concurrency import bounded_map, throttled_gather
from cultural_chunker.utils.errors import CulturalChunkerError, ValidationError
from cultural_chunker.utils.logging import document_context, get_logger
from cultural_chunker.utils.text_normalizer import fuzzy_match, normalize_entity_name

logger: structlog.BoundLogger = get_logger(__name__)

# Tier given to a chunk whose own processing failed: above public so it is
# never shown unreviewed, below restricted so it does not trigger escalation.
_FALLBACK_TIER = SensitivityTier.COMMUNITY


class _ChunkOutcome(NamedTuple):
    """What one worker returns for one chunk."""

    chunk: Chunk
    extracted_entities: frozenset[str]
    warnings: tuple[ChunkWarning, ...] = ()


class DocumentPipeline:
    """Chunks, classifies and links the text of one document per call.

    All collaborators are optional; omitted ones are built from *config*.
    Instances hold no per-document state, so one pipeline may process many
    documents, including concurrently from several threads.

    Parameters
    ----------
    config:
        Validated configuration; defaults to ``PipelineConfig()``.
    classifier:
        Sensitivity classifier (e.g. one built with a custom lexicon).
    analyzer:
        Keyword / readability analyzer.
    entity_extractor:
        Optional upstream extractor run once per chunk.
    progress_tracker:
        Optional tracker that receives a stage update as each stage starts.
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        *,
        classifier: SensitivityClassifier | None = None,
        analyzer: TextAnalyzer | None = None,
        entity_extractor: IEntityExtractor | None = None,
        progress_tracker: ProgressTracker | None = None,
    ) -> None:
        self._config = config or PipelineConfig()
        cfg = self._config
        self._segmenter = TextSegmenter(
            min_segment_chars=cfg.min_chunk_size,
            max_segment_chars=cfg.max_segment_chars,
        )
        self._chunk_builder = ChunkBuilder(
            target_size=cfg.target_chunk_size,
            overlap_size=cfg.overlap_size,
        )
        self._classifier = classifier or SensitivityClassifier()
        self._analyzer = analyzer or TextAnalyzer(keyword_count=cfg.keyword_count)
        self._relationship_builder = RelationshipBuilder(
            threshold=cfg.relationship_threshold,
            min_shared_keywords=cfg.min_shared_keywords,
            semantic_threshold=cfg.semantic_similarity_threshold,
        )
        self._entity_extractor = entity_extractor
        self._progress_tracker = progress_tracker

    @property
    def config(self) -> PipelineConfig:
        return self._config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def process(
        self,
        text: str,
        *,
        document_id: str | None = None,
        entity_map: Mapping[int, Iterable[str]] | None = None,
        page_breaks: Sequence[int] | None = None,
    ) -> ProcessingResult:
        """Run the full pipeline over *text*.

        Parameters
        ----------
        text:
            The full document text.  Offsets in the result index into it.
        document_id:
            Identifier stamped on every chunk; a UUID is generated if omitted.
        entity_map:
            Optional entity names keyed by segment index (as returned by
            :meth:`TextSegmenter.segment`).  A chunk's entities are the
            union over the segments it covers.
        page_breaks:
            Optional character offsets where a new page starts; fills the
            chunks' page range.

        Returns
        -------
        ProcessingResult
            Ordered chunks, relationships, per-chunk warnings and review
            requests.

        Raises
        ------
        ValidationError
            If *text* is not a string, is empty or whitespace only, or is
            shorter than ``min_document_length`` once stripped.
        """
        document_id = document_id or str(uuid.uuid4())
        with document_context(document_id):
            return self._run(text, document_id, entity_map, page_breaks)

    def _run(
        self,
        text: str,
        document_id: str,
        entity_map: Mapping[int, Iterable[str]] | None,
        page_breaks: Sequence[int] | None,
    ) -> ProcessingResult:
        self._update(document_id, PipelineStage.VALIDATION, 0.0, "Validating document")
        self._validate(text)

        self._update(document_id, PipelineStage.SEGMENTATION, 10.0, "Segmenting text")
        segments = self._segmenter.segment(text)

        self._update(document_id, PipelineStage.CHUNKING, 25.0, "Building chunks")
        chunks = self._chunk_builder.build_chunks(
            segments, text, document_id, page_breaks=page_breaks
        )

        self._update(
            document_id,
            PipelineStage.CLASSIFICATION,
            40.0,
            f"Classifying {len(chunks)} chunks",
        )
        outcomes = bounded_map(self._process_chunk, chunks, max_workers=self._config.max_workers)

        # Join: every chunk is finished (or failed) past this point.
        processed: list[Chunk] = []
        warnings: list[ChunkWarning] = []
        extracted: list[frozenset[str]] = []
        for chunk, outcome in zip(chunks, outcomes):
            if isinstance(outcome, Exception):
                warning = _warning_for(chunk, outcome)
                logger.warning(
                    "chunk_processing_failed",
                    document_id=document_id,
                    chunk_index=chunk.index,
                    step="classification",
                    error=str(outcome),
                    error_type=type(outcome).__name__,
                )
                warnings.append(warning)
                processed.append(_fallback_chunk(chunk, warning))
                extracted.append(frozenset())
            else:
                warnings.extend(outcome.warnings)
                processed.append(outcome.chunk)
                extracted.append(outcome.extracted_entities)

        processed = self._attach_entities(processed, entity_map, extracted)

        self._update(document_id, PipelineStage.RELATIONSHIPS, 80.0, "Building relationships")
        relationships = self._relationship_builder.build_relationships(processed)

        review_requests: list[ReviewRequest] = [
            request for request in map(build_review_request, processed) if request is not None
        ]

        result = ProcessingResult(
            document_id=document_id,
            chunks=processed,
            relationships=relationships,
            warnings=warnings,
            review_requests=review_requests,
        )

        logger.info(
            "document_processed",
            document_id=document_id,
            num_segments=len(segments),
            num_chunks=len(processed),
            num_relationships=len(relationships),
            num_warnings=len(warnings),
            num_review_requests=len(review_requests),
            highest_sensitivity=result.highest_sensitivity.value,
        )
        self._update(document_id, PipelineStage.COMPLETE, 100.0, "Processing complete")
        return result

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate(self, text: object) -> None:
        if not isinstance(text, str):
            raise ValidationError(f"Document text must be a string, got {type(text).__name__}")
        stripped = text.strip()
        if not stripped:
            raise ValidationError("Document text is empty")
        if len(stripped) < self._config.min_document_length:
            raise ValidationError(
                f"Insufficient text to process: {len(stripped)} characters, "
                f"minimum is {self._config.min_document_length}"
            )

    # ------------------------------------------------------------------
    # Per-chunk work (runs on worker threads)
    # ------------------------------------------------------------------

    def _process_chunk(self, chunk: Chunk) -> _ChunkOutcome:
        """Classify, analyze and extract entities for one chunk.

        Only a classification failure escapes (and becomes the conservative
        fallback in the join).  Analysis and entity-extraction failures are
        recorded as warnings on a chunk that keeps its computed tier and
        elder-review flag.
        """
        chunk = chunk.with_classification(self._classifier.classify(chunk.text))
        warnings: list[ChunkWarning] = []

        try:
            chunk = chunk.with_analysis(self._analyzer.analyze(chunk.text))
        except Exception as exc:
            warnings.append(self._partial_failure(chunk, exc, "text_analysis"))

        extracted: frozenset[str] = frozenset()
        if self._entity_extractor is not None:
            try:
                extracted = frozenset(self._entity_extractor.extract(chunk.text))
            except Exception as exc:
                warnings.append(self._partial_failure(chunk, exc, "entity_extraction"))

        if warnings:
            chunk = chunk.model_copy(
                update={"warnings": [*chunk.warnings, *(w.message for w in warnings)]}
            )
        return _ChunkOutcome(chunk=chunk, extracted_entities=extracted, warnings=tuple(warnings))

    @staticmethod
    def _partial_failure(chunk: Chunk, error: Exception, step: str) -> ChunkWarning:
        warning = _warning_for(chunk, error, step=step)
        logger.warning(
            "chunk_processing_failed",
            document_id=chunk.document_id,
            chunk_index=chunk.index,
            step=step,
            error=str(error),
            error_type=type(error).__name__,
        )
        return warning

    # ------------------------------------------------------------------
    # Entities
    # ------------------------------------------------------------------

    def _attach_entities(
        self,
        chunks: list[Chunk],
        entity_map: Mapping[int, Iterable[str]] | None,
        extracted: list[frozenset[str]],
    ) -> list[Chunk]:
        """Give each chunk its normalized, document-wide canonical entity names.

        Names that fuzzily match an earlier name (rapidfuzz, at
        ``entity_match_threshold``) collapse onto that earlier spelling, so
        "Aunty Mary" and "Mary Aunty" count as one entity across chunks.
        """
        if not entity_map and not any(extracted):
            return chunks

        canonical: list[str] = []
        lookup: dict[str, str] = {}

        def _canonicalize(name: str) -> str:
            if name in lookup:
                return lookup[name]
            match = fuzzy_match(name, canonical, threshold=self._config.entity_match_threshold)
            if match is None:
                canonical.append(name)
                lookup[name] = name
            else:
                lookup[name] = match[0]
            return lookup[name]

        updated: list[Chunk] = []
        for chunk, names in zip(chunks, extracted):
            raw: set[str] = set(names)
            if entity_map:
                for segment_index in range(chunk.first_segment, chunk.last_segment + 1):
                    raw.update(entity_map.get(segment_index, ()))
            normalized = sorted({n for n in map(normalize_entity_name, raw) if n})
            entities = tuple(sorted({_canonicalize(n) for n in normalized}))
            updated.append(chunk.model_copy(update={"entities": entities}) if entities else chunk)
        return updated

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    def _update(
        self,
        document_id: str,
        stage: PipelineStage,
        progress: float,
        message: str,
    ) -> None:
        if self._progress_tracker is not None:
            self._progress_tracker.update(document_id, stage, progress, message)


def _warning_for(chunk: Chunk, error: Exception, step: str | None = None) -> ChunkWarning:
    message = str(error) or type(error).__name__
    if not isinstance(error, CulturalChunkerError):
        message = f"{type(error).__name__}: {message}"
    if step is not None:
        message = f"{step.replace('_', ' ').capitalize()} failed: {message}"
    return ChunkWarning(chunk_index=chunk.index, stage=PipelineStage.CLASSIFICATION, message=message)


def _fallback_chunk(chunk: Chunk, warning: ChunkWarning) -> Chunk:
    return chunk.model_copy(
        update={
            "sensitivity_level": _FALLBACK_TIER,
            "requires_elder_review": False,
            "keywords": [],
            "readability_score": 0.0,
            "warnings": [warning.message],
        }
    )


# ---------------------------------------------------------------------------
# Multi-document helper
# ---------------------------------------------------------------------------

async def process_documents_async(
    pipeline: DocumentPipeline,
    documents: Sequence[str | Mapping[str, Any]],
    max_concurrent: int = 4,
) -> list[ProcessingResult | BaseException]:
    """Process independent documents concurrently from async code.

    Each document runs :meth:`DocumentPipeline.process` on a worker thread
    (``asyncio.to_thread``); at most *max_concurrent* run at once.

    Parameters
    ----------
    pipeline:
        The pipeline to run every document through.
    documents:
        Either plain text, or a mapping with a ``text`` key plus any
        keyword arguments accepted by ``process`` (``document_id``,
        ``entity_map``, ``page_breaks``).
    max_concurrent:
        Upper bound on documents processed at the same time.

    Returns
    -------
    list[ProcessingResult | BaseException]
        One entry per document, in input order.  A document that failed
        (e.g. :class:`ValidationError`) contributes its exception.
    """

    def _run(document: str | Mapping[str, Any]) -> ProcessingResult:
        if isinstance(document, Mapping):
            options = dict(document)
            text = options.pop("text", None)
            return pipeline.process(text, **options)
        return pipeline.process(document)

    coros = [asyncio.to_thread(_run, document) for document in documents]
    return await throttled_gather(coros, max_concurrent=max_concurrent)
