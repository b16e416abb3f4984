"""Custom exception hierarchy for cultural-chunker.

All library exceptions inherit from :class:`CulturalChunkerError`, which
carries an optional ``stage`` so error handlers can tell which pipeline step
(segmentation, chunking, classification, ...) raised the failure.

The hierarchy is organized by pipeline domain:

    CulturalChunkerError   (base -- catch-all for any library error)
    +-- ValidationError     (document text rejected before processing)
    +-- ConfigurationError  (invalid numeric ranges / overlap >= target)
    +-- ClassificationError (per-chunk sensitivity classification failure)
    +-- AnalysisError       (per-chunk keyword / readability failure)

ValidationError and ConfigurationError are raised synchronously before any
output is produced.  ClassificationError and AnalysisError never escape
:meth:`~cultural_chunker.pipeline.orchestrator.DocumentPipeline.process`:
the orchestrator converts them into per-chunk warnings.
"""


class CulturalChunkerError(Exception):
    """Base exception for all cultural-chunker errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``stage`` naming the pipeline step that failed.  ``__str__`` prefixes
    the stage in brackets for log scanning, e.g.
    ``[chunking] overlap_size must be smaller than target_size``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        stage: str | None = None,
    ) -> None:
        self._message = message
        self._stage = stage
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def stage(self) -> str | None:
        return self._stage

    def __str__(self) -> str:
        if self._stage:
            return f"[{self._stage}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Input / configuration errors (raised before any output exists)
# ---------------------------------------------------------------------------

class ValidationError(CulturalChunkerError):
    """Raised when document text is empty, not a string, or too short."""

    def __init__(
        self,
        message: str = "Insufficient text to process",
        stage: str | None = "validation",
    ) -> None:
        super().__init__(message=message, stage=stage)


class ConfigurationError(CulturalChunkerError):
    """Raised when pipeline configuration values are out of range."""

    def __init__(
        self,
        message: str = "Invalid pipeline configuration",
        stage: str | None = "configuration",
    ) -> None:
        super().__init__(message=message, stage=stage)


# ---------------------------------------------------------------------------
# Per-chunk errors (isolated to one chunk by the orchestrator)
# ---------------------------------------------------------------------------

class ClassificationError(CulturalChunkerError):
    """Raised when sensitivity classification of a single chunk fails."""

    def __init__(
        self,
        message: str = "Sensitivity classification failed",
        stage: str | None = "classification",
    ) -> None:
        super().__init__(message=message, stage=stage)


class AnalysisError(CulturalChunkerError):
    """Raised when keyword / readability analysis of a single chunk fails."""

    def __init__(
        self,
        message: str = "Text analysis failed",
        stage: str | None = "analysis",
    ) -> None:
        super().__init__(message=message, stage=stage)
