"""Pipeline orchestration components for the cultural-chunker pipeline."""

from cultural_chunker.pipeline.orchestrator import DocumentPipeline, process_documents_async
from cultural_chunker.pipeline.progress_tracker import ProgressTracker

__all__ = [
    "DocumentPipeline",
    "ProgressTracker",
    "process_documents_async",
]
