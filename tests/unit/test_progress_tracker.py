"""Unit tests for ProgressTracker."""

from __future__ import annotations

import pytest

from cultural_chunker.models.pipeline import PipelineStage
from cultural_chunker.pipeline.progress_tracker import ProgressTracker


class TestProgressTracker:
    @pytest.fixture()
    def tracker(self) -> ProgressTracker:
        return ProgressTracker()

    def test_initial_status(self, tracker: ProgressTracker) -> None:
        assert tracker.get_status("doc-1") == {
            "stage": "VALIDATION",
            "progress": 0.0,
            "message": "",
        }

    def test_update_and_get_status(self, tracker: ProgressTracker) -> None:
        tracker.update("doc-1", PipelineStage.CHUNKING, 25.0, "Building chunks")

        status = tracker.get_status("doc-1")
        assert status["stage"] == "CHUNKING"
        assert status["progress"] == 25.0
        assert status["message"] == "Building chunks"

    def test_progress_is_clamped(self, tracker: ProgressTracker) -> None:
        tracker.update("doc-1", PipelineStage.COMPLETE, 150.0)
        assert tracker.get_status("doc-1")["progress"] == 100.0
        tracker.update("doc-1", PipelineStage.VALIDATION, -5.0)
        assert tracker.get_status("doc-1")["progress"] == 0.0

    def test_listener_receives_updates(self, tracker: ProgressTracker) -> None:
        received: list[tuple] = []
        tracker.register_listener("doc-1", lambda *args: received.append(args))

        tracker.update("doc-1", PipelineStage.SEGMENTATION, 10.0, "Segmenting")

        assert received == [("doc-1", PipelineStage.SEGMENTATION, 10.0, "Segmenting")]

    def test_listeners_are_per_document(self, tracker: ProgressTracker) -> None:
        received: list[str] = []
        tracker.register_listener("doc-1", lambda doc, *_: received.append(doc))

        tracker.update("doc-2", PipelineStage.CHUNKING, 25.0)

        assert received == []

    def test_failing_listener_is_skipped(self, tracker: ProgressTracker) -> None:
        received: list[float] = []

        def _broken(*_args) -> None:
            raise RuntimeError("listener down")

        tracker.register_listener("doc-1", _broken)
        tracker.register_listener("doc-1", lambda _d, _s, progress, _m: received.append(progress))

        tracker.update("doc-1", PipelineStage.CLASSIFICATION, 40.0)

        assert received == [40.0]

    def test_unregister(self, tracker: ProgressTracker) -> None:
        received: list[float] = []

        def _listener(_d, _s, progress, _m) -> None:
            received.append(progress)

        tracker.register_listener("doc-1", _listener)
        tracker.register_listener("doc-1", _listener)  # duplicate ignored
        tracker.update("doc-1", PipelineStage.CHUNKING, 25.0)
        tracker.unregister_listener("doc-1", _listener)
        tracker.update("doc-1", PipelineStage.COMPLETE, 100.0)

        assert received == [25.0]

    def test_clear_forgets_status_and_listeners(self, tracker: ProgressTracker) -> None:
        received: list[float] = []
        tracker.register_listener("doc-1", lambda _d, _s, progress, _m: received.append(progress))
        tracker.update("doc-1", PipelineStage.COMPLETE, 100.0, "Processing complete")

        tracker.clear("doc-1")

        assert tracker.get_status("doc-1") == {
            "stage": "VALIDATION",
            "progress": 0.0,
            "message": "",
        }
        tracker.update("doc-1", PipelineStage.CHUNKING, 25.0)
        assert received == [100.0]
        assert tracker._statuses.keys() == {"doc-1"}
        tracker.clear("doc-1")
        tracker.clear("never-seen")
        assert tracker._statuses == {}
        assert tracker._listeners == {}
