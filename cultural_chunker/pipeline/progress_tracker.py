"""Pipeline progress tracking with callback-based listener notification.

Tracks the current stage and progress percentage for each document being
processed and broadcasts updates to registered listener callbacks.
Listeners are keyed by document ID so several documents can be processed
concurrently without cross-talk.

# ─── HOW PROGRESS TRACKING WORKS ──────────────────────────────────────
#
# This implements the Observer pattern:
#
#   DocumentPipeline ──update()──→ ProgressTracker ──callback()──→ job-status poller
#                                                  ──→ (any other listener)
#
# Data flow:
#   1. The orchestrator calls tracker.update(document_id, stage, progress, msg)
#   2. ProgressTracker stores the snapshot and calls all registered listeners
#   3. A host application's listener records the status so a UI can poll it
#
# Key points:
#   - Listeners are keyed by document_id → no cross-talk between documents
#   - Listener errors are caught and logged → one broken listener can't
#     block the pipeline or crash other listeners
#   - Updates are synchronous; process() itself is synchronous
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from cultural_chunker.models.pipeline import PipelineStage
from cultural_chunker.utils.logging import get_logger

ProgressListener = Callable[[str, PipelineStage, float, str], object]


@dataclass
class _DocumentStatus:
    """Internal snapshot of a single document's progress.

    A plain mutable dataclass (not Pydantic) because it is internal-only
    and never serialized.
    """

    stage: PipelineStage = PipelineStage.VALIDATION
    progress: float = 0.0
    message: str = ""


class ProgressTracker:
    """Tracks and broadcasts pipeline progress via callbacks.

    Each document is identified by its ``document_id``.  External consumers
    register callables that are invoked whenever :meth:`update` is called
    for that document.
    """

    def __init__(self) -> None:
        self._statuses: dict[str, _DocumentStatus] = {}
        self._listeners: dict[str, list[ProgressListener]] = {}
        # Documents may be processed from several threads at once.
        self._lock = threading.Lock()
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def update(
        self,
        document_id: str,
        stage: PipelineStage,
        progress: float,
        message: str = "",
    ) -> None:
        """Record a progress update and notify all registered listeners.

        Parameters
        ----------
        document_id:
            The document being processed.
        stage:
            The current pipeline stage.
        progress:
            Completion percentage (0.0 – 100.0); clamped.
        message:
            Human-readable status message.
        """
        progress = max(0.0, min(100.0, progress))

        with self._lock:
            self._statuses[document_id] = _DocumentStatus(
                stage=stage,
                progress=progress,
                message=message,
            )
            listeners = list(self._listeners.get(document_id, []))

        self._logger.debug(
            "progress_update",
            document_id=document_id,
            stage=stage.value,
            progress=round(progress, 1),
            message=message,
        )

        self._notify_listeners(listeners, document_id, stage, progress, message)

    def register_listener(self, document_id: str, callback: ProgressListener) -> None:
        """Register *callback* to receive updates for *document_id*.

        The callback is called as ``callback(document_id, stage, progress, message)``.
        """
        with self._lock:
            listeners = self._listeners.setdefault(document_id, [])
            if callback in listeners:
                return
            listeners.append(callback)
            total = len(listeners)
        self._logger.debug("listener_registered", document_id=document_id, total_listeners=total)

    def unregister_listener(self, document_id: str, callback: ProgressListener) -> None:
        """Remove a previously registered callback for *document_id*."""
        with self._lock:
            listeners = self._listeners.get(document_id, [])
            if callback not in listeners:
                return
            listeners.remove(callback)
            remaining = len(listeners)
            if not listeners:
                del self._listeners[document_id]
        self._logger.debug(
            "listener_unregistered", document_id=document_id, remaining_listeners=remaining
        )

    def get_status(self, document_id: str) -> dict:
        """Return the current stage and progress for *document_id*.

        Returns
        -------
        dict
            Keys: ``stage`` (:class:`str`), ``progress`` (:class:`float`),
            ``message`` (:class:`str`).  Zeroed defaults when the document
            has not been tracked yet.
        """
        with self._lock:
            status = self._statuses.get(document_id)
        if status is None:
            return {"stage": PipelineStage.VALIDATION.value, "progress": 0.0, "message": ""}
        return {
            "stage": status.stage.value,
            "progress": status.progress,
            "message": status.message,
        }

    def clear(self, document_id: str) -> None:
        """Forget the status and listeners of *document_id*.

        Call once a finished document's status has been read; a tracker
        shared across many documents otherwise keeps every entry.
        """
        with self._lock:
            self._statuses.pop(document_id, None)
            self._listeners.pop(document_id, None)
        self._logger.debug("progress_cleared", document_id=document_id)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _notify_listeners(
        self,
        listeners: list[ProgressListener],
        document_id: str,
        stage: PipelineStage,
        progress: float,
        message: str,
    ) -> None:
        """Invoke *listeners*; failures are logged and skipped."""
        for callback in listeners:
            try:
                callback(document_id, stage, progress, message)
            except Exception as exc:
                self._logger.warning(
                    "listener_callback_error",
                    document_id=document_id,
                    error=str(exc),
                    callback=getattr(callback, "__name__", repr(callback)),
                )
