from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Callable

from contracts.rows import FrameAnnotation
from frames.contracts import Frame
from frames.sources.base import FrameSource
from ocr.engines.base import TextRecognizer
from overlay.geometry import DisplayTransform
from overlay.render import render_annotation
from overlay.surface import RenderSurface
from rows.annotate import SKIP_RECOGNITION_FAILED, annotate_recognition
from rows.config import RowClusteringConfig

from .config import LiveConfig
from .slot import LatestResultSlot

logger = logging.getLogger(__name__)

# Called once per frame after overlays are applied; returning False stops the session.
DisplayCallback = Callable[[Frame], bool]


@dataclass(slots=True)
class SessionStats:
    frames_read: int = 0
    submitted: int = 0
    skipped_busy: int = 0
    recognition_failed: int = 0
    dropped_stale: int = 0
    applied: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "frames_read": self.frames_read,
            "submitted": self.submitted,
            "skipped_busy": self.skipped_busy,
            "recognition_failed": self.recognition_failed,
            "dropped_stale": self.dropped_stale,
            "applied": self.applied,
        }


class LiveSession:
    """
    Frame loop: capture -> asynchronous recognition -> row clustering -> redraw.

    Recognition and clustering run on executor threads. Their annotations go
    through a LatestResultSlot; only the loop thread touches the surface, and
    it always applies the newest annotation available.
    """

    def __init__(
        self,
        *,
        source: FrameSource,
        recognizer: TextRecognizer,
        surface: RenderSurface,
        row_config: RowClusteringConfig | None = None,
        config: LiveConfig | None = None,
        display: DisplayCallback | None = None,
    ) -> None:
        self.source = source
        self.recognizer = recognizer
        self.surface = surface
        self.row_config = row_config or RowClusteringConfig()
        self.config = config or LiveConfig()
        self.display = display

        self.row_config.validate()
        self.config.validate()

        self.stats = SessionStats()
        self.current: FrameAnnotation | None = None
        self._slot: LatestResultSlot[FrameAnnotation] = LatestResultSlot()
        self._lock = threading.Lock()
        self._in_flight = 0
        self._stop = threading.Event()
        self._executor: ThreadPoolExecutor | None = None

    def stop(self) -> None:
        self._stop.set()

    @property
    def in_flight(self) -> int:
        with self._lock:
            return self._in_flight

    def _annotate(self, frame: Frame) -> FrameAnnotation:
        result = self.recognizer.recognize(frame.image)
        if not result.ok:
            logger.debug("frame %d: recognition failed: %s", frame.seq, [e.code for e in result.errors])
        return annotate_recognition(result, self.row_config)

    def _on_done(self, seq: int, fut: Future) -> None:
        with self._lock:
            self._in_flight -= 1

        try:
            annotation = fut.result()
        except Exception:
            logger.exception("frame %d: recognition raised; clearing overlays", seq)
            annotation = FrameAnnotation.empty(SKIP_RECOGNITION_FAILED)

        if annotation.meta.get("skipped") == SKIP_RECOGNITION_FAILED:
            with self._lock:
                self.stats.recognition_failed += 1

        if not self._slot.offer(seq, annotation):
            with self._lock:
                self.stats.dropped_stale += 1

    def submit(self, frame: Frame) -> bool:
        """Hand `frame` to the recognizer unless `max_in_flight` is reached."""

        if self._executor is None:
            raise RuntimeError("LiveSession.submit() called outside run()")

        with self._lock:
            if self._in_flight >= self.config.max_in_flight:
                self.stats.skipped_busy += 1
                return False
            self._in_flight += 1
            self.stats.submitted += 1

        fut = self._executor.submit(self._annotate, frame)
        fut.add_done_callback(partial(self._on_done, frame.seq))
        return True

    def _transform_for(self, frame: Frame) -> DisplayTransform:
        if self.config.display_size is None:
            view_w, view_h = self.surface.view_size_for(frame.width_px, frame.height_px)
        else:
            view_w, view_h = self.config.display_size
        return DisplayTransform(
            image_width=frame.width_px,
            image_height=frame.height_px,
            view_width=view_w,
            view_height=view_h,
        )

    def apply_pending(self, frame: Frame, timeout: float | None = 0.0) -> bool:
        """Redraw the surface if a newer annotation is waiting. Loop thread only."""

        pending = self._slot.take(timeout=timeout)
        if pending is None:
            return False

        seq, annotation = pending
        self.current = annotation
        render_annotation(annotation, self._transform_for(frame), self.surface)
        self.stats.applied += 1
        logger.debug(
            "frame %d: applied annotation from frame %d (kept=%d groups=%d)",
            frame.seq,
            seq,
            len(annotation.kept_lines()),
            len(annotation.groups),
        )
        return True

    def run(self) -> SessionStats:
        """
        Drive the session until the source is exhausted, `stop()` is called or
        the display callback returns False.
        """

        self._stop.clear()
        last_frame: Frame | None = None

        with self.source, ThreadPoolExecutor(
            max_workers=self.config.recognition_workers, thread_name_prefix="recognition"
        ) as executor:
            self._executor = executor
            try:
                for frame in self.source.frames():
                    if self._stop.is_set():
                        break
                    last_frame = frame
                    self.stats.frames_read += 1

                    self.submit(frame)
                    self.apply_pending(frame, timeout=(None if self.config.wait_for_result else 0.0))

                    if self.display is not None and not self.display(frame):
                        self.stop()
                        break
            finally:
                self._executor = None
            # leaving the with-block waits for in-flight recognitions

        if last_frame is not None and not self._stop.is_set():
            # Show the result of the final frame(s) for finite sources.
            self.apply_pending(last_frame)
            if self.display is not None:
                self.display(last_frame)

        logger.info("session finished: %s", self.stats.to_dict())
        return self.stats
