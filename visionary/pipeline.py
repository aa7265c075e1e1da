"""Frame-to-speech pipeline.

Detection and recognition run on worker threads and post their results to
one message queue. A single consumer owns the tracker, the selector and the
arbiter, and handles messages strictly in arrival order, so no announcement
state is touched from the capture or worker threads.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, TYPE_CHECKING, Union

from visionary.announcer_module import AnnouncementArbiter
from visionary.common import Detection, build_frame_set
from visionary.config import PipelineConfig
from visionary.logic.frame_governor import FrameGovernor
from visionary.logic.object_selector import ObjectSelector
from visionary.logic.text_stabilizer import TextStabilizer

if TYPE_CHECKING:
    from visionary.render_module import OverlayRenderer
    from visionary.speech_module import SpeechChannel
    from visionary.text_ocr_module import TextRecognizer
    from visionary.vision_module import ObjectDetector


@dataclass(frozen=True)
class ObjectsDetected:
    detections: List[Detection]
    viewport_height: float


@dataclass(frozen=True)
class TextRecognized:
    text: Optional[str]
    timestamp: float


@dataclass(frozen=True)
class StatusMessage:
    text: str


Message = Union[ObjectsDetected, TextRecognized, StatusMessage]

_STOP = object()


class Pipeline:
    """Session-scoped wiring of governor, stabilizers and arbiter."""

    def __init__(
        self,
        detector: "ObjectDetector",
        recognizer: Optional["TextRecognizer"],
        speech: "SpeechChannel",
        renderer: Optional["OverlayRenderer"] = None,
        config: PipelineConfig | None = None,
        executor: Executor | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._logger = logging.getLogger(__name__)
        self.config = config or PipelineConfig()
        self._detector = detector
        self._recognizer = recognizer
        self._renderer = renderer
        self._clock = clock

        self.governor = FrameGovernor(self.config.text_interval_s)
        self.tracker = TextStabilizer(
            self.config.stable_text_threshold, self.config.similarity_threshold
        )
        self.selector = ObjectSelector()
        self.arbiter = AnnouncementArbiter(
            speech, self.config.text_cooldown_s, self.config.similarity_threshold
        )

        self._messages: queue.Queue[Any] = queue.Queue()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=2, thread_name_prefix="Detection"
        )
        self._consumer: Optional[threading.Thread] = None

    # ---------------------------
    # Session lifecycle
    # ---------------------------

    def start(self) -> None:
        if self._consumer is not None:
            return
        self._consumer = threading.Thread(
            target=self._consume, name="PipelineConsumer", daemon=True
        )
        self._consumer.start()

    def stop(self, timeout: float = 2.0) -> None:
        if self._consumer is not None:
            self._messages.put(_STOP)
            self._consumer.join(timeout=timeout)
            self._consumer = None
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)
        self.tracker.clear()
        if self._renderer is not None:
            self._renderer.clear()
        self._logger.info(
            "Pipeline stopped (admitted=%d, dropped=%d).",
            self.governor.admitted,
            self.governor.dropped,
        )

    # ---------------------------
    # Producer side (capture thread)
    # ---------------------------

    def submit_frame(self, frame: Any, now: float | None = None) -> bool:
        """Admit a frame and dispatch it; returns False when it was dropped."""
        if not self.governor.admit(frame):
            return False
        now = self._clock() if now is None else now
        viewport = self._viewport_height(frame)
        try:
            if self._recognizer is not None and self.governor.text_cycle_due(now):
                self._executor.submit(self._run_text_path, frame, now)
            self._executor.submit(self._run_object_path, frame, viewport)
        except RuntimeError as exc:
            self._logger.warning("Frame dispatch rejected: %s", exc)
            self.governor.complete()
            return False
        return True

    def say(self, text: str) -> None:
        self._messages.put(StatusMessage(text))

    def _run_object_path(self, frame: Any, viewport: float) -> None:
        # always post: handling the result is what releases the governor
        detections: List[Detection] = []
        try:
            detections = list(self._detector.detect(frame) or [])
        except Exception as exc:
            self._logger.error("Object detection failed: %s", exc)
        finally:
            self._messages.put(ObjectsDetected(detections, viewport))

    def _run_text_path(self, frame: Any, timestamp: float) -> None:
        try:
            text = self._recognizer.recognize(frame)
        except Exception as exc:
            self._logger.error("Text recognition failed: %s", exc)
            text = None
        self._messages.put(TextRecognized(text, timestamp))

    def _viewport_height(self, frame: Any) -> float:
        if self.config.viewport_height_px is not None:
            return float(self.config.viewport_height_px)
        shape = getattr(frame, "shape", None)
        if not shape:
            return 0.0
        return float(shape[0])

    # ---------------------------
    # Consumer side
    # ---------------------------

    def drain(self) -> int:
        """Handle every pending message on the calling thread."""
        handled = 0
        while True:
            try:
                message = self._messages.get_nowait()
            except queue.Empty:
                return handled
            if message is _STOP:
                continue
            self._dispatch(message)
            handled += 1

    def handle(self, message: Message) -> None:
        if isinstance(message, ObjectsDetected):
            try:
                self._handle_objects(message)
            finally:
                self.governor.complete()
        elif isinstance(message, TextRecognized):
            self._handle_text(message)
        elif isinstance(message, StatusMessage):
            self.arbiter.announce_status(message.text)
        else:
            self._logger.warning("Unknown pipeline message: %r", message)

    def _consume(self) -> None:
        while True:
            message = self._messages.get()
            if message is _STOP:
                return
            self._dispatch(message)

    def _dispatch(self, message: Message) -> None:
        try:
            self.handle(message)
        except Exception as exc:
            self._logger.error("Failed to handle %s: %s", type(message).__name__, exc)

    def _handle_objects(self, message: ObjectsDetected) -> None:
        frame_set = build_frame_set(message.detections, self.config.object_conf_threshold)
        if self._renderer is not None:
            self._renderer.publish(frame_set)
        decision = self.selector.decide(
            frame_set, self.arbiter.state, message.viewport_height
        )
        if decision is not None:
            self.arbiter.announce_object(decision)

    def _handle_text(self, message: TextRecognized) -> None:
        stable = self.tracker.observe(message.text)
        if stable is not None:
            self.arbiter.announce_text(stable, message.timestamp)
