"""Camera capture module."""

from __future__ import annotations

import logging
import sys
import threading
import time
from typing import Any, Callable, Iterable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    import numpy as np

Frame = "np.ndarray" if TYPE_CHECKING else Any
FrameCallback = Callable[[Any], None]


class CameraStream:
    """Background capture thread that pushes every frame to a callback.

    The callback runs on the capture thread and must not block; the latest
    frame is also kept for the display loop on the main thread.
    """

    def __init__(
        self,
        camera_index: int = 0,
        width: int | None = None,
        height: int | None = None,
        fallback_indices: Iterable[int] = (1, 2, 3),
        fps_smoothing: float = 0.9,
        backend: int | None = None,
    ) -> None:
        self._logger = logging.getLogger(__name__)
        self._cv2 = None
        self._cap = None
        self._width = width
        self._height = height
        self._fps_smoothing = max(0.0, min(fps_smoothing, 0.99))
        self._fps = 0.0
        self._last_ts = time.monotonic()
        self._backend = backend

        self._frame_lock = threading.Lock()
        self._latest: Optional[Frame] = None
        self._running = threading.Event()
        self._thread: Optional[threading.Thread] = None

        try:
            import cv2
        except Exception as exc:
            self._logger.error("OpenCV not available: %s", exc)
            return

        self._cv2 = cv2
        if self._backend is None and sys.platform == "darwin":
            self._backend = cv2.CAP_AVFOUNDATION
        self._cap = self._open_camera(camera_index, fallback_indices)
        if self._cap is None:
            self._logger.error("No camera found. Try a different index or check permissions.")

    @property
    def fps(self) -> float:
        return self._fps

    @property
    def opened(self) -> bool:
        return self._cap is not None and self._cap.isOpened()

    def start(self, on_frame: FrameCallback) -> bool:
        if not self.opened:
            return False
        if self._running.is_set():
            return True
        self._running.set()
        self._thread = threading.Thread(
            target=self._capture_loop, args=(on_frame,), name="CameraCapture", daemon=True
        )
        self._thread.start()
        self._logger.info("Camera session started.")
        return True

    def latest(self) -> Optional[Frame]:
        with self._frame_lock:
            return self._latest

    def stop(self) -> None:
        self._running.clear()
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None

    def release(self) -> None:
        self.stop()
        if self._cap is not None and self._cap.isOpened():
            self._cap.release()

    def _capture_loop(self, on_frame: FrameCallback) -> None:
        while self._running.is_set():
            ok, frame = self._cap.read()
            if not ok or frame is None:
                self._logger.warning("No frame received from camera.")
                time.sleep(0.05)
                continue
            self._update_fps()
            with self._frame_lock:
                self._latest = frame
            try:
                on_frame(frame)
            except Exception as exc:
                self._logger.error("Frame callback failed: %s", exc)

    def _open_camera(self, camera_index: int, fallback_indices: Iterable[int]) -> Optional[Any]:
        indices = [camera_index] + [idx for idx in fallback_indices if idx != camera_index]
        for idx in indices:
            try:
                if self._backend is not None:
                    cap = self._cv2.VideoCapture(idx, self._backend)
                else:
                    cap = self._cv2.VideoCapture(idx)
            except Exception as exc:
                self._logger.warning("Failed to open camera index %s: %s", idx, exc)
                continue
            if cap.isOpened():
                if self._width is not None:
                    cap.set(self._cv2.CAP_PROP_FRAME_WIDTH, self._width)
                if self._height is not None:
                    cap.set(self._cv2.CAP_PROP_FRAME_HEIGHT, self._height)
                self._logger.info("Camera opened at index %s", idx)
                return cap
            cap.release()
        return None

    def _update_fps(self) -> None:
        now = time.monotonic()
        dt = now - self._last_ts
        if dt > 0:
            inst = 1.0 / dt
            if self._fps == 0.0:
                self._fps = inst
            else:
                self._fps = (self._fps * self._fps_smoothing) + (inst * (1.0 - self._fps_smoothing))
        self._last_ts = now
