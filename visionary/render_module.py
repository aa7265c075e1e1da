"""Bounding-box overlay for the debug window."""

from __future__ import annotations

import threading
from typing import Any, Dict

import cv2

from visionary.common import FrameDetectionSet


class OverlayRenderer:
    """Keeps the latest detection set and draws it onto frames.

    ``publish`` is called from the pipeline consumer; ``draw`` runs on the
    main thread, which is the only thread allowed to touch OpenCV windows.
    """

    def __init__(self, color: tuple[int, int, int] = (0, 255, 0)) -> None:
        self._lock = threading.Lock()
        self._detections: FrameDetectionSet = {}
        self._color = color

    def publish(self, detections: FrameDetectionSet) -> None:
        with self._lock:
            self._detections = dict(detections)

    def latest(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._detections)

    def clear(self) -> None:
        self.publish({})

    def draw(self, frame: Any, status: str | None = None) -> Any:
        height, width = frame.shape[:2]
        for label, det in self.latest().items():
            x, y, w, h = det.bbox
            x1, y1 = int(x * width), int(y * height)
            x2, y2 = int((x + w) * width), int((y + h) * height)
            cv2.rectangle(frame, (x1, y1), (x2, y2), self._color, 2)
            cv2.putText(
                frame,
                f"{label} {det.conf:.2f}",
                (x1, max(20, y1 - 5)),
                cv2.FONT_HERSHEY_SIMPLEX,
                0.6,
                self._color,
                2,
            )
        if status:
            cv2.putText(
                frame,
                status,
                (10, 30),
                cv2.FONT_HERSHEY_SIMPLEX,
                0.7,
                (255, 0, 0),
                2,
            )
        return frame
