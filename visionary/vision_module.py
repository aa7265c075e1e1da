"""Object detection using YOLOv8."""

from __future__ import annotations

import importlib.util
import logging
from pathlib import Path
from typing import Any, List, TYPE_CHECKING

if TYPE_CHECKING:
    import numpy as np

from visionary.common import BBox, Detection


class ObjectDetector:
    """YOLOv8 detector producing normalized boxes; empty output in dummy mode."""

    def __init__(self, weights_path: str, allowed_labels: List[str] | None = None) -> None:
        self._weights_path = Path(weights_path)
        self._logger = logging.getLogger(__name__)
        self._dummy_mode = not self._weights_path.exists()
        self._model = None
        self._allowed_labels = (
            {label.strip().lower() for label in allowed_labels}
            if allowed_labels
            else None
        )
        if importlib.util.find_spec("ultralytics") is None:
            self._logger.error(
                "Ultralytics not installed. Install the project dependencies to use YOLO."
            )
            self._dummy_mode = True
        if self._dummy_mode:
            self._logger.warning(
                "YOLO weights not found at %s. Running in dummy mode.",
                self._weights_path,
            )
        else:
            from ultralytics import YOLO

            try:
                self._model = YOLO(str(self._weights_path))
                self._logger.info("YOLO model loaded from %s.", self._weights_path)
            except Exception as exc:
                self._logger.error("Failed to load YOLO weights: %s", exc)
                self._dummy_mode = True

    @property
    def dummy_mode(self) -> bool:
        return self._dummy_mode

    def detect(self, frame: Any) -> List[Detection]:
        if frame is None or self._dummy_mode or self._model is None:
            return []
        try:
            results = self._model.predict(source=frame, verbose=False)
        except Exception as exc:
            self._logger.error("Error during YOLO inference: %s", exc)
            return []
        detections: List[Detection] = []
        for result in results:
            boxes = result.boxes
            if boxes is None or len(boxes) == 0:
                continue
            xyxyn = boxes.xyxyn.cpu().numpy()
            confs = boxes.conf.cpu().numpy()
            classes = boxes.cls.cpu().numpy().astype(int)
            names = result.names or getattr(self._model, "names", {})
            for coords, conf, cls_idx in zip(xyxyn, confs, classes):
                label = names.get(int(cls_idx), str(int(cls_idx)))
                if self._allowed_labels and label.lower() not in self._allowed_labels:
                    continue
                detections.append(
                    Detection(label=label, conf=float(conf), bbox=self._to_xywh(coords))
                )
        return detections

    @staticmethod
    def _to_xywh(coords: "np.ndarray") -> BBox:
        x1, y1, x2, y2 = (max(0.0, min(float(v), 1.0)) for v in coords)
        return x1, y1, max(0.0, x2 - x1), max(0.0, y2 - y1)
