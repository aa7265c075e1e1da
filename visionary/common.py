"""Shared dataclasses for detections and decisions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

# Normalized (x, y, w, h), origin top-left, all in [0, 1]
BBox = Tuple[float, float, float, float]


@dataclass(frozen=True)
class Detection:
    label: str
    conf: float
    bbox: BBox

    @property
    def height(self) -> float:
        return self.bbox[3]


# label -> Detection for a single frame
FrameDetectionSet = Dict[str, Detection]


def build_frame_set(
    detections: Iterable[Detection], min_conf: float
) -> FrameDetectionSet:
    """Keep detections above ``min_conf``; a repeated label keeps its last box."""
    frame_set: FrameDetectionSet = {}
    for det in detections:
        if det.conf <= min_conf:
            continue
        frame_set[det.label] = det
    return frame_set


@dataclass(frozen=True)
class Decision:
    text_to_say: str
    debug_text: str
    conf: float = 0.0
    label: Optional[str] = None
