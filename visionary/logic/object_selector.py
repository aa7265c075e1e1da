"""Highest-confidence object selection for announcement."""

from __future__ import annotations

import logging
from typing import Optional

from visionary.common import Decision, Detection, FrameDetectionSet
from visionary.logic.distance import estimate_distance, rounded_distance
from visionary.logic.state import AnnouncementState


class ObjectSelector:
    """Picks the single object worth announcing from a frame's detections."""

    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def select(self, frame_set: FrameDetectionSet) -> Optional[Detection]:
        best: Optional[Detection] = None
        # strictly greater keeps the first one seen on ties
        for det in frame_set.values():
            if best is None or det.conf > best.conf:
                best = det
        return best

    @staticmethod
    def is_worthy(det: Detection, state: AnnouncementState) -> bool:
        return (
            det.label != state.last_announced_label
            or det.conf > state.last_announced_confidence
        )

    def decide(
        self,
        frame_set: FrameDetectionSet,
        state: AnnouncementState,
        viewport_height_px: float,
    ) -> Optional[Decision]:
        """Returns an object announcement, or None when nothing new is in view."""
        top = self.select(frame_set)
        if top is None:
            return None
        distance = estimate_distance(top.height, viewport_height_px)
        if distance is None:
            self._logger.debug("Distance unknown for %s; skipping frame.", top.label)
            return None
        meters = rounded_distance(distance)
        if not self.is_worthy(top, state):
            self._logger.debug(
                "No change: %s (conf=%.2f) already announced.", top.label, top.conf
            )
            return None
        debug = (
            f"Highest confidence object: {top.label} with confidence "
            f"{top.conf:.2f} and distance {meters}m"
        )
        return Decision(
            text_to_say=f"{top.label} at {meters} meters",
            debug_text=debug,
            conf=top.conf,
            label=top.label,
        )
