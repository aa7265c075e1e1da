"""Single-frame-in-flight admission control."""

from __future__ import annotations

import threading
from typing import Any, Optional

from visionary.config import TEXT_DETECTION_INTERVAL_S


class FrameGovernor:
    """Admits one frame at a time and paces the text-detection cycle.

    Frames arriving while another one is in flight are dropped, not queued.
    Called from the capture thread and the pipeline consumer, so all state
    sits behind one lock.
    """

    def __init__(self, text_interval_s: float = TEXT_DETECTION_INTERVAL_S) -> None:
        self._lock = threading.Lock()
        self._busy = False
        self._text_interval_s = text_interval_s
        self._last_text_cycle: Optional[float] = None
        self._admitted = 0
        self._dropped = 0

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._busy

    @property
    def admitted(self) -> int:
        with self._lock:
            return self._admitted

    @property
    def dropped(self) -> int:
        with self._lock:
            return self._dropped

    def admit(self, frame: Any = None) -> bool:
        with self._lock:
            if self._busy:
                self._dropped += 1
                return False
            self._busy = True
            self._admitted += 1
            return True

    def complete(self) -> None:
        with self._lock:
            self._busy = False

    def text_cycle_due(self, now: float) -> bool:
        with self._lock:
            if (
                self._last_text_cycle is not None
                and now - self._last_text_cycle < self._text_interval_s
            ):
                return False
            self._last_text_cycle = now
            return True
