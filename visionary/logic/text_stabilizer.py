"""Text stabilization across OCR cycles."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from visionary.config import STABLE_TEXT_THRESHOLD, TEXT_SIMILARITY_THRESHOLD
from visionary.logic.similarity import similar


@dataclass(frozen=True)
class StableTextCandidate:
    text: str
    streak: int


class TextStabilizer:
    """Streak counter that promotes a recurring OCR string to stable text.

    A candidate survives as long as each new observation is similar to it;
    a dissimilar observation replaces it and restarts the streak, and a cycle
    without text drops it entirely.
    """

    def __init__(
        self,
        threshold: int = STABLE_TEXT_THRESHOLD,
        similarity_threshold: float = TEXT_SIMILARITY_THRESHOLD,
    ) -> None:
        self._logger = logging.getLogger(__name__)
        self._threshold = threshold
        self._similarity_threshold = similarity_threshold
        self._candidate: Optional[StableTextCandidate] = None

    @property
    def candidate(self) -> Optional[StableTextCandidate]:
        return self._candidate

    def observe(self, text: Optional[str]) -> Optional[str]:
        """Feed one cycle's text; returns the stable text if it is eligible."""
        if text is None or not text.strip():
            if self._candidate is not None:
                self._logger.debug("No text detected; dropping candidate.")
            self.clear()
            return None

        current = self._candidate
        if current is None:
            self._candidate = StableTextCandidate(text=text, streak=1)
        elif similar(current.text, text, self._similarity_threshold):
            self._candidate = StableTextCandidate(
                text=current.text, streak=current.streak + 1
            )
        else:
            self._logger.debug(
                "Text candidate replaced: %r -> %r", current.text, text
            )
            self._candidate = StableTextCandidate(text=text, streak=1)
        return self.stable()

    def stable(self) -> Optional[str]:
        if self._candidate is None or self._candidate.streak < self._threshold:
            return None
        return self._candidate.text

    def clear(self) -> None:
        self._candidate = None
