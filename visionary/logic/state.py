"""Session-scoped announcement memory."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class AnnouncementState:
    last_announced_label: Optional[str] = None
    last_announced_confidence: float = 0.0
    last_announced_text: Optional[str] = None
    last_text_announcement_time: Optional[float] = None

    def remember_object(self, label: str, conf: float) -> None:
        self.last_announced_label = label
        self.last_announced_confidence = conf

    def remember_text(self, text: str, when: float) -> None:
        self.last_announced_text = text
        self.last_text_announcement_time = when
