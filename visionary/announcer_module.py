"""Announcement arbitration over the single speech channel."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from visionary.common import Decision
from visionary.config import (
    TEXT_ANNOUNCEMENT_COOLDOWN_S,
    TEXT_ANNOUNCEMENT_PREFIX,
    TEXT_SIMILARITY_THRESHOLD,
)
from visionary.logic.similarity import similar
from visionary.logic.state import AnnouncementState

if TYPE_CHECKING:
    from visionary.speech_module import SpeechChannel


class AnnouncementArbiter:
    """Owns the speech channel for object and text announcements.

    There is no queue and no priority: whichever request arrives last stops
    the current utterance and takes the channel. Text announcements are
    additionally gated by a cooldown and by similarity to the last text.
    """

    def __init__(
        self,
        speaker: "SpeechChannel",
        text_cooldown_s: float = TEXT_ANNOUNCEMENT_COOLDOWN_S,
        similarity_threshold: float = TEXT_SIMILARITY_THRESHOLD,
    ) -> None:
        self._logger = logging.getLogger(__name__)
        self._speaker = speaker
        self._text_cooldown_s = text_cooldown_s
        self._similarity_threshold = similarity_threshold
        self.state = AnnouncementState()

    def announce_object(self, decision: Decision) -> None:
        self._logger.info("Decision: %s", decision.debug_text)
        self.state.remember_object(decision.label or "", decision.conf)
        self._take_channel(decision.text_to_say)

    def should_announce_text(self, text: str, now: float) -> bool:
        last_time = self.state.last_text_announcement_time
        if last_time is not None and now - last_time < self._text_cooldown_s:
            return False
        last_text = self.state.last_announced_text
        if last_text is not None:
            return not similar(last_text, text, self._similarity_threshold)
        return True

    def announce_text(self, text: str, now: float) -> bool:
        if not self.should_announce_text(text, now):
            self._logger.debug("Text suppressed (cooldown or repeat): %s", text)
            return False
        self._logger.info("Detected stable text: %s", text)
        self._take_channel(f"{TEXT_ANNOUNCEMENT_PREFIX} {text}")
        self.state.remember_text(text, now)
        return True

    def announce_status(self, text: str) -> None:
        self._take_channel(text)

    def _take_channel(self, utterance: str) -> None:
        if self._speaker.is_speaking():
            self._speaker.stop()
        self._speaker.speak(utterance)
