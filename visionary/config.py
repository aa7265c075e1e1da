"""Application configuration constants."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

# Object path
OBJECT_CONF_THRESHOLD: float = 0.5

# Distance calibration (pinhole approximation, single average object height)
FOCAL_LENGTH: float = 1400.0
AVERAGE_OBJECT_HEIGHT_M: float = 0.3

# Text path
TEXT_DETECTION_INTERVAL_S: float = 0.5
STABLE_TEXT_THRESHOLD: int = 3
TEXT_SIMILARITY_THRESHOLD: float = 0.8
TEXT_ANNOUNCEMENT_COOLDOWN_S: float = 5.0
TEXT_ANNOUNCEMENT_PREFIX: str = "Detected text:"
OCR_MIN_WORD_CONF: int = 40

# Speech
SPEECH_LANGUAGE: str = "en"
SPEECH_RATE_FACTOR: float = 0.9
SPEECH_VOLUME: float = 0.8
STARTUP_PHRASE: str = "Walking Stick Online"

# Camera / UI
CAMERA_WIDTH: int = 1280
CAMERA_HEIGHT: int = 720
WINDOW_NAME: str = "Visionary"
DEBUG_DRAW: bool = True

WEIGHTS_PATH: str = os.environ.get(
    "VISIONARY_WEIGHTS", os.path.join("assets", "yolov8x.pt")
)
CAMERA_INDEX: int = int(os.environ.get("VISIONARY_CAMERA_INDEX", "0"))
LOG_LEVEL: str = os.environ.get("VISIONARY_LOG_LEVEL", "INFO")


@dataclass(frozen=True)
class PipelineConfig:
    object_conf_threshold: float = OBJECT_CONF_THRESHOLD
    text_interval_s: float = TEXT_DETECTION_INTERVAL_S
    stable_text_threshold: int = STABLE_TEXT_THRESHOLD
    similarity_threshold: float = TEXT_SIMILARITY_THRESHOLD
    text_cooldown_s: float = TEXT_ANNOUNCEMENT_COOLDOWN_S
    # None = use the height of each submitted frame
    viewport_height_px: Optional[float] = None
