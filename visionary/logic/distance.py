"""Distance estimation from bounding-box height."""

from __future__ import annotations

import math
from typing import Optional

from visionary.config import AVERAGE_OBJECT_HEIGHT_M, FOCAL_LENGTH


def estimate_distance(
    box_height: float,
    viewport_height_px: float,
    focal_length: float = FOCAL_LENGTH,
    object_height_m: float = AVERAGE_OBJECT_HEIGHT_M,
) -> Optional[float]:
    """Pinhole estimate in meters, or None when the box has no height on screen."""
    height_px = box_height * viewport_height_px
    if height_px <= 0:
        return None
    return (focal_length * object_height_m) / height_px


def rounded_distance(distance: float) -> int:
    # half away from zero, not banker's rounding
    return int(math.floor(distance + 0.5))
