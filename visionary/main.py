"""Main integration entry point."""

from __future__ import annotations

import logging
import time

import cv2

from visionary.camera_module import CameraStream
from visionary.config import (
    CAMERA_HEIGHT,
    CAMERA_INDEX,
    CAMERA_WIDTH,
    DEBUG_DRAW,
    LOG_LEVEL,
    STARTUP_PHRASE,
    WEIGHTS_PATH,
    WINDOW_NAME,
    PipelineConfig,
)
from visionary.pipeline import Pipeline
from visionary.render_module import OverlayRenderer
from visionary.speech_module import SpeechChannel
from visionary.text_ocr_module import TextRecognizer
from visionary.vision_module import ObjectDetector


def main() -> None:
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
        format="[%(levelname)s] %(message)s",
    )
    camera = CameraStream(camera_index=CAMERA_INDEX, width=CAMERA_WIDTH, height=CAMERA_HEIGHT)
    detector = ObjectDetector(weights_path=WEIGHTS_PATH)
    recognizer = TextRecognizer()
    speech = SpeechChannel()
    renderer = OverlayRenderer()
    pipeline = Pipeline(
        detector,
        recognizer if recognizer.available else None,
        speech,
        renderer=renderer,
        config=PipelineConfig(),
    )

    if DEBUG_DRAW:
        cv2.namedWindow(WINDOW_NAME, cv2.WINDOW_NORMAL)

    pipeline.start()
    if not camera.opened:
        logging.error("Camera unavailable; exiting.")
        pipeline.stop()
        speech.shutdown()
        return
    pipeline.say(STARTUP_PHRASE)
    camera.start(pipeline.submit_frame)
    try:
        while True:
            if not DEBUG_DRAW:
                time.sleep(0.05)
                continue
            frame = camera.latest()
            if frame is not None:
                status = f"FPS: {camera.fps:.1f} | dropped: {pipeline.governor.dropped}"
                cv2.imshow(WINDOW_NAME, renderer.draw(frame.copy(), status))
            key = cv2.waitKey(30) & 0xFF
            if key in (ord("q"), 27):
                break
    except KeyboardInterrupt:
        logging.info("Interrupted.")
    finally:
        camera.release()
        pipeline.stop()
        speech.shutdown()
        cv2.destroyAllWindows()


if __name__ == "__main__":
    main()
