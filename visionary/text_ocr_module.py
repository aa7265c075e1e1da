"""Offline OCR module for reading visible text."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import cv2

from visionary.config import OCR_MIN_WORD_CONF


class TextRecognizer:
    """Recognizes text in a frame with tesseract; returns one joined string."""

    def __init__(self, min_word_conf: int = OCR_MIN_WORD_CONF) -> None:
        self._logger = logging.getLogger(__name__)
        self._min_word_conf = min_word_conf
        self._tesseract_available = self._check_tesseract()
        if not self._tesseract_available:
            self._logger.warning("pytesseract/tesseract not available; text path disabled.")

    @property
    def available(self) -> bool:
        return self._tesseract_available

    def recognize(self, frame: Any) -> Optional[str]:
        if frame is None or not self._tesseract_available:
            return None
        try:
            best_lines: List[Dict[str, Any]] = []
            best_score = 0.0
            for name, image in self._preprocess_variants(frame):
                words = self._filter_words(self._run_ocr_data(image))
                lines = self._group_lines(words)
                score = self._score_lines(lines)
                self._logger.debug(
                    "OCR variant=%s words=%d lines=%d score=%.2f",
                    name,
                    len(words),
                    len(lines),
                    score,
                )
                if score > best_score:
                    best_lines, best_score = lines, score
        except Exception as exc:
            self._logger.error("Failed to perform text detection: %s", exc)
            return None
        text = " ".join(line["text"] for line in best_lines).strip()
        return text or None

    def _preprocess_variants(self, frame: Any) -> List[Tuple[str, Any]]:
        gray = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
        resized = cv2.resize(gray, None, fx=1.5, fy=1.5, interpolation=cv2.INTER_CUBIC)
        blurred = cv2.GaussianBlur(resized, (3, 3), 0)
        clahe = cv2.createCLAHE(clipLimit=2.0, tileGridSize=(8, 8))
        enhanced = clahe.apply(blurred)
        _, otsu = cv2.threshold(enhanced, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
        adaptive = cv2.adaptiveThreshold(
            enhanced, 255, cv2.ADAPTIVE_THRESH_GAUSSIAN_C, cv2.THRESH_BINARY, 31, 5
        )
        return [("otsu", otsu), ("adaptive", adaptive)]

    def _run_ocr_data(self, image: Any) -> Dict[str, List[Any]]:
        import pytesseract

        config = "--oem 3 --psm 11"
        return pytesseract.image_to_data(
            image, config=config, output_type=pytesseract.Output.DICT
        )

    def _filter_words(self, data: Dict[str, List[Any]]) -> List[Dict[str, Any]]:
        words: List[Dict[str, Any]] = []
        for i, text in enumerate(data.get("text", [])):
            token = (text or "").strip()
            if not token:
                continue
            try:
                conf = float(data["conf"][i])
            except (KeyError, IndexError, ValueError, TypeError):
                continue
            if conf < self._min_word_conf:
                continue
            if not self._is_meaningful_token(token):
                continue
            words.append(
                {
                    "text": token,
                    "conf": conf,
                    "block": self._field(data, "block_num", i),
                    "par": self._field(data, "par_num", i),
                    "line": self._field(data, "line_num", i),
                    "left": int(self._field(data, "left", i)),
                }
            )
        return words

    @staticmethod
    def _field(data: Dict[str, List[Any]], key: str, i: int) -> Any:
        values = data.get(key) or []
        return values[i] if i < len(values) else 0

    def _group_lines(self, words: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        lines: Dict[Tuple[int, int, int], List[Dict[str, Any]]] = {}
        for word in words:
            key = (word["block"], word["par"], word["line"])
            lines.setdefault(key, []).append(word)
        line_items: List[Dict[str, Any]] = []
        for key in sorted(lines):
            line_words = sorted(lines[key], key=lambda w: w["left"])
            line_items.append(
                {
                    "text": " ".join(w["text"] for w in line_words),
                    "conf": sum(w["conf"] for w in line_words) / len(line_words),
                }
            )
        return line_items

    def _score_lines(self, lines: List[Dict[str, Any]]) -> float:
        if not lines:
            return 0.0
        total_chars = sum(len(line["text"]) for line in lines)
        mean_conf = sum(line["conf"] for line in lines) / len(lines)
        return (mean_conf / 100.0) * total_chars

    def _is_meaningful_token(self, token: str) -> bool:
        if len(token) < 2:
            return False
        alnum_count = sum(1 for ch in token if ch.isalnum())
        return alnum_count >= max(2, len(token) // 2)

    def _check_tesseract(self) -> bool:
        try:
            import pytesseract
            from shutil import which

            tesseract_path = self._resolve_tesseract_path()
            if tesseract_path:
                pytesseract.pytesseract.tesseract_cmd = tesseract_path
            elif which("tesseract") is None:
                return False
            _ = pytesseract.get_tesseract_version()
            return True
        except Exception:
            return False

    def _resolve_tesseract_path(self) -> Optional[str]:
        env_path = os.environ.get("TESSERACT_CMD")
        if env_path and Path(env_path).exists():
            return env_path
        windows_default = Path("C:/Program Files/Tesseract-OCR/tesseract.exe")
        if windows_default.exists():
            return str(windows_default)
        return None
