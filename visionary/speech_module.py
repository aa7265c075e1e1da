"""Speech output using offline TTS.

One worker thread owns the TTS engine. Callers only enqueue commands, so
``speak`` and ``stop`` never block frame processing. Pending commands are
collapsed on every tick: a stop discards everything queued before it, and
only the newest utterance is spoken.
"""

from __future__ import annotations

import logging
import platform
import queue
import shutil
import subprocess
import threading
import time
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from visionary.config import SPEECH_LANGUAGE, SPEECH_RATE_FACTOR, SPEECH_VOLUME

_SPEAK = "speak"
_STOP = "stop"


@dataclass(frozen=True)
class SpeechConfig:
    language: str = SPEECH_LANGUAGE
    rate_factor: float = SPEECH_RATE_FACTOR
    volume: float = SPEECH_VOLUME
    poll_interval_s: float = 0.02
    say_voice: Optional[str] = "Samantha"  # macOS fallback only


class SpeechChannel:
    """Single audio channel: speak(), stop(), is_speaking()."""

    def __init__(self, config: SpeechConfig | None = None, start: bool = True) -> None:
        self._logger = logging.getLogger(__name__)
        self.config = config or SpeechConfig()
        self._commands: queue.Queue[Tuple[str, str]] = queue.Queue()
        self._shutdown = threading.Event()
        self._speaking = threading.Event()

        self._engine: Optional[Any] = None
        self._fallback_say = False
        self._say_process: Optional[subprocess.Popen] = None

        self._worker = threading.Thread(
            target=self._run_worker, name="SpeechWorker", daemon=True
        )
        if start:
            self._worker.start()

    # ---------------------------
    # Public API
    # ---------------------------

    def speak(self, text: str) -> None:
        text = (text or "").strip()
        if not text or self._shutdown.is_set():
            return
        self._commands.put((_SPEAK, text))

    def stop(self) -> None:
        if self._shutdown.is_set():
            return
        self._commands.put((_STOP, ""))

    def is_speaking(self) -> bool:
        return self._speaking.is_set()

    def shutdown(self, timeout: float = 1.0) -> None:
        if self._shutdown.is_set():
            return
        self._shutdown.set()
        if self._worker.is_alive():
            self._worker.join(timeout=timeout)

    # ---------------------------
    # Worker
    # ---------------------------

    def _run_worker(self) -> None:
        self._init_backend()
        try:
            while not self._shutdown.is_set():
                self._tick()
                time.sleep(self.config.poll_interval_s)
        finally:
            self._halt_backend()
            if self._engine is not None:
                try:
                    self._engine.endLoop()
                except Exception as exc:
                    self._logger.debug("pyttsx3 endLoop failed: %s", exc)

    def _tick(self) -> None:
        stop_requested, text = self._collapse_pending()
        if stop_requested:
            self._halt_backend()
        if text:
            self._say(text)
        self._pump()

    def _collapse_pending(self) -> Tuple[bool, Optional[str]]:
        stop_requested = False
        text: Optional[str] = None
        for kind, payload in self._drain():
            if kind == _STOP:
                stop_requested = True
                text = None
            else:
                text = payload
        return stop_requested, text

    def _drain(self) -> List[Tuple[str, str]]:
        items: List[Tuple[str, str]] = []
        while True:
            try:
                items.append(self._commands.get_nowait())
            except queue.Empty:
                return items

    def _say(self, text: str) -> None:
        # newest request wins the channel
        if self._backend_busy():
            self._halt_backend()
        self._logger.info("Speaking: %s", text)
        if self._engine is not None:
            try:
                self._engine.say(text)
                self._speaking.set()
                return
            except Exception as exc:
                self._logger.error("pyttsx3 speak failed: %s", exc)
        if self._fallback_say:
            cmd = ["say", text]
            if self.config.say_voice:
                cmd = ["say", "-v", self.config.say_voice, text]
            try:
                self._say_process = subprocess.Popen(cmd)
                self._speaking.set()
            except Exception as exc:
                self._logger.error("macOS say failed: %s", exc)
        else:
            self._logger.warning("TTS unavailable: no backend available.")

    def _pump(self) -> None:
        if self._engine is not None:
            try:
                self._engine.iterate()
            except Exception as exc:
                self._logger.error("pyttsx3 iterate failed: %s", exc)
        if self._backend_busy():
            self._speaking.set()
        else:
            self._speaking.clear()

    def _backend_busy(self) -> bool:
        if self._say_process is not None and self._say_process.poll() is None:
            return True
        if self._engine is not None:
            try:
                return bool(self._engine.isBusy())
            except Exception:
                return False
        return False

    def _halt_backend(self) -> None:
        if self._engine is not None:
            try:
                self._engine.stop()
            except Exception as exc:
                self._logger.error("pyttsx3 stop failed: %s", exc)
        if self._say_process is not None and self._say_process.poll() is None:
            self._say_process.terminate()
        self._say_process = None
        self._speaking.clear()

    # ---------------------------
    # Backend setup
    # ---------------------------

    def _init_backend(self) -> None:
        try:
            import pyttsx3

            engine = pyttsx3.init()
            self._engine = engine
            self._apply_config()
            engine.startLoop(False)
        except Exception as exc:
            self._logger.error("pyttsx3 init failed: %s", exc)
            self._engine = None
            if platform.system() == "Darwin" and shutil.which("say") is not None:
                self._fallback_say = True
                self._logger.warning("Falling back to macOS 'say' command for TTS.")

    def _apply_config(self) -> None:
        if self._engine is None:
            return
        try:
            rate = self._engine.getProperty("rate")
            self._engine.setProperty("rate", int(rate * self.config.rate_factor))
            self._engine.setProperty("volume", max(0.0, min(1.0, self.config.volume)))
        except Exception as exc:
            self._logger.error("Failed to configure TTS engine: %s", exc)
        self._select_voice()

    def _select_voice(self) -> None:
        try:
            voices = self._engine.getProperty("voices") or []
        except Exception as exc:
            self._logger.error("Failed to list voices: %s", exc)
            return
        for voice in voices:
            if self._matches_language(voice, self.config.language):
                try:
                    self._engine.setProperty("voice", voice.id)
                    self._logger.info("Using voice: %s", voice.id)
                    return
                except Exception as exc:
                    self._logger.error("Failed to set voice: %s", exc)
                    return
        self._logger.warning(
            "No '%s' voice found; using default voice.", self.config.language
        )

    @staticmethod
    def _matches_language(voice: Any, language: str) -> bool:
        langs = getattr(voice, "languages", []) or []
        fields = []
        for lang in langs:
            if isinstance(lang, bytes):
                lang = lang.decode("utf-8", errors="ignore")
            fields.append(str(lang).lower().lstrip("\x05"))
        wanted = language.lower()
        for field in fields:
            if field == wanted or field[: len(wanted) + 1] in (wanted + "_", wanted + "-"):
                return True
        ident = str(getattr(voice, "id", "")).lower()
        return f"{wanted}-us" in ident or f"{wanted}_us" in ident
