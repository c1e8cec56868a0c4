from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from .config import AppConfig
from .history import HistoryStore, load_settings, save_settings
from .models import AnswerData, AppSettings, HistoryItem, ProcessState
from .tts import AudioGuide
from .video import VideoCompanion


logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Everything the views share for one browser session.

    Created once per session with `AppState.load` and kept in st.session_state.
    """

    config: AppConfig
    settings: AppSettings
    history: HistoryStore
    process: ProcessState = field(default_factory=ProcessState)
    answer: Optional[AnswerData] = None
    audio: Optional[AudioGuide] = None
    video: Optional[VideoCompanion] = None

    @classmethod
    def load(cls, config: AppConfig) -> "AppState":
        history = HistoryStore(config.data_dir)
        history.load()
        return cls(config=config, settings=load_settings(config.data_dir), history=history)

    @property
    def is_busy(self) -> bool:
        return self.process.status == "processing"

    def update_settings(self, settings: AppSettings) -> None:
        if settings == self.settings:
            return
        self.settings = settings
        try:
            save_settings(self.config.data_dir, settings)
        except OSError as e:
            logger.error("Could not save settings: %s", e)

    def begin_processing(self, message: str = "Analyzing document...") -> None:
        if self.is_busy:
            raise RuntimeError("A study guide is already being generated.")
        self._set_answer(None)
        self.process = ProcessState(status="processing", message=message)

    def succeed(self, file_name: str, answer: AnswerData) -> Optional[HistoryItem]:
        self._set_answer(answer)
        self.process = ProcessState(status="success")
        try:
            return self.history.add(file_name, answer)
        except OSError as e:
            # The guide stays on screen and in this session's list; only the file is stale.
            logger.error("Could not save history to %s: %s", self.history.path, e)
            return None

    def fail(self, message: str) -> None:
        self.process = ProcessState(status="error", message=message)

    def show(self, item: HistoryItem) -> None:
        self._set_answer(item.data)
        self.process = ProcessState(status="success")

    def reset(self) -> None:
        self._set_answer(None)
        self.process = ProcessState()

    def clear_history(self) -> None:
        self.history.clear()

    def _set_answer(self, answer: Optional[AnswerData]) -> None:
        # Companions belong to the displayed guide.
        if self.audio is not None:
            self.audio.close()
            self.audio = None
        if self.video is not None:
            self.video.release()
            self.video = None
        self.answer = answer
