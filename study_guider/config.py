from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


logger = logging.getLogger(__name__)

PRIMARY_MODEL = "gemini-3-pro-preview"
FALLBACK_MODEL = "gemini-2.5-flash"
TTS_MODEL = "gemini-2.5-flash-preview-tts"
VIDEO_MODEL = "veo-3.1-fast-generate-preview"


@dataclass(frozen=True)
class AppConfig:
    api_key: str = ""
    data_dir: str = ""
    request_timeout: float = 300.0
    log_level: str = "INFO"

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r (not a number); using %s", name, raw, default)
        return default


def load_config() -> AppConfig:
    """Read configuration from the process environment (and a .env file if present).

    A missing API key is logged but not fatal; hosted calls will fail later
    with an auth error instead.
    """

    load_dotenv()

    api_key = (os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or "").strip()
    if not api_key:
        logger.error("GEMINI_API_KEY is missing in the environment variables.")

    data_dir = os.getenv("STUDY_GUIDER_DATA_DIR", "").strip() or str(Path.home() / ".study_guider")

    return AppConfig(
        api_key=api_key,
        data_dir=data_dir,
        request_timeout=_float_env("STUDY_GUIDER_REQUEST_TIMEOUT", 300.0),
        log_level=(os.getenv("STUDY_GUIDER_LOG_LEVEL", "") or "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
