from __future__ import annotations

import base64
import io
import logging
from typing import Any, Optional

import numpy as np
from google.genai import types
from pydub import AudioSegment

from .config import TTS_MODEL


logger = logging.getLogger(__name__)

SAMPLE_RATE = 24000
SAMPLE_WIDTH = 2
CHANNELS = 1
MAX_TTS_CHARS = 4000
VOICE_NAME = "Fenrir"


class AudioGenerationError(RuntimeError):
    pass


def _inline_audio(resp: Any) -> Optional[bytes]:
    candidates = getattr(resp, "candidates", None) or []
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    if not parts:
        return None
    inline = getattr(parts[0], "inline_data", None)
    data = getattr(inline, "data", None)
    if not data:
        return None
    if isinstance(data, str):
        return base64.b64decode(data)
    return bytes(data)


def synthesize_speech(text: str, *, client: Any, voice_name: str = VOICE_NAME) -> bytes:
    """Narrate the start of a study guide with Gemini TTS.

    Only the first 4000 characters are sent. Returns raw mono 16-bit PCM at 24 kHz.
    """

    prompt = "Read this study guide clearly and professionally. Content: " + text[:MAX_TTS_CHARS]

    resp = client.models.generate_content(
        model=TTS_MODEL,
        contents=prompt,
        config=types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice_name),
                )
            ),
        ),
    )

    pcm = _inline_audio(resp)
    if not pcm:
        raise AudioGenerationError("No audio generated by the model.")
    logger.info("Received %d bytes of audio from %s", len(pcm), TTS_MODEL)
    return pcm


def decode_pcm16(data: bytes) -> np.ndarray:
    """Little-endian 16-bit PCM to float32 samples in [-1, 1); a trailing odd byte is dropped."""

    usable = len(data) - (len(data) % SAMPLE_WIDTH)
    samples = np.frombuffer(data[:usable], dtype="<i2")
    return samples.astype(np.float32) / 32768.0


def pcm_to_wav(data: bytes, sample_rate: int = SAMPLE_RATE) -> bytes:
    usable = len(data) - (len(data) % SAMPLE_WIDTH)
    seg = AudioSegment(
        data=data[:usable],
        sample_width=SAMPLE_WIDTH,
        frame_rate=sample_rate,
        channels=CHANNELS,
    )
    buf = io.BytesIO()
    seg.export(buf, format="wav")
    return buf.getvalue()


class AudioGuide:
    """Narration for one study guide.

    The first play() calls the TTS endpoint; later calls reuse the decoded buffer.
    """

    def __init__(self, text: str, *, client: Any):
        self.text = text
        self._client = client
        self._pcm: Optional[bytes] = None
        self._samples: Optional[np.ndarray] = None

    @property
    def has_audio(self) -> bool:
        return self._samples is not None

    def play(self) -> np.ndarray:
        if self._samples is None:
            pcm = synthesize_speech(self.text, client=self._client)
            self._samples = decode_pcm16(pcm)
            self._pcm = pcm
        return self._samples

    def wav_bytes(self) -> bytes:
        if self._pcm is None:
            self.play()
        return pcm_to_wav(self._pcm or b"")

    @property
    def duration_seconds(self) -> float:
        if self._samples is None:
            return 0.0
        return len(self._samples) / SAMPLE_RATE

    def close(self) -> None:
        self._pcm = None
        self._samples = None
