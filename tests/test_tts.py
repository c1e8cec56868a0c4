from __future__ import annotations

import base64
import struct

import numpy as np
import pytest

from study_guider.config import TTS_MODEL
from study_guider.tts import (
    MAX_TTS_CHARS,
    AudioGenerationError,
    AudioGuide,
    decode_pcm16,
    pcm_to_wav,
    synthesize_speech,
)

from .fakes import FakeClient, audio_response


PCM = struct.pack("<4h", 0, 16384, -32768, 32767)


def test_decode_length_and_range():
    samples = decode_pcm16(PCM)
    assert len(samples) == len(PCM) // 2
    assert samples.dtype == np.float32
    assert np.all(samples >= -1.0) and np.all(samples <= 1.0)
    assert samples[0] == 0.0
    assert samples[1] == pytest.approx(0.5)
    assert samples[2] == -1.0


def test_decode_drops_trailing_odd_byte():
    assert len(decode_pcm16(PCM + b"\x01")) == 4


def test_synthesize_truncates_text_and_requests_audio():
    client = FakeClient([audio_response(PCM)])

    pcm = synthesize_speech("q" * 10000, client=client)

    assert pcm == PCM
    call = client.models.calls[0]
    assert call["model"] == TTS_MODEL
    assert call["contents"].count("q") == MAX_TTS_CHARS
    assert call["config"].response_modalities == ["AUDIO"]
    assert call["config"].speech_config.voice_config.prebuilt_voice_config.voice_name == "Fenrir"


def test_synthesize_accepts_base64_payload():
    client = FakeClient([audio_response(base64.b64encode(PCM).decode("ascii"))])
    assert synthesize_speech("hello", client=client) == PCM


@pytest.mark.parametrize("data", [None, b""])
def test_no_payload_raises(data):
    client = FakeClient([audio_response(data)])
    with pytest.raises(AudioGenerationError, match="No audio generated"):
        synthesize_speech("hello", client=client)


def test_play_reuses_decoded_buffer():
    client = FakeClient([audio_response(PCM)])
    guide = AudioGuide("guide text", client=client)

    first = guide.play()
    second = guide.play()

    assert first is second
    assert len(client.models.calls) == 1
    assert guide.has_audio


def test_close_releases_buffer():
    guide = AudioGuide("guide text", client=FakeClient([audio_response(PCM)]))
    guide.play()
    guide.close()
    assert not guide.has_audio
    assert guide.duration_seconds == 0.0


def test_wav_container():
    wav = pcm_to_wav(PCM)
    assert wav[:4] == b"RIFF"
    assert wav[8:12] == b"WAVE"
