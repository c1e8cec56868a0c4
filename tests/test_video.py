from __future__ import annotations

import threading
from unittest import mock

import pytest
import requests

from study_guider.config import VIDEO_MODEL
from study_guider.video import (
    VideoCancelledError,
    VideoCompanion,
    VideoGenerationError,
    VideoTimeoutError,
    build_video_prompt,
    fetch_video,
    generate_video,
)

from .fakes import FakeClient, video_operation


URI = "https://generativelanguage.googleapis.com/v1beta/files/abc:download?alt=media"


def test_prompt_truncates_context():
    prompt = build_video_prompt("Pythagoras", "z" * 1000)
    assert "Pythagoras. Context for video generation: " in prompt
    assert prompt.endswith("z" * 300)
    assert "z" * 301 not in prompt
    assert prompt.startswith("Professional educational animation")


def test_polls_until_done():
    client = FakeClient(
        videos=[video_operation(done=False)],
        operations=[video_operation(done=False), video_operation(done=True, uri=URI)],
    )

    uri = generate_video("prompt", client=client, poll_interval=0)

    assert uri == URI
    assert client.operations.calls == 2
    call = client.models.video_calls[0]
    assert call["model"] == VIDEO_MODEL
    assert call["config"].number_of_videos == 1
    assert call["config"].resolution == "720p"
    assert call["config"].aspect_ratio == "16:9"


def test_completed_without_uri():
    client = FakeClient(videos=[video_operation(done=True)])
    with pytest.raises(VideoGenerationError, match="no URI returned"):
        generate_video("prompt", client=client, poll_interval=0)


def test_operation_error_is_reported():
    client = FakeClient(videos=[video_operation(done=True, error={"message": "blocked"})])
    with pytest.raises(VideoGenerationError, match="blocked"):
        generate_video("prompt", client=client, poll_interval=0)


def test_stuck_operation_times_out():
    client = FakeClient(videos=[video_operation(done=False)])
    with pytest.raises(VideoTimeoutError):
        generate_video("prompt", client=client, poll_interval=0, max_wait_seconds=0)


def test_cancel_stops_polling():
    client = FakeClient(videos=[video_operation(done=False)])
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(VideoCancelledError):
        generate_video("prompt", client=client, poll_interval=0, cancel=cancel)
    assert client.operations.calls == 0


def test_cancel_during_wait():
    client = FakeClient(videos=[video_operation(done=False)])
    cancel = threading.Event()
    timer = threading.Timer(0.05, cancel.set)
    timer.start()
    try:
        with pytest.raises(VideoCancelledError):
            generate_video("prompt", client=client, poll_interval=30, cancel=cancel)
    finally:
        timer.cancel()


def test_fetch_appends_key():
    resp = mock.Mock(content=b"mp4-bytes")
    with mock.patch("study_guider.video.requests.get", return_value=resp) as get:
        assert fetch_video(URI, "secret") == b"mp4-bytes"
    get.assert_called_once()
    assert get.call_args.kwargs["params"] == {"key": "secret"}
    resp.raise_for_status.assert_called_once()


def test_fetch_http_error():
    resp = mock.Mock()
    resp.raise_for_status.side_effect = requests.HTTPError("403")
    with mock.patch("study_guider.video.requests.get", return_value=resp):
        with pytest.raises(VideoGenerationError):
            fetch_video(URI, "secret")


def test_companion_replaces_clip():
    client = FakeClient(videos=[video_operation(done=True, uri=URI), video_operation(done=True, uri=URI + "2")])
    companion = VideoCompanion(client=client, api_key="k")
    with mock.patch("study_guider.video.fetch_video", side_effect=[b"one", b"two"]):
        first = companion.generate("Topic A", "context", poll_interval=0)
        second = companion.generate("Topic B", "context", poll_interval=0)

    assert first.data == b"one"
    assert companion.clip is second
    assert companion.clip.data == b"two"
    companion.release()
    assert companion.clip is None


def test_companion_requires_topic():
    companion = VideoCompanion(client=FakeClient(), api_key="k")
    with pytest.raises(ValueError):
        companion.generate("  ", "context")


def test_companion_cancel_from_another_thread():
    client = FakeClient(videos=[video_operation(done=False)])
    companion = VideoCompanion(client=client, api_key="k")
    timer = threading.Timer(0.05, companion.cancel)
    timer.start()
    try:
        with pytest.raises(VideoCancelledError):
            companion.generate("Topic", "context", poll_interval=30)
    finally:
        timer.cancel()
    assert companion.clip is None
