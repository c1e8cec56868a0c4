from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Optional

import requests
from google.genai import types

from .config import VIDEO_MODEL


logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 5.0
MAX_WAIT_SECONDS = 600.0
MAX_CONTEXT_CHARS = 300


class VideoGenerationError(RuntimeError):
    pass


class VideoTimeoutError(VideoGenerationError):
    pass


class VideoCancelledError(VideoGenerationError):
    pass


def build_video_prompt(topic: str, context: str) -> str:
    subject = topic.strip() + ". Context for video generation: " + context[:MAX_CONTEXT_CHARS]
    return f"Professional educational animation, 3d style, clear and bright visuals, explaining: {subject}"


def _video_uri(operation: Any) -> Optional[str]:
    response = getattr(operation, "response", None) or getattr(operation, "result", None)
    videos = getattr(response, "generated_videos", None) or []
    if not videos:
        return None
    video = getattr(videos[0], "video", None)
    return getattr(video, "uri", None) or None


def generate_video(
    prompt: str,
    *,
    client: Any,
    poll_interval: float = POLL_INTERVAL_SECONDS,
    max_wait_seconds: float = MAX_WAIT_SECONDS,
    cancel: Optional[threading.Event] = None,
) -> str:
    """Start a Veo job and poll it until it finishes; returns the media URI.

    Polling stops with VideoTimeoutError after `max_wait_seconds` and with
    VideoCancelledError as soon as `cancel` is set.
    """

    cancel = cancel or threading.Event()
    deadline = time.monotonic() + max_wait_seconds

    operation = client.models.generate_videos(
        model=VIDEO_MODEL,
        prompt=prompt,
        config=types.GenerateVideosConfig(
            number_of_videos=1,
            resolution="720p",
            aspect_ratio="16:9",
        ),
    )
    logger.info("Started video operation %s", getattr(operation, "name", "?"))

    polls = 0
    while not operation.done:
        if cancel.is_set():
            raise VideoCancelledError("Video generation was cancelled.")
        if time.monotonic() >= deadline:
            raise VideoTimeoutError(f"Video generation did not finish within {max_wait_seconds:.0f} seconds.")
        # Event.wait doubles as an interruptible sleep.
        if cancel.wait(poll_interval):
            raise VideoCancelledError("Video generation was cancelled.")
        operation = client.operations.get(operation)
        polls += 1
        logger.debug("Video operation poll %d: done=%s", polls, operation.done)

    error = getattr(operation, "error", None)
    if error:
        raise VideoGenerationError(f"Video generation failed: {error}")

    uri = _video_uri(operation)
    if not uri:
        raise VideoGenerationError("Video generation completed but no URI returned.")
    return uri


def fetch_video(uri: str, api_key: str, *, timeout: float = 120.0) -> bytes:
    """Download generated media; the API key is appended as the `key` query parameter."""

    try:
        resp = requests.get(uri, params={"key": api_key}, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise VideoGenerationError(f"Failed to download the generated video: {e}") from e
    if not resp.content:
        raise VideoGenerationError("Downloaded video is empty.")
    return resp.content


@dataclass
class VideoClip:
    topic: str
    uri: str
    data: bytes = field(repr=False)


class VideoCompanion:
    """Holds at most one fetched clip; replacing or clearing drops the previous bytes."""

    def __init__(self, *, client: Any, api_key: str):
        self._client = client
        self._api_key = api_key
        self.clip: Optional[VideoClip] = None
        self.cancel_event = threading.Event()

    def generate(
        self,
        topic: str,
        context: str,
        *,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        max_wait_seconds: float = MAX_WAIT_SECONDS,
    ) -> VideoClip:
        if not topic.strip():
            raise ValueError("A topic is required to generate a video.")
        self.cancel_event.clear()
        uri = generate_video(
            build_video_prompt(topic, context),
            client=self._client,
            poll_interval=poll_interval,
            max_wait_seconds=max_wait_seconds,
            cancel=self.cancel_event,
        )
        data = fetch_video(uri, self._api_key)
        self.release()
        self.clip = VideoClip(topic=topic.strip(), uri=uri, data=data)
        return self.clip

    def cancel(self) -> None:
        """Stop an in-flight generate() from another thread.

        The Streamlit page runs generate() on its own script thread and cannot
        handle a click until it returns, so it offers no cancel button; there
        the `max_wait_seconds` bound is what ends a stuck job.
        """

        self.cancel_event.set()

    def release(self) -> None:
        if self.clip is not None:
            logger.debug("Releasing video clip for %r", self.clip.topic)
        self.clip = None
