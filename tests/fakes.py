from __future__ import annotations

from types import SimpleNamespace
from typing import Any


def text_response(text: str | None) -> SimpleNamespace:
    return SimpleNamespace(text=text, candidates=[])


def audio_response(data: Any) -> SimpleNamespace:
    part = SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type="audio/L16;rate=24000"))
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])


class FakeModels:
    """Stands in for client.models; each call pops the next scripted outcome."""

    def __init__(self, outcomes: list[Any] | None = None, videos: list[Any] | None = None):
        self.outcomes = list(outcomes or [])
        self.videos = list(videos or [])
        self.calls: list[dict] = []
        self.video_calls: list[dict] = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def generate_videos(self, **kwargs):
        self.video_calls.append(kwargs)
        return self.videos.pop(0)


class FakeOperations:
    def __init__(self, states: list[Any] | None = None):
        self.states = list(states or [])
        self.calls = 0

    def get(self, operation):
        self.calls += 1
        if self.states:
            return self.states.pop(0)
        return operation


class FakeClient:
    def __init__(self, outcomes=None, videos=None, operations=None):
        self.models = FakeModels(outcomes, videos)
        self.operations = FakeOperations(operations)


def video_operation(done: bool, uri: str | None = None, error: Any = None) -> SimpleNamespace:
    videos = [SimpleNamespace(video=SimpleNamespace(uri=uri))] if uri else []
    response = SimpleNamespace(generated_videos=videos) if done else None
    return SimpleNamespace(name="operations/abc", done=done, response=response, error=error)
