from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from google import genai
from google.genai import types

from .config import FALLBACK_MODEL, PRIMARY_MODEL


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelTier:
    model: str
    thinking_budget: Optional[int] = None


PRIMARY_TIER = ModelTier(model=PRIMARY_MODEL, thinking_budget=2048)
FALLBACK_TIER = ModelTier(model=FALLBACK_MODEL)


class EmptyResponseError(RuntimeError):
    pass


def make_client(api_key: str, timeout: Optional[float] = None) -> genai.Client:
    """Gemini client shared by every hosted call.

    `timeout` is in seconds and applies to each request made through the client.
    """

    http_options = None
    if timeout:
        http_options = types.HttpOptions(timeout=int(timeout * 1000))
    return genai.Client(api_key=api_key, http_options=http_options)


def response_text(resp: Any) -> str:
    text = getattr(resp, "text", None)
    if not text:
        # Try to extract from candidates if needed
        parts: list[str] = []
        for c in getattr(resp, "candidates", None) or []:
            content = getattr(c, "content", None)
            if not content:
                continue
            for p in getattr(content, "parts", None) or []:
                t = getattr(p, "text", None)
                if t:
                    parts.append(t)
        text = "\n".join(parts)
    return (text or "").strip()


def generate_text(
    client: Any,
    tier: ModelTier,
    *,
    data: bytes,
    mime_type: str,
    prompt: str,
    system_instruction: str,
) -> str:
    """One generation call against a single tier; empty output raises EmptyResponseError."""

    config_kwargs: dict[str, Any] = {"system_instruction": system_instruction}
    if tier.thinking_budget is not None:
        config_kwargs["thinking_config"] = types.ThinkingConfig(thinking_budget=tier.thinking_budget)

    resp = client.models.generate_content(
        model=tier.model,
        contents=[
            types.Part.from_bytes(data=data, mime_type=mime_type),
            prompt,
        ],
        config=types.GenerateContentConfig(**config_kwargs),
    )

    text = response_text(resp)
    if not text:
        raise EmptyResponseError(f"Empty response from {tier.model}")
    return text
