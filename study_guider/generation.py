from __future__ import annotations

import logging
from typing import Any, Sequence

from .gemini_llm import FALLBACK_TIER, PRIMARY_TIER, ModelTier, generate_text
from .models import AnswerData, UploadedDocument
from .prompts import SYSTEM_INSTRUCTION


logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Failed to generate answers. Please try again later or check if the PDF is valid."


class GenerationError(RuntimeError):
    pass


def generate_study_guide(
    document: UploadedDocument,
    prompt: str,
    *,
    client: Any,
    tiers: Sequence[ModelTier] = (PRIMARY_TIER, FALLBACK_TIER),
    system_instruction: str = SYSTEM_INSTRUCTION,
) -> AnswerData:
    """Try each tier once, in order; the first non-empty answer wins.

    Errors, timeouts and empty output are all treated as a failed tier. When
    every tier fails a GenerationError with a fixed, user-safe message is
    raised; the last underlying error is kept as its cause.
    """

    last_error: Exception | None = None
    for i, tier in enumerate(tiers):
        logger.info("Attempting generation with %s...", tier.model)
        try:
            text = generate_text(
                client,
                tier,
                data=document.data,
                mime_type=document.mime_type,
                prompt=prompt,
                system_instruction=system_instruction,
            )
        except Exception as e:
            last_error = e
            if i + 1 < len(tiers):
                logger.warning(
                    "Model %s failed or returned empty. Falling back to %s. (%s)",
                    tier.model,
                    tiers[i + 1].model,
                    e,
                )
            else:
                logger.error("Model %s failed: %s", tier.model, e)
            continue
        return AnswerData(text=text, model_used=tier.model)

    raise GenerationError(FAILURE_MESSAGE) from last_error
