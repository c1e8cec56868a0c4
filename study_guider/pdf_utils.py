from __future__ import annotations

import io
import logging
import math
from typing import Optional

from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

from .models import UploadedDocument


logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
MAX_UPLOAD_BYTES = 20 * 1024 * 1024


class UploadValidationError(ValueError):
    pass


def validate_upload(file_name: str, mime_type: Optional[str], data: bytes) -> UploadedDocument:
    """Accept a single PDF of at most 20 MB.

    The type check runs first, so a non-PDF is rejected regardless of size.
    """

    if (mime_type or "").lower() != PDF_MIME_TYPE:
        raise UploadValidationError("Only PDF files are allowed.")
    if len(data) > MAX_UPLOAD_BYTES:
        raise UploadValidationError("File size exceeds the 20MB limit.")
    return UploadedDocument(file_name=file_name, mime_type=PDF_MIME_TYPE, data=data)


def estimate_processing_seconds(size: int) -> int:
    """Rough wait estimate: 15 s base plus 10 s per MB, capped at two minutes."""

    size_mb = size / (1024 * 1024)
    return min(int(math.floor(15 + size_mb * 10)), 120)


def count_pages(data: bytes) -> Optional[int]:
    """Page count for display only; unreadable files return None instead of failing."""

    try:
        reader = PdfReader(io.BytesIO(data))
        return len(reader.pages)
    except (PdfReadError, ValueError, OSError) as e:
        logger.info("Could not read page count: %s", e)
        return None
