from __future__ import annotations

import pytest

from study_guider.models import UploadedDocument


@pytest.fixture
def pdf_document() -> UploadedDocument:
    return UploadedDocument(file_name="questions.pdf", mime_type="application/pdf", data=b"%PDF-1.4" + b"\0" * (2 * 1024 * 1024))
