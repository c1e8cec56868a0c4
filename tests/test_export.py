from __future__ import annotations

import io

from docx import Document

from study_guider.export import parse_markdown, to_docx, to_markdown, to_pdf
from study_guider.models import AnswerData


GUIDE = """# Algebra Practice

## Study Plan Summary
- Revise **quadratics** first
- Then `factorisation`

| Method | When |
|---|---|
| Formula | Always works |
| Factoring | Nice roots |

The roots are $x = \\frac{-b \\pm \\sqrt{b^2-4ac}}{2a}$ & more <here>.

## 🗺️ Concept Roadmap
1. Linear equations
"""


def test_parse_markdown_blocks():
    blocks = [b for b in parse_markdown(GUIDE) if b.kind != "blank"]
    kinds = [b.kind for b in blocks]
    assert kinds == ["heading", "heading", "bullet", "bullet", "table", "paragraph", "heading", "bullet"]
    assert blocks[2].text == "Revise quadratics first"
    assert blocks[4].rows == [["Method", "When"], ["Formula", "Always works"], ["Factoring", "Nice roots"]]


def test_markdown_export():
    data = to_markdown(AnswerData(GUIDE, "m"))
    assert data.startswith(b"# Study Roadmap")
    assert "Concept Roadmap" in data.decode("utf-8")


def test_docx_export():
    doc = Document(io.BytesIO(to_docx(AnswerData(GUIDE, "m"))))
    texts = [p.text for p in doc.paragraphs]
    assert "Study Roadmap" in texts
    assert "Algebra Practice" in texts
    assert len(doc.tables) == 1
    assert doc.tables[0].cell(1, 1).text == "Always works"


def test_pdf_export():
    data = to_pdf(AnswerData(GUIDE, "m"))
    assert data.startswith(b"%PDF")
