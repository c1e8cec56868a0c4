from __future__ import annotations

import io
import re
from dataclasses import dataclass
from typing import Sequence
from xml.sax.saxutils import escape

from docx import Document
from docx.shared import Pt, RGBColor
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import ListFlowable, ListItem, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .models import AnswerData


TITLE = "Study Roadmap"
TAGLINE = '"Na Chorharyam Na Cha Rajharyam" - Knowledge cannot be stolen.'
ACCENT_HEX = "#ea580c"
ACCENT_RGB = RGBColor(0xEA, 0x58, 0x0C)

PDF_FILE_NAME = "Study_Roadmap.pdf"
DOCX_FILE_NAME = "Study_Guide_Roadmap.docx"
MARKDOWN_FILE_NAME = "Study_Guide_Roadmap.md"

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.*)$")
_BULLET_RE = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+(.*)$")
_TABLE_SEP_RE = re.compile(r"^\s*\|?\s*:?-{2,}:?\s*(\|\s*:?-{2,}:?\s*)*\|?\s*$")


@dataclass
class Block:
    kind: str  # heading | bullet | table | paragraph | blank
    text: str = ""
    level: int = 0
    rows: list[list[str]] | None = None


def _strip_inline(text: str) -> str:
    t = re.sub(r"\*\*(.+?)\*\*", r"\1", text)
    t = re.sub(r"__(.+?)__", r"\1", t)
    t = re.sub(r"`([^`]*)`", r"\1", t)
    return t.strip()


def _table_cells(line: str) -> list[str]:
    return [_strip_inline(c) for c in line.strip().strip("|").split("|")]


def parse_markdown(text: str) -> list[Block]:
    """Split guide markdown into coarse blocks; math is kept as written."""

    blocks: list[Block] = []
    table: list[list[str]] = []

    def flush_table() -> None:
        if table:
            blocks.append(Block(kind="table", rows=list(table)))
            table.clear()

    for raw in (text or "").splitlines():
        line = raw.rstrip()
        if line.lstrip().startswith("|"):
            if not _TABLE_SEP_RE.match(line):
                table.append(_table_cells(line))
            continue
        flush_table()

        if not line.strip():
            blocks.append(Block(kind="blank"))
            continue
        m = _HEADING_RE.match(line)
        if m:
            blocks.append(Block(kind="heading", text=_strip_inline(m.group(2)), level=len(m.group(1))))
            continue
        m = _BULLET_RE.match(line)
        if m:
            blocks.append(Block(kind="bullet", text=_strip_inline(m.group(1))))
            continue
        blocks.append(Block(kind="paragraph", text=_strip_inline(line)))

    flush_table()
    return blocks


def to_markdown(answer: AnswerData) -> bytes:
    return f"# {TITLE}\n\n{answer.text}\n".encode("utf-8")


def to_docx(answer: AnswerData) -> bytes:
    document = Document()
    heading = document.add_heading(TITLE, 0)
    for run in heading.runs:
        run.font.color.rgb = ACCENT_RGB
    tagline = document.add_paragraph(TAGLINE)
    tagline.runs[0].italic = True
    tagline.runs[0].font.size = Pt(9)

    for block in parse_markdown(answer.text):
        if block.kind == "heading":
            h = document.add_heading(block.text, min(block.level, 4))
            for run in h.runs:
                run.font.color.rgb = ACCENT_RGB
        elif block.kind == "bullet":
            document.add_paragraph(block.text, style="List Bullet")
        elif block.kind == "table" and block.rows:
            _add_docx_table(document, block.rows)
        elif block.kind == "paragraph":
            document.add_paragraph(block.text)

    bio = io.BytesIO()
    document.save(bio)
    return bio.getvalue()


def _add_docx_table(document, rows: Sequence[Sequence[str]]) -> None:
    width = max(len(r) for r in rows)
    table = document.add_table(rows=len(rows), cols=width)
    table.style = "Table Grid"
    for i, row in enumerate(rows):
        for j in range(width):
            cell = table.cell(i, j)
            cell.text = row[j] if j < len(row) else ""
            if i == 0:
                for p in cell.paragraphs:
                    for run in p.runs:
                        run.bold = True


def _pdf_styles() -> dict:
    base = getSampleStyleSheet()
    accent = colors.HexColor(ACCENT_HEX)
    return {
        "title": ParagraphStyle("GuideTitle", parent=base["Title"], textColor=accent),
        "tagline": ParagraphStyle("GuideTagline", parent=base["Italic"], fontSize=8, alignment=1),
        "h1": ParagraphStyle("GuideH1", parent=base["Heading1"], textColor=accent),
        "h2": ParagraphStyle("GuideH2", parent=base["Heading2"], textColor=accent),
        "h3": ParagraphStyle("GuideH3", parent=base["Heading3"], textColor=accent),
        "body": base["BodyText"],
        "cell": ParagraphStyle("GuideCell", parent=base["BodyText"], fontSize=8, leading=10),
    }


def to_pdf(answer: AnswerData) -> bytes:
    styles = _pdf_styles()
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=18 * mm,
        rightMargin=18 * mm,
        topMargin=18 * mm,
        bottomMargin=18 * mm,
        title=TITLE,
    )

    story: list = [
        Paragraph(TITLE.upper(), styles["title"]),
        Paragraph(escape(TAGLINE), styles["tagline"]),
        Spacer(1, 6 * mm),
    ]
    bullets: list[str] = []

    def flush_bullets() -> None:
        if bullets:
            story.append(
                ListFlowable(
                    [ListItem(Paragraph(escape(b), styles["body"])) for b in bullets],
                    bulletType="bullet",
                )
            )
            bullets.clear()

    for block in parse_markdown(answer.text):
        if block.kind == "bullet":
            bullets.append(block.text)
            continue
        flush_bullets()
        if block.kind == "heading":
            style = styles.get(f"h{min(block.level, 3)}", styles["h3"])
            story.append(Paragraph(escape(block.text), style))
        elif block.kind == "paragraph":
            story.append(Paragraph(escape(block.text), styles["body"]))
        elif block.kind == "table" and block.rows:
            story.append(_pdf_table(block.rows, styles["cell"]))
            story.append(Spacer(1, 3 * mm))
    flush_bullets()

    doc.build(story)
    return buffer.getvalue()


def _pdf_table(rows: Sequence[Sequence[str]], cell_style: ParagraphStyle) -> Table:
    width = max(len(r) for r in rows)
    data = [
        [Paragraph(escape(row[j]) if j < len(row) else "", cell_style) for j in range(width)]
        for row in rows
    ]
    table = Table(data, repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#ffedd5")),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ]
        )
    )
    return table
