"""
Question Export Service - renders searched questions as a PDF.

Layout:
  - title block and optional filter line
  - one section per round ("Round 2: Technical Interview")
  - numbered question entries with a "company • role • year • Level: X" line
  - "Page i of N | Total Questions: M" footer on every page

Pagination is done up front by `paginate()`; entries are atomic, a page
break never splits one.
"""

import io
import os
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont, TTFError
from reportlab.pdfgen import canvas

from experience_portal.core.config import get_settings
from experience_portal.core.logging import get_logger
from experience_portal.services.insights_service import group_by_round

logger = get_logger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 20 * mm
LINE_HEIGHT = 7 * mm
SECTION_SPACING = 10 * mm
CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN
CONTENT_HEIGHT = PAGE_HEIGHT - 2 * MARGIN

QUESTION_INDENT = 5 * mm
META_INDENT = 10 * mm

EXPORT_FONT = "ExportFont"
FALLBACK_FONTS = ("Helvetica", "Helvetica-Bold")
FONT_CANDIDATES = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf",
    "/Library/Fonts/Arial Unicode.ttf",
    os.path.join(os.environ.get("WINDIR", "C:\\Windows"), "Fonts", "arial.ttf"),
]

ACCENT = (99 / 255, 102 / 255, 241 / 255)
MUTED = (100 / 255, 100 / 255, 100 / 255)
FOOTER_GREY = (150 / 255, 150 / 255, 150 / 255)


@lru_cache()
def get_fonts() -> Tuple[str, str]:
    """
    (regular, bold) font names for the export.

    Registers the configured PDF_FONT_PATH or the first system TTF found so
    non-Latin question text can be drawn. Without one, the built-in
    Helvetica pair is used.
    """
    configured = get_settings().pdf_font_path
    candidates = ([configured] if configured else []) + FONT_CANDIDATES
    for path in candidates:
        if not os.path.exists(path):
            continue
        try:
            pdfmetrics.registerFont(TTFont(EXPORT_FONT, path))
        except TTFError as e:
            logger.warning(f"Cannot load PDF font {path}: {e}")
            continue
        logger.info(f"PDF export font: {path}")
        return EXPORT_FONT, EXPORT_FONT

    logger.warning("No TTF font found, PDF export falls back to Helvetica")
    return FALLBACK_FONTS


@dataclass
class Block:
    """A vertical slice of the document that is never split across pages."""
    kind: str  # title | filters | round | entry | spacer
    height: float
    lines: List[str] = field(default_factory=list)
    meta_lines: List[str] = field(default_factory=list)
    keep_with_next: bool = False


def paginate(blocks: List[Block], content_height: float = CONTENT_HEIGHT) -> List[List[Block]]:
    """
    Distribute blocks over pages.

    A block that does not fit in the remaining space starts a new page. A
    block flagged keep_with_next only stays if the following block fits too.
    A block taller than a whole page gets a page to itself. Spacers are
    dropped at page boundaries.
    """
    pages: List[List[Block]] = [[]]
    used = 0.0

    for index, block in enumerate(blocks):
        needed = block.height
        if block.keep_with_next and index + 1 < len(blocks):
            needed += blocks[index + 1].height

        if block.kind == "spacer":
            if not pages[-1]:
                continue
            if used + block.height > content_height:
                pages.append([])
                used = 0.0
                continue
        elif pages[-1] and used + needed > content_height:
            pages.append([])
            used = 0.0

        pages[-1].append(block)
        used += block.height

    return pages


def filter_description(company: Optional[str], role: Optional[str]) -> Optional[str]:
    parts = []
    if company:
        parts.append(f"Company: {company}")
    if role:
        parts.append(f"Role: {role}")
    return "Filters: " + ", ".join(parts) if parts else None


def metadata_line(entry: dict) -> str:
    text = f"{entry['company']} • {entry['role']}"
    if entry.get("year"):
        text += f" • {entry['year']}"
    return text + f" • Level: {entry['level']}"


def build_blocks(questions: List[dict], company: Optional[str] = None, role: Optional[str] = None) -> List[Block]:
    """Turn flattened question entries into measured layout blocks."""
    font, bold = get_fonts()
    blocks = [Block("title", LINE_HEIGHT * 2, ["Interview Questions"])]

    filters = filter_description(company, role)
    if filters:
        blocks.append(Block("filters", LINE_HEIGHT * 1.5, [filters]))

    for group_index, group in enumerate(group_by_round(questions), start=1):
        if group_index > 1:
            blocks.append(Block("spacer", SECTION_SPACING))
        header = f"Round {group['round_number']}: {group['round_name']}"
        blocks.append(Block("round", LINE_HEIGHT * 1.5, [header], keep_with_next=True))

        for q_index, entry in enumerate(group["questions"], start=1):
            text = f"{group_index}.{q_index}. {entry['question']}"
            lines = simpleSplit(text, bold, 11, CONTENT_WIDTH - QUESTION_INDENT)
            meta = simpleSplit(metadata_line(entry), font, 9, CONTENT_WIDTH - META_INDENT)
            height = LINE_HEIGHT * len(lines) + LINE_HEIGHT * 1.5 * len(meta)
            blocks.append(Block("entry", height, lines, meta))

    return blocks


def layout_questions(questions: List[dict], company: Optional[str] = None, role: Optional[str] = None) -> List[List[Block]]:
    return paginate(build_blocks(questions, company, role))


def _draw_block(pdf: canvas.Canvas, block: Block, top: float) -> float:
    """Draw one block with its top edge at `top`; return the new top."""
    font, bold = get_fonts()
    y = top
    if block.kind == "title":
        pdf.setFont(bold, 18)
        pdf.setFillColorRGB(0, 0, 0)
        pdf.drawCentredString(PAGE_WIDTH / 2, y - LINE_HEIGHT, block.lines[0])
    elif block.kind == "filters":
        pdf.setFont(font, 10)
        pdf.setFillColorRGB(0, 0, 0)
        pdf.drawString(MARGIN, y - LINE_HEIGHT, block.lines[0])
    elif block.kind == "round":
        pdf.setFont(bold, 14)
        pdf.setFillColorRGB(*ACCENT)
        pdf.drawString(MARGIN, y - LINE_HEIGHT, block.lines[0])
    elif block.kind == "entry":
        pdf.setFont(bold, 11)
        pdf.setFillColorRGB(0, 0, 0)
        for line in block.lines:
            y -= LINE_HEIGHT
            pdf.drawString(MARGIN + QUESTION_INDENT, y, line)
        pdf.setFont(font, 9)
        pdf.setFillColorRGB(*MUTED)
        for line in block.meta_lines:
            pdf.drawString(MARGIN + META_INDENT, y - LINE_HEIGHT * 0.8, line)
            y -= LINE_HEIGHT * 1.5
        return y
    return top - block.height


def render_questions_pdf(questions: List[dict], company: Optional[str] = None, role: Optional[str] = None) -> bytes:
    """Render the question list as PDF bytes."""
    pages = layout_questions(questions, company, role)
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    pdf.setTitle("Interview Questions")

    for page_number, blocks in enumerate(pages, start=1):
        top = PAGE_HEIGHT - MARGIN
        for block in blocks:
            top = _draw_block(pdf, block, top)

        pdf.setFont(get_fonts()[0], 8)
        pdf.setFillColorRGB(*FOOTER_GREY)
        pdf.drawCentredString(
            PAGE_WIDTH / 2, 10 * mm,
            f"Page {page_number} of {len(pages)} | Total Questions: {len(questions)}"
        )
        pdf.showPage()

    pdf.save()
    return buffer.getvalue()


def export_filename(company: Optional[str] = None, role: Optional[str] = None) -> str:
    """interview-questions[-company][-role].pdf with filesystem-safe parts."""
    name = "interview-questions"
    for part in (company, role):
        slug = re.sub(r"[^A-Za-z0-9]+", "-", part or "").strip("-")
        if slug:
            name += f"-{slug}"
    return name + ".pdf"
