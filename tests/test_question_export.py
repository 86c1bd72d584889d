import os

import pytest
import reportlab
from reportlab.pdfbase import pdfmetrics

from experience_portal.services import question_export
from experience_portal.services.question_export import (
    Block, paginate, build_blocks, render_questions_pdf, export_filename, metadata_line, filter_description
)

VERA_TTF = os.path.join(os.path.dirname(reportlab.__file__), "fonts", "Vera.ttf")


@pytest.fixture
def font_candidates(monkeypatch):
    """Point font discovery at the given paths for one test."""
    def use(paths):
        monkeypatch.setattr(question_export, "FONT_CANDIDATES", paths)
        question_export.get_fonts.cache_clear()
    yield use
    question_export.get_fonts.cache_clear()


def _entry(height=40):
    return Block("entry", height, ["q"])


def _heights(pages):
    return [[b.height for b in page] for page in pages]


def test_blocks_never_split_across_pages():
    pages = paginate([_entry(), _entry(), _entry()], content_height=100)
    assert _heights(pages) == [[40, 40], [40]]


def test_round_header_moves_with_its_first_entry():
    blocks = [_entry(), _entry(), Block("round", 15, ["Round 2: Tech"], keep_with_next=True), _entry()]

    pages = paginate(blocks, content_height=100)

    assert [[b.kind for b in page] for page in pages] == [["entry", "entry"], ["round", "entry"]]


def test_oversized_block_gets_its_own_page():
    pages = paginate([_entry(), _entry(150), _entry()], content_height=100)
    assert _heights(pages) == [[40], [150], [40]]


def test_spacer_is_dropped_at_page_break():
    pages = paginate([_entry(90), Block("spacer", 20), _entry()], content_height=100)
    assert [[b.kind for b in page] for page in pages] == [["entry"], ["entry"]]


def test_every_block_is_placed_once_in_order():
    blocks = [_entry(h) for h in (30, 70, 10, 55, 45, 90, 5)]
    pages = paginate(blocks, content_height=100)
    placed = [b for page in pages for b in page]
    assert placed == blocks
    assert all(sum(b.height for b in page) <= 100 for page in pages)


def _questions():
    return [
        {"question": "Find the maximum subarray sum", "company": "Google", "role": "SWE",
         "round_number": 1, "round_name": "OA", "year": 2024, "level": "Medium"},
        {"question": "Explain HashMap", "company": "Google", "role": "SWE",
         "round_number": 2, "round_name": "Technical", "year": 2024, "level": "Hard"},
        {"question": "Design a rate limiter", "company": "Amazon", "role": "SDE",
         "round_number": 1, "round_name": "OA", "year": None, "level": "Easy"},
    ]


def test_build_blocks_structure():
    blocks = build_blocks(_questions(), company="Google")

    kinds = [b.kind for b in blocks]
    assert kinds == ["title", "filters", "round", "entry", "entry", "spacer", "round", "entry"]
    assert blocks[1].lines == ["Filters: Company: Google"]
    assert blocks[2].lines == ["Round 1: OA"]
    assert blocks[3].lines[0].startswith("1.1. Find the maximum")
    assert blocks[4].lines[0].startswith("1.2. Design a rate limiter")
    assert blocks[7].lines[0].startswith("2.1. Explain HashMap")


def test_long_question_wraps():
    long_question = dict(_questions()[0], question="word " * 80)
    entry = [b for b in build_blocks([long_question]) if b.kind == "entry"][0]
    assert len(entry.lines) > 1


def test_metadata_and_filter_lines():
    assert metadata_line(_questions()[0]) == "Google • SWE • 2024 • Level: Medium"
    assert metadata_line(_questions()[2]) == "Amazon • SDE • Level: Easy"
    assert filter_description(None, None) is None
    assert filter_description("Google", "SWE") == "Filters: Company: Google, Role: SWE"


def test_render_pdf_produces_pdf_bytes():
    pdf = render_questions_pdf(_questions() * 40, company="Google", role="SWE")
    assert pdf.startswith(b"%PDF")
    assert len(pdf) > 1000


def test_export_filename():
    assert export_filename() == "interview-questions.pdf"
    assert export_filename("Google", None) == "interview-questions-Google.pdf"
    assert export_filename("Tata Consultancy", "SDE / Backend") == "interview-questions-Tata-Consultancy-SDE-Backend.pdf"


def test_ttf_font_is_registered_for_export(font_candidates):
    font_candidates(["/nonexistent/font.ttf", VERA_TTF])

    assert question_export.get_fonts() == ("ExportFont", "ExportFont")
    assert pdfmetrics.getFont("ExportFont").face.name

    questions = [dict(_questions()[0], question="Объясните хеш-таблицу और ट्री")]
    assert render_questions_pdf(questions).startswith(b"%PDF")


def test_falls_back_to_helvetica_without_ttf(font_candidates):
    font_candidates(["/nonexistent/font.ttf"])

    assert question_export.get_fonts() == ("Helvetica", "Helvetica-Bold")
    assert render_questions_pdf(_questions()).startswith(b"%PDF")
