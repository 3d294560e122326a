"""Tests for PDF emission, chunked output and streaming."""

from __future__ import annotations

import logging

import fitz  # pymupdf
import pytest

from resume_forge.errors import RenderFailure
from resume_forge.export.pdf_emitter import (
    PDF_MIME_TYPE,
    PdfEmitter,
    document_filename,
    emit,
    iter_emit,
    stream,
)
from resume_forge.export.readback import pdf_page_texts, pdf_text
from resume_forge.models.resume import TEMPLATES
from resume_forge.pipeline.builder import build
from resume_forge.rendering.blocks import Heading, Paragraph
from resume_forge.rendering.engine import render


class FakeSink:
    """Records writes and counts how often the writer waited for a drain."""

    def __init__(self):
        self.chunks: list[bytes] = []
        self.drains = 0

    def write(self, data: bytes) -> None:
        self.chunks.append(data)

    async def drain(self) -> None:
        self.drains += 1


@pytest.fixture
def long_resume(full_candidate):
    entry = {
        "company": "Acme",
        "position": "Engineer",
        "startDate": "2010-01-01",
        "endDate": "2011-01-01",
        "description": "Worked on many things across the whole stack. " * 4,
        "achievements": [f"Achievement number {n} with a measurable result" for n in range(6)],
    }
    candidate = {**full_candidate, "experience": [entry] * 25}
    return build(candidate, owner="user-1")


class TestEmit:
    def test_returns_pdf_bytes(self, sample_resume):
        data = emit(render(sample_resume))
        assert data.startswith(b"%PDF-")
        assert PDF_MIME_TYPE == "application/pdf"

    def test_repeated_runs_are_identical(self, sample_resume):
        blocks = render(sample_resume)
        assert emit(blocks, "classic") == emit(blocks, "classic")

    def test_text_in_block_order(self, sample_resume):
        text = pdf_text(emit(render(sample_resume)))
        positions = [
            text.index(marker)
            for marker in (
                "Jane Doe",
                "Professional Summary",
                "Professional Experience",
                "Frontend Engineer at Acme",
                "Junior Developer at Globex",
                "Education",
                "Skills",
                "Projects",
                "Certifications",
            )
        ]
        assert positions == sorted(positions)

    def test_empty_sections_absent(self, minimal_resume):
        text = pdf_text(emit(render(minimal_resume)))
        assert "Jane Doe" in text
        assert "Professional Experience" not in text

    def test_short_resume_is_one_page(self, sample_resume):
        emitter = PdfEmitter("modern")
        emitter.emit(render(sample_resume))
        assert emitter.page_count == 1

    def test_long_resume_breaks_pages(self, long_resume):
        emitter = PdfEmitter("modern")
        pages = pdf_page_texts(emitter.emit(render(long_resume)))
        assert emitter.page_count > 1
        assert len(pages) == emitter.page_count
        assert "Jane Doe" in pages[0]
        assert "Certifications" in pages[-1]

    @pytest.mark.parametrize("template", TEMPLATES)
    def test_every_template_emits(self, sample_resume, template):
        data = emit(render(sample_resume), template)
        assert "Frontend Engineer at Acme" in pdf_text(data)

    def test_classic_uppercases_section_titles(self, sample_resume):
        text = pdf_text(emit(render(sample_resume), "classic"))
        assert "PROFESSIONAL EXPERIENCE" in text

    def test_templates_differ_in_bytes(self, sample_resume):
        blocks = render(sample_resume)
        assert emit(blocks, "modern") != emit(blocks, "minimal")

    def test_letter_page_format(self, sample_resume):
        data = emit(render(sample_resume), page_format="Letter")
        with fitz.open(stream=data, filetype="pdf") as doc:
            assert round(doc[0].rect.width) == 612

    def test_typographic_characters_transliterated(self):
        blocks = [Heading(1, "Jane Doe"), Paragraph("Built “fast” apps – 2x")]
        text = pdf_text(emit(blocks))
        assert '"fast"' in text
        assert "apps - 2x" in text

    def test_unknown_template(self, caplog):
        with pytest.raises(RenderFailure):
            PdfEmitter("neon")
        assert any(
            r.levelno == logging.ERROR and "neon" in r.getMessage() for r in caplog.records
        )

    def test_unknown_block(self, caplog):
        with pytest.raises(RenderFailure):
            emit([Heading(1, "Jane"), object()])
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert errors[0].exc_info is not None

    def test_missing_font_falls_back(self, sample_resume):
        data = emit(render(sample_resume), font_path="/nonexistent/font.ttf")
        assert data.startswith(b"%PDF-")


class TestIterEmit:
    def test_chunks_reassemble(self, sample_resume):
        blocks = render(sample_resume)
        chunks = list(iter_emit(blocks, chunk_size=256))
        assert len(chunks) > 1
        assert all(len(c) <= 256 for c in chunks)
        assert b"".join(chunks) == emit(blocks)

    def test_nothing_runs_until_pulled(self):
        chunks = iter_emit([Heading(1, "Jane")], chunk_size=0)
        with pytest.raises(ValueError, match="chunk_size"):
            next(chunks)


class TestStream:
    async def test_drains_after_every_chunk(self, sample_resume):
        blocks = render(sample_resume)
        sink = FakeSink()
        written = await stream(blocks, sink, "creative", chunk_size=256)
        assert sink.drains == len(sink.chunks) > 1
        assert written == sum(len(c) for c in sink.chunks)
        assert b"".join(sink.chunks) == emit(blocks, "creative")

    async def test_accepts_generator(self, sample_resume):
        sink = FakeSink()
        await stream((b for b in render(sample_resume)), sink)
        assert b"".join(sink.chunks).startswith(b"%PDF-")


def test_document_filename(sample_resume):
    assert document_filename(sample_resume) == "Jane Doe_Resume.pdf"
