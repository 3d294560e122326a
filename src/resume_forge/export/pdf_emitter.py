"""Pagination & Emission Engine - lays out blocks on fixed-size pages with fpdf2.

Page breaks come only from content volume and the template's style metrics.
A fixed creation date keeps repeated runs byte-identical for a given fpdf2
version.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Iterator
from datetime import datetime, timezone
from typing import Protocol

from fpdf import FPDF, XPos, YPos
from fpdf.errors import FPDFException

from resume_forge.errors import RenderFailure
from resume_forge.export.styles import TemplateStyle, get_style
from resume_forge.models.resume import Resume
from resume_forge.rendering.blocks import BulletList, Heading, KeyValueLine, LayoutBlock, Paragraph

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
DEFAULT_PAGE_FORMAT = "A4"
DEFAULT_MARGIN = 50.0  # points
DEFAULT_CHUNK_SIZE = 16 * 1024
FIXED_CREATION_DATE = datetime(2000, 1, 1, tzinfo=timezone.utc)
CUSTOM_FONT = "ResumeFont"

# Typographic characters that core PDF fonts (latin-1) cannot encode
_TRANSLITERATIONS = str.maketrans(
    {
        "\u2018": "'",
        "\u2019": "'",
        "\u201c": '"',
        "\u201d": '"',
        "\u2013": "-",
        "\u2014": "-",
        "\u2022": "-",
        "\u2026": "...",
        "\u00a0": " ",
    }
)


class ByteSink(Protocol):
    """Anything shaped like ``asyncio.StreamWriter``."""

    def write(self, data: bytes) -> object: ...

    async def drain(self) -> None: ...


class PdfEmitter:
    """Writes layout blocks to a single-column PDF in one template's style."""

    def __init__(
        self,
        template: str = "modern",
        *,
        page_format: str = DEFAULT_PAGE_FORMAT,
        margin: float = DEFAULT_MARGIN,
        font_path: str | None = None,
    ):
        self.template = template
        self.style: TemplateStyle = get_style(template)
        self.page_format = page_format
        self.margin = margin
        self.font_path = font_path
        self._family = self.style.font_family
        self.page_count = 0

    def emit(self, blocks: Iterable[LayoutBlock]) -> bytes:
        """Lay out ``blocks`` in order and return the finished PDF bytes.

        ``blocks`` may be a generator; each block is placed as it is pulled.
        """
        pdf = self._new_document()
        count = 0
        try:
            for block in blocks:
                self._write_block(pdf, block)
                count += 1
            data = bytes(pdf.output())
            self.page_count = pdf.page_no()
        except RenderFailure:
            logger.error("Layout failed after %d blocks", count, exc_info=True)
            raise
        except FPDFException as exc:
            logger.error("PDF backend failed after %d blocks", count, exc_info=True)
            raise RenderFailure(f"PDF backend failed: {exc}") from exc
        logger.debug(
            "Emitted %d blocks on %d page(s), %d bytes (template=%s)",
            count,
            pdf.page_no(),
            len(data),
            self.template,
        )
        return data

    def _new_document(self) -> FPDF:
        pdf = FPDF(orientation="P", unit="pt", format=self.page_format)
        pdf.set_margins(self.margin, self.margin, self.margin)
        pdf.set_auto_page_break(auto=True, margin=self.margin)
        pdf.set_creation_date(FIXED_CREATION_DATE)
        pdf.set_creator("resume-forge")
        self._family = self._load_font(pdf)
        pdf.add_page()
        return pdf

    def _load_font(self, pdf: FPDF) -> str:
        if not self.font_path:
            return self.style.font_family
        try:
            pdf.add_font(CUSTOM_FONT, "", self.font_path)
            pdf.add_font(CUSTOM_FONT, "B", self.font_path)
        except (OSError, FPDFException):
            logger.warning(
                "Failed to load font %s, using %s", self.font_path, self.style.font_family
            )
            return self.style.font_family
        return CUSTOM_FONT

    def _write_block(self, pdf: FPDF, block: LayoutBlock) -> None:
        if isinstance(block, Heading):
            self._heading(pdf, block)
        elif isinstance(block, Paragraph):
            self._paragraph(pdf, block)
        elif isinstance(block, BulletList):
            self._bullets(pdf, block)
        elif isinstance(block, KeyValueLine):
            self._key_values(pdf, block)
        else:
            raise RenderFailure(f"Unknown layout block: {type(block).__name__}")

    def _heading(self, pdf: FPDF, block: Heading) -> None:
        s = self.style
        body_line = s.line_height(s.body_size)
        text = block.text
        if block.level <= 1:
            size, gap, align, color = s.name_size, 0.0, "C", s.accent
            pdf.set_title(self._safe_text(pdf, block.text))
        elif block.level == 2:
            size, gap, align, color = s.section_size, s.section_gap, "L", s.accent
            if s.uppercase_sections:
                text = text.upper()
        else:
            size, gap, align, color = s.entry_size, s.entry_gap, "L", s.text_color

        # Keep a heading on the same page as the first line that follows it
        if pdf.will_page_break(gap + s.line_height(size) + body_line):
            pdf.add_page()
        elif pdf.get_y() > pdf.t_margin:
            pdf.ln(gap)

        pdf.set_font(self._family, "B", size)
        pdf.set_text_color(*color)
        self._cell(pdf, text, s.line_height(size), align)

        if block.level == 2 and s.section_rule:
            y = pdf.get_y()
            pdf.set_draw_color(*s.accent)
            pdf.set_line_width(0.75)
            pdf.line(pdf.l_margin, y, pdf.w - pdf.r_margin, y)
            pdf.ln(3)

    def _paragraph(self, pdf: FPDF, block: Paragraph) -> None:
        self._body_font(pdf)
        align = "C" if block.align == "center" else "L"
        self._cell(pdf, block.text, self.style.line_height(self.style.body_size), align)

    def _bullets(self, pdf: FPDF, block: BulletList) -> None:
        self._body_font(pdf)
        indent = self.style.bullet_indent
        for item in block.items:
            pdf.set_x(pdf.l_margin + indent)
            self._cell(
                pdf,
                f"- {item}",
                self.style.line_height(self.style.body_size),
                "L",
                width=pdf.epw - indent,
            )

    def _key_values(self, pdf: FPDF, block: KeyValueLine) -> None:
        s = self.style
        height = s.line_height(s.body_size)
        pdf.set_text_color(*s.text_color)
        pdf.set_x(pdf.l_margin)
        for i, (label, value) in enumerate(block.items):
            if i:
                pdf.set_font(self._family, "", s.body_size)
                pdf.write(height, " | ")
            pdf.set_font(self._family, "B", s.body_size)
            pdf.write(height, self._safe_text(pdf, f"{label}: "))
            pdf.set_font(self._family, "", s.body_size)
            pdf.write(height, self._safe_text(pdf, value))
        pdf.ln(height)

    def _body_font(self, pdf: FPDF) -> None:
        pdf.set_font(self._family, "", self.style.body_size)
        pdf.set_text_color(*self.style.text_color)

    def _cell(self, pdf: FPDF, text: str, height: float, align: str, width: float = 0) -> None:
        pdf.multi_cell(
            w=width,
            h=height,
            text=self._safe_text(pdf, text),
            align=align,
            new_x=XPos.LMARGIN,
            new_y=YPos.NEXT,
        )

    @staticmethod
    def _safe_text(pdf: FPDF, text: str) -> str:
        """Ensure text is encodable by the current font. Replace if needed."""
        if pdf.is_ttf_font:
            return text
        text = text.translate(_TRANSLITERATIONS)
        # For built-in fonts (Helvetica etc.), strip non-latin chars
        try:
            text.encode("latin-1")
            return text
        except UnicodeEncodeError:
            return text.encode("latin-1", errors="replace").decode("latin-1")


def emit(blocks: Iterable[LayoutBlock], template: str = "modern", **options) -> bytes:
    """Render ``blocks`` to PDF bytes in the given template's style."""
    return PdfEmitter(template, **options).emit(blocks)


def iter_emit(
    blocks: Iterable[LayoutBlock],
    template: str = "modern",
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    **options,
) -> Iterator[bytes]:
    """Yield the PDF in ``chunk_size`` pieces; nothing is produced until pulled.

    fpdf2 writes its cross-reference table last, so the first chunk is ready
    once layout finishes; chunks are immutable once yielded.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    data = emit(blocks, template, **options)
    for start in range(0, len(data), chunk_size):
        yield data[start : start + chunk_size]


async def stream(
    blocks: Iterable[LayoutBlock],
    sink: ByteSink,
    template: str = "modern",
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    **options,
) -> int:
    """Write the PDF to an async sink, waiting for ``drain()`` after every chunk.

    Layout runs in a worker thread so the event loop keeps serving other
    requests. Returns the number of bytes written.
    """
    blocks = tuple(blocks)
    chunks = await asyncio.to_thread(
        lambda: list(iter_emit(blocks, template, chunk_size=chunk_size, **options))
    )
    written = 0
    for chunk in chunks:
        sink.write(chunk)
        await sink.drain()
        written += len(chunk)
    return written


def document_filename(resume: Resume) -> str:
    """``"{fullName}_Resume.pdf"``; escaping for the filesystem is the caller's job."""
    return f"{resume.personal_info.full_name}_Resume.pdf"
