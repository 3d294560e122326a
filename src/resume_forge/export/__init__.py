"""PDF export module for resume-forge."""
from resume_forge.export.pdf_emitter import (
    PDF_MIME_TYPE,
    PdfEmitter,
    document_filename,
    emit,
    iter_emit,
    stream,
)
from resume_forge.export.readback import pdf_page_texts, pdf_text
from resume_forge.export.styles import TEMPLATE_STYLES

__all__ = [
    "PDF_MIME_TYPE",
    "PdfEmitter",
    "TEMPLATE_STYLES",
    "document_filename",
    "emit",
    "iter_emit",
    "pdf_page_texts",
    "pdf_text",
    "stream",
]
