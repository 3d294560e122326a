"""Read text back out of emitted PDFs (previews, checks, tests)."""

from __future__ import annotations


def pdf_page_texts(pdf_bytes: bytes) -> list[str]:
    """Return the extracted text of each page, in page order."""
    import fitz  # pymupdf

    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        return [page.get_text() for page in doc]


def pdf_text(pdf_bytes: bytes) -> str:
    """All page texts joined with form feeds."""
    return "\f".join(pdf_page_texts(pdf_bytes))
