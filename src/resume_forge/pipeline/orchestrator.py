"""Main pipeline orchestrator - prompt in, validated resume and PDF out."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from resume_forge.export.pdf_emitter import (
    DEFAULT_CHUNK_SIZE,
    ByteSink,
    PdfEmitter,
    document_filename,
    stream,
)
from resume_forge.models.resume import Resume
from resume_forge.pipeline.builder import MANUAL, Provenance, build
from resume_forge.pipeline.generator import ResumeGenerator, parse_request
from resume_forge.rendering.engine import render

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Complete result from one generate-and-render run."""

    resume: Resume
    document: bytes
    filename: str
    page_count: int
    elapsed_seconds: float = 0.0
    metadata: dict = field(default_factory=dict)


class ResumePipeline:
    """Stateless glue between the generator, the builder, the renderer and the emitter.

    Every call is independent; nothing is cached between requests.
    """

    def __init__(
        self,
        generator: ResumeGenerator,
        *,
        render_options: dict[str, Any] | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        self.generator = generator
        self.render_options = dict(render_options or {})
        self.chunk_size = chunk_size

    async def generate(
        self,
        payload: Any,
        owner: str,
        *,
        on_phase: Callable[[str, str], None] | None = None,
    ) -> PipelineResult:
        """Run a ``{"prompt", "template"}`` request through generation and rendering."""
        start = time.monotonic()

        def _notify(phase: str, detail: str = ""):
            if on_phase:
                on_phase(phase, detail)

        request = parse_request(payload)
        _notify("generate", "Generating resume data")
        draft = await self.generator.generate(request.prompt, request.template)

        _notify("build", "Validating resume")
        resume = build(
            draft.model_dump(mode="json", by_alias=True),
            owner=owner,
            template=draft.template,
            provenance=Provenance(ai_generated=True, ai_prompt=draft.ai_prompt),
        )

        _notify("render", "Rendering PDF")
        document, page_count = self._emit(resume)

        elapsed = time.monotonic() - start
        _notify("done", f"Done in {elapsed:.1f}s")
        logger.info(
            "Pipeline finished for owner %s: %d page(s), %.1fs", owner, page_count, elapsed
        )
        return PipelineResult(
            resume=resume,
            document=document,
            filename=document_filename(resume),
            page_count=page_count,
            elapsed_seconds=elapsed,
            metadata={"template": resume.template},
        )

    def create(self, payload: Any, owner: str, template: str | None = None) -> Resume:
        """Validate manually entered data; failures raise InvalidInput."""
        return build(payload, owner=owner, template=template, provenance=MANUAL)

    def render_document(self, resume: Resume) -> bytes:
        """Lay out and emit an already validated resume."""
        document, _ = self._emit(resume)
        return document

    async def stream_document(self, resume: Resume, sink: ByteSink) -> int:
        """Write the PDF to ``sink`` chunk by chunk; returns the bytes written."""
        written = await stream(
            render(resume),
            sink,
            resume.template,
            chunk_size=self.chunk_size,
            **self.render_options,
        )
        logger.info("Streamed %d bytes for owner %s", written, resume.owner)
        return written

    def _emit(self, resume: Resume) -> tuple[bytes, int]:
        return render_pdf(resume, **self.render_options)


def render_pdf(resume: Resume, **render_options: Any) -> tuple[bytes, int]:
    """Lay out ``resume`` in its own template; returns the PDF bytes and page count."""
    emitter = PdfEmitter(resume.template, **render_options)
    document = emitter.emit(render(resume))
    return document, emitter.page_count
