"""Content Generation Adapter - turns a free-text background into a validated draft.

The provider is injected, so tests and alternative backends only need an
object with an ``LLMClient.generate``-compatible coroutine.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from resume_forge.clients.llm_client import DEFAULT_MODEL, LLMClient
from resume_forge.errors import (
    FieldError,
    InvalidInput,
    MalformedResponse,
    ProviderError,
    SchemaViolation,
)
from resume_forge.models.request import GenerationRequest
from resume_forge.models.resume import DEFAULT_TEMPLATE, TEMPLATES, ResumeDraft
from resume_forge.pipeline.builder import Provenance, field_errors, validate_candidate
from resume_forge.utils.json_parser import extract_json

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are a professional resume writer. You turn a person's description of their \
background into structured resume data. You respond with JSON only."""

RESUME_SHAPE = """\
{
  "personalInfo": {
    "fullName": "string (required)",
    "email": "string (required)",
    "phone": "string",
    "address": "string",
    "linkedin": "string",
    "website": "string",
    "summary": "string"
  },
  "experience": [
    {
      "company": "string (required)",
      "position": "string (required)",
      "startDate": "YYYY-MM-DD (required)",
      "endDate": "YYYY-MM-DD (omit when current)",
      "current": false,
      "description": "string",
      "achievements": ["string"],
      "skills": ["string"]
    }
  ],
  "education": [
    {
      "institution": "string (required)",
      "degree": "string (required)",
      "field": "string",
      "startDate": "YYYY-MM-DD (required)",
      "endDate": "YYYY-MM-DD",
      "gpa": "string",
      "honors": ["string"]
    }
  ],
  "skills": {
    "technical": ["string"],
    "soft": ["string"],
    "languages": ["string"]
  },
  "projects": [
    {
      "name": "string (required)",
      "description": "string",
      "technologies": ["string"],
      "link": "string",
      "startDate": "YYYY-MM-DD",
      "endDate": "YYYY-MM-DD"
    }
  ],
  "certifications": [
    {
      "name": "string (required)",
      "issuer": "string",
      "date": "YYYY-MM-DD",
      "expiryDate": "YYYY-MM-DD",
      "link": "string"
    }
  ]
}"""


def build_prompt(prompt_text: str) -> str:
    """Wrap the user's text in the fixed generation instructions."""
    return f"""Create a professional resume from the information below.

Return a JSON object with exactly this shape:
{RESUME_SHAPE}

Rules:
- Return ONLY valid JSON. No markdown, no commentary.
- Keep entries in the order the person mentions them.
- Use empty arrays for sections with no information; do not invent employers, \
schools, dates or certifications.
- Make it professional and concise. Focus on achievements and measurable results.

User input:
{prompt_text}"""


class ResumeGenerator:
    def __init__(
        self,
        llm: LLMClient,
        model: str = DEFAULT_MODEL,
        *,
        temperature: float = 0.2,
        max_tokens: int = 8192,
    ):
        self.llm = llm
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def generate(self, prompt_text: str, template: str = DEFAULT_TEMPLATE) -> ResumeDraft:
        """Ask the provider for resume data and validate it into a draft.

        Raises:
            InvalidInput: ``prompt_text`` is empty or ``template`` unknown; the
                provider is not called.
            ProviderError: the provider call failed.
            MalformedResponse: the provider reply is not parseable JSON.
            SchemaViolation: the JSON does not satisfy the resume schema.
        """
        if not isinstance(prompt_text, str) or not prompt_text.strip():
            raise InvalidInput([FieldError("prompt", "must not be empty")])
        if isinstance(template, str):
            template = template.strip().lower() or DEFAULT_TEMPLATE
        if template not in TEMPLATES:
            raise InvalidInput(
                [FieldError("template", f"must be one of: {', '.join(TEMPLATES)}")]
            )

        try:
            response = await self.llm.generate(
                prompt=build_prompt(prompt_text),
                system=SYSTEM_PROMPT,
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as exc:
            raise ProviderError(f"Provider call failed: {exc}") from exc

        try:
            candidate = extract_json(response.text)
        except ValueError as exc:
            logger.warning("Provider returned unparseable output (%d chars)", len(response.text))
            raise MalformedResponse(str(exc), raw_text=response.text) from exc

        if not isinstance(candidate, Mapping):
            raise SchemaViolation(
                [FieldError("", f"expected a JSON object, got {type(candidate).__name__}")]
            )

        draft = validate_candidate(
            candidate,
            template=template,
            provenance=Provenance(ai_generated=True, ai_prompt=prompt_text),
        )
        logger.info(
            "Generated resume for %s: %d experience, %d education entries",
            draft.personal_info.full_name,
            len(draft.experience),
            len(draft.education),
        )
        return draft

    async def handle_request(self, payload: Any) -> ResumeDraft:
        """Run :meth:`generate` for a ``{"prompt": ..., "template": ...}`` request body."""
        request = parse_request(payload)
        return await self.generate(request.prompt, request.template)


def parse_request(payload: Any) -> GenerationRequest:
    """Validate a generation request body, mapping failures to InvalidInput."""
    if not isinstance(payload, Mapping):
        raise InvalidInput([FieldError("", "request body must be a JSON object")])
    try:
        return GenerationRequest.model_validate(payload)
    except ValidationError as exc:
        raise InvalidInput(field_errors(exc)) from exc
