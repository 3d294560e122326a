"""Document Model Builder - the only path from raw data to a validated Resume.

Both hand-entered data and generator output pass through :func:`build`.
Validation collects every field problem in one pass so the caller can show
all of them at once.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from resume_forge.errors import FieldError, FieldValidationError, InvalidInput, SchemaViolation
from resume_forge.models.resume import SECTION_KEYS, Resume, ResumeDraft

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", ResumeDraft, Resume)

_MESSAGES = {
    "missing": "is required",
    "string_too_short": "must not be empty",
}


@dataclass(frozen=True)
class Provenance:
    """Where the data came from; ``ai_prompt`` is kept only for generated resumes."""

    ai_generated: bool = False
    ai_prompt: str | None = None


MANUAL = Provenance()


def build(
    candidate: Any,
    owner: str,
    template: str | None = None,
    provenance: Provenance = MANUAL,
) -> Resume:
    """Validate and normalize ``candidate`` into a Resume owned by ``owner``.

    Raises:
        SchemaViolation: generated data failed validation.
        InvalidInput: manually supplied data failed validation.
    """
    error_cls = _error_class(provenance)
    payload = _prepare(candidate, template, provenance, error_cls)
    payload["owner"] = owner
    return _validate(Resume, payload, error_cls)


def validate_candidate(
    candidate: Any,
    template: str | None = None,
    provenance: Provenance = MANUAL,
) -> ResumeDraft:
    """Validate ``candidate`` without attaching an owner."""
    error_cls = _error_class(provenance)
    payload = _prepare(candidate, template, provenance, error_cls)
    return _validate(ResumeDraft, payload, error_cls)


def revise(resume: Resume, changes: Mapping[str, Any]) -> Resume:
    """Return a new Resume with ``changes`` deep-merged in and re-validated.

    Nested objects merge key by key; lists are replaced wholesale.
    """
    record = resume.to_record()
    merged = _deep_merge(record, changes)
    provenance = Provenance(resume.ai_generated, resume.ai_prompt)
    payload = _prepare(merged, merged.get("template"), provenance, InvalidInput)
    payload["owner"] = resume.owner
    payload["isActive"] = resume.is_active
    return _validate(Resume, payload, InvalidInput)


def field_errors(exc: ValidationError) -> list[FieldError]:
    """Flatten a pydantic ValidationError into dotted-path field errors."""
    return [
        FieldError(field=_format_loc(err["loc"]), message=_message(err))
        for err in exc.errors(include_url=False)
    ]


def _error_class(provenance: Provenance) -> type[FieldValidationError]:
    return SchemaViolation if provenance.ai_generated else InvalidInput


def _prepare(
    candidate: Any,
    template: str | None,
    provenance: Provenance,
    error_cls: type[FieldValidationError],
) -> dict[str, Any]:
    if not isinstance(candidate, Mapping):
        raise error_cls(
            [FieldError("", f"expected a JSON object, got {type(candidate).__name__}")]
        )

    payload = {
        k: v for k, v in candidate.items() if k in SECTION_KEYS or to_camel(k) in SECTION_KEYS
    }
    dropped = sorted(str(k) for k in candidate if k not in payload)
    if dropped:
        logger.debug("Dropping unknown top-level keys: %s", ", ".join(dropped))

    if template is None:
        template = candidate.get("template")
    if template is not None:
        payload["template"] = template
    payload["aiGenerated"] = provenance.ai_generated
    if provenance.ai_generated:
        payload["aiPrompt"] = provenance.ai_prompt
    return payload


def _validate(
    model: type[ModelT], payload: dict[str, Any], error_cls: type[FieldValidationError]
) -> ModelT:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        errors = field_errors(exc)
        logger.warning(
            "Resume validation failed with %d error(s): %s",
            len(errors),
            ", ".join(e.field for e in errors),
        )
        raise error_cls(errors) from exc


def _format_loc(loc: tuple[int | str, ...]) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            name = to_camel(part) if "_" in part else part
            path += f".{name}" if path else name
    return path


def _message(err: Any) -> str:
    if err["type"] in _MESSAGES:
        return _MESSAGES[err["type"]]
    return str(err["msg"]).removeprefix("Value error, ")


def _deep_merge(base: dict[str, Any], changes: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in changes.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged
