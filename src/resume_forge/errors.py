"""Error taxonomy shared by generation, validation and rendering."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """One field-level problem, addressed by a dotted path like ``experience[0].endDate``."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}" if self.field else self.message


class ResumeError(Exception):
    """Base class for every error the core hands back to its caller."""

    public_message = "Resume processing failed."


class FieldValidationError(ResumeError):
    """Input failed validation; carries the complete list of offending fields."""

    def __init__(self, errors: list[FieldError], message: str | None = None):
        self.errors = list(errors)
        super().__init__(message or self._summarize())

    def _summarize(self) -> str:
        fields = ", ".join(e.field or "<root>" for e in self.errors)
        return f"{len(self.errors)} invalid field(s): {fields}"

    @property
    def fields(self) -> list[str]:
        return [e.field for e in self.errors]

    @property
    def public_message(self) -> str:  # type: ignore[override]
        return "\n".join(str(e) for e in self.errors)


class InvalidInput(FieldValidationError):
    """Empty prompt or manually supplied data missing required fields."""


class SchemaViolation(FieldValidationError):
    """Generated JSON parsed fine but does not satisfy the resume schema."""


class GenerationError(ResumeError):
    """The generative provider did not produce usable output."""

    public_message = "Resume generation failed."


class ProviderError(GenerationError):
    """The provider call itself failed (network, API error, caller timeout)."""


class MalformedResponse(GenerationError):
    """The provider returned non-JSON or truncated text."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class RenderFailure(ResumeError):
    """Layout or emission found an inconsistency validation should have prevented."""

    public_message = "Resume rendering failed."
