"""Pydantic model for the generation request handed over by the routing layer."""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, StringConstraints, field_validator

from resume_forge.models.resume import DEFAULT_TEMPLATE, TemplateName


class GenerationRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    prompt: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    template: TemplateName = DEFAULT_TEMPLATE

    @field_validator("template", mode="before")
    @classmethod
    def _default_when_blank(cls, value: Any) -> Any:
        if value is None or isinstance(value, str) and not value.strip():
            return DEFAULT_TEMPLATE
        return value.strip().lower() if isinstance(value, str) else value
