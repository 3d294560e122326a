"""Pydantic models for the canonical resume document.

Wire names are camelCase (``personalInfo.fullName``); attributes are
snake_case. Every model is frozen: a change produces a new, re-validated
instance through :func:`resume_forge.pipeline.builder.revise`.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime
from typing import Annotated, Any, Literal, Optional, get_args

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

TemplateName = Literal["modern", "classic", "creative", "minimal"]
TEMPLATES: tuple[str, ...] = get_args(TemplateName)
DEFAULT_TEMPLATE: TemplateName = "modern"

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s.]+$")
PRESENT_WORDS = frozenset({"present", "current", "now", "ongoing"})

_MONTHS = {
    name.lower(): number
    for names in (calendar.month_name, calendar.month_abbr)
    for number, name in enumerate(names)
    if name
}
_YEAR = re.compile(r"^(\d{4})$")
_YEAR_MONTH = re.compile(r"^(\d{4})[-/.](\d{1,2})$")
_MONTH_YEAR = re.compile(r"^(\d{1,2})[-/.](\d{4})$")
_ISO_DATE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:[T ].*)?$")
_NAMED_MONTH = re.compile(r"^([A-Za-z]+)\.?,?\s+(\d{4})$")


def coerce_date(value: Any) -> date | None:
    """Turn the date shapes generators and forms produce into a ``date``.

    Year-only and year-month values anchor on the first day.
    """
    if value is None or isinstance(value, date) and not isinstance(value, datetime):
        return value
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, int) and not isinstance(value, bool):
        if not 1 <= value <= 9999:
            raise ValueError(f"year {value} is out of range")
        return date(value, 1, 1)
    if not isinstance(value, str):
        raise ValueError(f"expected a date, got {type(value).__name__}")

    text = value.strip()
    if not text:
        return None
    if m := _YEAR.match(text):
        return date(int(m.group(1)), 1, 1)
    if m := _YEAR_MONTH.match(text):
        return date(int(m.group(1)), int(m.group(2)), 1)
    if m := _MONTH_YEAR.match(text):
        return date(int(m.group(2)), int(m.group(1)), 1)
    if m := _ISO_DATE.match(text):
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    if (m := _NAMED_MONTH.match(text)) and m.group(1).lower() in _MONTHS:
        return date(int(m.group(2)), _MONTHS[m.group(1).lower()], 1)
    raise ValueError(f"unrecognized date {text!r}")


def _coerce_text(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _blank_to_none(value: Any) -> Any:
    value = _coerce_text(value)
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _as_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, (str, dict)):
        return [value]
    if isinstance(value, (list, tuple)):
        return [_coerce_text(v) for v in value]
    return value


def _as_dict(value: Any) -> Any:
    return {} if value is None else value


def _drop_blank(items: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(i for i in items if i)


def _unique(items: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(i for i in items if i))


RequiredText = Annotated[
    str, BeforeValidator(_coerce_text), StringConstraints(strip_whitespace=True, min_length=1)
]
OptionalText = Annotated[Optional[str], BeforeValidator(_blank_to_none)]
TextList = Annotated[tuple[str, ...], BeforeValidator(_as_list), AfterValidator(_drop_blank)]
TextSet = Annotated[tuple[str, ...], BeforeValidator(_as_list), AfterValidator(_unique)]
RequiredDate = Annotated[date, BeforeValidator(coerce_date)]
OptionalDate = Annotated[Optional[date], BeforeValidator(coerce_date)]


def _check_not_before(value: date | None, info: ValidationInfo, start_field: str) -> date | None:
    start = info.data.get(start_field)
    if value is not None and start is not None and value < start:
        raise ValueError(f"must not precede {to_camel(start_field)}")
    return value


class _ResumeModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
        str_strip_whitespace=True,
    )


class PersonalInfo(_ResumeModel):
    full_name: RequiredText
    email: RequiredText
    phone: OptionalText = None
    address: OptionalText = None
    linkedin: OptionalText = None
    website: OptionalText = None
    summary: OptionalText = None

    @field_validator("email")
    @classmethod
    def _email_shape(cls, value: str) -> str:
        if not EMAIL_PATTERN.match(value):
            raise ValueError("must look like name@domain.tld")
        return value

    @property
    def contact_items(self) -> list[str]:
        return [
            v for v in (self.email, self.phone, self.address, self.linkedin, self.website) if v
        ]


class Experience(_ResumeModel):
    # start_date and current precede end_date so its validator can see them.
    company: RequiredText
    position: RequiredText
    start_date: RequiredDate
    current: bool = False
    end_date: OptionalDate = Field(default=None, validate_default=True)
    description: OptionalText = None
    achievements: TextList = ()
    skills: TextSet = ()

    @model_validator(mode="before")
    @classmethod
    def _present_means_current(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("current") is None:
            data.pop("current", None)
            for key in ("endDate", "end_date"):
                end = data.get(key)
                if isinstance(end, str) and end.strip().lower() in PRESENT_WORDS:
                    data[key] = None
                    data["current"] = True
        # An absent endDate still has to reach its validator under the wire name
        if "endDate" not in data and "end_date" not in data:
            data["endDate"] = None
        return data

    @field_validator("end_date")
    @classmethod
    def _end_date_rules(cls, value: date | None, info: ValidationInfo) -> date | None:
        if info.data.get("current"):
            return value
        if value is None:
            raise ValueError("is required unless the position is current")
        return _check_not_before(value, info, "start_date")


class Education(_ResumeModel):
    institution: RequiredText
    degree: RequiredText
    field: OptionalText = None
    start_date: RequiredDate
    end_date: OptionalDate = None
    gpa: OptionalText = None
    honors: TextList = ()

    @field_validator("end_date")
    @classmethod
    def _end_after_start(cls, value: date | None, info: ValidationInfo) -> date | None:
        return _check_not_before(value, info, "start_date")


class Skills(_ResumeModel):
    technical: TextSet = ()
    soft: TextSet = ()
    languages: TextSet = ()

    @model_validator(mode="before")
    @classmethod
    def _flat_list_is_technical(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            return {"technical": data}
        return data

    @property
    def is_empty(self) -> bool:
        return not (self.technical or self.soft or self.languages)


class Project(_ResumeModel):
    name: RequiredText
    description: OptionalText = None
    technologies: TextList = ()
    link: OptionalText = None
    start_date: OptionalDate = None
    end_date: OptionalDate = None

    @field_validator("end_date")
    @classmethod
    def _end_after_start(cls, value: date | None, info: ValidationInfo) -> date | None:
        return _check_not_before(value, info, "start_date")


class Certification(_ResumeModel):
    name: RequiredText
    issuer: OptionalText = None
    date: OptionalDate = None
    expiry_date: OptionalDate = None
    link: OptionalText = None

    @field_validator("expiry_date")
    @classmethod
    def _expiry_after_issue(cls, value: Any, info: ValidationInfo) -> Any:
        # the "date" field shadows the type inside this class body
        return _check_not_before(value, info, "date")


class Accessibility(_ResumeModel):
    """Free-form accommodation notes; carried through, never interpreted."""

    disability_type: OptionalText = None
    accommodations: TextList = ()
    accessibility_preferences: TextList = ()


class ResumeContent(_ResumeModel):
    """The sections a generator or a form fills in."""

    personal_info: PersonalInfo
    experience: Annotated[tuple[Experience, ...], BeforeValidator(_as_list)] = ()
    education: Annotated[tuple[Education, ...], BeforeValidator(_as_list)] = ()
    skills: Annotated[Skills, BeforeValidator(_as_dict)] = Field(default_factory=Skills)
    projects: Annotated[tuple[Project, ...], BeforeValidator(_as_list)] = ()
    certifications: Annotated[tuple[Certification, ...], BeforeValidator(_as_list)] = ()
    accessibility: Annotated[Accessibility, BeforeValidator(_as_dict)] = Field(
        default_factory=Accessibility
    )


SECTION_KEYS: tuple[str, ...] = (
    "personalInfo",
    "experience",
    "education",
    "skills",
    "projects",
    "certifications",
    "accessibility",
)


class ResumeDraft(ResumeContent):
    """Validated content plus template and provenance, not yet owned by anyone."""

    template: TemplateName = DEFAULT_TEMPLATE
    ai_generated: bool = False
    ai_prompt: OptionalText = None

    @field_validator("template", mode="before")
    @classmethod
    def _normalize_template(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    @model_validator(mode="before")
    @classmethod
    def _prompt_only_when_generated(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("aiGenerated", data.get("ai_generated")):
            data = {k: v for k, v in data.items() if k not in ("aiPrompt", "ai_prompt")}
        return data

    def to_response(self) -> dict[str, Any]:
        """Generation success payload handed back to the routing layer."""
        return self.model_dump(
            mode="json",
            by_alias=True,
            include={
                "personal_info",
                "experience",
                "education",
                "skills",
                "projects",
                "certifications",
                "template",
                "ai_generated",
                "ai_prompt",
            },
        )


class Resume(ResumeDraft):
    """A validated resume owned by exactly one user reference."""

    owner: RequiredText
    is_active: bool = True

    def to_record(self) -> dict[str, Any]:
        """Full camelCase document for the persistence layer."""
        return self.model_dump(mode="json", by_alias=True)
