"""Data models for the resume document and its requests."""

from resume_forge.models.request import GenerationRequest
from resume_forge.models.resume import (
    DEFAULT_TEMPLATE,
    TEMPLATES,
    Accessibility,
    Certification,
    Education,
    Experience,
    PersonalInfo,
    Project,
    Resume,
    ResumeContent,
    ResumeDraft,
    Skills,
    TemplateName,
)

__all__ = [
    "Accessibility",
    "Certification",
    "DEFAULT_TEMPLATE",
    "Education",
    "Experience",
    "GenerationRequest",
    "PersonalInfo",
    "Project",
    "Resume",
    "ResumeContent",
    "ResumeDraft",
    "Skills",
    "TEMPLATES",
    "TemplateName",
]
