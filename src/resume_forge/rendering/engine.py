"""Template Rendering Engine - decides what goes on the page and in which order.

Content and order never depend on the template; styling is applied later by
the emitter.
"""

from __future__ import annotations

import logging
from datetime import date

from resume_forge.errors import RenderFailure
from resume_forge.models.resume import (
    Certification,
    Education,
    Experience,
    PersonalInfo,
    Project,
    Resume,
    Skills,
)
from resume_forge.rendering.blocks import BulletList, Heading, KeyValueLine, LayoutBlock, Paragraph

logger = logging.getLogger(__name__)

SECTION_TITLES = {
    "summary": "Professional Summary",
    "experience": "Professional Experience",
    "education": "Education",
    "skills": "Skills",
    "projects": "Projects",
    "certifications": "Certifications",
}

SKILL_LABELS = (
    ("technical", "Technical"),
    ("soft", "Soft Skills"),
    ("languages", "Languages"),
)


def format_calendar_date(value: date) -> str:
    """US-style calendar date, e.g. ``1/15/2023``."""
    return f"{value.month}/{value.day}/{value.year}"


def experience_dates(entry: Experience) -> str:
    """``"{startYear} - {Present|endYear}"``; ``current`` wins over any endDate."""
    if entry.current:
        return f"{entry.start_date.year} - Present"
    if entry.end_date is None:
        raise RenderFailure(
            f"Experience at {entry.company!r} is not current but has no end date"
        )
    return f"{entry.start_date.year} - {entry.end_date.year}"


def render(resume: Resume) -> tuple[LayoutBlock, ...]:
    """Map a validated resume to an ordered sequence of layout blocks."""
    try:
        blocks = [
            *_header(resume.personal_info),
            *_summary(resume.personal_info),
            *_experience(resume.experience),
            *_education(resume.education),
            *_skills(resume.skills),
            *_projects(resume.projects),
            *_certifications(resume.certifications),
        ]
    except RenderFailure:
        logger.error("Layout failed for resume owned by %s", resume.owner, exc_info=True)
        raise
    logger.debug("Rendered %d layout blocks", len(blocks))
    return tuple(blocks)


def _header(info: PersonalInfo) -> list[LayoutBlock]:
    if not info.full_name.strip():
        raise RenderFailure("Resume has a blank full name")
    return [
        Heading(1, info.full_name),
        Paragraph(" | ".join(info.contact_items), align="center"),
    ]


def _summary(info: PersonalInfo) -> list[LayoutBlock]:
    if not info.summary:
        return []
    return [Heading(2, SECTION_TITLES["summary"]), Paragraph(info.summary)]


def _experience(entries: tuple[Experience, ...]) -> list[LayoutBlock]:
    if not entries:
        return []
    blocks: list[LayoutBlock] = [Heading(2, SECTION_TITLES["experience"])]
    for entry in entries:
        blocks.append(Heading(3, f"{entry.position} at {entry.company}"))
        blocks.append(Paragraph(experience_dates(entry)))
        if entry.description:
            blocks.append(Paragraph(entry.description))
        if entry.achievements:
            blocks.append(BulletList(entry.achievements))
    return blocks


def _education(entries: tuple[Education, ...]) -> list[LayoutBlock]:
    if not entries:
        return []
    blocks: list[LayoutBlock] = [Heading(2, SECTION_TITLES["education"])]
    for entry in entries:
        title = f"{entry.degree} in {entry.field}" if entry.field else entry.degree
        blocks.append(Heading(3, title))
        blocks.append(Paragraph(entry.institution))
        years = str(entry.start_date.year)
        if entry.end_date:
            years += f" - {entry.end_date.year}"
        blocks.append(Paragraph(years))
        if entry.gpa:
            blocks.append(KeyValueLine((("GPA", entry.gpa),)))
        if entry.honors:
            blocks.append(BulletList(entry.honors))
    return blocks


def _skills(skills: Skills) -> list[LayoutBlock]:
    if skills.is_empty:
        return []
    blocks: list[LayoutBlock] = [Heading(2, SECTION_TITLES["skills"])]
    for attr, label in SKILL_LABELS:
        items = getattr(skills, attr)
        if items:
            blocks.append(KeyValueLine(((label, ", ".join(items)),)))
    return blocks


def _projects(entries: tuple[Project, ...]) -> list[LayoutBlock]:
    if not entries:
        return []
    blocks: list[LayoutBlock] = [Heading(2, SECTION_TITLES["projects"])]
    for entry in entries:
        blocks.append(Heading(3, entry.name))
        if entry.description:
            blocks.append(Paragraph(entry.description))
        if entry.technologies:
            blocks.append(KeyValueLine((("Technologies", ", ".join(entry.technologies)),)))
        if entry.link:
            blocks.append(KeyValueLine((("Link", entry.link),)))
    return blocks


def _certifications(entries: tuple[Certification, ...]) -> list[LayoutBlock]:
    if not entries:
        return []
    blocks: list[LayoutBlock] = [Heading(2, SECTION_TITLES["certifications"])]
    for entry in entries:
        blocks.append(Heading(3, entry.name))
        if entry.issuer:
            blocks.append(KeyValueLine((("Issued by", entry.issuer),)))
        dates: list[tuple[str, str]] = []
        if entry.date:
            dates.append(("Date", format_calendar_date(entry.date)))
        if entry.expiry_date:
            dates.append(("Expires", format_calendar_date(entry.expiry_date)))
        if dates:
            blocks.append(KeyValueLine(tuple(dates)))
    return blocks
