"""Presentational parameters per template. Only the emitter reads these."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from resume_forge.errors import RenderFailure

logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]

BLACK: RGB = (0, 0, 0)


@dataclass(frozen=True)
class TemplateStyle:
    font_family: str
    name_size: float
    section_size: float
    entry_size: float
    body_size: float
    accent: RGB = BLACK
    text_color: RGB = BLACK
    line_spacing: float = 1.3  # line height as a multiple of font size
    section_gap: float = 10.0
    entry_gap: float = 5.0
    section_rule: bool = True
    uppercase_sections: bool = False
    bullet_indent: float = 12.0

    def line_height(self, size: float) -> float:
        return size * self.line_spacing


TEMPLATE_STYLES: dict[str, TemplateStyle] = {
    "modern": TemplateStyle(
        font_family="Helvetica",
        name_size=24,
        section_size=14,
        entry_size=12,
        body_size=10,
        accent=(31, 78, 121),
    ),
    "classic": TemplateStyle(
        font_family="Times",
        name_size=22,
        section_size=14,
        entry_size=12,
        body_size=11,
        uppercase_sections=True,
    ),
    "creative": TemplateStyle(
        font_family="Helvetica",
        name_size=28,
        section_size=15,
        entry_size=12,
        body_size=10,
        accent=(142, 68, 173),
        text_color=(44, 62, 80),
        section_gap=14.0,
        entry_gap=6.0,
        line_spacing=1.4,
    ),
    "minimal": TemplateStyle(
        font_family="Helvetica",
        name_size=20,
        section_size=12,
        entry_size=11,
        body_size=10,
        accent=(90, 90, 90),
        text_color=(40, 40, 40),
        section_rule=False,
        section_gap=8.0,
        entry_gap=4.0,
    ),
}


def get_style(template: str) -> TemplateStyle:
    """Look up the style for a validated template id."""
    try:
        return TEMPLATE_STYLES[template]
    except KeyError:
        logger.error("No style registered for template %r", template, exc_info=True)
        raise RenderFailure(f"No style registered for template {template!r}") from None
