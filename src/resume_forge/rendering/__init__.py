"""Resume -> layout blocks."""

from resume_forge.rendering.blocks import (
    BulletList,
    Heading,
    KeyValueLine,
    LayoutBlock,
    Paragraph,
    plain_text,
)
from resume_forge.rendering.engine import render

__all__ = [
    "BulletList",
    "Heading",
    "KeyValueLine",
    "LayoutBlock",
    "Paragraph",
    "plain_text",
    "render",
]
