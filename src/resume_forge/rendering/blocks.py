"""Renderer-agnostic layout blocks produced by the rendering engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union

Align = Literal["left", "center"]


@dataclass(frozen=True)
class Heading:
    level: int  # 1 = name, 2 = section, 3 = entry
    text: str


@dataclass(frozen=True)
class Paragraph:
    text: str
    align: Align = "left"


@dataclass(frozen=True)
class BulletList:
    items: tuple[str, ...]


@dataclass(frozen=True)
class KeyValueLine:
    items: tuple[tuple[str, str], ...]

    @property
    def text(self) -> str:
        return " | ".join(f"{label}: {value}" for label, value in self.items)


LayoutBlock = Union[Heading, Paragraph, BulletList, KeyValueLine]


def block_lines(block: LayoutBlock) -> list[str]:
    """Plain-text lines for one block, as they read on the page."""
    if isinstance(block, BulletList):
        return [f"- {item}" for item in block.items]
    return [block.text]


def plain_text(blocks: tuple[LayoutBlock, ...] | list[LayoutBlock]) -> str:
    """Render blocks as plain text, one line per printed line."""
    lines: list[str] = []
    for block in blocks:
        if isinstance(block, Heading) and block.level <= 2 and lines:
            lines.append("")
        lines.extend(block_lines(block))
    return "\n".join(lines)
