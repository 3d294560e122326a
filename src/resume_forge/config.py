"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from resume_forge.models.resume import DEFAULT_TEMPLATE, TEMPLATES

PAGE_FORMATS = ("A4", "Letter", "Legal")


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-haiku-4-5-20251001"
    temperature: float = 0.2
    max_tokens: int = 8192
    timeout: int = 60
    max_attempts: int = 1

    def __post_init__(self) -> None:
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"llm.temperature must be between 0 and 1, got {self.temperature}")
        if not 1 <= self.max_tokens <= 64000:
            raise ValueError(f"llm.max_tokens must be between 1 and 64000, got {self.max_tokens}")
        if not 1 <= self.timeout <= 600:
            raise ValueError(f"llm.timeout must be between 1 and 600, got {self.timeout}")
        if not 1 <= self.max_attempts <= 10:
            raise ValueError(f"llm.max_attempts must be between 1 and 10, got {self.max_attempts}")


@dataclass(frozen=True)
class RenderConfig:
    page_format: str = "A4"
    margin: float = 50.0
    font_path: str | None = None
    chunk_size: int = 16 * 1024

    def __post_init__(self) -> None:
        if self.page_format not in PAGE_FORMATS:
            raise ValueError(
                f"render.page_format must be one of {', '.join(PAGE_FORMATS)}, "
                f"got {self.page_format!r}"
            )
        if not 0 <= self.margin <= 144:
            raise ValueError(f"render.margin must be between 0 and 144 points, got {self.margin}")
        if self.chunk_size < 1:
            raise ValueError(f"render.chunk_size must be positive, got {self.chunk_size}")

    @property
    def resolved_font_path(self) -> Path | None:
        return Path(self.font_path).expanduser() if self.font_path else None

    def emitter_options(self) -> dict:
        font = self.resolved_font_path
        return {
            "page_format": self.page_format,
            "margin": self.margin,
            "font_path": str(font) if font else None,
        }


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    default_template: str = DEFAULT_TEMPLATE

    def __post_init__(self) -> None:
        if self.default_template not in TEMPLATES:
            raise ValueError(
                f"default_template must be one of {', '.join(TEMPLATES)}, "
                f"got {self.default_template!r}"
            )


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        # Look for config.yaml relative to the project root
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        render=RenderConfig(**raw.get("render", {})),
        default_template=raw.get("default_template", DEFAULT_TEMPLATE),
    )
