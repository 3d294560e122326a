"""Utility to extract JSON from LLM responses."""

from __future__ import annotations

import json
from typing import Any


def extract_json(text: str) -> Any:
    """Extract a JSON value from an LLM response, handling ```json blocks.

    Tries in order:
    1. Direct json.loads on the full text
    2. Strip fenced code block markers and parse
    3. Find first '{' to last '}' and parse

    Truncated output is not repaired: a half-written resume is worse than
    a clear failure.
    """
    if not isinstance(text, str):
        raise ValueError(f"Expected text, got {type(text).__name__}")
    text = text.strip()

    # 1) Direct parse
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    # 2) Strip fenced code block markers
    stripped = _strip_code_fences(text)
    if stripped != text:
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            pass

    # 3) First '{' to last '}'
    result = _extract_braces(stripped)
    if result is not None:
        return result

    raise ValueError(f"Could not extract JSON from text: {text[:200]}...")


def _strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers from text."""
    lines = text.split("\n")

    # Remove opening fence (```json, ```, etc.) and any prose before it
    for i, line in enumerate(lines):
        if line.strip().startswith("```"):
            lines = lines[i + 1 :]
            break

    # Remove closing fence and whatever follows it
    for i, line in enumerate(lines):
        if line.strip() == "```":
            lines = lines[:i]
            break

    return "\n".join(lines).strip()


def _extract_braces(text: str) -> dict | None:
    """Try to extract JSON object from first '{' to last '}'."""
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1 and end > start:
        try:
            return json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            pass
    return None
