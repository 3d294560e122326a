"""Tests for JSON extraction utility."""

import pytest

from resume_forge.utils.json_parser import extract_json


class TestExtractJson:
    def test_direct_json(self):
        result = extract_json('{"fullName": "Jane Doe"}')
        assert result == {"fullName": "Jane Doe"}

    def test_fenced_code_block(self):
        text = 'Here is the resume:\n```json\n{"template": "modern"}\n```\nDone.'
        result = extract_json(text)
        assert result == {"template": "modern"}

    def test_fenced_without_json_tag(self):
        text = '```\n{"key": "value"}\n```'
        result = extract_json(text)
        assert result == {"key": "value"}

    def test_embedded_json(self):
        text = 'Sure! {"skills": {"technical": ["React"]}} Let me know if you need more.'
        result = extract_json(text)
        assert result == {"skills": {"technical": ["React"]}}

    def test_array_is_returned_as_is(self):
        assert extract_json("[1, 2, 3]") == [1, 2, 3]

    def test_nested_json(self):
        text = '{"experience": [{"achievements": ["a", "b"]}]}'
        result = extract_json(text)
        assert result["experience"][0]["achievements"] == ["a", "b"]

    def test_truncated_json_not_repaired(self):
        text = '{"personalInfo": {"fullName": "Jane Doe", "email": "jane@'
        with pytest.raises(ValueError, match="Could not extract JSON"):
            extract_json(text)

    def test_invalid_json_raises(self):
        with pytest.raises(ValueError, match="Could not extract JSON"):
            extract_json("no json here at all")

    def test_empty_string_raises(self):
        with pytest.raises(ValueError):
            extract_json("")

    def test_non_string_raises(self):
        with pytest.raises(ValueError, match="Expected text"):
            extract_json(None)

    def test_multiline_fenced(self):
        text = """Here's the output:
```json
{
  "fullName": "José Müller",
  "skills": ["Python", "Java"]
}
```"""
        result = extract_json(text)
        assert result["fullName"] == "José Müller"
        assert len(result["skills"]) == 2
