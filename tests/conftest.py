"""Shared test fixtures."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from resume_forge.clients.llm_client import LLMClient, LLMResponse
from resume_forge.models.resume import Resume
from resume_forge.pipeline.builder import build


@pytest.fixture
def sample_prompt() -> str:
    return "Frontend engineer, 3 years, React, led a 2-person team"


@pytest.fixture
def minimal_candidate() -> dict:
    """The smallest payload that passes validation."""
    return {
        "personalInfo": {"fullName": "Jane Doe", "email": "jane@example.com"},
    }


@pytest.fixture
def full_candidate() -> dict:
    return {
        "personalInfo": {
            "fullName": "  Jane Doe ",
            "email": "jane@example.com",
            "phone": "+1 555 0100",
            "address": "Portland, OR",
            "linkedin": "linkedin.com/in/janedoe",
            "website": "",
            "summary": "Frontend engineer focused on accessible, fast web apps.",
        },
        "experience": [
            {
                "company": "Acme",
                "position": "Frontend Engineer",
                "startDate": "2021-01-01",
                "current": True,
                "description": "Built the customer dashboard in React.",
                "achievements": [
                    "Led a 2-person team shipping the design system",
                    "Cut bundle size by 40%",
                ],
                "skills": ["React", "TypeScript", "React"],
            },
            {
                "company": "Globex",
                "position": "Junior Developer",
                "startDate": "2019-06",
                "endDate": "2020-12-31",
            },
        ],
        "education": [
            {
                "institution": "State University",
                "degree": "BSc",
                "field": "Computer Science",
                "startDate": "2015",
                "endDate": "2019",
                "gpa": 3.8,
                "honors": ["Dean's List"],
            }
        ],
        "skills": {
            "technical": ["React", "TypeScript", "CSS"],
            "soft": ["Mentoring"],
            "languages": [],
        },
        "projects": [
            {
                "name": "a11y-lint",
                "description": "Accessibility linter for JSX.",
                "technologies": ["Node.js", "ESLint"],
                "link": "https://github.com/jane/a11y-lint",
            }
        ],
        "certifications": [
            {
                "name": "AWS Certified Developer",
                "issuer": "Amazon",
                "date": "2023-01-15",
            }
        ],
        "accessibility": {
            "disabilityType": "low vision",
            "accommodations": ["screen magnifier"],
        },
    }


@pytest.fixture
def sample_resume(full_candidate) -> Resume:
    return build(full_candidate, owner="user-1", template="modern")


@pytest.fixture
def minimal_resume(minimal_candidate) -> Resume:
    return build(minimal_candidate, owner="user-1")


@pytest.fixture
def generated_candidate() -> dict:
    """What a well-behaved provider returns for the sample prompt."""
    return {
        "personalInfo": {"fullName": "Jane Doe", "email": "jane.doe@example.com"},
        "experience": [
            {
                "company": "Acme",
                "position": "Frontend Engineer",
                "startDate": "2021-01-01",
                "current": True,
            }
        ],
        "education": [],
        "skills": {"technical": ["React"], "soft": ["Leadership"], "languages": []},
        "projects": [],
        "certifications": [],
    }


@pytest.fixture
def mock_llm_client(generated_candidate) -> LLMClient:
    """Create a mock LLM client that answers with ``generated_candidate``."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(
            text=json.dumps(generated_candidate), input_tokens=100, output_tokens=50
        )
    )
    return client
