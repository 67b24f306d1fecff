"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests:
settings, sample payloads shaped like real model answers, and a base64 helper.
"""

import base64
import json
from typing import Any, Dict

import pytest

from lesson_generation.config import Settings


def encode_payload(value: Any) -> str:
    """Base64 of the JSON encoding of value, the answer format the prompts ask for."""
    return base64.b64encode(json.dumps(value).encode("utf-8")).decode("ascii")


def module_titles(topic: str = "Python") -> list[str]:
    return [
        f"Module 1: Getting Started with {topic}",
        f"Module 2: {topic} Data Types",
        f"Module 3: Control Flow in {topic}",
        f"Module 4: {topic} Functions and Modules",
        f"Module 5: Building Projects with {topic}",
    ]


def flashcard_payload(count: int, topic: str = "Python") -> list[Dict[str, Any]]:
    return [
        {
            "id": i,
            "frontHTML": f"What is {topic} concept {i}?",
            "backHTML": f"{topic} concept {i} is explained here in several sentences of detail.",
        }
        for i in range(1, count + 1)
    ]


def quiz_payload(count: int) -> list[Dict[str, Any]]:
    questions = []
    for i in range(1, count + 1):
        if i % 2:
            questions.append({
                "question": f"Question {i}?",
                "questionType": "single",
                "answers": ["A", "B", "C", "D"],
                "correctAnswer": "A",
                "explanation": "A is correct.",
                "point": 10,
            })
        else:
            questions.append({
                "question": f"Question {i}?",
                "questionType": "multiple",
                "answers": ["A", "B", "C", "D"],
                "correctAnswer": ["B", "C"],
                "explanation": "B and C are correct.",
                "point": 10,
            })
    return questions


def module_content_payload(title: str = "Module 1: Introduction to Python") -> Dict[str, Any]:
    return {
        "title": title,
        "type": "technical",
        "sections": [
            {
                "title": "Variables",
                "content": "Variables are names bound to objects. Assignment never copies data, it binds a name.",
                "keyPoints": ["Names refer to objects", "Assignment binds"],
                "codeExample": {
                    "language": "python",
                    "code": "x = 1\nprint(x)",
                    "explanation": "Binds x and prints it.",
                },
            },
            {
                "title": "History",
                "content": "Python was created by Guido van Rossum and first released in 1991 as a scripting language.",
                "keyPoints": ["Released 1991"],
                "codeExample": None,
            },
        ],
    }


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.GEMINI_MODEL = "gemini-exp"
    """
    return Settings(
        # === Application ===
        APP_NAME="Lesson Generation Layer (Test)",
        APP_VERSION="0.1.0",
        DEBUG=True,
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === Gemini ===
        GEMINI_API_KEY="test-key",
        GEMINI_BASE_URL="https://gemini.test",
        GEMINI_MODEL=None,

        # === Retry & Fallback ===
        MODEL_SWITCH_DELAY_SECONDS=0.0,
        MAX_ATTEMPTS=3,
        RETRY_DELAY_SECONDS=0.0,

        # === Monitoring ===
        PROMETHEUS_ENABLED=False,  # Disable metrics in tests unless explicitly needed
    )


@pytest.fixture
def sample_module_titles() -> list[str]:
    return module_titles()


@pytest.fixture
def sample_module_content() -> Dict[str, Any]:
    return module_content_payload()


class Payloads:
    """Builders for model answers, exposed to tests through the payloads fixture."""

    encode = staticmethod(encode_payload)
    module_titles = staticmethod(module_titles)
    flashcards = staticmethod(flashcard_payload)
    quiz = staticmethod(quiz_payload)
    module_content = staticmethod(module_content_payload)


@pytest.fixture
def payloads() -> type[Payloads]:
    return Payloads
