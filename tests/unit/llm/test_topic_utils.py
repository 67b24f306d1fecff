"""Unit tests for topic classification helpers."""

import pytest

from lesson_generation.llm.topic_utils import appropriate_language, is_code_related_topic


@pytest.mark.parametrize("topic", [
    "Intro to Python",
    "React Hooks in Depth",
    "SQL Joins",
    "Data Structures and Algorithms",
    "Cloud Computing Basics",
])
def test_technical_topics(topic):
    assert is_code_related_topic(topic)


@pytest.mark.parametrize("topic", [
    "French Revolution",
    "Photosynthesis",
    "Renaissance Painting",
])
def test_general_topics(topic):
    assert not is_code_related_topic(topic)


@pytest.mark.parametrize("topic,language", [
    ("Advanced JavaScript Patterns", "javascript"),
    ("Node streams", "javascript"),
    ("Django for beginners", "python"),
    ("Spring Boot services", "java"),
    ("Semantic HTML", "html"),
    ("Responsive styling with SCSS", "css"),
    ("PostgreSQL indexing", "sql"),
    ("TypeScript generics", "typescript"),
    ("Machine learning", "javascript"),
])
def test_appropriate_language(topic, language):
    assert appropriate_language(topic) == language


def test_javascript_wins_over_java():
    assert appropriate_language("Java and JavaScript compared") == "javascript"
