"""
Topic classification helpers for prompt construction.

Decides whether a lesson is technical (and should carry code examples)
and which language those examples should use.
"""

from typing import Mapping, Sequence


TECH_KEYWORDS: Mapping[str, Sequence[str]] = {
    "programming": ("javascript", "python", "java", "coding", "programming", "typescript"),
    "web": ("html", "css", "react", "angular", "vue", "frontend", "backend", "fullstack"),
    "database": ("sql", "database", "mongodb", "postgres"),
    "software": ("api", "development", "software", "git", "devops", "algorithms"),
    "tech": ("computer science", "data structures", "networking", "cloud"),
}

# Order matters: "javascript" must be checked before "java"
LANGUAGE_KEYWORDS: Mapping[str, Sequence[str]] = {
    "javascript": ("javascript", "js", "node", "react", "vue", "angular"),
    "python": ("python", "django", "flask"),
    "java": ("java", "spring"),
    "html": ("html", "markup"),
    "css": ("css", "styling", "scss"),
    "sql": ("sql", "database", "mysql", "postgresql"),
    "typescript": ("typescript", "ts"),
}

DEFAULT_LANGUAGE = "javascript"


def is_code_related_topic(topic: str) -> bool:
    """
    True if any technology keyword appears in the topic (case-insensitive substring).

    Examples:
        >>> is_code_related_topic("Intro to Python")
        True
        >>> is_code_related_topic("French Revolution")
        False
    """
    lowered = topic.lower()
    return any(
        keyword in lowered
        for keywords in TECH_KEYWORDS.values()
        for keyword in keywords
    )


def appropriate_language(topic: str) -> str:
    """
    Pick the code example language for a topic; javascript when nothing matches.

    Matching is substring-based, first language in LANGUAGE_KEYWORDS wins.
    """
    lowered = topic.lower()
    for language, keywords in LANGUAGE_KEYWORDS.items():
        if any(keyword in lowered for keyword in keywords):
            return language
    return DEFAULT_LANGUAGE
