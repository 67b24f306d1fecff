"""
Post-processing for lesson content.

Models often leave markdown artifacts inside JSON string values (code
fences, inline backticks, doubly escaped newlines). These helpers scrub
them from validated module sections.
"""

import re
from typing import Any, Optional

from pydantic import BaseModel


DEFAULT_CODE_LANGUAGE = "javascript"

_JSON_FENCE = re.compile(r"```json\n?")
_ANY_FENCE = re.compile(r"```\n?")
_LANG_FENCE = re.compile(r"```[\w]*\n?")
_TRAILING_FENCE = re.compile(r"```$", re.MULTILINE)
_LINE_COMMENT = re.compile(r"^// ", re.MULTILINE)


def sanitize_section_content(text: str) -> str:
    """
    Strip markdown leftovers from a section's free text.

    Removes fences and backticks, turns literal ``\\n`` sequences into
    newlines and collapses doubled backslashes.
    """
    cleaned = _JSON_FENCE.sub("", text)
    cleaned = _ANY_FENCE.sub("", cleaned)
    cleaned = cleaned.replace("`", "")
    cleaned = cleaned.replace("\\n", "\n")
    cleaned = cleaned.replace("\\\\", "\\")
    return cleaned.strip()


def clean_code_code(code: str) -> str:
    """Remove fence markers and leading ``// `` comment markers from a snippet."""
    cleaned = _LANG_FENCE.sub("", code)
    cleaned = _TRAILING_FENCE.sub("", cleaned)
    cleaned = _LINE_COMMENT.sub("", cleaned)
    return cleaned.strip()


def clean_code_example(value: Any) -> Optional[dict]:
    """
    Normalize a section's codeExample.

    Returns None for anything malformed (not an object, non-string fields)
    so a bad snippet never fails the whole lesson.
    """
    if value is None:
        return None
    if isinstance(value, BaseModel):
        value = value.model_dump()
    if not isinstance(value, dict):
        return None

    code = value.get("code") or ""
    language = value.get("language") or DEFAULT_CODE_LANGUAGE
    explanation = value.get("explanation") or ""
    if not all(isinstance(field, str) for field in (code, language, explanation)):
        return None

    return {
        "language": language,
        "code": clean_code_code(code),
        "explanation": explanation,
    }
