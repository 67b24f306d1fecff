"""
Payload decoding: recover a JSON array/object from raw model text.

The model is asked to answer with a base64 string only, but replies arrive
fenced, wrapped in {"b64": ...}, as plain JSON, or as JSON with unescaped
literal newlines inside string values. Recovery stages run in a fixed order,
base64 paths first (most robust against raw code/markup in the content),
plain-JSON recovery second:

1. Strip markdown fence lines, keeping the inner content
2. {"b64": "<token>"} wrapper -> token
3. Standalone base64 token on its own line -> bytes -> UTF-8 -> JSON
4. Each balanced bracket/brace pair, left to right -> JSON
5. Same substring with literal newlines/tabs removed -> JSON

A response no stage can parse is a DecodeFailure, never a crash.
"""

import base64
import binascii
import json
import re
from typing import Any, Iterator, Optional

import structlog

from lesson_generation.models.enums import DecodeStage
from lesson_generation.models.llm_models import DecodedPayload
from .exceptions import DecodeFailure

logger = structlog.get_logger(__name__)


_FENCE_LINE = re.compile(r"^[ \t]*```[\w+-]*[ \t]*$\n?", re.MULTILINE)
_INLINE_FENCE_OPEN = re.compile(r"^```[\w+-]*\s*")
_INLINE_FENCE_CLOSE = re.compile(r"\s*```$")
_B64_WRAPPER = re.compile(r'"b64"\s*:\s*"([A-Za-z0-9+/=]+)"')
_B64_TOKEN = re.compile(r"^\s*([A-Za-z0-9+/=]{20,})\s*$", re.MULTILINE)
_LITERAL_WHITESPACE = re.compile(r"[\r\n\t]")

_CLOSERS = {"[": "]", "{": "}"}
_CLOSER_CHARS = frozenset(_CLOSERS.values())
_OPENER = re.compile(r"[\[{]")


def strip_code_fences(text: str) -> str:
    """
    Remove markdown code-fence markers, preserving what they wrap.

    Only whole-line fences (and a fence hugging the start/end of the text)
    are removed; backticks inside JSON string values are left alone.
    """
    cleaned = _FENCE_LINE.sub("", text).strip()
    if cleaned.startswith("```"):
        cleaned = _INLINE_FENCE_OPEN.sub("", cleaned)
    if cleaned.endswith("```"):
        cleaned = _INLINE_FENCE_CLOSE.sub("", cleaned)
    return cleaned.strip()


def find_base64_token(text: str) -> Optional[str]:
    """Return the {"b64": ...} token if present, else a standalone base64 line."""
    wrapped = _B64_WRAPPER.search(text)
    if wrapped:
        return wrapped.group(1)
    standalone = _B64_TOKEN.search(text)
    if standalone:
        return standalone.group(1)
    return None


def decode_base64_json(token: str) -> Optional[Any]:
    """
    Decode a base64 token into a JSON array/object.

    Returns None when the token is not valid base64, not UTF-8 text, or
    not JSON; the caller falls through to the plain-JSON stages.
    """
    padded = token + "=" * (-len(token) % 4)
    try:
        decoded = base64.b64decode(padded, validate=True).decode("utf-8")
        value = json.loads(decoded)
    except (binascii.Error, ValueError) as e:
        # UnicodeDecodeError and JSONDecodeError are both ValueErrors
        logger.debug("Base64 stage rejected token", token_length=len(token), error=str(e))
        return None
    if not isinstance(value, (list, dict)):
        return None
    return value


def _match_closer(text: str, start: int) -> Optional[int]:
    """
    Index of the bracket closing text[start], skipping brackets inside JSON
    strings. None when the brackets never balance or close with the wrong kind.
    """
    expected: list[str] = []
    in_string = escaped = False
    for idx in range(start, len(text)):
        char = text[idx]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char in _CLOSERS:
            expected.append(_CLOSERS[char])
        elif char in _CLOSER_CHARS:
            if char != expected.pop():
                return None
            if not expected:
                return idx
    return None


def iter_json_candidates(text: str) -> Iterator[str]:
    """
    Yield bracketed substrings that may hold the JSON payload, left to right.

    Each '[' or '{' outside an earlier candidate opens one: its balanced
    closer when there is one, else the last closer of the same kind (a reply
    whose strings break the balance, e.g. an unescaped quote). Prose such as
    "[as requested]" before the payload is yielded and skipped by the caller.
    """
    pos = 0
    while True:
        opener = _OPENER.search(text, pos)
        if opener is None:
            return
        start = opener.start()
        end = _match_closer(text, start)
        if end is not None:
            yield text[start:end + 1]
            pos = end + 1
            continue
        end = text.rfind(_CLOSERS[text[start]])
        if end > start:
            yield text[start:end + 1]
        pos = start + 1


def _loads_structured(candidate: str) -> Optional[Any]:
    try:
        value = json.loads(candidate)
    except ValueError:
        return None
    if not isinstance(value, (list, dict)):
        return None
    return value


class PayloadDecoder:
    """
    Ordered recovery chain over raw response text.

    iter_payloads() yields every stage that produced a value, in stage
    order, so the validation pipeline can stop at the first one its schema
    accepts. decode() returns the first payload or raises DecodeFailure.
    """

    def iter_payloads(self, text: str) -> Iterator[DecodedPayload]:
        """Yield decoded payloads lazily, most robust stage first."""
        if not text or not text.strip():
            return

        cleaned = strip_code_fences(text)
        was_fenced = cleaned != text.strip()

        token = find_base64_token(cleaned)
        if token:
            value = decode_base64_json(token)
            if value is not None:
                logger.debug("Decoded base64 payload", token_length=len(token))
                yield DecodedPayload(value=value, stage=DecodeStage.BASE64)

        for candidate in iter_json_candidates(cleaned):
            value = _loads_structured(candidate)
            if value is not None:
                stage = DecodeStage.FENCED if was_fenced else DecodeStage.DIRECT_PARSE
                logger.debug("Parsed JSON payload", stage=stage.value, length=len(candidate))
                yield DecodedPayload(value=value, stage=stage)
                continue

            normalized = _LITERAL_WHITESPACE.sub("", candidate)
            value = _loads_structured(normalized)
            if value is not None:
                logger.debug("Parsed JSON after whitespace normalization", length=len(normalized))
                yield DecodedPayload(value=value, stage=DecodeStage.NORMALIZED_WHITESPACE)

    def decode(self, text: str) -> DecodedPayload:
        """
        Return the first payload any stage recovers.

        Raises:
            DecodeFailure: no stage produced a JSON array/object
        """
        for payload in self.iter_payloads(text):
            return payload
        raise DecodeFailure(
            "No recovery stage produced a structured value",
            raw_content=text,
            stages_tried=[stage.value for stage in DecodeStage],
        )
