"""
Unit tests for PayloadDecoder (recovery stages).

Tests cover:
- Base64 answers (bare, fenced, wrapped in {"b64": ...})
- Plain and fenced JSON
- Literal newline/tab normalization
- Path invariance: every recoverable form decodes to the same value
- DecodeFailure for unrecoverable text
"""

import base64
import json

import pytest

from lesson_generation.models.enums import DecodeStage
from lesson_generation.validation.decoder import (
    PayloadDecoder,
    decode_base64_json,
    find_base64_token,
    iter_json_candidates,
    strip_code_fences,
)
from lesson_generation.validation.exceptions import DecodeFailure


VALUE = ["Module 1: Basics", "Module 2: More"]
TOKEN = base64.b64encode(json.dumps(VALUE).encode()).decode()


@pytest.fixture
def decoder():
    return PayloadDecoder()


class TestHelpers:
    """Tests for the stage helpers."""

    def test_strip_code_fences(self):
        assert strip_code_fences("```json\n[1, 2]\n```") == "[1, 2]"
        assert strip_code_fences("```[1]```") == "[1]"
        assert strip_code_fences("[1]") == "[1]"

    def test_find_base64_token_prefers_wrapper(self):
        text = f'{{"b64": "{TOKEN}"}}'
        assert find_base64_token(text) == TOKEN

    def test_find_base64_token_standalone_line(self):
        assert find_base64_token(f"Here you go:\n{TOKEN}\n") == TOKEN

    def test_short_tokens_ignored(self):
        assert find_base64_token("abc123") is None

    def test_decode_base64_json_handles_missing_padding(self):
        unpadded = base64.b64encode(b'{"a": 1}').decode().rstrip("=")
        assert decode_base64_json(unpadded) == {"a": 1}

    def test_decode_base64_json_rejects_scalars_and_garbage(self):
        assert decode_base64_json(base64.b64encode(b'"just a string"').decode()) is None
        assert decode_base64_json("NotReallyBase64!!") is None
        assert decode_base64_json(base64.b64encode(b"\xff\xfe\xfd").decode()) is None

    def test_json_candidates_are_balanced(self):
        assert list(iter_json_candidates('Sure! [1, [2]] hope that helps')) == ["[1, [2]]"]
        assert list(iter_json_candidates('x {"a": [1]} y')) == ['{"a": [1]}']
        assert list(iter_json_candidates("no json here")) == []

    def test_json_candidates_skip_brackets_inside_strings(self):
        text = '{"code": "arr[0] = {"}'
        assert list(iter_json_candidates(text)) == [text]

    def test_json_candidates_prose_brackets_first(self):
        text = 'See [note]: {"a": [1]}'
        assert list(iter_json_candidates(text)) == ["[note]", '{"a": [1]}']

    def test_unbalanced_candidate_falls_back_to_last_closer(self):
        assert list(iter_json_candidates('[1, "two]')) == ['[1, "two]']


class TestPayloadDecoder:
    """Tests for PayloadDecoder.decode() / iter_payloads()."""

    def test_bare_base64(self, decoder):
        payload = decoder.decode(TOKEN)
        assert payload.value == VALUE
        assert payload.stage is DecodeStage.BASE64

    def test_fenced_base64(self, decoder):
        payload = decoder.decode(f"```\n{TOKEN}\n```")
        assert payload.value == VALUE
        assert payload.stage is DecodeStage.BASE64

    def test_wrapped_base64(self, decoder):
        payload = decoder.decode(f'```json\n{{"b64": "{TOKEN}"}}\n```')
        assert payload.value == VALUE
        assert payload.stage is DecodeStage.BASE64

    def test_plain_json(self, decoder):
        payload = decoder.decode(json.dumps(VALUE))
        assert payload.value == VALUE
        assert payload.stage is DecodeStage.DIRECT_PARSE

    def test_json_with_prose(self, decoder):
        payload = decoder.decode(f"Here is your learning path:\n{json.dumps(VALUE)}\nEnjoy!")
        assert payload.value == VALUE
        assert payload.stage is DecodeStage.DIRECT_PARSE

    def test_fenced_json(self, decoder):
        payload = decoder.decode(f"```json\n{json.dumps(VALUE)}\n```")
        assert payload.value == VALUE
        assert payload.stage is DecodeStage.FENCED

    def test_literal_newlines_inside_strings(self, decoder):
        text = '[{"id": 1, "frontHTML": "Line one\nline two", "backHTML": "ok"}]'

        payload = decoder.decode(text)

        assert payload.stage is DecodeStage.NORMALIZED_WHITESPACE
        assert payload.value == [{"id": 1, "frontHTML": "Line oneline two", "backHTML": "ok"}]

    @pytest.mark.parametrize("text", [
        TOKEN,
        f"```\n{TOKEN}\n```",
        f'{{"b64": "{TOKEN}"}}',
        json.dumps(VALUE),
        f"```json\n{json.dumps(VALUE, indent=2)}\n```",
    ])
    def test_path_invariance(self, decoder, text):
        assert decoder.decode(text).value == VALUE

    def test_prose_brackets_before_object(self, decoder, sample_module_content):
        text = "Here is the lesson [as requested]:\n" + json.dumps(sample_module_content)

        payload = decoder.decode(text)

        assert payload.value == sample_module_content
        assert payload.stage is DecodeStage.DIRECT_PARSE

    def test_prose_brackets_before_object_with_literal_newlines(self, decoder):
        text = 'Answer [v2] follows: {"title": "Loops", "note": "first\nsecond"}'

        payload = decoder.decode(text)

        assert payload.value == {"title": "Loops", "note": "firstsecond"}
        assert payload.stage is DecodeStage.NORMALIZED_WHITESPACE

    def test_bad_base64_falls_through_to_json(self, decoder):
        text = 'Some text\n["a", "b"]'
        payload = decoder.decode(text)
        assert payload.value == ["a", "b"]

    def test_iter_payloads_yields_every_successful_stage(self, decoder):
        # A base64 line followed by a plain JSON array: both stages succeed
        other = ["x"]
        text = f"{TOKEN}\n{json.dumps(other)}"

        stages = [(p.stage, p.value) for p in decoder.iter_payloads(text)]

        assert stages == [(DecodeStage.BASE64, VALUE), (DecodeStage.DIRECT_PARSE, other)]

    @pytest.mark.parametrize("text", ["", "   \n ", "I cannot help with that.", "[1, 2", "{not json}"])
    def test_unrecoverable_text(self, decoder, text):
        with pytest.raises(DecodeFailure):
            decoder.decode(text)

    def test_decode_failure_keeps_snippet(self, decoder):
        with pytest.raises(DecodeFailure) as exc_info:
            decoder.decode("x" * 1000 + " nothing structured")

        assert len(exc_info.value.details["content_snippet"]) == 500
