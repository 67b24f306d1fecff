"""
Decode + validate half of the generation pipeline.

- decoder.py: ordered recovery chain (fences, base64, outermost JSON, whitespace normalization)
- content_validator.py: per-operation content schemas with exact cardinality
- sanitizers.py: markdown cleanup for lesson sections and code examples
- pipeline.py: first decoded payload that validates wins
"""

from .exceptions import (
    ValidationError,
    InvalidRequestError,
    DecodeFailure,
    ValidationFailure,
)
from .decoder import PayloadDecoder
from .content_validator import ContentValidator
from .pipeline import ValidationPipeline, ValidatedContent

__all__ = [
    # Main pipeline
    "ValidationPipeline",
    "ValidatedContent",
    "PayloadDecoder",
    "ContentValidator",
    # Exceptions (for retry engine / API error handling)
    "ValidationError",
    "InvalidRequestError",
    "DecodeFailure",
    "ValidationFailure",
]
