"""
Error taxonomy.

- ValidationError: bad caller input, surfaced as HTTP 400 before any AI call
- TransportError: network/timeout/non-2xx from an external service
- ExtractionError: model output with no usable JSON
- PersistenceError: read/write failure on a student record

Transport and extraction errors never leave the fallback ladder.
"""
from typing import Optional


class StudentAnalysisError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(StudentAnalysisError):
    pass


class TransportError(StudentAnalysisError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ExtractionError(StudentAnalysisError):
    """No strategy produced valid JSON. Keeps the original text for diagnostics."""

    def __init__(self, text: str):
        preview = (text or "")[:80]
        super().__init__(f"No valid JSON found in model output: {preview!r}")
        self.text = text


class PersistenceError(StudentAnalysisError):
    pass
