"""
JSON extraction from raw model output.

Models wrap JSON in markdown fences, add a sentence before it, or
forget it entirely. Strategies, first successful parse wins:

0. The whole text is already valid JSON
1. A fenced block: ```json ... ``` (language tag optional)
2. The slice from the first "{" to the last "}"
3. The full text verbatim
"""
import json
import re
from typing import Any, Iterator

from student_analysis.core.errors import ExtractionError

FENCE_PATTERN = re.compile(r"```[ \t]*(?:json)?[ \t]*\n?(.+?)\n?[ \t]*```", re.DOTALL | re.IGNORECASE)


def _candidates(text: str) -> Iterator[str]:
    stripped = text.strip()
    yield stripped

    match = FENCE_PATTERN.search(text)
    if match:
        yield match.group(1)

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        yield text[start:end + 1]

    yield text


def extract_json(text: str) -> Any:
    """
    Parse the JSON value embedded in `text`.

    Raises:
        ExtractionError if no strategy yields valid JSON
    """
    if not text or not text.strip():
        raise ExtractionError(text or "")

    for candidate in _candidates(text):
        try:
            return json.loads(candidate)
        except (ValueError, RecursionError):
            continue

    raise ExtractionError(text)
