"""
Response extraction — raw backend text to a parsed JSON value.

Pure functions, no network. Tolerates prose and markdown fences around the
payload by falling back to the first decodable top-level object or array.
"""

import json
import logging
from typing import Any, Optional

from neuralcore.config import RAW_PREVIEW_CHARS
from neuralcore.errors import ParseError
from neuralcore.schema import SchemaDescriptor

logger = logging.getLogger(__name__)

_decoder = json.JSONDecoder()


def _preview(raw: str) -> str:
    return raw[:RAW_PREVIEW_CHARS]


def find_json_payload(text: str) -> Any:
    """Decode the first top-level JSON object or array embedded in ``text``.

    Every ``{`` or ``[`` is tried in order; the first one that decodes wins.
    Raises ValueError when none does.
    """
    for idx, ch in enumerate(text):
        if ch not in "{[":
            continue
        try:
            value, _ = _decoder.raw_decode(text, idx)
            return value
        except json.JSONDecodeError:
            continue
        except RecursionError:
            raise ValueError("JSON payload nested too deeply") from None
    raise ValueError("no JSON object or array found")


def extract(raw: str, schema: Optional[SchemaDescriptor] = None, strict: bool = False) -> Any:
    """Turn raw backend output into a parsed value.

    With ``strict`` and a schema, a value that parses but does not conform
    raises ParseError. Otherwise structure is left to the caller.
    """
    if raw is None or not raw.strip():
        raise ParseError("Backend returned an empty response")

    text = raw.strip()
    try:
        value = json.loads(text)
    except (json.JSONDecodeError, RecursionError):
        try:
            value = find_json_payload(text)
        except ValueError:
            raise ParseError("Backend response is not valid JSON", _preview(text)) from None
        logger.debug("Extracted embedded JSON from %d chars of surrounding text", len(text))

    if strict and schema is not None:
        problems = schema.validate(value)
        if problems:
            raise ParseError(
                "Backend response does not match schema: " + "; ".join(problems[:5]),
                _preview(text),
            )
    return value
