"""Parsing of JSON objects out of free-form AI replies.

Models asked for "JSON only" still wrap answers in markdown fences or add
a sentence before the object.  :func:`parse_json_reply` strips fences,
tries a direct parse, then falls back to the outermost ``{...}`` span.
"""

from __future__ import annotations

import json
from typing import Any

from onelove.utils.errors import ParseError


def parse_json_reply(reply: str) -> dict[str, Any]:
    """Return the JSON object contained in ``reply``.

    Raises
    ------
    ParseError
        If no JSON object can be recovered from the text.
    """
    text = reply.strip()
    if text.startswith("```"):
        lines = [line for line in text.split("\n") if not line.strip().startswith("```")]
        text = "\n".join(lines)

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        start = text.find("{")
        end = text.rfind("}") + 1
        if start < 0 or end <= start:
            raise ParseError(message="No JSON object in AI reply") from None
        try:
            parsed = json.loads(text[start:end])
        except json.JSONDecodeError as exc:
            raise ParseError(message=f"Malformed JSON in AI reply: {exc.msg}") from exc

    if not isinstance(parsed, dict):
        raise ParseError(message="AI reply JSON is not an object")
    return parsed
