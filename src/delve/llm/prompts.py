"""
Prompt helpers: placeholder rendering, instruction suffixes and lenient JSON parsing.
"""

import json
from collections.abc import Mapping
from typing import Any

NO_MARKDOWN_SUFFIX = (
    "\n\nReply in plain text. Do not use markdown formatting "
    "(no headers, no bold, no bullet lists, no code fences)."
)


def render_template(template: str, values: Mapping[str, Any]) -> str:
    """
    Replace every ``{{key}}`` occurrence with its value.

    Matching is exact, with no escaping. Dicts and lists are inserted as
    compact JSON, other values with ``str``. Placeholders without a value
    are left untouched.
    """
    rendered = template
    for key, value in values.items():
        if isinstance(value, (dict, list)):
            text = json.dumps(value, separators=(",", ":"))
        else:
            text = str(value)
        rendered = rendered.replace("{{" + key + "}}", text)
    return rendered


def system_instructions(text: str, no_markdown: bool = False) -> str:
    """System prompt text, optionally asking for markdown-free output."""
    if no_markdown:
        return text + NO_MARKDOWN_SUFFIX
    return text


def parse_json(text: str) -> Any:
    """
    Parse JSON from model output that may carry prose or code fences.

    Tries the whole text first, then the span from the first ``{`` or ``[``
    to the last matching closing bracket.

    Raises:
        ValueError: If no JSON value can be extracted
    """
    text = text.strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
    if not starts:
        raise ValueError("No JSON object found in text")
    start = min(starts)
    closing = "}" if text[start] == "{" else "]"
    end = text.rfind(closing)
    if end <= start:
        raise ValueError("No JSON object found in text")

    try:
        return json.loads(text[start : end + 1])
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in text: {e}") from e
