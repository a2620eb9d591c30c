# stitch/ai/utils.py
# Cleanup of model replies before JSON decoding

import json
import re
from typing import Any, NamedTuple, Optional

_THINK_BLOCK = re.compile(r"^\s*<think>.*?</think>", re.DOTALL)
_FENCED = re.compile(r"^```[a-zA-Z]*[ \t]*\n(?P<body>.*?)\n```$", re.DOTALL)

ERROR_PREVIEW_CHARS = 200


class ParsedJSON(NamedTuple):
    data: Optional[dict[str, Any]]
    json_text: str
    error: str


# * Drop a leading <think>...</think> block & an enclosing ``` fence
def strip_markdown_code_blocks(text: str) -> str:
    cleaned = _THINK_BLOCK.sub("", text, count=1).strip()
    fenced = _FENCED.match(cleaned)
    return fenced.group("body") if fenced else cleaned


def _preview(text: str) -> str:
    if len(text) <= ERROR_PREVIEW_CHARS:
        return text
    return text[:ERROR_PREVIEW_CHARS] + "..."


# * Decode a reply into a JSON object; error is "" on success
def parse_json(text: str) -> ParsedJSON:
    json_text = strip_markdown_code_blocks(text)
    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as e:
        return ParsedJSON(None, json_text, f"JSON parsing failed: {e}. Stripped text: {_preview(json_text)}")

    if isinstance(data, dict):
        return ParsedJSON(data, json_text, "")
    return ParsedJSON(None, json_text, f"Expected a JSON object, got {type(data).__name__}")
