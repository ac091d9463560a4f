import json
import re
from typing import Any

FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)\s*```", re.IGNORECASE)
FENCED = re.compile(r"```\s*([\s\S]*?)\s*```")
BARE_OBJECT = re.compile(r"\{[\s\S]*\}")
BARE_ARRAY = re.compile(r"\[[\s\S]*\]")


def extract_json_text(text: str) -> str:
    """Pull the JSON payload out of a model reply.

    Looks for a ```json fence, then any fence, then the outermost object or
    array. Returns the stripped text unchanged when nothing matches.
    """
    if not text:
        return ""
    for pattern in (FENCED_JSON, FENCED):
        match = pattern.search(text)
        if match:
            return match.group(1).strip()

    stripped = text.strip()
    candidates = [m for m in (BARE_OBJECT.search(stripped), BARE_ARRAY.search(stripped)) if m]
    if candidates:
        # Whichever structure opens first is the payload
        return min(candidates, key=lambda m: m.start()).group(0)
    return stripped


def parse_json_reply(text: str) -> Any:
    """Raises json.JSONDecodeError when no JSON can be recovered."""
    return json.loads(extract_json_text(text))
