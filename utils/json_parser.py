"""JSON parsing utility for handling LLM responses."""

import json
import re
from typing import Any

from utils.logger import get_logger

logger = get_logger(__name__)

_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]+?)\s*```")
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")


def parse_json(raw: str) -> Any:
    """Parse JSON with fallbacks for markdown fences and trailing commas."""
    candidates = [raw.strip()]

    match = _JSON_FENCE_RE.search(raw)
    if match:
        candidates.append(match.group(1).strip())

    for candidate in list(candidates):
        normalized = _TRAILING_COMMA_RE.sub(r"\1", candidate)
        if normalized != candidate:
            candidates.append(normalized)

    for candidate in candidates:
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            continue

    logger.debug("json_parse_failed", raw=raw[:200])
    raise json.JSONDecodeError(f"LLM returned invalid JSON: {raw}", raw, 0)
