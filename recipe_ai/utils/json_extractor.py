# json_extractor.py
import json
import logging
from typing import Optional

logger = logging.getLogger(__name__)

CODE_FENCE = "```"


def _reject_constant(name: str):
    # Python's json accepts NaN/Infinity, strict JSON does not
    raise ValueError(f"Invalid JSON constant: {name}")


def load_json(text: str):
    """Parse strict JSON (no NaN/Infinity literals)"""
    return json.loads(text, parse_constant=_reject_constant)


def is_valid_json(candidate: str) -> bool:
    """Check whether a candidate string parses as JSON"""
    try:
        load_json(candidate)
        return True
    except (ValueError, RecursionError):
        return False


def strip_code_fence(text: str) -> str:
    """
    Drop a leading ```lang line and everything after the last fence.

    Text that does not start with a fence, or whose only fence is the
    opening one, is returned unchanged.
    """
    if not text.startswith(CODE_FENCE):
        return text

    first_newline = text.find("\n")
    last_fence = text.rfind(CODE_FENCE)
    if first_newline >= 0 and last_fence > first_newline:
        return text[first_newline + 1:last_fence].strip()
    return text


def extract_json_object(text: Optional[str]) -> Optional[str]:
    """
    Find the first syntactically valid JSON object in a model reply

    Args:
        text: Raw reply text, possibly wrapped in prose or code fences

    Returns:
        The JSON object substring, or None if no object parses
    """
    if not text or not text.strip():
        return None

    trimmed = strip_code_fence(text.strip())

    if len(trimmed) >= 2 and trimmed[0] == "{" and trimmed[-1] == "}" and is_valid_json(trimmed):
        return trimmed

    depth = 0
    start = -1
    for i, char in enumerate(trimmed):
        if char == "{":
            if depth == 0:
                start = i
            depth += 1
        elif char == "}":
            if depth == 0:
                # stray closing brace in surrounding prose
                continue
            depth -= 1
            if depth == 0:
                candidate = trimmed[start:i + 1]
                if is_valid_json(candidate):
                    return candidate
                logger.debug(f"Skipping unparseable brace group at {start}-{i}")

    return None
