"""Utility to extract JSON from LLM responses."""

from __future__ import annotations

import json

_WRAPPER_KEYS = ("suggestions", "replies", "responses", "items")


def extract_json(text: str) -> dict | list:
    """Extract JSON from LLM response, handling ```json blocks.

    Tries in order:
    1. Direct json.loads on the full text
    2. Strip fenced code block markers and parse
    3. Slice the outermost array or object (whichever opens first) and parse
    4. Slice the other kind and parse
    5. Try to repair truncated JSON (missing closing brackets/braces)
    """
    text = text.strip()

    # 1) Direct parse
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError):
        pass

    # 2) Strip fenced code block markers
    stripped = _strip_code_fences(text)
    if stripped != text:
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            pass

    # 3-4) Outermost structure first: whichever of '[' / '{' opens earlier
    pairs = sorted(
        [("[", "]"), ("{", "}")],
        key=lambda pair: (stripped.find(pair[0]) == -1, stripped.find(pair[0])),
    )
    for opener, closer in pairs:
        result = _extract_between(stripped, opener, closer)
        if result is not None:
            return result

    # 5) Try to repair truncated JSON
    result = _try_repair_truncated(stripped)
    if result is not None:
        return result

    raise ValueError(f"Could not extract JSON from text: {text[:200]}...")


def extract_json_items(text: str) -> list:
    """Extract a list of items, unwrapping {"suggestions": [...]} style objects.

    A lone object is returned as a one-item list. Raises ValueError when
    nothing list-shaped can be recovered.
    """
    data = extract_json(text)
    if isinstance(data, dict):
        for key in _WRAPPER_KEYS:
            if isinstance(data.get(key), list):
                return data[key]
        return [data]
    if isinstance(data, list):
        return data
    raise ValueError(f"Expected a JSON array, got {type(data).__name__}")


def _strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers from text."""
    lines = text.split("\n")

    # Remove opening fence (```json, ```, etc.)
    if lines and lines[0].strip().startswith("```"):
        lines = lines[1:]

    # Remove closing fence
    while lines and lines[-1].strip() in ("```", ""):
        lines = lines[:-1]

    return "\n".join(lines).strip()


def _extract_between(text: str, opener: str, closer: str) -> dict | list | None:
    start = text.find(opener)
    end = text.rfind(closer)
    if start != -1 and end != -1 and end > start:
        try:
            return json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            pass
    return None


def _try_repair_truncated(text: str) -> dict | list | None:
    """Try to repair truncated JSON by closing open brackets/braces."""
    starts = [i for i in (text.find("["), text.find("{")) if i != -1]
    if not starts:
        return None

    candidate = text[min(starts):]

    # Cut back to the last complete object so a half-written string is dropped
    last_close = candidate.rfind("}")
    if last_close == -1:
        return None
    truncated = candidate[: last_close + 1]

    stack: list[str] = []
    in_string = False
    escaped = False
    for ch in truncated:
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in "[{":
            stack.append("]" if ch == "[" else "}")
        elif ch in "]}" and stack:
            stack.pop()

    if not stack:
        return None

    repaired = truncated.rstrip().rstrip(",") + "".join(reversed(stack))
    try:
        return json.loads(repaired)
    except json.JSONDecodeError:
        return None
