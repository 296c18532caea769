"""Best-effort JSON extraction from free-text model replies."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Literal, Mapping, Optional

Shape = Literal["array", "object"]

_BRACKETS: Dict[str, tuple[str, str, type]] = {
    "array": ("[", "]", list),
    "object": ("{", "}", dict),
}

_DECODER = json.JSONDecoder()


def extract_json(raw: Any, shape: Shape, fallback: Any) -> Any:
    """Return the first JSON value of ``shape`` embedded in ``raw``.

    Only the first opening bracket of the requested shape is considered. The
    value starting there is decoded on its own, ignoring any trailing prose; if
    that fails, the widest span up to the last closing bracket is tried. Any
    failure, including a value of the wrong type, yields ``fallback``.
    """
    if shape not in _BRACKETS:
        raise ValueError(f"Unsupported shape: {shape!r}")
    if not isinstance(raw, str) or not raw:
        return fallback
    opener, closer, expected = _BRACKETS[shape]

    start = raw.find(opener)
    if start == -1:
        return fallback

    value = _decode_at(raw, start)
    if value is None:
        end = raw.rfind(closer)
        if end <= start:
            return fallback
        value = _decode_span(raw[start : end + 1])
    if not isinstance(value, expected):
        return fallback
    return value


def extract_array(raw: Any, fallback: Optional[List[Any]] = None) -> List[Any]:
    """Extract a JSON array, defaulting to an empty list."""
    return extract_json(raw, "array", [] if fallback is None else fallback)


def extract_object(raw: Any, fallback: Mapping[str, Any]) -> Any:
    """Extract a JSON object, defaulting to ``fallback``."""
    return extract_json(raw, "object", fallback)


def _decode_at(text: str, index: int) -> Any:
    try:
        value, _ = _DECODER.raw_decode(text, index)
    except json.JSONDecodeError:
        return None
    return value


def _decode_span(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


__all__ = ["Shape", "extract_array", "extract_json", "extract_object"]
