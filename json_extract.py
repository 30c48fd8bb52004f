"""Recover a JSON value from free-form LLM output.

Models wrap JSON in markdown fences, add commentary before or after it, and
some providers sprinkle zero-width characters into the text. ``extract_json``
undoes the common cases and otherwise fails loudly: it never repairs or
guesses at malformed data.
"""
import json
import re as _re
from typing import Any, Optional

from errors import ParseError

_CODE_FENCE = _re.compile(r"```(?:json)?\s*\n?([\s\S]*?)\n?\s*```")
_INVISIBLE = _re.compile("[\u200b-\u200d\ufeff]")
_OPENER = _re.compile(r"[\[{]")
_BOM = "\ufeff"

PARSE_FAILURE = "cannot parse JSON from model response"


def _reject_constant(name: str):
    # NaN / Infinity are not JSON
    raise ValueError(f"invalid JSON constant {name}")


def _strict_loads(text: str) -> Any:
    return json.loads(text, parse_constant=_reject_constant)


def strip_code_fence(text: str) -> str:
    """Return the trimmed body of the first fenced block, or the trimmed text."""
    cleaned = text.strip()
    match = _CODE_FENCE.search(cleaned)
    if match:
        cleaned = match.group(1).strip()
    return cleaned


def strip_invisible(text: str) -> str:
    """Drop a leading BOM and every zero-width space/joiner/non-joiner/BOM."""
    if text.startswith(_BOM):
        text = text[1:]
    return _INVISIBLE.sub("", text)


def bracket_slice(text: str) -> Optional[str]:
    """Slice from the first ``[``/``{`` to the last ``]``/``}``, or None."""
    opener = _OPENER.search(text)
    if not opener:
        return None
    start = opener.start()
    end = max(text.rfind("]"), text.rfind("}"))
    if end <= start:
        return None
    return text[start:end + 1]


def extract_json(raw_text: str) -> Any:
    """Parse the single JSON value contained in ``raw_text``.

    Tries a strict parse of the fence-stripped, normalized text first and
    falls back to the outermost bracket span. Raises ParseError when neither
    yields valid JSON.
    """
    if not isinstance(raw_text, str):
        raise ParseError(PARSE_FAILURE)

    cleaned = strip_invisible(strip_code_fence(raw_text))

    try:
        return _strict_loads(cleaned)
    except ValueError:
        pass

    candidate = bracket_slice(cleaned)
    if candidate is None:
        raise ParseError(PARSE_FAILURE)
    try:
        return _strict_loads(candidate)
    except ValueError as e:
        raise ParseError(PARSE_FAILURE) from e
