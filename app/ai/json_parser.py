"""Helpers for pulling JSON payloads out of free-form LLM output."""

from __future__ import annotations

import json
import re
from typing import Any

_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")


def extract_json_array(raw: str) -> str | None:
  """Return the text from the first ``[`` to the last ``]``, or None when absent.

  This tolerates prose or markdown fences around the payload.
  """
  start_index = raw.find("[")
  end_index = raw.rfind("]")
  if start_index == -1 or end_index == -1 or end_index < start_index:
    return None
  return raw[start_index : end_index + 1]


def parse_json_with_fallback(raw: str) -> Any:
  """Parse JSON, retrying once with trailing commas removed."""
  # Prefer strict parsing so valid JSON is preserved without mutation.
  try:
    return json.loads(raw)
  except json.JSONDecodeError as exc:
    last_error = exc

  cleaned = _strip_trailing_commas(raw)
  if cleaned == raw:
    raise last_error
  return json.loads(cleaned)


def _strip_trailing_commas(raw: str) -> str:
  """Remove trailing commas before closing brackets for lenient parsing."""
  # Keep the transform narrow so only obvious comma violations are altered.
  return _TRAILING_COMMA_RE.sub(r"\1", raw)
