"""Validation and sanitization helpers.

Client-reported state is relayed to every peer verbatim, so it passes
through `sanitize_json` first. Display names go through `is_valid_name`.
"""
from typing import Any
import regex as re


# Allow: any Unicode letter/mark/number, spaces, plus a small, explicit set of name punctuation
VALID_NAME_RE = re.compile(r"^[\p{L}\p{M}\p{N} .'\-_`’·]+$", flags=re.UNICODE)

MAX_NAME_LENGTH = 24

# Keys that would let one client smuggle prototype-ish fields to peers' JS mirrors
_DISALLOWED_KEYS = ("__proto__", "prototype", "constructor")


def is_valid_name(s: str | None) -> bool:
	"""Return True if `s` is a reasonable display name.

	- Strips and enforces a sensible maximum length.
	- Uses Unicode-aware character class matching.
	"""
	if not s:
		return False
	if s.isspace() or s.strip().lower() == "system":
		return False
	s = s.strip()
	if len(s) > MAX_NAME_LENGTH:
		return False
	return bool(VALID_NAME_RE.match(s))


def sanitize_json(obj: Any, *, _depth: int = 0, _max_depth: int = 6) -> Any:
	"""Recursively sanitize an input JSON-like structure.

	- Drops non-string keys, keys starting with '$' and prototype keys.
	- Enforces max depth to avoid excessive recursion.
	- Returns a cleaned structure containing only dict/list/primitives.
	"""
	if _depth > _max_depth:
		raise ValueError("Input too deeply nested")

	if isinstance(obj, dict):
		clean = {}
		for k, v in obj.items():
			if not isinstance(k, str):
				continue
			if k.startswith("$") or k in _DISALLOWED_KEYS:
				continue
			clean[k] = sanitize_json(v, _depth=_depth + 1, _max_depth=_max_depth)
		return clean
	elif isinstance(obj, list):
		return [sanitize_json(v, _depth=_depth + 1, _max_depth=_max_depth) for v in obj]
	elif isinstance(obj, (str, int, float, bool)) or obj is None:
		return obj
	else:
		raise ValueError("Unsupported JSON value type")
