"""Utility helpers used across the project.

Exports:
- time helpers: `Clock`, `now_ts`, `elapsed_ms`, `to_iso`
- validation helpers: `is_valid_name`, `sanitize_json`, `VALID_NAME_RE`
"""

from .time import Clock, now_ts, elapsed_ms, to_iso
from .validation import is_valid_name, sanitize_json, VALID_NAME_RE

__all__ = [
	"Clock",
	"now_ts",
	"elapsed_ms",
	"to_iso",
	"is_valid_name",
	"sanitize_json",
	"VALID_NAME_RE",
]
