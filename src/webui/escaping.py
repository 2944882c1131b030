"""
Embedding host values into generated JavaScript source.

Every string that ends up inside a generated script literal goes through
``escape_for_script_literal``. ``serialize_to_script_literal`` turns any host
value into a JavaScript/JSON literal and never raises: values it cannot
represent degrade to ``null`` (inside structures) or to their quoted string
form (at the top level).
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any

from webui.values import JsonBlob, to_state_value

logger = logging.getLogger(__name__)

NULL = "null"


def escape_for_script_literal(s: str) -> str:
	"""Escape backslash, double quote, newline, carriage return and tab, in order."""
	return (
		s.replace("\\", "\\\\")
		.replace('"', '\\"')
		.replace("\n", "\\n")
		.replace("\r", "\\r")
		.replace("\t", "\\t")
	)


def quote(s: str) -> str:
	"""Double-quoted script literal."""
	return f'"{escape_for_script_literal(s)}"'


def quote_js_string(s: str) -> str:
	"""Single-quoted script literal, used for state IDs in generated calls."""
	escaped = escape_for_script_literal(s).replace("'", "\\'")
	return f"'{escaped}'"


def js_bool(flag: bool) -> str:
	return "true" if flag else "false"


def js_number(value: int | float) -> str:
	if isinstance(value, bool):
		return str(int(value))
	if not isinstance(value, (int, float)):
		return NULL
	if isinstance(value, float):
		if not math.isfinite(value):
			return NULL
		return repr(value)
	return str(value)


def primitive_literal(value: Any) -> str:
	"""Literal for a primitive; anything else renders as ``null``."""
	if isinstance(value, str):
		return quote(value)
	if isinstance(value, bool):
		return js_bool(value)
	if isinstance(value, (int, float)):
		return js_number(value)
	return NULL


def _structured_literal(value: Any, seen: set[int]) -> str:
	if value is None:
		return NULL
	if isinstance(value, (str, bool, int, float)):
		return primitive_literal(value)
	if isinstance(value, JsonBlob):
		try:
			return _structured_literal(value.decode(), seen)
		except ValueError:
			logger.warning("Invalid JSON blob in state value, rendering null")
			return NULL
	if not isinstance(value, (list, tuple, Mapping)):
		normalized = to_state_value(value)
		if normalized is value:
			return NULL
		return _structured_literal(normalized, seen)
	if id(value) in seen:
		# Cycles cannot be represented in a literal
		return NULL
	seen.add(id(value))
	try:
		if isinstance(value, Mapping):
			entries = (
				f"{quote(str(k))}:{_structured_literal(v, seen)}"
				for k, v in value.items()
			)
			return "{" + ",".join(entries) + "}"
		return "[" + ",".join(_structured_literal(v, seen) for v in value) + "]"
	finally:
		seen.discard(id(value))


def serialize_to_script_literal(value: Any) -> str:
	"""Render any host value as a JavaScript literal.

	Resolution order: strings, booleans, integers, floats, structured values
	(recursively, compact JSON syntax), then the quoted ``str()`` form.
	"""
	if isinstance(value, str):
		return quote(value)
	if isinstance(value, bool):
		return js_bool(value)
	if isinstance(value, int):
		return js_number(value)
	if isinstance(value, float):
		return js_number(value)
	if value is None:
		return NULL
	if isinstance(value, (list, tuple, Mapping, JsonBlob)):
		return _structured_literal(value, set())
	normalized = to_state_value(value)
	if isinstance(normalized, JsonBlob):
		return _structured_literal(normalized, set())
	try:
		text = str(value)
	except Exception:
		logger.warning(
			"Could not serialize %s for script output, rendering null",
			type(value).__name__,
		)
		return NULL
	logger.debug("Falling back to string form for %s", type(value).__name__)
	return quote(text)
