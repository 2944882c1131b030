"""
Wire-compatible state values.

State values cross from Python into generated JavaScript and into the JSON
export format, so they are restricted to a small set of shapes:

- primitives: ``bool``, ``int``, ``float``, ``str`` and ``None``
- sequences of state values (rendered as arrays)
- string-keyed mappings of state values (rendered as objects)
- ``JsonBlob``: an already serialized JSON document, used for structured
  host values such as dataclasses

``to_state_value`` normalizes arbitrary host values into these shapes.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import asdict, dataclass, is_dataclass
from typing import Any, TypeAlias

logger = logging.getLogger(__name__)

Primitive: TypeAlias = bool | int | float | str | None


class _Missing:
	__slots__ = ()

	def __repr__(self) -> str:
		return "MISSING"

	def __bool__(self) -> bool:
		return False


MISSING: Any = _Missing()
"""Marks the absence of a previous value (first registration of a key)."""


@dataclass(frozen=True, slots=True)
class JsonBlob:
	"""A pre-serialized JSON document embedded verbatim in generated code."""

	text: str

	@classmethod
	def encode(cls, value: Any) -> "JsonBlob":
		return cls(json.dumps(value, separators=(",", ":"), default=_json_default))

	def decode(self) -> Any:
		return json.loads(self.text)


StateValue: TypeAlias = Primitive | list["StateValue"] | dict[str, "StateValue"] | JsonBlob


def is_primitive(value: Any) -> bool:
	return value is None or isinstance(value, (bool, int, float, str))


def _json_default(value: Any) -> Any:
	structured = _structured_form(value)
	if structured is None:
		raise TypeError(f"Object of type {type(value).__name__} is not serializable")
	return structured


def _structured_form(value: Any) -> Any | None:
	"""Plain (dict/list) form of an encodable host object, or None."""
	if is_dataclass(value) and not isinstance(value, type):
		return asdict(value)
	for attr in ("model_dump", "to_dict"):
		method = getattr(value, attr, None)
		if callable(method):
			return method()
	return None


def to_state_value(value: Any) -> Any:
	"""Normalize a host value into one of the wire-compatible shapes.

	Values that fit none of the shapes are returned unchanged; serialization
	degrades them later instead of failing here.
	"""
	if is_primitive(value) or isinstance(value, JsonBlob):
		return value
	if isinstance(value, Mapping):
		return {str(k): to_state_value(v) for k, v in value.items()}
	if isinstance(value, (list, tuple)):
		return [to_state_value(v) for v in value]
	structured = _structured_form(value)
	if structured is not None:
		try:
			return JsonBlob.encode(structured)
		except (TypeError, ValueError):
			logger.warning(
				"Could not encode %s as JSON, keeping raw value", type(value).__name__
			)
	return value


def to_plain(value: Any) -> Any:
	"""Inverse of ``to_state_value`` for export: JSON blobs become plain data."""
	if isinstance(value, JsonBlob):
		return value.decode()
	if isinstance(value, Mapping):
		return {str(k): to_plain(v) for k, v in value.items()}
	if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
		return [to_plain(v) for v in value]
	structured = _structured_form(value)
	if structured is not None:
		return structured
	return value
