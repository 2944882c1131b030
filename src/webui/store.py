"""
Scoped key/value state storage.

``ScopedStateStore`` keeps one table per ``StateScope``. Every operation runs
under a single store lock, so concurrent registrations, updates and reads are
serializable. Subscribers are invoked synchronously after the update, outside
of the store lock, each one isolated from failures of the others. Updates and
their notifications are serialized by a separate notification lock, so
subscribers see values in the order they were stored.
"""

from __future__ import annotations

import itertools
import json
import logging
import threading
import time
import types
import typing
from collections import deque
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, fields, is_dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, TypeVar, overload

from webui.config import StateConfiguration
from webui.values import MISSING, to_plain

if TYPE_CHECKING:
	from webui.registry import ScopedHandle

T = TypeVar("T")

logger = logging.getLogger(__name__)

Subscriber = Callable[[Any], None]


class StateScope(StrEnum):
	COMPONENT = "component"
	SHARED = "shared"
	GLOBAL = "global"
	SESSION = "session"


@dataclass(slots=True)
class StateCell:
	key: str
	scope: StateScope
	value: Any
	on_change: Subscriber | None = None


@dataclass(frozen=True, slots=True)
class SubscriptionToken:
	scope: StateScope
	key: str
	id: int


@dataclass(frozen=True, slots=True)
class DebugHistoryEntry:
	key: str
	scope: StateScope
	old_value: Any
	new_value: Any
	timestamp: float = field(default_factory=time.time)

	@property
	def qualified_key(self) -> str:
		return f"{self.scope.value}.{self.key}"


def _matches(value: Any, as_: Any) -> bool:
	origin = typing.get_origin(as_)
	if origin is None:
		if as_ is Any or as_ is object:
			return True
		if as_ is float:
			return isinstance(value, (int, float)) and not isinstance(value, bool)
		if as_ is int:
			return isinstance(value, int) and not isinstance(value, bool)
		return isinstance(value, as_)
	if origin in (typing.Union, types.UnionType):
		return any(_matches(value, arg) for arg in typing.get_args(as_))
	args = typing.get_args(as_)
	if origin in (list, tuple, set, frozenset):
		if not isinstance(value, origin):
			return False
		if not args or origin is tuple:
			return True
		return all(_matches(item, args[0]) for item in value)
	if origin is dict:
		if not isinstance(value, dict):
			return False
		if len(args) != 2:
			return True
		key_type, value_type = args
		return all(
			_matches(k, key_type) and _matches(v, value_type) for k, v in value.items()
		)
	return isinstance(value, origin)


def _convert(value: Any, as_: Any) -> Any:
	if value is MISSING:
		return None
	try:
		matches = as_ is None or _matches(value, as_)
	except TypeError:
		# Targets isinstance cannot check (TypedDict, Protocol, ...)
		return None
	if matches:
		if as_ is float and isinstance(value, int):
			return float(value)
		return value
	# Imported state arrives as plain mappings; rebuild dataclasses from them
	if isinstance(as_, type) and is_dataclass(as_) and isinstance(value, Mapping):
		names = {f.name for f in fields(as_)}
		try:
			return as_(**{k: v for k, v in value.items() if k in names})
		except TypeError:
			return None
	return None


class ScopedStateStore:
	"""Thread-safe state tables partitioned by ``StateScope``."""

	config: StateConfiguration

	def __init__(self, config: StateConfiguration | None = None) -> None:
		self.config = config or StateConfiguration()
		self._lock = threading.RLock()
		# Held across an update and its notifications, reentrant for subscribers
		# that update state themselves
		self._notify_lock = threading.RLock()
		self._tables: dict[StateScope, dict[str, StateCell]] = {
			scope: {} for scope in StateScope
		}
		self._subscribers: dict[StateScope, dict[str, dict[int, Subscriber]]] = {
			scope: {} for scope in StateScope
		}
		self._token_ids = itertools.count(1)
		self._history: deque[DebugHistoryEntry] = deque(
			maxlen=self.config.max_debug_history
		)

	def _record(self, key: str, scope: StateScope, old: Any, new: Any) -> None:
		# Called with the lock held
		if self.config.enable_debugging and self.config.max_debug_history > 0:
			self._history.append(DebugHistoryEntry(key, scope, old, new))

	def register(
		self,
		key: str,
		scope: StateScope,
		initial_value: Any,
		*,
		on_change: Subscriber | None = None,
	) -> bool:
		"""Create the cell for ``(scope, key)`` unless it exists.

		The first registration wins; returns whether a cell was created.
		"""
		scope = StateScope(scope)
		with self._lock:
			table = self._tables[scope]
			if key in table:
				return False
			table[key] = StateCell(key, scope, initial_value, on_change)
			self._record(key, scope, MISSING, initial_value)
		logger.debug("Registered %s.%s", scope.value, key)
		return True

	def contains(self, key: str, scope: StateScope) -> bool:
		with self._lock:
			return key in self._tables[StateScope(scope)]

	@overload
	def get(self, key: str, scope: StateScope) -> Any | None: ...
	@overload
	def get(self, key: str, scope: StateScope, as_: type[T]) -> T | None: ...
	def get(self, key: str, scope: StateScope, as_: Any = None) -> Any | None:
		"""Current value, or ``None`` when missing or not convertible to ``as_``."""
		with self._lock:
			cell = self._tables[StateScope(scope)].get(key)
			value = cell.value if cell is not None else MISSING
		return _convert(value, as_)

	def update(self, key: str, scope: StateScope, value: Any) -> None:
		"""Replace the value (creating the cell if needed) and notify subscribers."""
		scope = StateScope(scope)
		with self._notify_lock:
			with self._lock:
				table = self._tables[scope]
				cell = table.get(key)
				if cell is None:
					old = MISSING
					cell = table[key] = StateCell(key, scope, value)
				else:
					old = cell.value
					cell.value = value
				self._record(key, scope, old, value)
				callbacks = list(self._subscribers[scope].get(key, {}).values())
				if cell.on_change is not None:
					callbacks.insert(0, cell.on_change)
			for callback in callbacks:
				try:
					callback(value)
				except Exception:
					logger.exception(
						"Error in state subscriber for %s.%s", scope.value, key
					)

	def subscribe(
		self, key: str, scope: StateScope, callback: Subscriber
	) -> SubscriptionToken:
		scope = StateScope(scope)
		with self._lock:
			token = SubscriptionToken(scope, key, next(self._token_ids))
			self._subscribers[scope].setdefault(key, {})[token.id] = callback
		return token

	def unsubscribe(self, token: SubscriptionToken) -> None:
		with self._lock:
			bucket = self._subscribers[token.scope].get(token.key)
			if bucket is None:
				return
			bucket.pop(token.id, None)
			if not bucket:
				del self._subscribers[token.scope][token.key]

	def clear_scope(self, scope: StateScope) -> None:
		scope = StateScope(scope)
		with self._lock:
			self._tables[scope].clear()
			self._subscribers[scope].clear()
		logger.debug("Cleared %s scope", scope.value)

	def keys(self, scope: StateScope) -> list[str]:
		with self._lock:
			return list(self._tables[StateScope(scope)])

	def snapshot(self, scope: StateScope) -> dict[str, Any]:
		with self._lock:
			return {k: c.value for k, c in self._tables[StateScope(scope)].items()}

	def export_json(self, scopes: Iterable[StateScope] | None = None) -> str:
		"""Serialize the requested scopes as ``{scope: {key: value}}``."""
		selected = list(StateScope) if scopes is None else [StateScope(s) for s in scopes]
		with self._lock:
			data = {
				scope.value: {k: c.value for k, c in self._tables[scope].items()}
				for scope in selected
			}
		return json.dumps(to_plain(data), sort_keys=True, default=str)

	def import_json(self, payload: str) -> bool:
		"""Replace the tables of every scope present in ``payload``.

		Malformed payloads are logged and ignored without touching any table.
		Returns whether the payload was applied.
		"""
		try:
			data = json.loads(payload)
		except (TypeError, ValueError):
			logger.warning("Ignoring malformed state import: invalid JSON")
			return False
		if not isinstance(data, dict):
			logger.warning("Ignoring malformed state import: expected an object")
			return False
		parsed: dict[StateScope, dict[str, Any]] = {}
		for name, table in data.items():
			try:
				scope = StateScope(name)
			except ValueError:
				logger.warning("Ignoring malformed state import: unknown scope %r", name)
				return False
			if not isinstance(table, dict):
				logger.warning(
					"Ignoring malformed state import: scope %r is not an object", name
				)
				return False
			parsed[scope] = table
		with self._lock:
			for scope, table in parsed.items():
				# Cells that survive the import keep their on_change callback
				previous = self._tables[scope]
				self._tables[scope] = {
					key: StateCell(
						key,
						scope,
						value,
						previous[key].on_change if key in previous else None,
					)
					for key, value in table.items()
				}
		logger.debug("Imported state for scopes %s", [s.value for s in parsed])
		return True

	def debug_history(self) -> list[DebugHistoryEntry]:
		with self._lock:
			return list(self._history)

	def handles(
		self, scopes: Iterable[StateScope] | None = None
	) -> "dict[str, ScopedHandle]":
		"""State handles keyed by ``"<scope>.<key>"`` for code generation."""
		from webui.registry import ScopedHandle

		selected = list(StateScope) if scopes is None else [StateScope(s) for s in scopes]
		with self._lock:
			pairs = [(scope, key) for scope in selected for key in self._tables[scope]]
		return {
			f"{scope.value}.{key}": ScopedHandle(self, key, scope) for scope, key in pairs
		}

	def generate_javascript(self, scopes: Iterable[StateScope] | None = None) -> str:
		from webui.codegen.generator import JavaScriptGenerator

		return JavaScriptGenerator().generate_complete_script(
			self.handles(scopes), self.config
		)
