"""
Directory of live state handles, keyed by state ID.

A ``GlobalStateRegistry`` is created for one build run and passed to whatever
needs it (markup bindings, code generation). Handles are type-erased: the
registry only needs their ID and current value.
"""

from __future__ import annotations

import itertools
import logging
import threading
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from webui.values import MISSING

if TYPE_CHECKING:
	from webui.store import ScopedStateStore, StateScope

logger = logging.getLogger(__name__)


@runtime_checkable
class StateHandle(Protocol):
	@property
	def state_id(self) -> str | None: ...

	@property
	def current_value(self) -> Any: ...


class ScopedHandle:
	"""Read-only view of one ``(scope, key)`` cell of a ``ScopedStateStore``."""

	__slots__: tuple[str, ...] = ("store", "key", "scope")

	store: "ScopedStateStore"
	key: str
	scope: "StateScope"

	def __init__(self, store: "ScopedStateStore", key: str, scope: "StateScope"):
		self.store = store
		self.key = key
		self.scope = scope

	@property
	def state_id(self) -> str:
		return f"{self.scope.value}.{self.key}"

	@property
	def current_value(self) -> Any:
		return self.store.get(self.key, self.scope)

	def __repr__(self) -> str:
		return f"ScopedHandle({self.state_id!r})"


class GlobalStateRegistry:
	"""Thread-safe map from state IDs to handles.

	Registering under an explicit ID that is already taken replaces the
	previous handle. Generated IDs (``state_<n>``) come from a counter that is
	never reset and skip IDs already in use, so they never collide with an
	existing handle and are not reused during the registry's lifetime.
	"""

	def __init__(self) -> None:
		self._lock = threading.Lock()
		self._handles: dict[str, StateHandle] = {}
		self._counter = itertools.count(1)

	def register(self, handle: StateHandle, state_id: str | None = None) -> str:
		with self._lock:
			if state_id is None:
				state_id = f"state_{next(self._counter)}"
				# Never hand out an ID already taken explicitly
				while state_id in self._handles:
					state_id = f"state_{next(self._counter)}"
			elif state_id in self._handles:
				logger.debug("Replacing state handle registered as %r", state_id)
			self._handles[state_id] = handle
		return state_id

	def unregister(self, state_id: str) -> None:
		with self._lock:
			self._handles.pop(state_id, None)

	def get(self, state_id: str) -> StateHandle | None:
		with self._lock:
			return self._handles.get(state_id)

	def all_ids(self) -> list[str]:
		with self._lock:
			return list(self._handles)

	def items(self) -> dict[str, StateHandle]:
		with self._lock:
			return dict(self._handles)

	def value_of(self, state_id: str) -> Any | None:
		handle = self.get(state_id)
		if handle is None:
			return None
		# Read outside the registry lock, the handle guards its own storage
		value = handle.current_value
		return None if value is MISSING else value

	def clear(self) -> None:
		with self._lock:
			self._handles.clear()

	def __contains__(self, state_id: object) -> bool:
		with self._lock:
			return state_id in self._handles

	def __len__(self) -> int:
		with self._lock:
			return len(self._handles)
