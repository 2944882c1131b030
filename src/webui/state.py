"""
Declarative state handles.

``State`` is the convenience layer over ``ScopedStateStore``: it registers its
key on construction and reads/writes through the store. Passing a registry
also makes the handle addressable by ID for markup bindings and code
generation.

```python
store = ScopedStateStore()
registry = GlobalStateRegistry()

count = State("count", 0, store=store, scope="global", registry=registry)
count.value += 1
```
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from webui.errors import StateTypeError
from webui.registry import GlobalStateRegistry, ScopedHandle
from webui.store import ScopedStateStore, StateScope, SubscriptionToken

T = TypeVar("T")

logger = logging.getLogger(__name__)

_component_ids = itertools.count(1)


def _compatible(existing: Any, new: Any) -> bool:
	if existing is None or new is None:
		return True
	numbers = (int, float)
	if (
		isinstance(existing, numbers)
		and isinstance(new, numbers)
		and not isinstance(existing, bool)
		and not isinstance(new, bool)
	):
		return True
	return type(existing) is type(new)


class State(Generic[T]):
	"""A state value stored in a ``ScopedStateStore`` under ``(scope, key)``.

	Component-scoped state is private to one declaration: unless an ``owner``
	(usually the element ID) is given, the key gets a unique suffix so two
	components never share a cell. Shared, global and session state are
	deduplicated by key, and later declarations see the first declaration's
	value. Registered in a registry without an explicit ID, they use their
	store cell ID (``"global.count"``); component state gets a generated one.
	"""

	key: str
	scope: StateScope
	store: ScopedStateStore

	def __init__(
		self,
		key: str,
		initial_value: T,
		*,
		store: ScopedStateStore,
		scope: StateScope | str = StateScope.COMPONENT,
		owner: str | None = None,
		registry: GlobalStateRegistry | None = None,
		state_id: str | None = None,
		on_change: Callable[[T], None] | None = None,
	) -> None:
		scope = StateScope(scope)
		if scope is StateScope.COMPONENT:
			key = f"{owner}.{key}" if owner else f"{key}#{next(_component_ids)}"
		self.key = key
		self.scope = scope
		self.store = store
		self._state_id: str | None = None

		created = store.register(key, scope, initial_value, on_change=on_change)
		if not created:
			existing = store.get(key, scope)
			if not _compatible(existing, initial_value):
				raise StateTypeError(
					f"State {scope.value}.{key} already holds a "
					+ f"{type(existing).__name__}, cannot redeclare it with a "
					+ f"{type(initial_value).__name__}"
				)
			if on_change is not None:
				store.subscribe(key, scope, on_change)
		if registry is not None:
			if state_id is None and scope is not StateScope.COMPONENT:
				# Same ID as the store cell behind it
				state_id = self.handle().state_id
			self.register(registry, state_id)

	def register(self, registry: GlobalStateRegistry, state_id: str | None = None) -> str:
		self._state_id = registry.register(self, state_id)
		return self._state_id

	@property
	def state_id(self) -> str | None:
		return self._state_id

	@property
	def value(self) -> T:
		return self.store.get(self.key, self.scope)  # pyright: ignore[reportReturnType]

	@value.setter
	def value(self, new_value: T) -> None:
		self.store.update(self.key, self.scope, new_value)

	@property
	def current_value(self) -> Any:
		return self.value

	def set(self, new_value: T) -> None:
		self.value = new_value

	def subscribe(self, callback: Callable[[T], None]) -> SubscriptionToken:
		return self.store.subscribe(self.key, self.scope, callback)

	def unsubscribe(self, token: SubscriptionToken) -> None:
		self.store.unsubscribe(token)

	def handle(self) -> ScopedHandle:
		return ScopedHandle(self.store, self.key, self.scope)

	def binding(self, registry: GlobalStateRegistry | None = None) -> "Binding[T]":
		"""A two-way binding that reads and writes this state."""
		return Binding(
			get=lambda: self.value,
			set=self.set,
			registry=registry,
		)

	def __repr__(self) -> str:
		return f"State({self.scope.value}.{self.key}={self.value!r})"


class Binding(Generic[T]):
	"""Two-way access to state owned elsewhere, through a getter/setter pair."""

	def __init__(
		self,
		get: Callable[[], T],
		set: Callable[[T], None],
		*,
		registry: GlobalStateRegistry | None = None,
		state_id: str | None = None,
		on_change: Callable[[T], None] | None = None,
	) -> None:
		self._get = get
		self._set = set
		self.on_change = on_change
		self._state_id: str | None = None
		if registry is not None:
			self._state_id = registry.register(self, state_id)

	@classmethod
	def constant(cls, value: T, **kwargs: Any) -> "Binding[T]":
		"""A binding that always reads ``value`` and ignores writes."""
		return cls(lambda: value, lambda _: None, **kwargs)

	@property
	def state_id(self) -> str | None:
		return self._state_id

	@property
	def value(self) -> T:
		return self._get()

	@value.setter
	def value(self, new_value: T) -> None:
		self._set(new_value)
		if self.on_change is not None:
			self.on_change(new_value)

	@property
	def current_value(self) -> Any:
		return self._get()
