"""
Self-describing state properties and the scripts built from them.

A state property knows its client-side variable declaration and the helper
functions that mutate it. Every helper ends with ``render()`` so elements
bound through ``data-state-*`` attributes refresh right after the mutation.

```python
script = StateScript(
	ScriptScope.document("blog/post"),
	[BooleanState("menuOpen", False), NumberState("likes", 0)],
)
script.generate_javascript()
```
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

from webui.escaping import (
	js_bool,
	js_number,
	primitive_literal,
	quote,
	serialize_to_script_literal,
)


def capitalize_first(name: str) -> str:
	"""Uppercase the first character only: ``isVisible`` -> ``IsVisible``."""
	return name[:1].upper() + name[1:]


def _helper(name: str, params: str, body: str) -> str:
	return f"const {name} = ({params}) => {{ {body} render(); }};"


class StateProperty(ABC):
	name: str
	initial_value: Any

	@property
	def suffix(self) -> str:
		return capitalize_first(self.name)

	@property
	@abstractmethod
	def js_variable_declaration(self) -> str: ...

	@property
	def js_helper_functions(self) -> str:
		return "\n".join(self._helpers())

	@abstractmethod
	def _helpers(self) -> list[str]: ...

	@property
	def js_code(self) -> str:
		return f"{self.js_variable_declaration}\n{self.js_helper_functions}"

	def _setter(self) -> str:
		return _helper(f"set{self.suffix}", "value", f"{self.name} = value;")


@dataclass(frozen=True, slots=True)
class BooleanState(StateProperty):
	name: str
	initial_value: bool = False

	@property
	def js_variable_declaration(self) -> str:
		return f"let {self.name} = {js_bool(self.initial_value)};"

	def _helpers(self) -> list[str]:
		return [
			_helper(f"toggle{self.suffix}", "", f"{self.name} = !{self.name};"),
		]


@dataclass(frozen=True, slots=True)
class StringState(StateProperty):
	name: str
	initial_value: str = ""

	@property
	def js_variable_declaration(self) -> str:
		return f"let {self.name} = {quote(self.initial_value)};"

	def _helpers(self) -> list[str]:
		return [self._setter()]


@dataclass(frozen=True, slots=True)
class NumberState(StateProperty):
	name: str
	initial_value: int | float = 0

	@property
	def js_variable_declaration(self) -> str:
		return f"let {self.name} = {js_number(self.initial_value)};"

	def _helpers(self) -> list[str]:
		return [
			self._setter(),
			_helper(f"increment{self.suffix}", "by = 1", f"{self.name} += by;"),
			_helper(f"decrement{self.suffix}", "by = 1", f"{self.name} -= by;"),
		]


@dataclass(frozen=True, slots=True)
class ArrayState(StateProperty):
	name: str
	initial_value: Sequence[Any] = field(default_factory=list)

	@property
	def js_variable_declaration(self) -> str:
		items = ", ".join(primitive_literal(v) for v in self.initial_value)
		return f"let {self.name} = [{items}];"

	def _helpers(self) -> list[str]:
		return [
			self._setter(),
			_helper(f"add{self.suffix}", "item", f"{self.name}.push(item);"),
			_helper(f"remove{self.suffix}", "index", f"{self.name}.splice(index, 1);"),
			_helper(f"clear{self.suffix}", "", f"{self.name} = [];"),
		]


@dataclass(frozen=True, slots=True)
class ObjectState(StateProperty):
	name: str
	initial_value: Mapping[str, Any] = field(default_factory=dict)

	@property
	def js_variable_declaration(self) -> str:
		entries = ", ".join(
			f"{quote(str(k))}: {primitive_literal(v)}"
			for k, v in self.initial_value.items()
		)
		return f"let {self.name} = {{{entries}}};"

	def _helpers(self) -> list[str]:
		return [
			self._setter(),
			_helper(f"update{self.suffix}", "key, value", f"{self.name}[key] = value;"),
			_helper(f"delete{self.suffix}", "key", f"delete {self.name}[key];"),
		]


@dataclass(frozen=True, slots=True)
class StateAction:
	"""A client-side call into the helpers generated for a state property."""

	js_code: str

	@classmethod
	def toggle(cls, name: str) -> "StateAction":
		return cls(f"toggle{capitalize_first(name)}()")

	@classmethod
	def update(cls, name: str, value: Any) -> "StateAction":
		return cls(f"set{capitalize_first(name)}({serialize_to_script_literal(value)})")

	@classmethod
	def increment(cls, name: str, by: int | float = 1) -> "StateAction":
		args = "" if by == 1 else js_number(by)
		return cls(f"increment{capitalize_first(name)}({args})")

	@classmethod
	def decrement(cls, name: str, by: int | float = 1) -> "StateAction":
		args = "" if by == 1 else js_number(by)
		return cls(f"decrement{capitalize_first(name)}({args})")

	@classmethod
	def expression(cls, name: str, expr: str) -> "StateAction":
		return cls(f"set{capitalize_first(name)}({expr})")

	@classmethod
	def add_to_array(cls, name: str, item: Any) -> "StateAction":
		return cls(f"add{capitalize_first(name)}({serialize_to_script_literal(item)})")

	@classmethod
	def remove_from_array(cls, name: str, index: int) -> "StateAction":
		return cls(f"remove{capitalize_first(name)}({index})")

	@classmethod
	def update_object(cls, name: str, key: str, value: Any) -> "StateAction":
		return cls(
			f"update{capitalize_first(name)}({quote(key)}, "
			+ f"{serialize_to_script_literal(value)})"
		)

	@classmethod
	def delete_from_object(cls, name: str, key: str) -> "StateAction":
		return cls(f"delete{capitalize_first(name)}({quote(key)})")

	@classmethod
	def custom(cls, code: str) -> "StateAction":
		return cls(code)

	@staticmethod
	def chain(*actions: "StateAction") -> str:
		return "; ".join(a.js_code for a in actions)


@dataclass(frozen=True, slots=True)
class ScriptScope:
	"""Where a ``StateScript`` applies: the whole site, one document or one element."""

	kind: Literal["global", "document", "local"]
	target: str | None = None

	@classmethod
	def global_(cls) -> "ScriptScope":
		return cls("global")

	@classmethod
	def document(cls, path: str) -> "ScriptScope":
		return cls("document", path)

	@classmethod
	def local(cls, element_id: str) -> "ScriptScope":
		return cls("local", element_id)

	@property
	def description(self) -> str:
		if self.kind == "global":
			return "Global"
		return f"{self.kind.capitalize()}({self.target})"

	@property
	def file_name(self) -> str:
		if self.kind == "global":
			return "state-global.js"
		if self.kind == "document":
			assert self.target is not None
			path = self.target.strip("/").replace("/", "-") or "index"
			return f"state-{path}.js"
		return f"state-local-{self.target}.js"


class StateScript:
	"""A group of state properties compiled into one script for a scope."""

	scope: ScriptScope
	states: list[StateProperty]

	def __init__(
		self,
		scope: ScriptScope | None = None,
		states: Iterable[StateProperty] = (),
	) -> None:
		self.scope = scope or ScriptScope.global_()
		self.states = list(states)

	def generate_javascript(self) -> str:
		state_code = "\n\n".join(s.js_code for s in self.states)
		return (
			f"// Generated State Management - {self.scope.description}\n"
			+ f"{state_code}\n\n{self.generate_render_function()}"
		)

	def generate_state_declarations(self) -> str:
		return "\n".join(s.js_variable_declaration for s in self.states)

	def generate_helper_functions(self) -> str:
		return "\n\n".join(s.js_helper_functions for s in self.states)

	def generate_render_function(self) -> str:
		from webui.codegen.templates.render import RENDER_TEMPLATE

		return str(
			RENDER_TEMPLATE.render_unicode(
				kind=self.scope.kind,
				target=self.scope.target,
				target_literal=quote(self.scope.target or ""),
			)
		)

	@property
	def state_names(self) -> list[str]:
		return [s.name for s in self.states]

	def get_state(self, name: str) -> StateProperty | None:
		return next((s for s in self.states if s.name == name), None)

	def has_state(self, name: str) -> bool:
		return self.get_state(name) is not None
