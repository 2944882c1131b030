"""
Glue between rendered markup and the state layer.

The markup system itself is external: anything with a ``render() -> str``
method is markup. This module decorates rendered HTML with the data
attributes the generated runtime understands (``data-webui-state``,
``data-state``, ``data-on<event>``, ``data-state-*``) and emits inline
``<script>`` bodies for handlers and the state runtime.
"""

from __future__ import annotations

import html
import logging
import re
import uuid
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Protocol, runtime_checkable

from webui.codegen.generator import ButtonAction, JavaScriptGenerator
from webui.config import StateConfiguration
from webui.properties import StateAction, capitalize_first
from webui.registry import GlobalStateRegistry, StateHandle
from webui.store import StateScope

logger = logging.getLogger(__name__)

UNINITIALIZED_STATE_ID = "uninitialized_state"

_OPENING_TAG = re.compile(r"<[a-zA-Z][^>]*>")
_ID_ATTRIBUTE = re.compile(r"""\sid\s*=\s*["']([^"']+)["']""")
_BODY_END = re.compile(r"</body\s*>", re.IGNORECASE)
_SCRIPT_END = re.compile(r"</(script)", re.IGNORECASE)


@runtime_checkable
class Markup(Protocol):
	def render(self) -> str: ...


@dataclass(frozen=True, slots=True)
class RawMarkup:
	"""Already rendered HTML."""

	html: str

	def render(self) -> str:
		return self.html


class DOMProperty(StrEnum):
	TEXT_CONTENT = "textContent"
	INNER_HTML = "innerHTML"
	VALUE = "value"
	CHECKED = "checked"
	DISABLED = "disabled"
	PLACEHOLDER = "placeholder"
	TITLE = "title"
	CLASS_NAME = "className"
	STYLE = "style"


def state_id_for(handle: StateHandle) -> str:
	"""ID the markup layer uses to refer to ``handle``."""
	state_id = handle.state_id
	if state_id is None:
		logger.warning("Binding markup to unregistered state %r", handle)
		return UNINITIALIZED_STATE_ID
	return state_id


def current_snapshot(registry: GlobalStateRegistry, state_id: str) -> Any | None:
	"""Current value of a registered state, for server-rendered initial content."""
	return registry.value_of(state_id)


def render_attributes(attributes: Mapping[str, str]) -> str:
	return "".join(
		f' {name}="{html.escape(str(value), quote=True)}"'
		for name, value in attributes.items()
	)


def add_attributes(rendered: str, attributes: Mapping[str, str]) -> str:
	"""Add attributes to the first opening tag, or wrap tagless text in a span."""
	match = _OPENING_TAG.search(rendered)
	attrs = render_attributes(attributes)
	if match is None:
		return f"<span{attrs}>{rendered}</span>"
	tag = match.group(0)
	if tag.endswith("/>"):
		new_tag = tag[:-2].rstrip() + attrs + " />"
	else:
		new_tag = tag[:-1] + attrs + ">"
	return rendered[: match.start()] + new_tag + rendered[match.end() :]


def inline_script(body: str) -> str:
	"""``<script>`` element whose body cannot close the tag early."""
	return "<script>\n" + _SCRIPT_END.sub(r"<\\/\1", body) + "\n</script>"


@dataclass(frozen=True, slots=True)
class AttributeMarkup:
	content: Markup
	attributes: Mapping[str, str]

	def render(self) -> str:
		return add_attributes(self.content.render(), self.attributes)


@dataclass(frozen=True, slots=True)
class StateBoundMarkup:
	"""Markup kept in sync with a state by the generated runtime."""

	content: Markup
	state_id: str
	property: DOMProperty = DOMProperty.TEXT_CONTENT

	def render(self) -> str:
		return add_attributes(
			self.content.render(),
			{
				"data-webui-state": self.state_id,
				"data-webui-property": DOMProperty(self.property).value,
			},
		)


@dataclass(frozen=True, slots=True)
class ClickHandlerMarkup:
	"""Markup followed by an inline click handler updating a state."""

	content: Markup
	state_id: str
	action: ButtonAction

	def render(self) -> str:
		rendered = self.content.render()
		match = _OPENING_TAG.search(rendered)
		if match is None:
			return rendered
		id_match = _ID_ATTRIBUTE.search(match.group(0))
		if id_match is not None:
			element_id = id_match.group(1)
		else:
			element_id = f"webui-element-{uuid.uuid4().hex[:8]}"
			rendered = add_attributes(rendered, {"id": element_id})
		script = JavaScriptGenerator().generate_button_handler(
			element_id, self.state_id, self.action
		)
		return f"{rendered}\n{inline_script(script)}"


@dataclass(frozen=True, slots=True)
class StateManagementMarkup:
	"""Markup with the complete state runtime for ``registry`` embedded."""

	content: Markup
	registry: GlobalStateRegistry
	config: StateConfiguration | None = None

	def render(self) -> str:
		rendered = self.content.render()
		script = inline_script(
			JavaScriptGenerator().generate_complete_script(
				self.registry.items(), self.config
			)
		)
		matches = list(_BODY_END.finditer(rendered))
		if not matches:
			return f"{rendered}\n{script}"
		last = matches[-1]
		return f"{rendered[: last.start()]}{script}\n{rendered[last.start() :]}"


def bind_to_state(
	content: Markup,
	handle: StateHandle,
	property: DOMProperty | str = DOMProperty.TEXT_CONTENT,
) -> StateBoundMarkup:
	return StateBoundMarkup(content, state_id_for(handle), DOMProperty(property))


def on_click(content: Markup, handle: StateHandle, action: ButtonAction) -> ClickHandlerMarkup:
	return ClickHandlerMarkup(content, state_id_for(handle), action)


def include_state_management(
	content: Markup,
	registry: GlobalStateRegistry,
	config: StateConfiguration | None = None,
) -> StateManagementMarkup:
	return StateManagementMarkup(content, registry, config)


def increment_button(text: str, handle: StateHandle) -> ClickHandlerMarkup:
	button = RawMarkup(f"<button>{html.escape(text)}</button>")
	return on_click(button, handle, ButtonAction.increment())


def toggle_button(text: str, handle: StateHandle) -> ClickHandlerMarkup:
	button = RawMarkup(f"<button>{html.escape(text)}</button>")
	return on_click(button, handle, ButtonAction.toggle())


def state_text(handle: StateHandle) -> StateBoundMarkup:
	"""A span showing the state's current value, updated on change."""
	value = handle.current_value
	text = "" if value is None else str(value)
	return bind_to_state(RawMarkup(f"<span>{html.escape(text)}</span>"), handle)


def state_input(
	handle: StateHandle,
	name: str | None = None,
	placeholder: str | None = None,
) -> StateBoundMarkup:
	"""Text input with two-way binding to the state."""
	attributes = {"type": "text", "name": name or handle.state_id or "state_input"}
	if placeholder is not None:
		attributes["placeholder"] = placeholder
	value = handle.current_value
	if value is not None:
		attributes["value"] = str(value)
	element = RawMarkup(f"<input{render_attributes(attributes)}>")
	return bind_to_state(element, handle, DOMProperty.VALUE)


def state_checkbox(handle: StateHandle, name: str | None = None) -> StateBoundMarkup:
	"""Checkbox with two-way binding to a boolean state."""
	attributes = {
		"type": "checkbox",
		"name": name or handle.state_id or "state_checkbox",
	}
	checked = " checked" if handle.current_value else ""
	element = RawMarkup(f"<input{render_attributes(attributes)}{checked}>")
	return bind_to_state(element, handle, DOMProperty.CHECKED)


_EVENT_BINDINGS = {
	"toggle": ("data-onclick", "toggle"),
	"increment": ("data-onclick", "increment"),
	"decrement": ("data-onclick", "decrement"),
	"input": ("data-oninput", "set"),
	"change": ("data-onchange", "set"),
}


def state_data_attributes(
	key: str,
	scope: StateScope | str = StateScope.COMPONENT,
	bindings: Sequence[str] = (),
) -> dict[str, str]:
	"""``data-state`` plus ``data-on<event>="scope.key.operation"`` attributes.

	Unknown binding names are ignored. Later click bindings replace earlier ones.
	"""
	target = f"{StateScope(scope).value}.{key}"
	attributes = {"data-state": target}
	for binding in bindings:
		event = _EVENT_BINDINGS.get(binding)
		if event is None:
			continue
		attribute, operation = event
		attributes[attribute] = f"{target}.{operation}"
	return attributes


# Attribute builders for elements driven by property scripts


def show_when(condition: str) -> dict[str, str]:
	return {"data-state-show": condition}


def hide_when(condition: str) -> dict[str, str]:
	return {"data-state-show": f"!({condition})"}


def text_from(expression: str) -> dict[str, str]:
	return {"data-state-text": "${" + expression + "}"}


def text_template(template: str) -> dict[str, str]:
	"""Template literal body with ``${...}`` placeholders."""
	return {"data-state-text": template}


def bind_value(state: str) -> dict[str, str]:
	return {
		"data-state-value": state,
		"oninput": f"set{capitalize_first(state)}(event.target.value)",
	}


def bind_number(state: str) -> dict[str, str]:
	return {
		"data-state-value": state,
		"oninput": f"set{capitalize_first(state)}(parseFloat(event.target.value) || 0)",
	}


def bind_checked(state: str) -> dict[str, str]:
	return {
		"data-state-checked": state,
		"onchange": f"set{capitalize_first(state)}(event.target.checked)",
	}


def classes_when(classes: Sequence[str], condition: str) -> dict[str, str]:
	names = " ".join(classes)
	return {"data-state-classes": f"{condition} ? '{names}' : ''"}


def style_when(style: str, condition: str) -> dict[str, str]:
	return {"data-state-style": f"{condition} ? '{style}' : ''"}


def disabled_when(condition: str) -> dict[str, str]:
	return {"data-state-disabled": condition}


def enabled_when(condition: str) -> dict[str, str]:
	return {"data-state-disabled": f"!({condition})"}


def action_attributes(event: str, *actions: StateAction) -> dict[str, str]:
	return {f"on{event}": StateAction.chain(*actions)}
