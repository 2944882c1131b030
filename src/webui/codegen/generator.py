"""
Vanilla JavaScript generation for registered state.

``JavaScriptGenerator`` is pure: it turns ``{state_id: handle}`` plus a
``StateConfiguration`` into script text. A state whose value cannot be read
or represented degrades to a ``null`` literal instead of failing the build.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal

from webui.codegen.templates.handlers import (
	BUTTON_HANDLER_TEMPLATE,
	FORM_HANDLER_TEMPLATE,
	STATE_TEMPLATE,
)
from webui.codegen.templates.runtime import INIT_TEMPLATE, RUNTIME_TEMPLATE
from webui.config import StateConfiguration
from webui.escaping import (
	NULL,
	js_bool,
	quote_js_string,
	serialize_to_script_literal,
)
from webui.registry import StateHandle

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ButtonAction:
	"""What a generated click handler does to its state."""

	kind: Literal["increment", "decrement", "toggle", "custom"]
	code: str | None = None

	@classmethod
	def increment(cls) -> "ButtonAction":
		return cls("increment")

	@classmethod
	def decrement(cls) -> "ButtonAction":
		return cls("decrement")

	@classmethod
	def toggle(cls) -> "ButtonAction":
		return cls("toggle")

	@classmethod
	def custom(cls, code: str) -> "ButtonAction":
		"""Arbitrary JavaScript; ``$STATE_ID`` is replaced with the raw state ID."""
		return cls("custom", code)

	def js_code(self, state_id: str) -> str:
		sid = quote_js_string(state_id)
		match self.kind:
			case "increment":
				return f"WebUIStateManager.setState({sid}, (WebUIStateManager.getState({sid}) || 0) + 1);"
			case "decrement":
				return f"WebUIStateManager.setState({sid}, (WebUIStateManager.getState({sid}) || 0) - 1);"
			case "toggle":
				return f"WebUIStateManager.setState({sid}, !WebUIStateManager.getState({sid}));"
			case "custom":
				return (self.code or "").replace("$STATE_ID", state_id)


# Characters that end a line comment in JavaScript
_LINE_TERMINATORS = str.maketrans(dict.fromkeys("\r\n\u2028\u2029", " "))


def _comment_safe(text: str) -> str:
	return text.translate(_LINE_TERMINATORS)


class JavaScriptGenerator:
	"""Generates the client-side state runtime and per-state scripts."""

	def generate_complete_script(
		self,
		states: Mapping[str, StateHandle],
		config: StateConfiguration | None = None,
	) -> str:
		"""Runtime, one ``createState`` per state, then DOM initialization."""
		config = config or StateConfiguration()
		parts = [self.generate_framework(config)]
		parts.extend(
			self.generate_state_script(handle, state_id, config)
			for state_id, handle in states.items()
		)
		parts.append(self.generate_initialization(list(states), config))
		return "\n\n".join(parts)

	def generate_state_script(
		self,
		state: StateHandle,
		state_id: str,
		config: StateConfiguration | None = None,
	) -> str:
		return str(
			STATE_TEMPLATE.render_unicode(
				state_id=_comment_safe(state_id),
				state_id_literal=quote_js_string(state_id),
				value_literal=self.value_literal(state, state_id),
			)
		)

	def value_literal(self, state: StateHandle, state_id: str) -> str:
		try:
			value = state.current_value
		except Exception:
			logger.warning(
				"Could not read the value of state %r, rendering null",
				state_id,
				exc_info=True,
			)
			return NULL
		return serialize_to_script_literal(value)

	def generate_framework(self, config: StateConfiguration) -> str:
		max_reconnect = config.max_reconnect_attempts
		return str(
			RUNTIME_TEMPLATE.render_unicode(
				enable_persistence=js_bool(config.enable_persistence),
				enable_debugging=js_bool(config.enable_debugging),
				storage_type=config.storage_type.value,
				max_debug_history=config.max_debug_history,
				enable_dev_sync=config.enable_dev_sync,
				dev_server_url=quote_js_string(config.dev_server_url),
				reconnect_delay_ms=config.reconnect_delay_ms,
				max_reconnect_attempts=NULL if max_reconnect is None else max_reconnect,
			)
		)

	def generate_initialization(
		self, state_ids: list[str], config: StateConfiguration
	) -> str:
		return str(
			INIT_TEMPLATE.render_unicode(
				state_ids=", ".join(quote_js_string(s) for s in state_ids),
				enable_dev_sync=config.enable_dev_sync,
			)
		)

	def generate_button_handler(
		self, button_id: str, state_id: str, action: ButtonAction
	) -> str:
		return str(
			BUTTON_HANDLER_TEMPLATE.render_unicode(
				button_id_literal=quote_js_string(button_id),
				action_code=action.js_code(state_id),
			)
		)

	def generate_form_handler(self, form_id: str, state_updates: Mapping[str, str]) -> str:
		"""Submit handler copying form fields into states (``{field: state_id}``)."""
		return str(
			FORM_HANDLER_TEMPLATE.render_unicode(
				form_id_literal=quote_js_string(form_id),
				updates=[
					(quote_js_string(field), quote_js_string(state_id))
					for field, state_id in state_updates.items()
				],
			)
		)
