"""
One build run of a static site: its state, configuration and scripts.

```python
site = Site()
count = site.state("count", 0, scope="global")
site.script(ScriptScope.document("index"), NumberState("likes", 0))
site.build("dist")
```
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from pathlib import Path
from typing import Any, TypeVar

from webui.codegen.codegen import Codegen, CodegenConfig
from webui.config import StateConfiguration
from webui.properties import ScriptScope, StateProperty, StateScript
from webui.registry import GlobalStateRegistry, StateHandle
from webui.state import State
from webui.store import ScopedStateStore, StateScope

T = TypeVar("T")

logger = logging.getLogger(__name__)

# Store scopes exposed to the browser as "<scope>.<key>" states
CLIENT_SCOPES = (StateScope.SHARED, StateScope.GLOBAL, StateScope.SESSION)


class Site:
	config: StateConfiguration
	codegen_config: CodegenConfig
	store: ScopedStateStore
	registry: GlobalStateRegistry
	scripts: list[StateScript]

	def __init__(
		self,
		config: StateConfiguration | None = None,
		codegen: CodegenConfig | None = None,
	) -> None:
		self.config = config or StateConfiguration.from_env()
		self.codegen_config = codegen or CodegenConfig()
		self.store = ScopedStateStore(self.config)
		self.registry = GlobalStateRegistry()
		self.scripts = []

	def state(
		self,
		key: str,
		initial_value: T,
		scope: StateScope | str = StateScope.COMPONENT,
		*,
		owner: str | None = None,
		state_id: str | None = None,
		on_change: Callable[[T], None] | None = None,
	) -> State[T]:
		"""Declare a state registered with this site's store and registry."""
		return State(
			key,
			initial_value,
			store=self.store,
			scope=scope,
			owner=owner,
			registry=self.registry,
			state_id=state_id,
			on_change=on_change,
		)

	def add_script(self, script: StateScript) -> StateScript:
		self.scripts.append(script)
		return script

	def script(self, scope: ScriptScope, *states: StateProperty) -> StateScript:
		return self.add_script(StateScript(scope, states))

	def states(self) -> dict[str, StateHandle]:
		"""Every state shipped to the browser, keyed by state ID.

		A store cell already registered through a ``State`` is shipped once,
		under that state's ID.
		"""
		handles: dict[str, StateHandle] = dict(self.registry.items())
		registered = {
			(h.scope, h.key) for h in handles.values() if isinstance(h, State)
		}
		for state_id, handle in self.store.handles(CLIENT_SCOPES).items():
			if (handle.scope, handle.key) not in registered:
				handles.setdefault(state_id, handle)
		return handles

	def build(
		self, output_dir: Path | str | None = None, *, production: bool = False
	) -> list[Path]:
		"""Write the state scripts under ``<output_dir>/<scripts_dir>``."""
		cfg = self.codegen_config
		if output_dir is not None:
			cfg = replace(cfg, output_dir=output_dir)
		config = self.config.for_production() if production else self.config
		paths = Codegen(cfg, config).generate_all(self.states(), self.scripts)
		logger.info("Generated %d state scripts in %s", len(paths), cfg.scripts_path)
		return paths

	def script_tags(
		self, document: str | None = None, elements: Iterable[str] = ()
	) -> list[str]:
		"""Script tags for the page at ``document`` and its scoped elements."""
		return Codegen(self.codegen_config, self.config).script_tags(
			self.scripts, document, elements
		)

	def export_state(self, scopes: list[StateScope] | None = None) -> str:
		return self.store.export_json(scopes)

	def value_of(self, state_id: str) -> Any | None:
		return self.registry.value_of(state_id)
