import pytest
from webui.errors import StateTypeError
from webui.registry import GlobalStateRegistry
from webui.state import Binding, State
from webui.store import ScopedStateStore, StateScope


class TestState:
	def test_value_roundtrip(self, store: ScopedStateStore):
		count = State("count", 0, store=store, scope=StateScope.GLOBAL)
		assert count.value == 0
		count.value += 1
		assert count.value == 1
		assert store.get("count", StateScope.GLOBAL) == 1

	def test_shared_state_deduplicates_by_key(self, store: ScopedStateStore):
		a = State("theme", "dark", store=store, scope="shared")
		b = State("theme", "light", store=store, scope="shared")
		assert b.value == "dark"
		b.value = "light"
		assert a.value == "light"

	def test_component_state_is_private(self, store: ScopedStateStore):
		a = State("open", False, store=store)
		b = State("open", True, store=store)
		assert a.key != b.key
		assert a.value is False
		assert b.value is True

	def test_component_state_with_owner(self, store: ScopedStateStore):
		state = State("open", False, store=store, owner="menu")
		assert state.key == "menu.open"
		assert store.get("menu.open", StateScope.COMPONENT) is False

	def test_incompatible_redeclaration_raises(self, store: ScopedStateStore):
		State("count", 0, store=store, scope=StateScope.GLOBAL)
		with pytest.raises(StateTypeError):
			State("count", "zero", store=store, scope=StateScope.GLOBAL)

	def test_numeric_redeclaration_is_compatible(self, store: ScopedStateStore):
		State("ratio", 1, store=store, scope=StateScope.GLOBAL)
		again = State("ratio", 0.5, store=store, scope=StateScope.GLOBAL)
		assert again.value == 1

	def test_state_type_error_is_a_type_error(self, store: ScopedStateStore):
		State("flag", True, store=store, scope=StateScope.GLOBAL)
		with pytest.raises(TypeError):
			State("flag", 1, store=store, scope=StateScope.GLOBAL)

	def test_on_change(self, store: ScopedStateStore):
		seen: list[int] = []
		count = State("count", 0, store=store, scope="global", on_change=seen.append)
		count.set(3)
		assert seen == [3]

	def test_on_change_on_redeclaration(self, store: ScopedStateStore):
		seen: list[int] = []
		first = State("count", 0, store=store, scope="global")
		State("count", 0, store=store, scope="global", on_change=seen.append)
		first.value = 2
		assert seen == [2]

	def test_subscribe(self, store: ScopedStateStore):
		seen: list[str] = []
		name = State("name", "", store=store, scope="session")
		token = name.subscribe(seen.append)
		name.value = "Ada"
		name.unsubscribe(token)
		name.value = "Grace"
		assert seen == ["Ada"]

	def test_registry_registration(
		self, store: ScopedStateStore, registry: GlobalStateRegistry
	):
		count = State("count", 5, store=store, scope="global", registry=registry)
		assert count.state_id == "global.count"
		assert registry.value_of("global.count") == 5
		count.value = 6
		assert registry.value_of("global.count") == 6

	def test_component_state_gets_generated_id(
		self, store: ScopedStateStore, registry: GlobalStateRegistry
	):
		open_ = State("open", False, store=store, registry=registry)
		assert open_.state_id == "state_1"
		assert registry.value_of("state_1") is False

	def test_explicit_state_id(
		self, store: ScopedStateStore, registry: GlobalStateRegistry
	):
		count = State(
			"count", 5, store=store, scope="global", registry=registry, state_id="likes"
		)
		assert count.state_id == "likes"
		assert "likes" in registry

	def test_unregistered_state_has_no_id(self, store: ScopedStateStore):
		assert State("x", 1, store=store).state_id is None

	def test_handle(self, store: ScopedStateStore):
		count = State("count", 1, store=store, scope="shared")
		assert count.handle().state_id == "shared.count"


class TestBinding:
	def test_binding_reads_and_writes_state(self, store: ScopedStateStore):
		count = State("count", 1, store=store, scope="global")
		binding = count.binding()
		assert binding.value == 1
		binding.value = 7
		assert count.value == 7

	def test_binding_on_change(self):
		box = {"v": 0}
		seen: list[int] = []
		binding = Binding(
			get=lambda: box["v"],
			set=lambda v: box.__setitem__("v", v),
			on_change=seen.append,
		)
		binding.value = 4
		assert box["v"] == 4
		assert seen == [4]

	def test_constant_binding(self, registry: GlobalStateRegistry):
		binding = Binding.constant("fixed", registry=registry, state_id="c")
		binding.value = "changed"
		assert binding.value == "fixed"
		assert registry.value_of("c") == "fixed"
