from typing import Any

import pytest
from webui.codegen.generator import ButtonAction, JavaScriptGenerator
from webui.config import StateConfiguration, StorageType
from webui.registry import GlobalStateRegistry


class FixedHandle:
	def __init__(self, value: Any) -> None:
		self.value = value

	@property
	def state_id(self) -> str | None:
		return None

	@property
	def current_value(self) -> Any:
		return self.value


class BrokenHandle:
	@property
	def state_id(self) -> str | None:
		return None

	@property
	def current_value(self) -> Any:
		raise RuntimeError("unavailable")


@pytest.fixture
def generator() -> JavaScriptGenerator:
	return JavaScriptGenerator()


class TestStateScript:
	def test_string_value(self, generator: JavaScriptGenerator):
		js = generator.generate_state_script(FixedHandle("initial value"), "test_state")
		assert js == (
			"// State: test_state\n"
			+ "WebUIStateManager.createState('test_state', \"initial value\");"
		)

	@pytest.mark.parametrize(
		"value,literal",
		[
			(42, "42"),
			(True, "true"),
			(None, "null"),
			([1, 2], "[1,2]"),
			({"a": "b"}, '{"a":"b"}'),
		],
	)
	def test_value_literals(
		self, generator: JavaScriptGenerator, value: Any, literal: str
	):
		js = generator.generate_state_script(FixedHandle(value), "s")
		assert js.endswith(f"WebUIStateManager.createState('s', {literal});")

	def test_unreadable_value_renders_null(self, generator: JavaScriptGenerator):
		js = generator.generate_state_script(BrokenHandle(), "broken")
		assert "WebUIStateManager.createState('broken', null);" in js

	def test_state_id_is_escaped(self, generator: JavaScriptGenerator):
		js = generator.generate_state_script(FixedHandle(1), "it's\nhere")
		assert "// State: it's here\n" in js
		assert "createState('it\\'s\\nhere', 1);" in js

	def test_line_separators_stay_in_comment(self, generator: JavaScriptGenerator):
		js = generator.generate_state_script(FixedHandle(1), "a\u2028b\u2029c")
		assert "// State: a b c\n" in js


class TestFramework:
	def test_runtime_exposes_manager(self, generator: JavaScriptGenerator):
		js = generator.generate_framework(StateConfiguration())
		assert "window.WebUIStateManager = manager;" in js
		for method in (
			"createState(id, initialValue)",
			"getState(id)",
			"setState(id, value)",
			"subscribe(id, callback)",
			"unsubscribe(id, callback)",
			"bindElement(stateId, target, property)",
			"updateDOM(stateId, value)",
			"updateElementProperty(element, property, value)",
			"notifyListeners(id, value)",
			"debug()",
		):
			assert method in js

	def test_configuration_is_embedded(self, generator: JavaScriptGenerator):
		config = StateConfiguration(
			enable_persistence=True,
			storage_type=StorageType.SESSION_STORAGE,
			enable_debugging=False,
			max_debug_history=7,
		)
		js = generator.generate_framework(config)
		assert "const enablePersistence = true;" in js
		assert "const enableDebugging = false;" in js
		assert "const storageType = 'sessionStorage';" in js
		assert "const maxDebugHistory = 7;" in js

	def test_dev_sync(self, generator: JavaScriptGenerator):
		config = StateConfiguration(
			dev_server_url="ws://localhost:9000/ws",
			reconnect_delay_ms=500,
			max_reconnect_attempts=4,
		)
		js = generator.generate_framework(config)
		assert "setupServerSync(url = 'ws://localhost:9000/ws')" in js
		assert "const reconnectDelay = 500;" in js
		assert "const maxReconnectAttempts = 4;" in js
		assert "type: 'stateChange'" in js

	def test_unlimited_reconnects(self, generator: JavaScriptGenerator):
		js = generator.generate_framework(StateConfiguration())
		assert "const maxReconnectAttempts = null;" in js
		assert "const reconnectDelay = 3000;" in js

	def test_production_omits_dev_sync(
		self, generator: JavaScriptGenerator, prod_config: StateConfiguration
	):
		js = generator.generate_framework(prod_config)
		assert "setupServerSync" not in js
		assert "WebSocket" not in js
		assert "const enableDebugging = false;" in js

	def test_listener_errors_are_isolated(self, generator: JavaScriptGenerator):
		js = generator.generate_framework(StateConfiguration())
		assert "console.error('Error in state listener for ' + id + ':', error);" in js

	def test_no_template_artifacts(self, generator: JavaScriptGenerator):
		js = generator.generate_framework(StateConfiguration())
		assert "${" not in js
		assert "% if" not in js
		assert "% endif" not in js


class TestInitialization:
	def test_lists_state_ids(self, generator: JavaScriptGenerator):
		js = generator.generate_initialization(["a", "b"], StateConfiguration())
		assert "initialized with states:', ['a', 'b']);" in js
		assert "[data-webui-state]" in js
		assert "[data-state]" in js
		assert "'click'" in js

	def test_dev_sync_only_on_loopback(self, generator: JavaScriptGenerator):
		js = generator.generate_initialization([], StateConfiguration())
		assert "host === 'localhost'" in js
		assert "WebUIStateManager.setupServerSync();" in js

	def test_production_skips_dev_sync(
		self, generator: JavaScriptGenerator, prod_config: StateConfiguration
	):
		js = generator.generate_initialization([], prod_config)
		assert "setupServerSync" not in js


class TestCompleteScript:
	def test_order(self, generator: JavaScriptGenerator, registry: GlobalStateRegistry):
		registry.register(FixedHandle(1), "first")
		registry.register(FixedHandle("two"), "second")
		js = generator.generate_complete_script(registry.items())
		runtime = js.index("window.WebUIStateManager = manager;")
		first = js.index("WebUIStateManager.createState('first', 1);")
		second = js.index("WebUIStateManager.createState('second', \"two\");")
		init = js.index("// Initialize WebUI when DOM is ready")
		assert runtime < first < second < init

	def test_empty_registry(self, generator: JavaScriptGenerator):
		js = generator.generate_complete_script({})
		assert "createState('" not in js
		assert "initialized with states:', []);" in js


class TestHandlers:
	def test_increment_button(self, generator: JavaScriptGenerator):
		js = generator.generate_button_handler("btn", "counter", ButtonAction.increment())
		assert js == (
			"document.getElementById('btn').addEventListener('click', function() {\n"
			+ "    WebUIStateManager.setState('counter', "
			+ "(WebUIStateManager.getState('counter') || 0) + 1);\n"
			+ "});"
		)

	def test_decrement_and_toggle(self, generator: JavaScriptGenerator):
		dec = generator.generate_button_handler("b", "n", ButtonAction.decrement())
		assert "(WebUIStateManager.getState('n') || 0) - 1" in dec
		toggle = generator.generate_button_handler("b", "open", ButtonAction.toggle())
		assert "WebUIStateManager.setState('open', !WebUIStateManager.getState('open'));" in toggle

	def test_custom_action(self, generator: JavaScriptGenerator):
		action = ButtonAction.custom("alert('$STATE_ID');")
		js = generator.generate_button_handler("b", "count", action)
		assert "alert('count');" in js

	def test_form_handler(self, generator: JavaScriptGenerator):
		js = generator.generate_form_handler(
			"signup", {"email": "user_email", "name": "user_name"}
		)
		assert "document.getElementById('signup').addEventListener('submit'" in js
		assert "event.preventDefault();" in js
		assert "WebUIStateManager.setState('user_email', form['email'].value);" in js
		assert "WebUIStateManager.setState('user_name', form['name'].value);" in js
