import pytest
from webui.config import StateConfiguration
from webui.registry import GlobalStateRegistry
from webui.store import ScopedStateStore


@pytest.fixture
def store() -> ScopedStateStore:
	return ScopedStateStore()


@pytest.fixture
def registry() -> GlobalStateRegistry:
	return GlobalStateRegistry()


@pytest.fixture
def prod_config() -> StateConfiguration:
	return StateConfiguration().for_production()


@pytest.fixture(autouse=True)
def _clean_webui_env(monkeypatch: pytest.MonkeyPatch):  # pyright: ignore[reportUnusedFunction]
	for name in (
		"WEBUI_ENV",
		"WEBUI_PERSISTENCE",
		"WEBUI_STORAGE",
		"WEBUI_DEBUG",
		"WEBUI_MAX_DEBUG_HISTORY",
		"WEBUI_DEV_SERVER_URL",
	):
		monkeypatch.delenv(name, raising=False)
