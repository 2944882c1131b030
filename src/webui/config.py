from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from enum import StrEnum

logger = logging.getLogger(__name__)

ENV_WEBUI_ENV = "WEBUI_ENV"
ENV_WEBUI_PERSISTENCE = "WEBUI_PERSISTENCE"
ENV_WEBUI_STORAGE = "WEBUI_STORAGE"
ENV_WEBUI_DEBUG = "WEBUI_DEBUG"
ENV_WEBUI_MAX_DEBUG_HISTORY = "WEBUI_MAX_DEBUG_HISTORY"
ENV_WEBUI_DEV_SERVER_URL = "WEBUI_DEV_SERVER_URL"

DEFAULT_DEV_SERVER_URL = "ws://localhost:8080/ws"


class StorageType(StrEnum):
	MEMORY = "memory"
	LOCAL_STORAGE = "localStorage"
	SESSION_STORAGE = "sessionStorage"


def _env_flag(name: str, default: bool) -> bool:
	raw = os.environ.get(name)
	if raw is None or raw.strip() == "":
		return default
	return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True, slots=True)
class StateConfiguration:
	"""
	Controls state storage and JavaScript generation.

	Attributes:
	    enable_persistence: Write state through to browser storage.
	    storage_type: Browser storage backend used when persistence is on.
	    enable_debugging: Record debug history and log state changes.
	    max_debug_history: Maximum number of debug history entries kept.
	    enable_dev_sync: Emit the development server synchronization code.
	    dev_server_url: WebSocket URL of the development server.
	    reconnect_delay_ms: Delay before reconnecting to the development server.
	    max_reconnect_attempts: Reconnect limit, ``None`` for unlimited.
	"""

	enable_persistence: bool = False
	storage_type: StorageType = StorageType.MEMORY
	enable_debugging: bool = True
	max_debug_history: int = 100
	enable_dev_sync: bool = True
	dev_server_url: str = DEFAULT_DEV_SERVER_URL
	reconnect_delay_ms: int = 3000
	max_reconnect_attempts: int | None = None

	def __post_init__(self) -> None:
		if self.max_debug_history < 0:
			raise ValueError("max_debug_history must be >= 0")
		if self.reconnect_delay_ms < 0:
			raise ValueError("reconnect_delay_ms must be >= 0")
		# Accept raw strings like "localStorage"
		if not isinstance(self.storage_type, StorageType):
			object.__setattr__(self, "storage_type", StorageType(self.storage_type))

	@property
	def persists(self) -> bool:
		return self.enable_persistence and self.storage_type != StorageType.MEMORY

	def for_production(self) -> "StateConfiguration":
		"""Copy with development-only features disabled."""
		return replace(self, enable_dev_sync=False, enable_debugging=False)

	@classmethod
	def from_env(cls) -> "StateConfiguration":
		"""Build a configuration from ``WEBUI_*`` environment variables."""
		config = cls(
			enable_persistence=_env_flag(ENV_WEBUI_PERSISTENCE, False),
			enable_debugging=_env_flag(ENV_WEBUI_DEBUG, True),
			dev_server_url=os.environ.get(
				ENV_WEBUI_DEV_SERVER_URL, DEFAULT_DEV_SERVER_URL
			),
		)
		storage = os.environ.get(ENV_WEBUI_STORAGE)
		if storage:
			try:
				config = replace(config, storage_type=StorageType(storage))
			except ValueError:
				logger.warning(
					"Ignoring unknown %s=%r, expected one of %s",
					ENV_WEBUI_STORAGE,
					storage,
					", ".join(s.value for s in StorageType),
				)
		max_history = os.environ.get(ENV_WEBUI_MAX_DEBUG_HISTORY)
		if max_history:
			try:
				config = replace(config, max_debug_history=int(max_history))
			except ValueError:
				logger.warning(
					"Ignoring invalid %s=%r", ENV_WEBUI_MAX_DEBUG_HISTORY, max_history
				)
		if os.environ.get(ENV_WEBUI_ENV) == "prod":
			config = config.for_production()
		return config
