"""
Development server for built sites.

Serves a build directory and a ``/ws`` WebSocket endpoint speaking the
state-sync protocol of the generated runtime (see ``webui.messages``).
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any

import uvicorn
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.staticfiles import StaticFiles

from webui.messages import ServerMessage, StateChangeMessage, reload, state_update
from webui.registry import GlobalStateRegistry
from webui.state import State
from webui.store import ScopedStateStore, StateScope

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8080


def parse_state_id(state_id: str) -> tuple[StateScope, str] | None:
	"""Split a ``"scope.key"`` ID, or ``None`` if it does not name a store cell."""
	scope_name, sep, key = state_id.partition(".")
	if not sep or not key:
		return None
	try:
		return StateScope(scope_name), key
	except ValueError:
		return None


class DevServer:
	"""FastAPI app with static files and live state sync.

	Browsers report ``stateChange`` messages. The change is applied to the
	``State`` registered under that ID in the attached registry, or else to the
	attached store when the ID names one of its cells (``"scope.key"``). It is
	forwarded to every other connected browser as a ``stateUpdate``.
	"""

	directory: Path
	store: ScopedStateStore | None
	registry: GlobalStateRegistry | None
	app: FastAPI

	def __init__(
		self,
		directory: Path | str,
		store: ScopedStateStore | None = None,
		registry: GlobalStateRegistry | None = None,
	) -> None:
		self.directory = Path(directory)
		self.store = store
		self.registry = registry
		self._clients: set[WebSocket] = set()
		self._lock = threading.Lock()
		self.app = FastAPI(title="WebUI dev server")
		self.app.add_api_websocket_route("/ws", self._websocket_endpoint)
		# Mounted last so it does not shadow /ws
		self.app.mount(
			"/", StaticFiles(directory=self.directory, html=True), name="site"
		)

	@property
	def client_count(self) -> int:
		return len(self._clients)

	async def _websocket_endpoint(self, websocket: WebSocket) -> None:
		await websocket.accept()
		with self._lock:
			self._clients.add(websocket)
		logger.debug("Dev client connected (%d total)", len(self._clients))
		try:
			while True:
				text = await websocket.receive_text()
				try:
					message = json.loads(text)
				except ValueError:
					logger.warning("Ignoring non-JSON dev client message: %r", text)
					continue
				await self._handle_message(websocket, message)
		except WebSocketDisconnect:
			pass
		finally:
			with self._lock:
				self._clients.discard(websocket)
			logger.debug("Dev client disconnected (%d left)", len(self._clients))

	async def _handle_message(self, sender: WebSocket, message: Any) -> None:
		if not isinstance(message, dict) or message.get("type") != "stateChange":
			logger.warning("Ignoring unexpected dev client message: %r", message)
			return
		state_id = message.get("stateId")
		if not isinstance(state_id, str):
			logger.warning("Ignoring stateChange without a stateId: %r", message)
			return
		change: StateChangeMessage = {
			"type": "stateChange",
			"stateId": state_id,
			"value": message.get("value"),
		}
		self.apply_state_change(change)
		await self.broadcast(state_update(state_id, change["value"]), exclude=sender)

	def apply_state_change(self, message: StateChangeMessage) -> bool:
		"""Apply a browser change to the attached state. Returns whether it applied."""
		state_id = message["stateId"]
		if self.registry is not None:
			handle = self.registry.get(state_id)
			if isinstance(handle, State):
				handle.set(message["value"])
				return True
		if self.store is None:
			return False
		parsed = parse_state_id(state_id)
		if parsed is None:
			return False
		scope, key = parsed
		self.store.update(key, scope, message["value"])
		return True

	async def broadcast(
		self, message: ServerMessage, exclude: WebSocket | None = None
	) -> int:
		"""Send ``message`` to every connected client. Returns how many received it."""
		with self._lock:
			clients = [c for c in self._clients if c is not exclude]
		delivered = 0
		for client in clients:
			try:
				await client.send_json(message)
				delivered += 1
			except (WebSocketDisconnect, RuntimeError):
				logger.debug("Dropping disconnected dev client")
				with self._lock:
					self._clients.discard(client)
		return delivered

	async def notify_reload(self) -> int:
		return await self.broadcast(reload())

	def run(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
		uvicorn.run(self.app, host=host, port=port)
