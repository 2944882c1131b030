from typing import Any, Literal, TypedDict


# ====================
# Server messages
# ====================
class StateUpdateMessage(TypedDict):
	type: Literal["stateUpdate"]
	stateId: str
	value: Any


class ScopedStateUpdateMessage(TypedDict):
	type: Literal["state-update"]
	scope: str
	key: str
	value: Any


class ReloadMessage(TypedDict):
	type: Literal["reload"]


ServerMessage = StateUpdateMessage | ScopedStateUpdateMessage | ReloadMessage


# ====================
# Client messages
# ====================
class StateChangeMessage(TypedDict):
	type: Literal["stateChange"]
	stateId: str
	value: Any


ClientMessage = StateChangeMessage


def state_update(state_id: str, value: Any) -> StateUpdateMessage:
	return {"type": "stateUpdate", "stateId": state_id, "value": value}


def scoped_state_update(scope: str, key: str, value: Any) -> ScopedStateUpdateMessage:
	return {"type": "state-update", "scope": scope, "key": key, "value": value}


def reload() -> ReloadMessage:
	return {"type": "reload"}
