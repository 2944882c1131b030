from webui.codegen.codegen import Codegen, CodegenConfig
from webui.codegen.generator import ButtonAction, JavaScriptGenerator
from webui.config import StateConfiguration, StorageType
from webui.errors import SiteLoadError, StateTypeError, WebUIError
from webui.markup import (
	DOMProperty,
	RawMarkup,
	bind_to_state,
	include_state_management,
	on_click,
	state_checkbox,
	state_data_attributes,
	state_input,
	state_text,
)
from webui.properties import (
	ArrayState,
	BooleanState,
	NumberState,
	ObjectState,
	ScriptScope,
	StateAction,
	StateProperty,
	StateScript,
	StringState,
)
from webui.registry import GlobalStateRegistry, ScopedHandle, StateHandle
from webui.site import Site
from webui.state import Binding, State
from webui.store import ScopedStateStore, StateScope, SubscriptionToken
from webui.values import JsonBlob

__all__ = [
	"ArrayState",
	"Binding",
	"BooleanState",
	"ButtonAction",
	"Codegen",
	"CodegenConfig",
	"DOMProperty",
	"GlobalStateRegistry",
	"JavaScriptGenerator",
	"JsonBlob",
	"NumberState",
	"ObjectState",
	"RawMarkup",
	"ScopedHandle",
	"ScopedStateStore",
	"ScriptScope",
	"Site",
	"SiteLoadError",
	"State",
	"StateAction",
	"StateConfiguration",
	"StateHandle",
	"StateProperty",
	"StateScope",
	"StateScript",
	"StateTypeError",
	"StorageType",
	"StringState",
	"SubscriptionToken",
	"WebUIError",
	"bind_to_state",
	"include_state_management",
	"on_click",
	"state_checkbox",
	"state_data_attributes",
	"state_input",
	"state_text",
]
