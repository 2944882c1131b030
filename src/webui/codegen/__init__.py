from .codegen import Codegen, CodegenConfig, write_file_if_changed
from .generator import ButtonAction, JavaScriptGenerator

__all__ = [
	"ButtonAction",
	"Codegen",
	"CodegenConfig",
	"JavaScriptGenerator",
	"write_file_if_changed",
]
