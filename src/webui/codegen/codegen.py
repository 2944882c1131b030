import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from webui.codegen.generator import JavaScriptGenerator
from webui.config import StateConfiguration
from webui.properties import ScriptScope, StateScript
from webui.registry import StateHandle

logger = logging.getLogger(__name__)

GLOBAL_SCRIPT_NAME = ScriptScope.global_().file_name


@dataclass
class CodegenConfig:
	"""
	Configuration for script generation.

	Attributes:
	    output_dir (Path | str): Root directory of the built site.
	    scripts_dir (str): Directory for generated scripts, relative to ``output_dir``.
	    script_prefix (str): URL prefix under which the scripts are served.
	"""

	output_dir: Path | str = "dist"
	"""Root directory of the built site."""

	scripts_dir: str = "scripts"
	"""Directory for generated scripts, relative to ``output_dir``."""

	script_prefix: str = "/scripts"
	"""URL prefix under which the scripts are served."""

	@property
	def scripts_path(self) -> Path:
		return Path(self.output_dir) / self.scripts_dir

	def script_url(self, file_name: str) -> str:
		return f"{self.script_prefix.rstrip('/')}/{file_name}"


def write_file_if_changed(path: Path, content: str) -> bool:
	"""Write content to file only if it has changed. Returns whether it wrote."""
	if path.exists():
		try:
			if path.read_text(encoding="utf-8") == content:
				logger.debug(f"Unchanged, skipping {path}")
				return False
		except OSError:
			logger.warning(f"Can't read file {path.absolute()}")

	path.parent.mkdir(exist_ok=True, parents=True)
	path.write_text(content, encoding="utf-8")
	return True


class Codegen:
	"""Writes the state scripts of one build run into ``<output_dir>/<scripts_dir>``."""

	cfg: CodegenConfig
	state_config: StateConfiguration

	def __init__(
		self,
		config: CodegenConfig,
		state_config: StateConfiguration | None = None,
	) -> None:
		self.cfg = config
		self.state_config = state_config or StateConfiguration()
		self.generator = JavaScriptGenerator()

	@property
	def output_folder(self) -> Path:
		return self.cfg.scripts_path

	def generate_global_script(
		self,
		states: Mapping[str, StateHandle],
		scripts: Iterable[StateScript] = (),
	) -> Path:
		"""Runtime, every given state and the global property scripts, as ``state-global.js``."""
		parts = [self.generator.generate_complete_script(states, self.state_config)]
		parts.extend(s.generate_javascript() for s in scripts)
		path = self.output_folder / GLOBAL_SCRIPT_NAME
		write_file_if_changed(path, "\n\n".join(parts))
		return path

	def generate_state_script(self, script: StateScript) -> Path:
		path = self.output_folder / script.scope.file_name
		write_file_if_changed(path, script.generate_javascript())
		return path

	def generate_all(
		self,
		states: Mapping[str, StateHandle],
		scripts: Iterable[StateScript] = (),
	) -> list[Path]:
		scripts = list(scripts)
		global_scripts = [s for s in scripts if s.scope.kind == "global"]
		generated = [self.generate_global_script(states, global_scripts)]
		generated.extend(
			self.generate_state_script(s) for s in scripts if s.scope.kind != "global"
		)

		# Clean up scripts from previous builds that are no longer generated
		for path in self.output_folder.glob("state-*.js"):
			if path not in generated:
				try:
					path.unlink()
					logger.debug(f"Removed stale file: {path}")
				except OSError as e:
					logger.warning(f"Could not remove stale file {path}: {e}")
		return generated

	def script_tags(
		self,
		scripts: Iterable[StateScript] = (),
		document: str | None = None,
		elements: Iterable[str] = (),
	) -> list[str]:
		"""Tags for one page: the global script, then the scripts of ``document``
		and of the element IDs in ``elements``.

		Scripts of other pages are left out, they declare their own top-level
		names and ``render`` functions.
		"""
		wanted = {ScriptScope.local(e).file_name for e in elements}
		if document is not None:
			wanted.add(ScriptScope.document(document).file_name)
		names = [GLOBAL_SCRIPT_NAME]
		for script in scripts:
			name = script.scope.file_name
			if name in wanted and name not in names:
				names.append(name)
		return [f'<script src="{self.cfg.script_url(name)}"></script>' for name in names]
