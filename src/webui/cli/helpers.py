from __future__ import annotations

import importlib
import importlib.util
import sys
from pathlib import Path
from typing import Literal, TypedDict

from webui.errors import SiteLoadError
from webui.site import Site

DEFAULT_SITE_VAR = "site"


class ParsedSiteTarget(TypedDict):
	mode: Literal["path", "module"]
	module_name: str
	site_var: str
	file_path: Path | None


def parse_site_target(target: str) -> ParsedSiteTarget:
	"""Parse ``path/to/site.py[:var]``, ``path/to/pkg[:var]`` or ``module.path:var``."""
	path_part, sep, var = target.rpartition(":")
	# No colon, or a Windows drive letter
	if not sep or (len(path_part) == 1 and path_part.isalpha()):
		path_part, var = target, DEFAULT_SITE_VAR
	var = var or DEFAULT_SITE_VAR

	path = Path(path_part)
	if path.is_dir() and (path / "__init__.py").exists():
		path = path / "__init__.py"
	if path.suffix == ".py" or path.exists():
		file_path = path.resolve()
		module_name = (
			file_path.parent.name if file_path.name == "__init__.py" else file_path.stem
		)
		return {
			"mode": "path",
			"module_name": module_name,
			"site_var": var,
			"file_path": file_path,
		}
	return {
		"mode": "module",
		"module_name": path_part,
		"site_var": var,
		"file_path": None,
	}


def load_site_from_target(target: str) -> Site:
	parsed = parse_site_target(target)
	if parsed["mode"] == "module":
		try:
			module = importlib.import_module(parsed["module_name"])
		except ImportError as e:
			raise SiteLoadError(target, str(e)) from e
	else:
		file_path = parsed["file_path"]
		assert file_path is not None
		if not file_path.exists():
			raise SiteLoadError(target, f"file not found: {file_path}")
		spec = importlib.util.spec_from_file_location(parsed["module_name"], file_path)
		if spec is None or spec.loader is None:
			raise SiteLoadError(target, f"could not load module from {file_path}")
		module = importlib.util.module_from_spec(spec)
		# Let the site import its siblings
		sys.path.insert(0, str(file_path.parent))
		try:
			spec.loader.exec_module(module)
		except Exception as e:
			raise SiteLoadError(target, f"{type(e).__name__}: {e}") from e
		finally:
			if str(file_path.parent) in sys.path:
				sys.path.remove(str(file_path.parent))

	site = getattr(module, parsed["site_var"], None)
	if not isinstance(site, Site):
		raise SiteLoadError(
			target, f"no webui.Site instance named '{parsed['site_var']}'"
		)
	return site
