from __future__ import annotations


class WebUIError(Exception):
	"""Base class for errors raised by webui."""


class StateTypeError(WebUIError, TypeError):
	"""A state key was redeclared with an incompatible value type."""


class SiteLoadError(WebUIError):
	"""A site target given on the command line could not be loaded."""

	target: str

	def __init__(self, target: str, message: str) -> None:
		super().__init__(f"Could not load '{target}': {message}")
		self.target = target
