"""
Command-line interface for WebUI state.
This module provides the CLI commands for generating state scripts and serving built sites.
"""
# typer relies on function calls used as default values
# pyright: reportCallInDefaultInitializer=false

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from webui.cli.helpers import load_site_from_target
from webui.devserver import DEFAULT_HOST, DEFAULT_PORT, DevServer
from webui.errors import SiteLoadError
from webui.registry import GlobalStateRegistry
from webui.site import Site
from webui.store import ScopedStateStore, StateScope

cli = typer.Typer(
	name="webui",
	help="WebUI - client-side state scripts for static sites",
	no_args_is_help=True,
)


def _load(console: Console, target: str) -> Site:
	try:
		return load_site_from_target(target)
	except SiteLoadError as exc:
		console.log(f"❌ {exc}")
		raise typer.Exit(1) from None


@cli.callback()
def main(
	verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
	if verbose:
		logging.basicConfig(
			level=logging.DEBUG,
			format="%(message)s",
			handlers=[RichHandler(console=Console(stderr=True))],
		)


@cli.command("generate")
def generate(
	site_target: str = typer.Argument(
		..., help="Site target: 'path.py[:var]' (default :site) or 'module:var'"
	),
	out: Path | None = typer.Option(
		None, "--out", "-o", help="Output directory (defaults to the site's)"
	),
	prod: bool = typer.Option(
		False, "--prod", help="Disable dev sync and debugging in generated scripts"
	),
):
	"""Generate the state scripts of a site."""
	console = Console()
	console.log(f"📁 Loading site from: {site_target}")
	site = _load(console, site_target)
	console.log(
		f"📋 Found {len(site.states())} states and {len(site.scripts)} property scripts"
	)

	paths = site.build(out, production=prod)
	for path in paths:
		console.log(f"  {path}")
	console.log(f"✅ Generated {len(paths)} scripts successfully!")


@cli.command("export-state")
def export_state(
	site_target: str = typer.Argument(
		..., help="Site target: 'path.py[:var]' (default :site) or 'module:var'"
	),
	scope: list[StateScope] | None = typer.Option(
		None, "--scope", "-s", help="Scope to export, repeatable (default: all)"
	),
):
	"""Print the site's state store as JSON."""
	site = _load(Console(stderr=True), site_target)
	typer.echo(site.export_state(scope or None))


@cli.command("dev")
def dev(
	directory: Path = typer.Argument(..., help="Built site directory to serve"),
	site_target: str | None = typer.Option(
		None, "--site", help="Site whose store receives browser state changes"
	),
	host: str = typer.Option(DEFAULT_HOST, "--host", help="Host uvicorn binds to"),
	port: int = typer.Option(DEFAULT_PORT, "--port", help="Port uvicorn binds to"),
):
	"""Serve a built site with live state sync."""
	console = Console()
	if not directory.is_dir():
		console.log(f"❌ Directory not found: {directory.absolute()}")
		raise typer.Exit(1)

	store: ScopedStateStore | None = None
	registry: GlobalStateRegistry | None = None
	if site_target is not None:
		site = _load(console, site_target)
		store, registry = site.store, site.registry

	console.log(f"🚀 Serving {directory} on http://{host}:{port} (sync at /ws)")
	DevServer(directory, store, registry).run(host=host, port=port)
