"""Command-line entry point: prettify a file or stdin, inspect the handoff store, serve the viewer."""
from __future__ import annotations

import logging
import sys
from typing import Optional

import click

from .config import load_settings
from .handoff_store import KEY_DETECTED, KEY_LOGS, HandoffStore
from .logging_setup import setup_logging
from .trigger import capture_selection, prettify_selection
from .viewer import badge_text

logger = logging.getLogger(__name__)


@click.group()
@click.option("--env-file", type=click.Path(dir_okay=False), default=None, help="Load settings from this .env file")
@click.option("--verbose", "-v", is_flag=True, help="Log at DEBUG level")
@click.pass_context
def cli(ctx: click.Context, env_file: Optional[str], verbose: bool) -> None:
    """Detect, pretty-print and view JSON or XML buried in log text."""
    settings = load_settings(env_file)
    setup_logging('DEBUG' if verbose else settings.log_level)
    ctx.obj = {"settings": settings}


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--store", "store_result", is_flag=True, help="Also write the result to the handoff store")
@click.pass_context
def detect(ctx: click.Context, source, store_result: bool) -> None:
    """Prettify SOURCE (a file, or stdin when omitted)."""
    settings = ctx.obj["settings"]
    raw_text = source.read()
    if store_result:
        result = capture_selection(raw_text, HandoffStore(settings.store_path))
    else:
        result = prettify_selection(raw_text)
    click.echo(badge_text(result.kind), err=True)
    click.echo(result.formatted)
    if result.kind == 'error':
        sys.exit(1)


@cli.command()
@click.pass_context
def show(ctx: click.Context) -> None:
    """Print the last stored result."""
    record = HandoffStore(ctx.obj["settings"].store_path).load()
    click.echo(badge_text(record[KEY_DETECTED]), err=True)
    click.echo(record[KEY_LOGS])


@cli.command()
@click.option("--port", type=int, default=None, help="Port for the Gradio server")
@click.pass_context
def serve(ctx: click.Context, port: Optional[int]) -> None:
    """Launch the viewer."""
    from app import build_demo

    settings = ctx.obj["settings"]
    demo = build_demo(settings)
    logger.info(f"Serving viewer (store: {settings.store_path})")
    demo.launch(server_port=port or settings.server_port)


def main() -> None:
    cli()
