from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv

from meta_sorter import __version__
from meta_sorter.config import (
    COMFY_MARKERS,
    DEFAULT_COMFY_DIR_NAME,
    DEFAULT_WEBUI_DIR_NAME,
    WEBUI_MARKERS,
    SortConfig,
)
from meta_sorter.runner import EXIT_ERROR, run_sync

app = typer.Typer(add_completion=False, help="Sort AI-generated images by the tool that made them")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


@app.command()
def run(
    inputs: List[Path] = typer.Argument(..., help="Files or directories to sort (directories are scanned recursively)."),
    comfy_dir_name: str = typer.Option(
        DEFAULT_COMFY_DIR_NAME, "--comfy-dir-name", "-c", help="Folder name for ComfyUI images."
    ),
    webui_dir_name: str = typer.Option(
        DEFAULT_WEBUI_DIR_NAME, "--webui-dir-name", "-w", help="Folder name for WebUI/NovelAI images."
    ),
    copy: bool = typer.Option(False, "--copy", help="Copy files instead of moving them"),
    workers: Optional[int] = typer.Option(None, "--workers", "-j", min=1, help="Worker threads. Default: CPU count"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Classify and report without touching any file"),
    comfy_marker: List[str] = typer.Option([], "--comfy-marker", help="Extra ComfyUI marker substring (repeatable)."),
    webui_marker: List[str] = typer.Option([], "--webui-marker", help="Extra WebUI marker substring (repeatable)."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    load_dotenv()
    _configure_logging(verbose)

    if comfy_dir_name == webui_dir_name:
        typer.echo("--comfy-dir-name and --webui-dir-name must differ.", err=True)
        raise typer.Exit(code=EXIT_ERROR)

    config = SortConfig(
        inputs=list(inputs),
        comfy_dir_name=comfy_dir_name,
        webui_dir_name=webui_dir_name,
        copy=copy,
        dry_run=dry_run,
        max_workers=workers,
        comfy_markers=(*COMFY_MARKERS, *comfy_marker),
        webui_markers=(*WEBUI_MARKERS, *webui_marker),
    )
    code = run_sync(config)
    raise typer.Exit(code=code)


@app.command()
def markers() -> None:
    """Show marker substrings in the order they are checked."""
    typer.echo(f"comfyui (checked first): {', '.join(repr(m) for m in COMFY_MARKERS)}")
    typer.echo(f"webui/novelai: {', '.join(repr(m) for m in WEBUI_MARKERS)}")


@app.command()
def version() -> None:
    typer.echo(f"meta_sorter {__version__}")


if __name__ == "__main__":
    app()
