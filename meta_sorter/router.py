from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from meta_sorter.config import SortConfig
from meta_sorter.models import OriginType

LOGGER = logging.getLogger(__name__)


class RouteError(Exception):
    """Placing a file into its destination folder failed."""


def folder_name_for(origin: OriginType, config: SortConfig) -> str:
    if origin == OriginType.COMFYUI:
        return config.comfy_dir_name
    if origin == OriginType.WEBUI:
        return config.webui_dir_name
    raise ValueError(f"no destination folder for origin {origin!r}")


def destination_dir(path: Path, origin: OriginType, config: SortConfig) -> Path:
    """Sorted folders always live inside the file's own parent directory.

    A file whose parent already carries the origin's folder name is
    considered placed, so re-running over sorted output does not nest
    ``comfyui_img/comfyui_img``.
    """
    name = folder_name_for(origin, config)
    if path.parent.name == name:
        return path.parent
    return path.parent / name


def _same_path(a: Path, b: Path) -> bool:
    return os.path.abspath(a) == os.path.abspath(b)


def _copy(src: Path, dest: Path) -> None:
    # copyfile refuses a directory at dest instead of copying into it.
    shutil.copyfile(src, dest)
    shutil.copystat(src, dest)


def _move(src: Path, dest: Path) -> None:
    try:
        os.replace(src, dest)
        return
    except OSError as exc:
        # Typically a cross-device move.
        LOGGER.debug("rename %s -> %s failed (%s), falling back to copy", src, dest, exc)

    try:
        _copy(src, dest)
    except OSError as exc:
        raise RouteError(f"Fallback copy failed: {exc}") from exc

    # A stray duplicate at the source is preferred over losing data.
    try:
        src.unlink()
    except OSError as exc:
        LOGGER.debug("could not remove %s after fallback copy: %s", src, exc)


def route(path: Path, origin: OriginType, config: SortConfig) -> Path:
    """Move or copy ``path`` into its origin folder and return the destination.

    Existing files at the destination are overwritten. A file that already
    sits in its destination folder is left untouched.
    """
    dest_dir = destination_dir(path, origin, config)
    dest_path = dest_dir / path.name

    if config.dry_run:
        return dest_path

    try:
        dest_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise RouteError(f"Create dir failed: {exc}") from exc

    if _same_path(path, dest_path):
        return dest_path

    if config.copy:
        try:
            _copy(path, dest_path)
        except OSError as exc:
            raise RouteError(f"Copy failed: {exc}") from exc
    else:
        _move(path, dest_path)

    return dest_path
