from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator

from meta_sorter.config import SUPPORTED_EXTENSIONS

LOGGER = logging.getLogger(__name__)


def is_supported(path: Path) -> bool:
    name = path.name
    if "." not in name:
        return False
    return name.rsplit(".", 1)[-1].lower() in SUPPORTED_EXTENSIONS


def _log_walk_error(exc: OSError) -> None:
    # Discovery failures are not file-processing failures.
    LOGGER.debug("skip unreadable entry: %s", exc)


def iter_candidates(root: Path, reserved_names: Iterable[str]) -> Iterator[Path]:
    """Yield candidate images under ``root``.

    - A file root is yielded as-is.
    - A directory root is walked top-down; directories named like a
      destination folder are pruned before descending.
    - Anything else (missing paths, sockets, ...) yields nothing.
    """
    reserved = set(reserved_names)

    try:
        if root.is_file():
            yield root
            return
        if not root.is_dir():
            return
    except OSError as exc:
        _log_walk_error(exc)
        return

    if root.name in reserved:
        return

    for dirpath, dirs, files in os.walk(root, topdown=True, onerror=_log_walk_error):
        dirs[:] = [d for d in dirs if d not in reserved]

        current = Path(dirpath)
        for name in files:
            fp = current / name
            try:
                if fp.is_symlink() or not fp.is_file():
                    continue
            except OSError as exc:
                _log_walk_error(exc)
                continue
            if is_supported(fp):
                yield fp


def discover(roots: Iterable[Path], reserved_names: Iterable[str]) -> list[Path]:
    """Collect every candidate up front, dropping paths reached twice."""
    reserved = tuple(reserved_names)
    seen: set[Path] = set()
    candidates: list[Path] = []

    for root in roots:
        for fp in iter_candidates(Path(root), reserved):
            key = Path(os.path.abspath(fp))
            if key in seen:
                continue
            seen.add(key)
            candidates.append(fp)
    return candidates
