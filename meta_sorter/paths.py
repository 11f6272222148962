from __future__ import annotations

import os
import platform
import sys
from pathlib import Path

PROBE_ENV_VAR = "FAST_META_PATH"
PROBE_BASENAME = "fast_meta"


def _expand(path_str: str) -> Path:
    return Path(path_str.replace("$HOME", str(Path.home())).replace('"', "")).expanduser()


def probe_executable_name() -> str:
    if platform.system().lower() == "windows":
        return f"{PROBE_BASENAME}.exe"
    return PROBE_BASENAME


def program_dirs() -> list[Path]:
    """Directories that count as "next to the running program"."""
    candidates: list[Path] = []
    if sys.argv and sys.argv[0]:
        candidates.append(Path(sys.argv[0]).resolve().parent)
    if sys.executable:
        candidates.append(Path(sys.executable).resolve().parent)
        # venv interpreters are often symlinks; console scripts live beside the link.
        candidates.append(Path(sys.executable).parent)

    unique: list[Path] = []
    for p in candidates:
        if p not in unique:
            unique.append(p)
    return unique


def find_probe() -> Path | None:
    env_path = os.getenv(PROBE_ENV_VAR)
    if env_path:
        p = _expand(env_path)
        return p.resolve() if p.is_file() else None

    name = probe_executable_name()
    for directory in program_dirs():
        p = directory / name
        if p.is_file():
            return p
    return None
