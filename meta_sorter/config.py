from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_COMFY_DIR_NAME = "comfyui_img"
DEFAULT_WEBUI_DIR_NAME = "webui_image"

SUPPORTED_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "webp", "avif"})

# ComfyUI is checked first: its embeddings can also carry generic "parameters" text.
COMFY_MARKERS = ("ComfyUI", "workflow", "generation_data")
WEBUI_MARKERS = ("parameters", "Stable Diffusion", "NovelAI", "Software", "Steps: ")


@dataclass(frozen=True)
class SortConfig:
    inputs: list[Path] = field(default_factory=list)
    comfy_dir_name: str = DEFAULT_COMFY_DIR_NAME
    webui_dir_name: str = DEFAULT_WEBUI_DIR_NAME

    # False = move (default), True = copy
    copy: bool = False
    dry_run: bool = False

    # None = auto (os.cpu_count())
    max_workers: int | None = None

    comfy_markers: tuple[str, ...] = COMFY_MARKERS
    webui_markers: tuple[str, ...] = WEBUI_MARKERS

    @property
    def reserved_names(self) -> tuple[str, str]:
        return (self.comfy_dir_name, self.webui_dir_name)
