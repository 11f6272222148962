from __future__ import annotations

from typing import Iterable

from meta_sorter.config import COMFY_MARKERS, WEBUI_MARKERS
from meta_sorter.models import OriginType, ProbeResult


def _contains_any(text: str, markers: Iterable[str]) -> bool:
    return any(marker in text for marker in markers)


def classify(
    result: ProbeResult,
    *,
    comfy_markers: Iterable[str] = COMFY_MARKERS,
    webui_markers: Iterable[str] = WEBUI_MARKERS,
) -> OriginType:
    """Map probe output to an origin type.

    A failed probe means "no usable metadata" and is never inspected.
    ComfyUI markers win over WebUI markers when both are present.
    Matching is case-sensitive substring containment.
    """
    if not result.ok:
        return OriginType.NONE

    text = result.stdout
    if _contains_any(text, comfy_markers):
        return OriginType.COMFYUI
    if _contains_any(text, webui_markers):
        return OriginType.WEBUI
    return OriginType.NONE
