from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class OriginType(Enum):
    COMFYUI = "comfyui"
    WEBUI = "webui"
    NONE = "none"


class Outcome(Enum):
    COMFYUI = "COMFYUI"
    WEBUI = "WEBUI"
    SKIPPED = "SKIPPED"
    ERROR = "ERROR"


ROUTED_OUTCOMES = {
    OriginType.COMFYUI: Outcome.COMFYUI,
    OriginType.WEBUI: Outcome.WEBUI,
}


@dataclass(frozen=True, slots=True)
class ProbeResult:
    stdout: str
    ok: bool


@dataclass(slots=True)
class SortOutcome:
    path: Path
    outcome: Outcome
    destination: Path | None = None
    detail: str | None = None
