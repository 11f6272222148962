from __future__ import annotations

from pathlib import Path

import pytest

from meta_sorter.models import ProbeResult
from meta_sorter.probe import ProbeLaunchError

COMFY_TEXT = 'prompt: {"3": {"class_type": "KSampler"}}\nworkflow: {"nodes": []}'
WEBUI_TEXT = "parameters: 1girl, masterpiece\nSteps: 20, Sampler: Euler a, CFG scale: 7"


class FakeProbe:
    """Canned probe output keyed by file name. Unknown names fail the probe."""

    def __init__(self, outputs: dict[str, ProbeResult | Exception] | None = None) -> None:
        self.outputs = dict(outputs or {})
        self.calls: list[Path] = []

    def __call__(self, path: Path) -> ProbeResult:
        self.calls.append(path)
        value = self.outputs.get(path.name, ProbeResult(stdout="", ok=False))
        if isinstance(value, Exception):
            raise value
        return value


def comfy() -> ProbeResult:
    return ProbeResult(stdout=COMFY_TEXT, ok=True)


def webui() -> ProbeResult:
    return ProbeResult(stdout=WEBUI_TEXT, ok=True)


def launch_error() -> ProbeLaunchError:
    return ProbeLaunchError("Exec failed: [Errno 2] No such file or directory")


@pytest.fixture
def make_file():
    def _make(path: Path, data: bytes = b"\x89PNG\r\n\x1a\nfake") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path

    return _make
