from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol

from meta_sorter.models import ProbeResult

LOGGER = logging.getLogger(__name__)


class ProbeLaunchError(Exception):
    """The probe process could not be started for one file."""


class MetadataProbe(Protocol):
    def __call__(self, path: Path) -> ProbeResult: ...


class SubprocessProbe:
    """Runs ``<executable> <path>`` and captures its output.

    A non-zero exit is reported as ``ok=False`` rather than raised; only a
    failure to spawn the process is an error. There is no timeout: a hung
    probe hangs the calling worker.
    """

    def __init__(self, executable: Path) -> None:
        self.executable = Path(executable)

    def __call__(self, path: Path) -> ProbeResult:
        try:
            proc = subprocess.run(
                [str(self.executable), str(path)],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=False,
            )
        except OSError as exc:
            raise ProbeLaunchError(f"Exec failed: {exc}") from exc

        if proc.returncode != 0:
            LOGGER.debug(
                "probe exit=%s for %s: %s",
                proc.returncode,
                path,
                proc.stderr.decode("utf-8", errors="replace").strip(),
            )
        return ProbeResult(
            stdout=proc.stdout.decode("utf-8", errors="replace"),
            ok=proc.returncode == 0,
        )
