from __future__ import annotations

import sys
from pathlib import Path

import pytest

from meta_sorter import paths
from meta_sorter.paths import find_probe, probe_executable_name
from meta_sorter.probe import ProbeLaunchError, SubprocessProbe

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="uses /bin/sh scripts")


def _script(path: Path, body: str) -> Path:
    path.write_text("#!/bin/sh\n" + body, encoding="utf-8")
    path.chmod(0o755)
    return path


@posix_only
def test_captures_stdout_and_passes_path(tmp_path):
    exe = _script(tmp_path / "probe", 'echo "workflow for $1"\necho "noise" >&2\n')
    target = tmp_path / "a b.png"

    result = SubprocessProbe(exe)(target)

    assert result.ok is True
    assert result.stdout.strip() == f"workflow for {target}"
    assert "noise" not in result.stdout


@posix_only
def test_nonzero_exit_is_not_an_error(tmp_path):
    exe = _script(tmp_path / "probe", 'echo "parameters"\nexit 3\n')

    result = SubprocessProbe(exe)(tmp_path / "a.png")

    assert result.ok is False
    assert "parameters" in result.stdout


@posix_only
def test_invalid_utf8_is_replaced(tmp_path):
    exe = _script(tmp_path / "probe", "printf 'Steps: \\377\\376 20'\n")

    result = SubprocessProbe(exe)(tmp_path / "a.png")

    assert result.ok is True
    assert result.stdout.startswith("Steps: ")
    assert "�" in result.stdout


def test_missing_executable_raises_launch_error(tmp_path):
    probe = SubprocessProbe(tmp_path / "gone" / probe_executable_name())

    with pytest.raises(ProbeLaunchError, match="Exec failed"):
        probe(tmp_path / "a.png")


def test_find_probe_from_env(tmp_path, monkeypatch):
    exe = tmp_path / "tools" / "my_probe"
    exe.parent.mkdir()
    exe.write_bytes(b"")
    monkeypatch.setenv(paths.PROBE_ENV_VAR, str(exe))

    assert find_probe() == exe.resolve()


def test_find_probe_env_pointing_nowhere_is_missing(tmp_path, monkeypatch):
    monkeypatch.setenv(paths.PROBE_ENV_VAR, str(tmp_path / "nope"))

    assert find_probe() is None


def test_find_probe_next_to_program(tmp_path, monkeypatch):
    monkeypatch.delenv(paths.PROBE_ENV_VAR, raising=False)
    (tmp_path / probe_executable_name()).write_bytes(b"")
    monkeypatch.setattr(paths.sys, "argv", [str(tmp_path / "meta-sorter")])

    assert find_probe() == tmp_path.resolve() / probe_executable_name()


def test_find_probe_missing(tmp_path, monkeypatch):
    monkeypatch.delenv(paths.PROBE_ENV_VAR, raising=False)
    monkeypatch.setattr(paths, "program_dirs", lambda: [tmp_path])

    assert find_probe() is None


def test_probe_name_per_platform(monkeypatch):
    monkeypatch.setattr(paths.platform, "system", lambda: "Windows")
    assert probe_executable_name() == "fast_meta.exe"
    monkeypatch.setattr(paths.platform, "system", lambda: "Linux")
    assert probe_executable_name() == "fast_meta"
