from __future__ import annotations

import logging
import os
import queue
import sys
import threading
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable

from meta_sorter.classify import classify
from meta_sorter.config import SortConfig
from meta_sorter.models import ROUTED_OUTCOMES, OriginType, Outcome, SortOutcome
from meta_sorter.paths import find_probe, probe_executable_name
from meta_sorter.probe import MetadataProbe, ProbeLaunchError, SubprocessProbe
from meta_sorter.router import RouteError, route
from meta_sorter.walker import discover

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 2

WORKERS_ENV_VAR = "META_SORTER_WORKERS"


@dataclass
class RunReport:
    total: int
    counts: Counter
    dry_run: bool = False


def _print_error(outcome: SortOutcome) -> None:
    # One write per line so concurrent workers do not interleave.
    sys.stderr.write(f"[ERROR] {outcome.path}: {outcome.detail}\n")
    sys.stderr.flush()


def process_one(path: Path, config: SortConfig, probe: MetadataProbe) -> SortOutcome:
    """Probe, classify and route a single candidate. Never raises for I/O."""
    try:
        result = probe(path)
        origin = classify(
            result,
            comfy_markers=config.comfy_markers,
            webui_markers=config.webui_markers,
        )
        if origin == OriginType.NONE:
            return SortOutcome(path=path, outcome=Outcome.SKIPPED)

        dest = route(path, origin, config)
    except (ProbeLaunchError, RouteError, OSError) as exc:
        return SortOutcome(path=path, outcome=Outcome.ERROR, detail=str(exc))

    return SortOutcome(path=path, outcome=ROUTED_OUTCOMES[origin], destination=dest)


def resolve_workers(requested: int | None, candidate_count: int) -> int:
    workers = requested
    if workers is None:
        env_workers = os.getenv(WORKERS_ENV_VAR)
        if env_workers:
            try:
                workers = int(env_workers)
            except ValueError:
                LOGGER.warning("ignoring invalid %s=%r", WORKERS_ENV_VAR, env_workers)
    if workers is None or workers < 1:
        workers = os.cpu_count() or 1
    return max(1, min(workers, candidate_count))


def process_candidates(
    candidates: Iterable[Path],
    config: SortConfig,
    probe: MetadataProbe,
    *,
    on_error: Callable[[SortOutcome], None] = _print_error,
) -> Counter:
    """Fan candidates out to a bounded pool of worker threads.

    Each candidate is taken from the queue by exactly one worker. The
    counter is the only shared state and is updated under a lock.
    """
    work: queue.Queue[Path] = queue.Queue()
    for c in candidates:
        work.put_nowait(c)

    counts: Counter = Counter({outcome: 0 for outcome in Outcome})
    lock = threading.Lock()

    def worker() -> None:
        while True:
            try:
                path = work.get_nowait()
            except queue.Empty:
                return

            try:
                outcome = process_one(path, config, probe)
            except Exception as exc:  # noqa: BLE001
                outcome = SortOutcome(
                    path=path, outcome=Outcome.ERROR, detail=f"{type(exc).__name__}: {exc}"
                )

            if outcome.outcome == Outcome.ERROR:
                on_error(outcome)
            else:
                LOGGER.debug("%s -> %s (%s)", path, outcome.outcome.value, outcome.destination)

            with lock:
                counts[outcome.outcome] += 1
            work.task_done()

    n_workers = resolve_workers(config.max_workers, work.qsize())
    threads = [threading.Thread(target=worker, name=f"sorter-{i}") for i in range(n_workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return counts


def _build_summary(report: RunReport) -> list[str]:
    rule = "-" * 50
    lines = [
        rule,
        f"Total Scanned: {report.total}",
        f"  -> ComfyUI: {report.counts[Outcome.COMFYUI]}",
        f"  -> WebUI/NovelAI: {report.counts[Outcome.WEBUI]}",
        f"  -> Skipped: {report.counts[Outcome.SKIPPED]}",
        f"  -> Errors: {report.counts[Outcome.ERROR]}",
    ]
    if report.dry_run:
        lines.append("  (dry run: no files were moved or copied)")
    lines.append(rule)
    return lines


def run_once(config: SortConfig, probe: MetadataProbe) -> RunReport:
    print("Scanning inputs (Skipping output folders)...")
    candidates = discover(config.inputs, config.reserved_names)

    total = len(candidates)
    print(f"Found {total} images. Processing...")

    counts = process_candidates(candidates, config, probe)
    report = RunReport(total=total, counts=counts, dry_run=config.dry_run)

    print("\n".join(_build_summary(report)))
    return report


def run_sync(config: SortConfig) -> int:
    """Resolve the probe, then scan and sort.

    A missing probe is the only fatal condition; per-file errors are
    reported but do not change the exit code.
    """
    probe_path = find_probe()
    if probe_path is None:
        print(f"[ERROR] {probe_executable_name()} not found next to the program", file=sys.stderr)
        return EXIT_ERROR

    LOGGER.info("using probe %s", probe_path)
    run_once(config, SubprocessProbe(probe_path))
    return EXIT_OK
