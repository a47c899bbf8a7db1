"""Glue between the walker, the ELF probe, the matcher and the store."""
from __future__ import annotations

import logging
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Deque, Iterable, Iterator, Tuple

from .config import PROGRESS_INTERVAL
from .matcher import LibraryMatcher
from .probe import NOT_EXECUTABLE, UNKNOWN_ARCH, ProbeResult, probe_file
from .store import AggregationStore
from .walker import walk_files

logger = logging.getLogger(__name__)

Probe = Callable[[str], ProbeResult]

IN_FLIGHT_PER_JOB = 4


@dataclass
class ScanStats:
    files_seen: int = 0
    executables: int = 0
    matched: int = 0


def _safe(probe: Probe) -> Callable[[str], Tuple[str, ProbeResult]]:
    def run(path: str) -> Tuple[str, ProbeResult]:
        try:
            return path, probe(path)
        except Exception as exc:
            logger.warning("%s: probe failed: %s", path, exc)
            return path, NOT_EXECUTABLE
    return run


def _probed(paths: Iterable[str], probe: Probe, jobs: int) -> Iterator[Tuple[str, ProbeResult]]:
    run = _safe(probe)
    if jobs <= 1:
        for path in paths:
            yield run(path)
        return
    # at most jobs * IN_FLIGHT_PER_JOB paths are pulled ahead of the consumer;
    # futures are drained in submission order, whichever worker ends first
    window: Deque[Future] = deque()
    limit = jobs * IN_FLIGHT_PER_JOB
    with ThreadPoolExecutor(max_workers=jobs) as pool:
        for path in paths:
            window.append(pool.submit(run, path))
            if len(window) >= limit:
                yield window.popleft().result()
        while window:
            yield window.popleft().result()


def scan(
    root: str,
    matcher: LibraryMatcher,
    store: AggregationStore,
    probe: Probe = probe_file,
    jobs: int = 1,
) -> ScanStats:
    """Walk *root* and record every matching dependency into *store*."""
    stats = ScanStats()
    logger.info("Scanning directory: %s", root)
    logger.info("Looking for executables using: %s", " ".join(matcher.patterns))

    def counted(paths: Iterable[str]) -> Iterator[str]:
        for path in paths:
            stats.files_seen += 1
            yield path

    for path, result in _probed(counted(walk_files(root)), probe, jobs):
        if not result.is_executable:
            continue
        stats.executables += 1
        if stats.executables % PROGRESS_INTERVAL == 0:
            logger.info("Scanned %d executables so far, found %d matches",
                        stats.executables, stats.matched)
        if result.architecture == UNKNOWN_ARCH:
            logger.debug("%s: unsupported architecture, skipped", path)
            continue

        hit = False
        for pattern in matcher.matches(result.dependencies):
            hit = True
            store.record(result.architecture, pattern, path)
        if hit:
            stats.matched += 1

    logger.info("Scan finished: %d files, %d executables, %d matched",
                stats.files_seen, stats.executables, stats.matched)
    return stats
