"""In-memory aggregation of architecture -> library -> executables."""
from __future__ import annotations

import logging
import threading
from typing import Dict, List, NamedTuple, Optional, Set, Tuple

from .config import CapacityPolicy
from .probe import UNKNOWN_ARCH

logger = logging.getLogger(__name__)


class LibraryReport(NamedTuple):
    name: str
    executables: Tuple[str, ...]

    @property
    def count(self) -> int:
        return len(self.executables)


class ArchitectureReport(NamedTuple):
    name: str
    libraries: Tuple[LibraryReport, ...]


class _LibraryBucket:
    __slots__ = ("name", "executables", "_seen")

    def __init__(self, name: str) -> None:
        self.name = name
        self.executables: List[str] = []
        self._seen: Set[str] = set()

    def __contains__(self, path: str) -> bool:
        return path in self._seen

    def add(self, path: str) -> None:
        self._seen.add(path)
        self.executables.append(path)


class AggregationStore:
    """Deduplicated facts collected during a scan.

    Every fact is an (architecture, library pattern, executable path) triple
    coming from an observed DT_NEEDED entry. Buckets remember the order in
    which they were first seen; that order is the tie-break when ranking.
    """

    def __init__(self, policy: Optional[CapacityPolicy] = None) -> None:
        self.policy = policy if policy is not None else CapacityPolicy()
        self._archs: Dict[str, Dict[str, _LibraryBucket]] = {}
        self._total = 0
        # buckets that already reported hitting a ceiling
        self._reported: Set[Tuple[str, ...]] = set()
        self._lock = threading.Lock()

    @property
    def total_executables(self) -> int:
        """Number of distinct (library, executable) insertions."""
        return self._total

    @property
    def architecture_count(self) -> int:
        return len(self._archs)

    def __len__(self) -> int:
        return len(self._archs)

    def __contains__(self, architecture: str) -> bool:
        return architecture in self._archs

    def _overflow(self, key: Tuple[str, ...], message: str, *args) -> None:
        if key not in self._reported:
            self._reported.add(key)
            logger.error(message, *args)

    def record(self, architecture: str, library: str, executable: str) -> bool:
        """Store one fact. Returns True only when it was newly inserted."""
        if architecture == UNKNOWN_ARCH:
            return False
        policy = self.policy
        with self._lock:
            libraries = self._archs.get(architecture)
            if libraries is None:
                if (policy.max_architectures is not None
                        and len(self._archs) >= policy.max_architectures):
                    self._overflow(("arch", architecture), "Too many architectures, dropping %s", architecture)
                    return False
                libraries = self._archs[architecture] = {}

            bucket = libraries.get(library)
            if bucket is None:
                if (policy.max_libraries is not None
                        and len(libraries) >= policy.max_libraries):
                    self._overflow(("lib", architecture),
                                   "Too many libraries for architecture %s", architecture)
                    return False
                bucket = libraries[library] = _LibraryBucket(library)

            if executable in bucket:
                return False
            if (policy.max_executables is not None
                    and len(bucket.executables) >= policy.max_executables):
                self._overflow(("exec", architecture, library),
                               "Too many executables for library %s (%s)", library, architecture)
                return False
            bucket.add(executable)
            self._total += 1
            return True

    def snapshot_sorted(self) -> Tuple[ArchitectureReport, ...]:
        """Architectures in first-seen order, libraries by descending count.

        Libraries with equal counts keep their first-seen order (the sort is
        stable), so the same input always produces the same snapshot.
        """
        with self._lock:
            reports = []
            for arch, libraries in self._archs.items():
                ranked = sorted(libraries.values(), key=lambda b: len(b.executables), reverse=True)
                reports.append(ArchitectureReport(
                    arch,
                    tuple(LibraryReport(b.name, tuple(b.executables)) for b in ranked),
                ))
            return tuple(reports)
