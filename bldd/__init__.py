"""bldd – Backward ldd

Scan a directory tree for ELF executables and report which of them depend on
a chosen set of shared libraries, grouped by architecture and ordered by the
number of executables that reference each library.
"""
from __future__ import annotations

from .config import CapacityPolicy
from .matcher import LibraryMatcher, canonicalize
from .probe import ProbeResult, probe_file
from .scanner import ScanStats, scan
from .store import AggregationStore, ArchitectureReport, LibraryReport
from .walker import walk_files

__version__ = "1.0.0"

__all__ = [
    "AggregationStore",
    "ArchitectureReport",
    "CapacityPolicy",
    "LibraryMatcher",
    "LibraryReport",
    "ProbeResult",
    "ScanStats",
    "canonicalize",
    "probe_file",
    "scan",
    "walk_files",
]
