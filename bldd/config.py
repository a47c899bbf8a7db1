"""Tunable defaults for a scan."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_OUTPUT = "bldd_report"
REPORT_TITLE = "Report on dynamic used libraries by ELF executables"
# Emit a progress line every N probed executables
PROGRESS_INTERVAL = 100


@dataclass(frozen=True)
class CapacityPolicy:
    """Ceilings for the aggregation store.

    Once a ceiling is hit, further facts of that kind are dropped and an error
    is logged once for the offending bucket; the scan itself carries on.
    ``None`` disables a ceiling.
    """

    max_architectures: Optional[int] = 4
    # per architecture
    max_libraries: Optional[int] = 100
    # per library
    max_executables: Optional[int] = 10000

    @classmethod
    def unbounded(cls) -> "CapacityPolicy":
        return cls(max_architectures=None, max_libraries=None, max_executables=None)
