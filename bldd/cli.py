"""Command-line entry point for ``bldd``.

Example
-------
::

    $ bldd --lib pthread --lib libm.so --dir /usr/bin --format both
    Text report saved to bldd_report.txt
    PDF report saved to bldd_report.pdf
    Summary: Found 42 executables across 1 architectures

"""
from __future__ import annotations

import argparse
import logging
import os
import sys
import textwrap
from typing import Callable, Dict, List, Optional, Sequence

from .config import DEFAULT_OUTPUT, CapacityPolicy
from .matcher import LibraryMatcher
from .probe import silence_lief
from .report import write_pdf_report, write_text_report
from .scanner import scan
from .store import AggregationStore

logger = logging.getLogger("bldd")

FORMATS = {
    "txt": ("txt",),
    "pdf": ("pdf",),
    "both": ("txt", "pdf"),
}

RENDERERS: Dict[str, Callable] = {
    "txt": write_text_report,
    "pdf": write_pdf_report,
}

LABELS = {"txt": "Text", "pdf": "PDF"}

# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def _ceiling(value: str) -> Optional[int]:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError("must be >= 0")
    return number or None


def _library(value: str) -> str:
    if not value:
        raise argparse.ArgumentTypeError("library name must not be empty")
    return value


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    epilogue = textwrap.dedent(
        """
        Examples:
          bldd --lib libc.so.6 --dir /usr/bin --format txt
          bldd --lib libpthread.so --lib libm.so --dir /usr/local/bin
          bldd --lib libc.so.6 --dir /home --format pdf
        """
    )
    defaults = CapacityPolicy()
    p = argparse.ArgumentParser(
        prog="bldd",
        description="bldd (backward ldd) - Find executables that use specific shared libraries",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilogue,
    )
    p.add_argument(
        "-l", "--lib",
        dest="libs",
        action="append",
        required=True,
        type=_library,
        metavar="LIB",
        help="Shared library to search for (can be specified multiple times)",
    )
    p.add_argument(
        "-d", "--dir",
        required=True,
        help="Directory to scan for executables",
    )
    p.add_argument(
        "-f", "--format",
        choices=sorted(FORMATS),
        default="txt",
        help="Output report format (default: txt)",
    )
    p.add_argument(
        "-o", "--output",
        default=DEFAULT_OUTPUT,
        metavar="FILENAME",
        help=f"Output file name without extension (default: {DEFAULT_OUTPUT})",
    )
    p.add_argument(
        "-j", "--jobs",
        type=int,
        default=1,
        help="Number of files probed in parallel (default: 1)",
    )
    p.add_argument(
        "--max-archs",
        type=_ceiling,
        default=defaults.max_architectures,
        help=f"Architecture ceiling, 0 for none (default: {defaults.max_architectures})",
    )
    p.add_argument(
        "--max-libs",
        type=_ceiling,
        default=defaults.max_libraries,
        help=f"Libraries per architecture, 0 for none (default: {defaults.max_libraries})",
    )
    p.add_argument(
        "--max-execs",
        type=_ceiling,
        default=defaults.max_executables,
        help=f"Executables per library, 0 for none (default: {defaults.max_executables})",
    )
    p.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )
    args = p.parse_args(argv)
    if args.jobs < 1:
        p.error("--jobs must be at least 1")
    return args


def _check_scan_root(path: str) -> None:
    """Exit before scanning if *path* cannot be opened as a directory."""
    try:
        with os.scandir(path):
            pass
    except OSError as exc:
        sys.exit(f"Error: Cannot open directory {path}: {exc.strerror or exc}")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    silence_lief()
    _check_scan_root(args.dir)

    matcher = LibraryMatcher(args.libs)
    store = AggregationStore(CapacityPolicy(
        max_architectures=args.max_archs,
        max_libraries=args.max_libs,
        max_executables=args.max_execs,
    ))
    scan(args.dir, matcher, store, jobs=args.jobs)
    snapshot = store.snapshot_sorted()

    failed: List[str] = []
    for fmt in FORMATS[args.format]:
        try:
            output = RENDERERS[fmt](snapshot, args.output)
        except (OSError, RuntimeError, UnicodeError) as exc:
            logger.error("Cannot create %s report: %s", LABELS[fmt], exc)
            failed.append(fmt)
            continue
        print(f"{LABELS[fmt]} report saved to {output}")

    print(f"Summary: Found {store.total_executables} executables "
          f"across {store.architecture_count} architectures")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
