"""Recursive discovery of regular files."""
from __future__ import annotations

import logging
import os
from typing import Iterator, List

logger = logging.getLogger(__name__)


def walk_files(root: str) -> Iterator[str]:
    """Lazily yield every regular file below *root*.

    Entries are inspected without following symlinks, so a symlink is neither
    descended into nor yielded. Directories that cannot be opened are logged
    and skipped; entries that cannot be stat'd are skipped silently.
    Within a directory, entries are visited in name order.
    """
    pending: List[str] = [root]
    while pending:
        current = pending.pop()
        try:
            with os.scandir(current) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError as exc:
            logger.warning("Cannot open directory: %s (%s)", current, exc.strerror or exc)
            continue

        subdirs: List[str] = []
        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    subdirs.append(entry.path)
                elif entry.is_file(follow_symlinks=False):
                    yield entry.path
            except OSError:
                continue
        # reversed so the stack pops them in name order
        pending.extend(reversed(subdirs))
