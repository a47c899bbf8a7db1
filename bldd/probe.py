"""ELF classification using lief.

Analysis is done with `lief <https://lief.quarkslab.com/>`_ rather than by
scraping ``readelf`` output, so file names never reach a shell.
"""
from __future__ import annotations

import logging
import os
from typing import Dict, NamedTuple, Tuple

import lief

logger = logging.getLogger(__name__)

ELF_MAGIC = b"\x7fELF"
UNKNOWN_ARCH = "unknown"

ARCH_NAMES: Dict[int, str] = {
    3: "x86",          # EM_386
    62: "x86_64",      # EM_X86_64
    40: "armv7",       # EM_ARM
    183: "aarch64",    # EM_AARCH64
}


class ProbeResult(NamedTuple):
    is_executable: bool
    architecture: str = UNKNOWN_ARCH
    dependencies: Tuple[str, ...] = ()


NOT_EXECUTABLE = ProbeResult(False)


def architecture_for_machine(machine: int) -> str:
    return ARCH_NAMES.get(machine, UNKNOWN_ARCH)


def has_elf_magic(path: str) -> bool:
    with open(path, "rb") as fp:
        return fp.read(4) == ELF_MAGIC


def probe_file(path: str) -> ProbeResult:
    """Classify *path* and list its DT_NEEDED entries in file order.

    Files without execute permission for the current user, or which are not
    valid ELF objects, come back with ``is_executable`` false. Nothing is
    raised for a single bad file.
    """
    if not os.access(path, os.X_OK):
        return NOT_EXECUTABLE
    try:
        if not has_elf_magic(path):
            return NOT_EXECUTABLE
    except OSError as exc:
        logger.debug("%s: cannot read: %s", path, exc)
        return NOT_EXECUTABLE

    try:
        binary = lief.ELF.parse(path)
    except Exception as exc:  # lief raises a variety of errors on malformed input
        logger.warning("%s: exception during parsing: %s", path, exc)
        return NOT_EXECUTABLE
    if binary is None:
        logger.warning("%s: lief could not parse the file", path)
        return NOT_EXECUTABLE

    machine = binary.header.machine_type
    arch = architecture_for_machine(int(getattr(machine, "value", machine)))
    return ProbeResult(True, arch, tuple(binary.libraries))


def silence_lief() -> None:
    """Keep lief's own parser chatter off the terminal."""
    lief.logging.disable()
