import os
from typing import Dict

from bldd.probe import NOT_EXECUTABLE, ProbeResult


class FakeProbe:
    """Probe answering from a basename -> ProbeResult table."""

    def __init__(self, table: Dict[str, ProbeResult]):
        self.table = table
        self.calls = []

    def __call__(self, path):
        self.calls.append(path)
        return self.table.get(os.path.basename(path), NOT_EXECUTABLE)


def make_tree(root, files):
    for rel in files:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"")
    return root
