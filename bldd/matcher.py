"""Matching of requested library tokens against DT_NEEDED names."""
from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Sequence


def canonicalize(token: str) -> str:
    """Turn a user supplied token into the pattern used for matching.

    ``pthread`` -> ``libpthread.so``, ``libfoo`` -> ``libfoo.so``, anything
    already containing ``.so`` is used verbatim.
    """
    if not token:
        raise ValueError("library name must not be empty")
    if ".so" in token:
        return token
    if not token.startswith("lib"):
        return f"lib{token}.so"
    return f"{token}.so"


class LibraryMatcher:
    """Substring matcher over a fixed, ordered list of canonical patterns.

    For each declared dependency the patterns are tried in the order the
    libraries were requested and the first hit wins.
    """

    def __init__(self, tokens: Iterable[str]) -> None:
        patterns: List[str] = []
        for token in tokens:
            pattern = canonicalize(token)
            if pattern not in patterns:
                patterns.append(pattern)
        if not patterns:
            raise ValueError("at least one library must be requested")
        self._patterns = tuple(patterns)

    @property
    def patterns(self) -> Sequence[str]:
        return self._patterns

    def match(self, dependency: str) -> Optional[str]:
        for pattern in self._patterns:
            if pattern in dependency:
                return pattern
        return None

    def matches(self, dependencies: Iterable[str]) -> Iterator[str]:
        """Yield the winning pattern for every matching dependency entry."""
        for dependency in dependencies:
            pattern = self.match(dependency)
            if pattern is not None:
                yield pattern

    def __repr__(self) -> str:
        return f"LibraryMatcher({list(self._patterns)!r})"
