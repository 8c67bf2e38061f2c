"""Prefix-based exclusion of types from diagram output."""

from __future__ import annotations

from typing import Iterable, List, Tuple


class IgnoreFilter:
    """Decide whether a type should be left out of the diagram.

    Matching is a case-sensitive prefix test against the fully qualified
    type name, never the display name.
    """

    def __init__(self, prefixes: Iterable[str] = ()) -> None:
        self.prefixes: Tuple[str, ...] = tuple(p for p in prefixes if p)

    def should_ignore(self, qualified_name: str) -> bool:
        return any(qualified_name.startswith(prefix) for prefix in self.prefixes)


def parse_prefixes(values: Iterable[str]) -> List[str]:
    """Split comma separated ``--ignore`` values into clean prefixes.

    ``["java., javax.", "org.junit"]`` -> ``["java.", "javax.", "org.junit"]``
    """
    prefixes: List[str] = []
    for value in values:
        for part in value.split(","):
            part = part.strip()
            if part and part not in prefixes:
                prefixes.append(part)
    return prefixes
