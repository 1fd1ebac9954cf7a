# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Router builder - compiles a set of routes into an immutable dispatch table.

Purpose
=======
build_dispatch_table() is the only place where routes meet each other. It
validates every pattern, rejects duplicates, and returns a DispatchTable that
is never modified again, so any number of concurrent requests can read it
without locking.

Definition::

    def build_dispatch_table(routes: Iterable[Route]) -> DispatchTable

    class DispatchTable(Mapping[str, Route]):
        def match(self, path: str) -> Route | None
        @property
        def patterns(self) -> tuple[str, ...]

Matching rules::

    exact pattern  "/echo"    →  only "/echo"
    subtree pattern "/files/" →  "/files/", "/files/a", "/files/a/b"
    priority: exact match, then the longest subtree pattern

Example::

    table = build_dispatch_table([EchoRoute(), HelloRoute()])
    table["/echo"]          # EchoRoute instance
    table.match("/missing") # None

Errors:
    DuplicatePatternError: two routes share a pattern.
    InvalidPatternError: a pattern is not a usable path.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from .exceptions import DuplicatePatternError, InvalidPatternError
from .route import Route

__all__ = ["DispatchTable", "build_dispatch_table", "validate_pattern"]

logger = logging.getLogger("genro_mux.router")

_FORBIDDEN_CHARS = {
    "?": "query strings are not part of a pattern",
    "#": "fragments are not part of a pattern",
    "{": "path parameters are not supported",
    "}": "path parameters are not supported",
}


def validate_pattern(pattern: object) -> str:
    """
    Check that ``pattern`` is a usable mount path and return it.

    Raises:
        InvalidPatternError: With the reason the pattern was refused.
    """
    if not isinstance(pattern, str):
        raise InvalidPatternError(pattern, "pattern must be a string")
    if not pattern:
        raise InvalidPatternError(pattern, "pattern must not be empty")
    if not pattern.startswith("/"):
        raise InvalidPatternError(pattern, "pattern must start with '/'")
    if any(ch.isspace() for ch in pattern):
        raise InvalidPatternError(pattern, "pattern must not contain whitespace")
    for char, reason in _FORBIDDEN_CHARS.items():
        if char in pattern:
            raise InvalidPatternError(pattern, reason)
    return pattern


class DispatchTable(Mapping[str, Route]):
    """
    Read-only mapping from pattern to the route that owns it.

    Built by build_dispatch_table(). Iteration follows registration order.
    Two tables compare equal when they hold the same pattern → route pairs.
    """

    __slots__ = ("_entries", "_subtrees")

    def __init__(self, entries: Mapping[str, Route]) -> None:
        self._entries: Mapping[str, Route] = MappingProxyType(dict(entries))
        # Longest first, so the first hit is the most specific subtree.
        self._subtrees: tuple[str, ...] = tuple(
            sorted((p for p in self._entries if p.endswith("/")), key=len, reverse=True)
        )

    def __getitem__(self, pattern: str) -> Route:
        return self._entries[pattern]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def patterns(self) -> tuple[str, ...]:
        """Registered patterns in registration order."""
        return tuple(self._entries)

    def match(self, path: str) -> Route | None:
        """Return the route serving ``path``, or None when nothing matches."""
        route = self._entries.get(path)
        if route is not None:
            return route
        for prefix in self._subtrees:
            if path.startswith(prefix):
                return self._entries[prefix]
        return None

    def __repr__(self) -> str:
        return f"DispatchTable(patterns={list(self._entries)})"


def build_dispatch_table(routes: Iterable[Route]) -> DispatchTable:
    """
    Register every route under its pattern and freeze the result.

    Args:
        routes: Route instances, possibly empty.

    Returns:
        The immutable DispatchTable.

    Raises:
        InvalidPatternError: A route exposes a malformed pattern.
        DuplicatePatternError: Two routes expose the same pattern. Nothing is
            overwritten and no table is returned.
    """
    entries: dict[str, Route] = {}
    for route in routes:
        pattern = validate_pattern(route.pattern)
        existing = entries.get(pattern)
        if existing is not None:
            raise DuplicatePatternError(pattern, existing, route)
        entries[pattern] = route
        logger.debug(f"Registered {type(route).__name__} at {pattern}")

    table = DispatchTable(entries)
    logger.info(f"Dispatch table built with {len(table)} route(s)")
    return table


if __name__ == "__main__":
    from .routes import EchoRoute, HelloRoute

    print(build_dispatch_table([EchoRoute(), HelloRoute()]))
