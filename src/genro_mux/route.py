# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Route capability.

Purpose
=======
A Route is a request handler that knows the exact path at which it must be
mounted. The router builder only relies on this contract, so any number of
independently written handler classes can be aggregated without the builder
knowing them.

Definition::

    class Route(ABC):
        pattern: str                                    # fixed, known before registration

        @abstractmethod
        async def handle(self, request: HttpRequest) -> Response

Optional hooks, looked up by name on the subclass and not defined on Route::

    def on_startup(self) -> None | Awaitable[None]
    def on_shutdown(self) -> None | Awaitable[None]

Example::

    class PingRoute(Route):
        pattern = "/ping"

        async def handle(self, request: HttpRequest) -> Response:
            return PlainTextResponse("pong\\n")

Pattern Syntax
==============
- ``/echo``  matches the path ``/echo`` only.
- ``/files/`` (trailing slash) matches ``/files/`` and everything below it.
- ``/`` matches every path not claimed by a more specific pattern.

Design Notes
============
- ``pattern`` may be a plain class attribute or a property; it must not
  change once the route is registered.
- ``handle`` reports processing failures through the response it returns.
  Anything it raises is contained by the Dispatcher and answered with 500.
- ``on_startup`` / ``on_shutdown`` may be sync or async. Startup hooks run
  before the listener accepts connections; shutdown hooks run in reverse
  registration order after the listener is closed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .request import HttpRequest
    from .response import Response

__all__ = ["Route"]


class Route(ABC):
    """Abstract base for request handlers mounted at a fixed pattern."""

    @property
    @abstractmethod
    def pattern(self) -> str:
        """Path at which this route is registered."""

    @abstractmethod
    async def handle(self, request: HttpRequest) -> Response:
        """Process ``request`` and return the response to send."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(pattern={self.pattern!r})"
