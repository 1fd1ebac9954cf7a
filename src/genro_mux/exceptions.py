# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Exception classes for genro-mux.

Module Structure
----------------
Three families, each with its own base so callers can catch a whole stage:

1. ConfigurationError - the route set cannot be turned into a dispatch table.
   Raised by build_dispatch_table() before any socket is opened.

       ConfigurationError
           ├── DuplicatePatternError
           └── InvalidPatternError

2. ServerError - the lifecycle manager cannot honour start()/stop().

       ServerError
           ├── BindError       (listener could not be bound)
           ├── StartupError    (a route startup hook failed)
           └── LifecycleError  (operation invalid in the current state)

3. Request-scoped signals, contained by the Dispatcher:

       HTTPException ── HTTPNotFound
       ClientDisconnect

Propagation
-----------
ConfigurationError and ServerError escape to the process entry point and
halt startup. HTTPException and ClientDisconnect never leave the request
that raised them: the Dispatcher converts them into a response.

Example:
    >>> raise DuplicatePatternError("/echo", first, second)
    >>> raise BindError("0.0.0.0:8080", OSError(98, "Address already in use"))
    >>> raise HTTPException(400, detail="Empty body")
"""

from __future__ import annotations

from typing import Any


class ConfigurationError(Exception):
    """The set of routes is not a valid dispatch table."""


class DuplicatePatternError(ConfigurationError):
    """
    Two routes declare the same pattern.

    Attributes:
        pattern: The contested pattern.
        existing: Route registered first.
        duplicate: Route that tried to register the same pattern.
    """

    def __init__(self, pattern: str, existing: Any, duplicate: Any) -> None:
        self.pattern = pattern
        self.existing = existing
        self.duplicate = duplicate
        super().__init__(
            f"Pattern {pattern!r} registered twice: "
            f"{type(existing).__name__} and {type(duplicate).__name__}"
        )


class InvalidPatternError(ConfigurationError):
    """A route declares a pattern that is not a valid path."""

    def __init__(self, pattern: Any, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")


class ServerError(Exception):
    """Base class for lifecycle failures of HttpServer."""


class BindError(ServerError):
    """
    The listener socket could not be bound.

    Attributes:
        address: The "host:port" that was requested.
        error: The underlying OSError.
    """

    def __init__(self, address: str, error: OSError) -> None:
        self.address = address
        self.error = error
        super().__init__(f"Cannot bind {address}: {error.strerror or error}")


class StartupError(ServerError):
    """A route startup hook failed, the listener was released."""


class LifecycleError(ServerError):
    """start()/stop() called in a state that does not allow it."""


class HTTPException(Exception):
    """
    HTTP exception with status code and detail.

    Raise from a route to answer with a plain-text error response.

    Attributes:
        status_code: HTTP status code (expected 4xx or 5xx, not validated)
        detail: Error detail message, used as response body
        headers: Extra response headers as list of tuples
    """

    def __init__(
        self,
        status_code: int,
        detail: str = "",
        headers: dict[str, str] | list[tuple[str, str]] | None = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        if headers is None:
            self.headers: list[tuple[str, str]] | None = None
        elif isinstance(headers, dict):
            self.headers = list(headers.items())
        else:
            self.headers = list(headers)
        super().__init__(detail)

    def __repr__(self) -> str:
        return f"HTTPException(status_code={self.status_code}, detail={self.detail!r})"


class HTTPNotFound(HTTPException):
    """HTTP 404 Not Found exception."""

    def __init__(self, detail: str = "404 page not found\n") -> None:
        super().__init__(404, detail=detail)


class ClientDisconnect(Exception):
    """The client went away before the request body was fully received."""
